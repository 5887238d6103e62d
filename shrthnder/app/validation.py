from typing import Iterable, List

from shrthnder.app import config
from shrthnder.app.errors import InvalidRuleError
from shrthnder.app.models import ShorthandRule


def normalize_category(name: str) -> str:
    return (name or "").strip().lower()


def clamp_rating(value) -> int:
    try:
        rating = int(value)
    except (TypeError, ValueError):
        return config.DEFAULT_RATING
    return max(config.MIN_RATING, min(config.MAX_RATING, rating))


def validate_rule(rule: ShorthandRule) -> ShorthandRule:
    if not rule.shorthand:
        raise InvalidRuleError("shorthand must not be empty")
    if any(ch.isspace() for ch in rule.shorthand):
        raise InvalidRuleError(f"shorthand {rule.shorthand!r} contains whitespace")
    if not rule.expansion:
        raise InvalidRuleError(f"shorthand {rule.shorthand!r} has no expansion")
    return rule


def validate_rules(rules: Iterable[ShorthandRule]) -> List[ShorthandRule]:
    """Check every rule and that no shorthand appears twice (ignoring case)."""
    seen = set()
    out = []
    for rule in rules:
        validate_rule(rule)
        key = rule.shorthand.lower()
        if key in seen:
            raise InvalidRuleError(f"duplicate shorthand {rule.shorthand!r}")
        seen.add(key)
        out.append(rule)
    return out
