"""
Shorthand expansion.

Rules are applied as an ordered pipeline: each rule is one substitution
stage, and every stage runs over the text the previous stage produced.
An expansion that happens to contain a later rule's shorthand gets
rewritten again by that later stage, so with [a -> b, b -> c] the text
"a" comes out as "c". Rule order is part of the contract.
"""
from __future__ import annotations
import re
from typing import Iterable, Optional, Sequence

from shrthnder.app.models import RuleSet, ShorthandRule


class SubstitutionStage:
    """Replaces whole-word, case-insensitive occurrences of one shorthand."""

    def __init__(self, rule: ShorthandRule):
        self.rule = rule
        self._regex = re.compile(r"\b" + re.escape(rule.shorthand) + r"\b", re.IGNORECASE)

    def _replace(self, match: re.Match) -> str:
        expansion = self.rule.expansion
        # only the first character's case is mirrored: "BTW" -> "By the way"
        if match.group(0)[:1].isupper():
            return expansion[:1].upper() + expansion[1:]
        return expansion

    def apply(self, text: str) -> str:
        return self._regex.sub(self._replace, text)


class ExpansionPipeline:
    def __init__(self, rules: Iterable[ShorthandRule] = ()):
        self.stages = [SubstitutionStage(r) for r in rules]

    def __call__(self, text: str) -> str:
        for stage in self.stages:
            text = stage.apply(text)
        return text

    def __len__(self) -> int:
        return len(self.stages)


def expand_text(text: str, rules: Sequence[ShorthandRule]) -> str:
    """Expand with an ad-hoc rule list."""
    if not rules:
        return text
    return ExpansionPipeline(rules)(text)


class Expander:
    """
    Expands typed text for a category using a RuleSet snapshot.
    Compiled pipelines are kept per category and thrown away whenever a
    different RuleSet is handed in, so calling expand() on every keystroke
    only pays for the regex passes.
    """

    def __init__(self, rule_source=None):
        # rule_source: RuleSet, or anything with .snapshot() -> RuleSet (RuleCache)
        self._source = rule_source
        self._ruleset: Optional[RuleSet] = None
        self._pipelines: dict = {}

    def _current(self) -> RuleSet:
        src = self._source
        if src is None:
            return RuleSet()
        if isinstance(src, RuleSet):
            return src
        return src.snapshot()

    def pipeline(self, category: str) -> ExpansionPipeline:
        ruleset = self._current()
        if ruleset is not self._ruleset:
            self._ruleset = ruleset
            self._pipelines = {}
        pipe = self._pipelines.get(category)
        if pipe is None:
            pipe = self._pipelines[category] = ExpansionPipeline(ruleset.rules_for(category))
        return pipe

    def expand(self, text: str, category: str) -> str:
        pipe = self.pipeline(category)
        if not pipe:
            return text
        return pipe(text)

    def bind(self, category: str):
        """Return a one-argument expand function fixed to one category."""
        return lambda text: self.expand(text, category)
