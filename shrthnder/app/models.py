from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from shrthnder.app import config


class Mode(Enum):
    NORMAL = "normal"
    SHORTHAND = "shorthand"


@dataclass(frozen=True)
class ShorthandRule:
    shorthand: str
    expansion: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ShorthandRule":
        if not isinstance(data, Mapping):
            raise TypeError(f"rule must be an object, got {type(data).__name__}")
        return cls(str(data["shorthand"]), str(data["expansion"]))

    def to_dict(self) -> Dict[str, str]:
        return {"shorthand": self.shorthand, "expansion": self.expansion}


@dataclass(frozen=True)
class ShorthandCategory:
    """One job domain as the rule provider sends it."""
    category: str
    test_text: str = ""
    rules: Tuple[ShorthandRule, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ShorthandCategory":
        if not isinstance(data, Mapping):
            raise TypeError(f"category entry must be an object, got {type(data).__name__}")
        # the server hands back its storage column name, older clients send testText
        text = data.get("testText")
        if text is None:
            text = data.get("test_text") or ""
        rules = tuple(ShorthandRule.from_dict(r) for r in data.get("rules") or ())
        return cls(str(data["category"]), str(text), rules)


class RuleSet:
    """
    Category -> ordered rules, plus each category's test passage.
    Built in one go from the provider's answer and never changed afterwards;
    the cache swaps whole RuleSets instead.
    """

    def __init__(self, categories: Iterable[ShorthandCategory] = ()):
        rules: Dict[str, Tuple[ShorthandRule, ...]] = {}
        texts: Dict[str, str] = {}
        for cat in categories:
            rules[cat.category] = tuple(cat.rules)
            texts[cat.category] = cat.test_text
        self._rules = MappingProxyType(rules)
        self._texts = MappingProxyType(texts)

    def rules_for(self, category: str) -> Tuple[ShorthandRule, ...]:
        return self._rules.get(category, ())

    def test_text(self, category: str) -> str:
        return self._texts.get(category, "")

    def categories(self) -> List[str]:
        return list(self._rules)

    def is_empty(self) -> bool:
        return not self._rules

    def __contains__(self, category: str) -> bool:
        return category in self._rules

    def __len__(self) -> int:
        return len(self._rules)


@dataclass(frozen=True)
class TestResult:
    __test__ = False  # not a pytest class

    wpm: int
    accuracy: int
    time_in_seconds: int
    input_text: str = ""

    def to_payload(self) -> Dict[str, int]:
        return {
            "wpm": self.wpm,
            "accuracy": self.accuracy,
            "time_in_seconds": self.time_in_seconds,
        }


@dataclass(frozen=True)
class TimeSavedResult:
    seconds: int
    percentage: int

    @property
    def faster(self) -> bool:
        return self.seconds > 0

    def to_payload(self) -> Dict[str, int]:
        return {"seconds": self.seconds, "percentage": self.percentage}


@dataclass
class Feedback:
    rating: int = config.DEFAULT_RATING
    comment: str = ""
    email: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return {"rating": self.rating, "comment": self.comment, "email": self.email}


@dataclass
class SubmissionPayload:
    job_category: str
    normal_test: TestResult
    shorthand_test: TestResult
    time_saved: TimeSavedResult
    feedback: Feedback = field(default_factory=Feedback)
    timestamp: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "job_category": self.job_category,
            "shorthand_test": self.shorthand_test.to_payload(),
            "normal_test": self.normal_test.to_payload(),
            "time_saved": self.time_saved.to_payload(),
            "feedback": self.feedback.to_payload(),
        }
        if self.timestamp:
            data["timestamp"] = self.timestamp
        return data
