import math
from typing import List, Optional

from shrthnder.app.errors import IncompleteResultsError
from shrthnder.app.models import TestResult, TimeSavedResult


def split_words(text: str) -> List[str]:
    """Words of text split on runs of whitespace; blank text has none."""
    return text.split()


def round_half_up(value: float) -> int:
    # round() would send 2.5 to 2
    return math.floor(value + 0.5)


def compute_wpm(text: str, elapsed_seconds: float) -> int:
    """
    WPM = words typed / (elapsed_seconds / 60), rounded.
    Zero elapsed time gives 0 instead of a division error.
    """
    if elapsed_seconds <= 0:
        return 0
    words = len(split_words(text))
    return round_half_up(words / (elapsed_seconds / 60.0))


def compute_accuracy(typed: str, target: str) -> int:
    """
    Positional word accuracy: the i-th typed word must equal the i-th target
    word. Missing or extra words count against it.
    """
    target_words = split_words(target)
    if not target_words:
        return 0
    typed_words = split_words(typed)
    matching = sum(1 for i, word in enumerate(target_words)
                   if i < len(typed_words) and typed_words[i] == word)
    return round_half_up(100.0 * matching / len(target_words))


def combine(normal: Optional[TestResult], shorthand: Optional[TestResult]) -> TimeSavedResult:
    if normal is None or shorthand is None:
        raise IncompleteResultsError("both the normal and the shorthand test must be finished")
    seconds = normal.time_in_seconds - shorthand.time_in_seconds
    if normal.time_in_seconds == 0:
        return TimeSavedResult(seconds=seconds, percentage=0)
    return TimeSavedResult(seconds=seconds,
                           percentage=round_half_up(100.0 * seconds / normal.time_in_seconds))


def progress_percent(typed: str, target: str) -> int:
    """0..100; only an exact (trimmed) match reads 100."""
    typed, target = typed.strip(), target.strip()
    if typed == target:
        return 100
    if not target:
        return 0
    return round_half_up(min(99.0, 100.0 * len(typed) / len(target)))
