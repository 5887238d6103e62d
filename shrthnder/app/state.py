from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional
import math
import time

from shrthnder.app.calculation import compute_accuracy, compute_wpm, progress_percent
from shrthnder.app.errors import IncompleteResultsError, SessionFinishedError
from shrthnder.app.models import Mode, TestResult


class Status(Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"


def _identity(text: str) -> str:
    return text


@dataclass
class TypingSession:
    """
    One timed attempt at typing target_text: Idle -> Running -> Finished.

    In shorthand mode raw_input holds what the user actually keyed in and the
    text that counts (the "effective" text) is expand(raw_input). The attempt
    finishes as soon as the effective text is at least as long as the target.
    Once finished nothing about the session changes.
    """
    target_text: str
    mode: Mode = Mode.NORMAL
    expand: Callable[[str], str] = _identity
    clock: Callable[[], float] = time.monotonic
    started_at: Optional[float] = None
    finished_at: Optional[float] = None
    raw_input: str = ""
    _frozen_elapsed: int = field(default=0, repr=False)

    @property
    def status(self) -> Status:
        if self.started_at is None:
            return Status.IDLE
        if self.finished_at is None:
            return Status.RUNNING
        return Status.FINISHED

    @property
    def is_running(self) -> bool:
        return self.status is Status.RUNNING

    def is_finished(self) -> bool:
        return self.finished_at is not None

    def start(self):
        if self.is_finished():
            raise SessionFinishedError("session already finished")
        if self.started_at is None:
            self.started_at = self.clock()

    def effective_text(self) -> str:
        if self.mode is Mode.SHORTHAND:
            return self.expand(self.raw_input)
        return self.raw_input

    def update(self, raw: str):
        """Store the latest raw input; the first update starts the clock."""
        if self.is_finished():
            raise SessionFinishedError("session already finished")
        self.start()
        self.raw_input = raw
        if len(self.effective_text()) >= len(self.target_text):
            self._finish()

    def apply_edit(self, visible: str, cursor: int):
        """
        Take the text box's new contents and caret position and fold the edit
        into raw_input.

        Normal mode: the box shows raw input, so it is taken as is.
        Shorthand mode: the box shows the expansion. The edit position is
        mapped back into the raw buffer by scaling with len(raw)/len(expanded),
        which is exact only while nothing before the caret has expanded.
        A shorter text deletes one raw character at the mapped position;
        otherwise the character just before the caret is inserted there,
        capitalized when it starts a sentence.
        """
        if self.mode is Mode.NORMAL:
            self.update(visible)
            return

        raw = self.raw_input
        current = self.expand(raw)
        if len(visible) < len(current):
            pos = _scale(cursor, len(current), len(raw))
            self.update(raw[:pos] + raw[pos + 1:])
            return

        if cursor < 1 or cursor > len(visible):
            return
        added = visible[cursor - 1]
        pos = _scale(cursor - 1, len(current), len(raw))
        before, after = raw[:pos], raw[pos:]
        if before.strip().endswith("."):
            added = added.upper()
        self.update(before + added + after)

    def _finish(self):
        self.finished_at = self.clock()
        self._frozen_elapsed = int(math.floor(self.finished_at - self.started_at))

    def elapsed_seconds(self) -> int:
        """Whole seconds so far; frozen once finished."""
        if self.started_at is None:
            return 0
        if self.finished_at is not None:
            return self._frozen_elapsed
        return max(0, int(math.floor(self.clock() - self.started_at)))

    def compute_wpm(self) -> int:
        if not self.is_finished():
            return 0
        return compute_wpm(self.effective_text(), self._frozen_elapsed)

    def compute_accuracy(self) -> int:
        if not self.is_finished():
            return 0
        return compute_accuracy(self.effective_text(), self.target_text)

    def progress(self) -> int:
        return progress_percent(self.effective_text(), self.target_text)

    def result(self) -> TestResult:
        if not self.is_finished():
            raise IncompleteResultsError(f"{self.mode.value} test is not finished")
        return TestResult(
            wpm=self.compute_wpm(),
            accuracy=self.compute_accuracy(),
            time_in_seconds=self._frozen_elapsed,
            input_text=self.effective_text(),
        )


def _scale(pos: int, expanded_len: int, raw_len: int) -> int:
    if expanded_len <= 0:
        return 0
    pos = max(0, min(pos, expanded_len))
    return int(math.floor(raw_len * pos / expanded_len))
