# ui/session_summary.py
from __future__ import annotations
import logging

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QLineEdit, QPlainTextEdit, QSlider, QFrame, QMessageBox
)

from shrthnder.app import config
from shrthnder.app.calculation import combine
from shrthnder.app.models import Feedback, TestResult
from shrthnder.app.validation import clamp_rating, normalize_category
from shrthnder.core.threads import Workers
from shrthnder.services.results import ResultSubmitter, build_submission

logger = logging.getLogger(__name__)


def describe_time_saved(normal: TestResult, shorthand: TestResult) -> str:
    saved = combine(normal, shorthand)
    word = "Saved" if saved.faster else "Increased"
    sign = "+" if saved.faster else "-"
    pace = "faster" if saved.faster else "slower"
    return (f"Time {word}: {abs(saved.seconds)} seconds "
            f"({sign}{abs(saved.percentage)}% {pace})")


def _result_box(title: str, result: TestResult, parent) -> QFrame:
    box = QFrame(parent)
    box.setFrameShape(QFrame.StyledPanel)
    v = QVBoxLayout(box)
    v.addWidget(QLabel(f"<b>{title}</b>"))
    v.addWidget(QLabel(f"Words per Minute: {result.wpm}"))
    v.addWidget(QLabel(f"Accuracy: {result.accuracy}%"))
    v.addWidget(QLabel(f"Time: {result.time_in_seconds} seconds"))
    return box


class SessionSummary(QDialog):
    """
    Results of both phases, the time saved, and the feedback form.
    A failed submission leaves everything in place so Submit can be pressed again.
    """
    newTestRequested = Signal()

    def __init__(self, category: str, normal: TestResult, shorthand: TestResult,
                 submitter: ResultSubmitter, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Test Results")
        self.resize(560, 560)
        self.category = category
        self.normal = normal
        self.shorthand = shorthand
        self.submitter = submitter

        root = QVBoxLayout(self)
        root.addWidget(_result_box("Normal Typing:", normal, self))
        root.addWidget(_result_box("Shorthand Typing:", shorthand, self))

        saved = QLabel(describe_time_saved(normal, shorthand), self)
        saved.setObjectName("lblSaved")
        color = "#2e7d32" if combine(normal, shorthand).faster else "#c62828"
        saved.setStyleSheet(f"color: {color}; font-weight: 600;")
        root.addWidget(saved)

        root.addWidget(QLabel("<b>Quick Feedback</b>"))
        self.txtEmail = QLineEdit(self)
        self.txtEmail.setPlaceholderText("Your Email (optional)")
        root.addWidget(self.txtEmail)

        root.addWidget(QLabel("How would you rate your experience with the shorthand typing system? (1-10)"))
        row = QHBoxLayout()
        row.addWidget(QLabel(str(config.MIN_RATING)))
        self.sldRating = QSlider(Qt.Horizontal, self)
        self.sldRating.setRange(config.MIN_RATING, config.MAX_RATING)
        self.sldRating.setValue(config.DEFAULT_RATING)
        self.sldRating.setTickPosition(QSlider.TicksBelow)
        row.addWidget(self.sldRating, 1)
        row.addWidget(QLabel(str(config.MAX_RATING)))
        root.addLayout(row)

        self.txtComment = QPlainTextEdit(self)
        self.txtComment.setPlaceholderText("Any additional comments? (optional)")
        self.txtComment.setMaximumHeight(90)
        root.addWidget(self.txtComment)

        self.lblStatus = QLabel("", self)
        root.addWidget(self.lblStatus)

        btns = QHBoxLayout()
        self.btnSubmit = QPushButton("Submit Results", self)
        self.btnSubmit.clicked.connect(self._submit)
        self.btnNew = QPushButton("Start New Test", self)
        self.btnNew.clicked.connect(self._new_test)
        self.btnNew.setVisible(False)
        btns.addWidget(self.btnSubmit)
        btns.addWidget(self.btnNew)
        btns.addStretch(1)
        root.addLayout(btns)

    def feedback(self) -> Feedback:
        return Feedback(
            rating=clamp_rating(self.sldRating.value()),
            comment=self.txtComment.toPlainText(),
            email=self.txtEmail.text().strip(),
        )

    def _submit(self):
        payload = build_submission(normalize_category(self.category), self.normal, self.shorthand,
                                   self.feedback())
        self.btnSubmit.setEnabled(False)
        self.lblStatus.setText("Submitting…")
        Workers.submit(lambda: self.submitter.submit(payload),
                       on_done=self._on_submitted, on_failed=self._on_submit_failed)

    def _on_submitted(self, _ack):
        self.lblStatus.setText("✓ Results submitted successfully!")
        self.btnNew.setVisible(True)

    def _on_submit_failed(self, msg: str):
        logger.error("Submission failed: %s", msg)
        self.lblStatus.setText("")
        self.btnSubmit.setEnabled(True)
        QMessageBox.warning(self, "Submit Results", f"Submission failed: {msg}")

    def _new_test(self):
        self.newTestRequested.emit()
        self.accept()
