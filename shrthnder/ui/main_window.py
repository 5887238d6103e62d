# ui/main_window.py
from __future__ import annotations
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QTabBar, QTabWidget,
    QLabel, QListWidget, QPlainTextEdit, QPushButton, QFileDialog, QMessageBox
)
from PySide6.QtCore import Qt
import logging

from shrthnder.app import config
from shrthnder.app.errors import DatabaseError
from shrthnder.app.models import Mode
from shrthnder.core.threads import Workers
from shrthnder.services.api_client import ApiClient
from shrthnder.services.expander import Expander
from shrthnder.services.results import ResultSubmitter
from shrthnder.services.rule_cache import RuleCache
from shrthnder.ui.session_summary import SessionSummary
from shrthnder.ui.test_ui import TestUI
from shrthnder.utils.db_helper import get_results
from shrthnder.utils.file_handler import default_export_name, export_results

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, api: ApiClient | None = None):
        super().__init__()
        self.setWindowTitle(config.APP_NAME)
        self.resize(1000, 720)

        self.api = api or ApiClient()
        self.cache = RuleCache(self.api)
        self.expander = Expander(self.cache)
        self.submitter = ResultSubmitter(self.api)
        self.category = config.DEFAULT_CATEGORY
        self._normal_result = None

        root = QWidget(self)
        root_v = QVBoxLayout(root)
        root_v.setContentsMargins(16, 16, 16, 16)
        root_v.setSpacing(14)
        self._build_top_bar(root_v)

        # --- Category + shortcuts ---
        self.categoryTabs = QTabBar(self)
        for name in config.CATEGORIES:
            self.categoryTabs.addTab(name.capitalize())
        self.categoryTabs.currentChanged.connect(self._on_category_changed)
        root_v.addWidget(self.categoryTabs)

        self.lblShortcuts = QLabel("Available Shortcuts:", self)
        root_v.addWidget(self.lblShortcuts)
        self.lstShortcuts = QListWidget(self)
        self.lstShortcuts.setMaximumHeight(140)
        root_v.addWidget(self.lstShortcuts)

        # --- Free practice / typing test ---
        self.tabs = QTabWidget(self)
        self.tabs.addTab(self._build_practice_tab(), "Free Practice")
        self.test = TestUI(self)
        self.test.phaseFinished.connect(self._on_phase_finished)
        self.test.runningChanged.connect(self._on_running_changed)
        self.tabs.addTab(self.test, "Typing Test")
        root_v.addWidget(self.tabs, 1)

        self.setCentralWidget(root)
        self._load_category(self.category)

    # ---------------- Top Bar ----------------
    def _build_top_bar(self, parent_layout):
        bar = QWidget(self)
        h = QHBoxLayout(bar)
        h.setContentsMargins(0, 0, 0, 0)
        h.setSpacing(10)

        self.lblLoading = QLabel("", bar)
        h.addWidget(self.lblLoading)
        h.addStretch(1)

        self.btnRefresh = QPushButton("Refresh rules", bar)
        self.btnRefresh.clicked.connect(self._refresh_rules)
        self.btnRefresh.setFocusPolicy(Qt.NoFocus)
        h.addWidget(self.btnRefresh)

        btn_export = QPushButton("Export results…", bar)
        btn_export.clicked.connect(self._export_results)
        btn_export.setFocusPolicy(Qt.NoFocus)
        h.addWidget(btn_export)

        btn_reset = QPushButton("Reset test", bar)
        btn_reset.clicked.connect(self._reset_test)
        btn_reset.setFocusPolicy(Qt.NoFocus)
        h.addWidget(btn_reset)

        parent_layout.addWidget(bar)

    def _build_practice_tab(self) -> QWidget:
        page = QWidget(self)
        v = QVBoxLayout(page)
        self.practiceInput = QPlainTextEdit(page)
        self.practiceInput.setPlaceholderText("Type here; shortcuts are expanded below as you type...")
        self.practiceInput.textChanged.connect(self._update_practice)
        v.addWidget(self.practiceInput, 1)
        self.practiceOutput = QPlainTextEdit(page)
        self.practiceOutput.setReadOnly(True)
        v.addWidget(self.practiceOutput, 1)
        return page

    # ---------------- Rules ----------------
    def _set_loading(self, loading: bool):
        self.lblLoading.setText("Loading shortcuts…" if loading else "")

    def _load_category(self, category: str, refreshed: bool = False):
        self._set_loading(True)
        # slots must be bound methods so Qt queues them onto the UI thread
        Workers.submit(lambda: self._fetch_category(category, refreshed),
                       on_done=self._on_rules_loaded,
                       on_failed=self._on_rules_failed)

    async def _fetch_category(self, category: str, refreshed: bool = False):
        return category, await self.cache.get_test_text(category), refreshed

    def _on_rules_loaded(self, loaded):
        category, test_text, refreshed = loaded
        # a slower answer for a category the user already left
        if category != self.category:
            return
        self._set_loading(False)
        rules = self.cache.snapshot().rules_for(category)
        self.lstShortcuts.clear()
        for rule in rules:
            self.lstShortcuts.addItem(f"{rule.shorthand} → {rule.expansion}")
        self.lblShortcuts.setText(f"Available Shortcuts ({len(rules)}):")
        self._update_practice()
        # same passage after a refresh: the bound expander already sees the new rules
        if refreshed and test_text == self.test.target_text:
            return
        self._normal_result = None
        self.test.set_test(test_text, self.expander.bind(category))

    def _on_rules_failed(self, msg: str):
        self._set_loading(False)
        logger.error("Loading rules failed: %s", msg)

    def _on_category_changed(self, idx: int):
        if not 0 <= idx < len(config.CATEGORIES):
            return
        self.category = config.CATEGORIES[idx]
        self._load_category(self.category)

    def _refresh_rules(self):
        self._set_loading(True)
        Workers.submit(self.cache.refresh,
                       on_done=self._on_refreshed,
                       on_failed=self._on_rules_failed)

    def _on_refreshed(self, _):
        self._load_category(self.category, refreshed=True)

    def _update_practice(self):
        text = self.practiceInput.toPlainText()
        self.practiceOutput.setPlainText(self.expander.expand(text, self.category))

    # ---------------- Test flow ----------------
    def _on_running_changed(self, running: bool):
        # switching domain mid-attempt would change the target under the user
        self.categoryTabs.setEnabled(not running)
        self.btnRefresh.setEnabled(not running)

    def _on_phase_finished(self, outcome):
        mode, result = outcome
        if mode is Mode.NORMAL:
            self._normal_result = result
            self.test.begin_phase(Mode.SHORTHAND)
            return
        dlg = SessionSummary(self.category, self._normal_result, result, self.submitter, self)
        dlg.newTestRequested.connect(self._reset_test)
        dlg.exec()

    def _reset_test(self):
        self._normal_result = None
        self.test.reset_test()

    # ---------------- Export ----------------
    def _export_results(self):
        path, _ = QFileDialog.getSaveFileName(self, "Export results", default_export_name(), "JSON (*.json)")
        if not path:
            return
        try:
            written = export_results(get_results(), path)
        except (DatabaseError, OSError) as e:
            QMessageBox.warning(self, "Export results", str(e))
            return
        self.statusBar().showMessage(f"Exported to {written}", 5000)

    def closeEvent(self, ev):
        self.test.ticker.stop()
        super().closeEvent(ev)
