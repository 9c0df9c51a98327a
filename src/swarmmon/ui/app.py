"""PySide6 application bootstrap — dashboard window, watcher wiring, run_app()."""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING

from PySide6.QtCore import QSettings
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QMainWindow,
    QStatusBar,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)
from qasync import QEventLoop

from swarmmon.constants import MAX_PROMPTS_PER_WINDOW
from swarmmon.models.usage import DashboardPayload, UsageSnapshot
from swarmmon.models.views import HeaderStats, StatusSummary
from swarmmon.services.metrics import build_payload
from swarmmon.services.status import format_time_remaining, status_summary
from swarmmon.services.tabs import build_dashboard
from swarmmon.services.watcher import UsageWatcher
from swarmmon.ui.file_events import QtFileEventSource
from swarmmon.ui.registry import DashboardRegistry
from swarmmon.ui.state_cache import SettingsStore, StateCache
from swarmmon.ui.theme import COLORS, build_stylesheet, format_cost, level_color
from swarmmon.ui.views.tab_views import (
    CostSavingsTab,
    PerformanceTab,
    StatCard,
    UsagePatternsTab,
)

if TYPE_CHECKING:
    from swarmmon.config import Config

logger = logging.getLogger(__name__)


class StatusLine:
    """Status bar label acting as the notification surface."""

    def __init__(self, label: QLabel) -> None:
        self._label = label

    def show(self, summary: StatusSummary) -> None:
        self._label.setText(summary.text)
        self._label.setToolTip(summary.tooltip)
        self._label.setStyleSheet(f"color: {level_color(summary.level)};")


class DashboardWindow(QMainWindow):
    """Header stats, three tabs and a status line fed by the usage watcher."""

    def __init__(self, config: Config, watcher: UsageWatcher, cache: StateCache) -> None:
        super().__init__()
        self._config = config
        self._watcher = watcher
        self._cache = cache

        self.setWindowTitle("Swarm Monitor")
        self.setMinimumSize(960, 640)

        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(16, 12, 16, 0)
        layout.setSpacing(12)

        # ── Header ──
        header = QHBoxLayout()
        self._card_prompts = StatCard("Prompts Remaining")
        self._card_cost = StatCard("Window Cost")
        self._card_time = StatCard("Time Left")
        self._card_savings = StatCard("Saved vs Comparison")
        for card in (self._card_prompts, self._card_cost, self._card_time, self._card_savings):
            header.addWidget(card)
        layout.addLayout(header)

        # ── Tabs ──
        self._tabs = QTabWidget()
        self._cost_tab = CostSavingsTab()
        self._usage_tab = UsagePatternsTab()
        self._perf_tab = PerformanceTab()
        self._tabs.addTab(self._cost_tab, "Cost Savings")
        self._tabs.addTab(self._usage_tab, "Usage Patterns")
        self._tabs.addTab(self._perf_tab, "Performance")
        layout.addWidget(self._tabs)

        # ── Status bar ──
        self._status_bar = QStatusBar()
        self.setStatusBar(self._status_bar)
        status_label = QLabel("Loading...")
        self._status_bar.addWidget(status_label)
        self._status_line = StatusLine(status_label)

        # ── Settings menu ──
        settings_menu = self.menuBar().addMenu("&Settings")
        settings_menu.addAction("Refresh interval...", self._choose_refresh_interval)
        settings_menu.addAction("Usage file...", self._choose_usage_file)

        self._restore_geometry()
        self.show_payload(DashboardPayload(pricing=config.pricing))

    def start(self) -> None:
        """Restore the cached payload, then begin watching. Needs the running loop."""
        cached = self._cache.load()
        if cached is not None and cached.has_data:
            logger.info("Restoring cached dashboard state")
            self.show_payload(cached, persist=False)
        self._watcher.set_callback(self._on_snapshot)
        self._watcher.start()

    def apply_config(self, config: Config) -> None:
        """Switch to new settings; the watcher restarts and re-reads immediately."""
        self._config = config
        self._watcher.reconfigure(config)

    def show_payload(self, payload: DashboardPayload, *, persist: bool = True) -> None:
        views = build_dashboard(payload, self._config.warning_threshold)
        self._set_header(views.header)
        self._cost_tab.set_view(views.cost)
        self._usage_tab.set_view(views.usage)
        self._perf_tab.set_view(views.performance)
        summary = status_summary(payload.snapshot, payload.metrics, self._config.warning_threshold)
        self._status_line.show(summary)
        if persist and payload.has_data:
            self._cache.save(payload)

    def dispose(self) -> None:
        self._watcher.set_callback(None)
        self._watcher.stop()
        self._cache.flush()
        self.deleteLater()

    def _choose_refresh_interval(self) -> None:
        value, ok = QInputDialog.getDouble(
            self, "Refresh interval", "Seconds:", self._config.refresh_interval, 1, 3600, 0
        )
        if ok:
            self.apply_config(replace(self._config, refresh_interval=value))

    def _choose_usage_file(self) -> None:
        path, _ = QFileDialog.getOpenFileName(
            self, "Usage file", str(self._config.usage_path), "JSON (*.json)"
        )
        if path:
            self.apply_config(replace(self._config, usage_file=Path(path)))

    def _on_snapshot(self, snapshot: UsageSnapshot | None) -> None:
        self.show_payload(build_payload(snapshot, self._config.pricing))

    def _set_header(self, header: HeaderStats | None) -> None:
        if header is None:
            for card in (self._card_prompts, self._card_cost, self._card_time, self._card_savings):
                card.set_value("—")
            return
        self._card_prompts.set_value(
            f"{header.prompts_remaining}/{MAX_PROMPTS_PER_WINDOW}",
            level_color(header.prompts_level),
        )
        self._card_cost.set_value(format_cost(header.window_cost_usd))
        self._card_time.set_value(
            format_time_remaining(header.time_remaining_ms),
            COLORS["warning"] if header.time_low else None,
        )
        self._card_savings.set_value(format_cost(header.savings_usd), COLORS["green"])

    def _restore_geometry(self) -> None:
        geometry = QSettings("SwarmMonitor", "SwarmMonitor").value("geometry")
        if geometry:
            self.restoreGeometry(geometry)

    def _save_geometry(self) -> None:
        QSettings("SwarmMonitor", "SwarmMonitor").setValue("geometry", self.saveGeometry())

    def closeEvent(self, event: QCloseEvent) -> None:
        self._watcher.stop()
        self._cache.flush()
        self._save_geometry()
        super().closeEvent(event)


def run_app(config: Config) -> None:
    """Entry point: create QApplication, event loop, dashboard window, and run."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    app = QApplication(sys.argv)
    app.setApplicationName("Swarm Monitor")
    app.setOrganizationName("SwarmMonitor")
    app.setStyleSheet(build_stylesheet())

    loop = QEventLoop(app)
    asyncio.set_event_loop(loop)

    def create_window() -> DashboardWindow:
        watcher = UsageWatcher(config, event_source=QtFileEventSource())
        return DashboardWindow(config, watcher, StateCache(SettingsStore()))

    registry: DashboardRegistry[DashboardWindow] = DashboardRegistry(create_window)
    window = registry.get_or_create()
    window.show()
    loop.call_soon(window.start)
    app.aboutToQuit.connect(registry.dispose)

    with loop:
        loop.run_forever()
