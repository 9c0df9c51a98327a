"""Dashboard tabs — cost savings, usage patterns, performance."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QScrollArea,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from swarmmon.constants import MAX_PROMPTS_PER_WINDOW
from swarmmon.models.views import CostSavingsView, PerformanceView, UsagePatternsView
from swarmmon.ui.theme import (
    COLORS,
    format_cost,
    format_percent,
    format_tokens,
    level_color,
    trend_arrow,
)
from swarmmon.ui.widgets.chart_widget import ChartCanvas


class StatCard(QWidget):
    """Small stat card with label + value."""

    def __init__(self, label: str, value: str = "—", parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 10, 12, 10)
        layout.setSpacing(2)

        val_lbl = QLabel(value)
        val_lbl.setStyleSheet("font-size: 22px; font-weight: bold;")
        layout.addWidget(val_lbl)

        name_lbl = QLabel(label)
        name_lbl.setStyleSheet(f"font-size: 11px; color: {COLORS['text_muted']};")
        layout.addWidget(name_lbl)

        self.setStyleSheet(
            f"background-color: {COLORS['bg']}; border: 1px solid #EAEAEA; border-radius: 8px;"
        )
        self._val_lbl = val_lbl
        self._name_lbl = name_lbl

    def set_value(self, value: str, color: str | None = None) -> None:
        self._val_lbl.setText(value)
        style = "font-size: 22px; font-weight: bold;"
        if color:
            style += f" color: {color};"
        self._val_lbl.setStyleSheet(style)

    def set_label(self, label: str) -> None:
        self._name_lbl.setText(label)


class _TabPage(QWidget):
    """Stack of an empty-state message and the scrollable tab content."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._stack = QStackedWidget()

        self._empty_label = QLabel()
        self._empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._empty_label.setWordWrap(True)
        self._empty_label.setStyleSheet(f"font-size: 14px; color: {COLORS['text_muted']};")
        self._stack.addWidget(self._empty_label)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QScrollArea.Shape.NoFrame)
        content = QWidget()
        self.content_layout = QVBoxLayout(content)
        self.content_layout.setContentsMargins(16, 12, 16, 16)
        self.content_layout.setSpacing(16)
        scroll.setWidget(content)
        self._stack.addWidget(scroll)

        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)
        outer.addWidget(self._stack)

    def show_empty(self, message: str) -> None:
        self._empty_label.setText(message)
        self._stack.setCurrentIndex(0)

    def show_content(self) -> None:
        self._stack.setCurrentIndex(1)

    @staticmethod
    def titled(title: str, widget: QWidget) -> QWidget:
        group = QWidget()
        layout = QVBoxLayout(group)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)
        lbl = QLabel(title)
        lbl.setStyleSheet(f"font-weight: bold; font-size: 13px; color: {COLORS['text']};")
        layout.addWidget(lbl)
        layout.addWidget(widget)
        return group


class CostSavingsTab(_TabPage):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        cards = QHBoxLayout()
        self._saved = StatCard("Total saved vs comparison")
        self._actual = StatCard("Actual cost")
        self._comparison = StatCard("Comparison cost")
        self._percent = StatCard("Savings")
        self._prompts = StatCard("Total prompts")
        self._avg = StatCard("Avg cost / prompt")
        for card in (
            self._saved,
            self._actual,
            self._comparison,
            self._percent,
            self._prompts,
            self._avg,
        ):
            cards.addWidget(card)
        self.content_layout.addLayout(cards)

        self._chart = ChartCanvas(width=7, height=3, empty_text="No daily data", y_label="USD")
        self.content_layout.addWidget(self.titled("Daily Cost (30 days)", self._chart))
        self.content_layout.addStretch()

    def set_view(self, view: CostSavingsView) -> None:
        if view.empty:
            self._chart.set_chart(None)
            self.show_empty(view.empty_message)
            return
        self._saved.set_value(format_cost(view.total_saved_usd), COLORS["green"])
        self._actual.set_value(format_cost(view.total_actual_usd), COLORS["blue"])
        self._comparison.set_value(format_cost(view.total_comparison_usd), COLORS["red"])
        self._percent.set_value(f"{view.savings_percent:.1f}%")
        self._prompts.set_value(f"{view.total_prompts:,}")
        self._avg.set_value(format_cost(view.avg_cost_per_prompt))
        self._chart.set_chart(view.daily_chart)
        self.show_content()


class UsagePatternsTab(_TabPage):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._progress_label = QLabel()
        self._progress_label.setStyleSheet("font-weight: bold;")
        self._progress = QProgressBar()
        self._progress.setRange(0, 100)
        self._progress.setTextVisible(False)
        self.content_layout.addWidget(self._progress_label)
        self.content_layout.addWidget(self._progress)

        self._daily_chart = ChartCanvas(width=7, height=3, empty_text="No daily data")
        self.content_layout.addWidget(self.titled("Daily Prompts (30 days)", self._daily_chart))

        grid = QGridLayout()
        grid.setSpacing(16)
        self._token_chart = ChartCanvas(width=4, height=3, empty_text="No token data")
        self._caller_chart = ChartCanvas(width=4, height=3, empty_text="No caller data yet")
        grid.addWidget(self.titled("Token Distribution", self._token_chart), 0, 0)
        grid.addWidget(self.titled("Caller Breakdown", self._caller_chart), 0, 1)
        self.content_layout.addLayout(grid)
        self.content_layout.addStretch()

    def set_view(self, view: UsagePatternsView) -> None:
        if view.empty:
            for chart in (self._daily_chart, self._token_chart, self._caller_chart):
                chart.set_chart(None)
            self.show_empty(view.empty_message)
            return
        self._progress_label.setText(
            f"Current Window: {view.prompts_used} / {MAX_PROMPTS_PER_WINDOW} prompts "
            f"({view.quota_percent:.0f}%, {view.prompts_remaining} left)"
        )
        self._progress.setValue(round(view.quota_percent))
        self._progress.setStyleSheet(
            f"QProgressBar::chunk {{ background-color: {level_color(view.quota_level)}; }}"
        )
        self._daily_chart.set_chart(view.daily_prompts_chart)
        self._token_chart.set_chart(view.token_chart)
        self._caller_chart.set_chart(view.caller_chart)
        self.show_content()


class PerformanceTab(_TabPage):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        cards = QHBoxLayout()
        self._latency = StatCard("Average response time")
        self._efficiency = StatCard("Batch efficiency")
        self._errors = StatCard("Error rate")
        self._throughput = StatCard("Tokens/sec")
        for card in (self._latency, self._efficiency, self._errors, self._throughput):
            cards.addWidget(card)
        self.content_layout.addLayout(cards)

        self._chart = ChartCanvas(width=7, height=3, empty_text="No requests", y_label="ms")
        self.content_layout.addWidget(self.titled("Response Time", self._chart))

        compare = QHBoxLayout()
        self._batch = StatCard("Batch calls")
        self._query = StatCard("Single queries")
        compare.addWidget(self._batch)
        compare.addWidget(self._query)
        self.content_layout.addWidget(self.titled("Batch vs Query", _wrap(compare)))
        self.content_layout.addStretch()

    def set_view(self, view: PerformanceView) -> None:
        if view.empty:
            self._chart.set_chart(None)
            self.show_empty(view.empty_message)
            return
        self._latency.set_value(
            f"{round(view.avg_response_time_ms)}ms{trend_arrow(view.trend)}", COLORS["blue"]
        )
        self._efficiency.set_value(format_percent(view.batch_efficiency), COLORS["green"])
        self._errors.set_value(
            format_percent(view.error_rate),
            COLORS["red"] if view.error_count else COLORS["green"],
        )
        self._errors.set_label(f"Error rate ({view.error_count}/{view.request_count})")
        self._throughput.set_value(f"{round(view.throughput_tokens_per_s):,}", COLORS["purple"])
        self._batch.set_value(str(view.batch.count), COLORS["blue"])
        self._batch.set_label(
            f"Batch calls · {format_tokens(view.batch.avg_tokens)} avg tokens · "
            f"{format_cost(view.batch.avg_cost_usd)} avg cost"
        )
        self._query.set_value(str(view.query.count), COLORS["orange"])
        self._query.set_label(
            f"Single queries · {format_tokens(view.query.avg_tokens)} avg tokens · "
            f"{format_cost(view.query.avg_cost_usd)} avg cost"
        )
        self._chart.set_chart(view.latency_chart)
        self.show_content()


def _wrap(layout: QHBoxLayout) -> QWidget:
    widget = QWidget()
    widget.setLayout(layout)
    return widget
