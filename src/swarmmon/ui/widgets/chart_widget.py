"""Matplotlib embedded chart widget for PySide6."""

from __future__ import annotations

from typing import TYPE_CHECKING

from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg
from matplotlib.figure import Figure

from swarmmon.ui.theme import CHART_COLORS, COLORS

BAR_COLORS = [COLORS["blue"], COLORS["red"], *CHART_COLORS[1:]]

if TYPE_CHECKING:
    from swarmmon.models.views import ChartData, ChartSeries


def point_color(series: ChartSeries, index: int) -> str:
    """Red for failed requests, blue for batches, green for single queries."""
    if index >= len(series.annotations):
        return COLORS["blue"]
    annotation = series.annotations[index]
    if annotation.errored:
        return COLORS["red"]
    return COLORS["blue"] if annotation.kind == "batch" else COLORS["green"]


class ChartCanvas(FigureCanvasQTAgg):
    """Renders one ChartData, or a neutral message when there is none."""

    def __init__(
        self,
        width: float = 6,
        height: float = 3,
        dpi: int = 100,
        empty_text: str = "No data",
        y_label: str = "",
    ) -> None:
        self.fig = Figure(figsize=(width, height), dpi=dpi, facecolor=COLORS["bg"])
        super().__init__(self.fig)
        self.ax = self.fig.add_subplot(111)
        self._empty_text = empty_text
        self._y_label = y_label
        self._style_axes()

    def _style_axes(self) -> None:
        self.ax.set_facecolor(COLORS["bg"])
        self.ax.tick_params(colors=COLORS["text_muted"], labelsize=9)
        for spine in self.ax.spines.values():
            spine.set_color(COLORS["border"])

    def set_chart(self, data: ChartData | None) -> None:
        self.ax.clear()
        self._style_axes()

        if data is None or not data.series:
            self.ax.set_axis_off()
            self.ax.text(
                0.5,
                0.5,
                self._empty_text,
                ha="center",
                va="center",
                color=COLORS["text_muted"],
                fontsize=12,
                transform=self.ax.transAxes,
            )
            self.draw()
            return

        self.ax.set_axis_on()
        match data.kind:
            case "bar":
                self._draw_bars(data)
            case "line":
                self._draw_lines(data)
            case "doughnut" | "pie":
                self._draw_pie(data, hole=data.kind == "doughnut")

        self.fig.tight_layout()
        self.draw()

    def _draw_bars(self, data: ChartData) -> None:
        count = len(data.series)
        width = 0.8 / count
        positions = range(len(data.labels))
        for i, series in enumerate(data.series):
            offset = (i - (count - 1) / 2) * width
            self.ax.bar(
                [p + offset for p in positions],
                series.values,
                width=width,
                label=series.label,
                color=BAR_COLORS[i % len(BAR_COLORS)],
            )
        self._label_x_axis(data.labels)
        self.ax.legend(fontsize=8, framealpha=0.8)

    def _draw_lines(self, data: ChartData) -> None:
        positions = list(range(len(data.labels)))
        for i, series in enumerate(data.series):
            color = CHART_COLORS[i % len(CHART_COLORS)]
            self.ax.plot(positions, series.values, color=color, linewidth=1.5)
            self.ax.fill_between(positions, series.values, color=color, alpha=0.15)
            if series.annotations:
                self.ax.scatter(
                    positions,
                    series.values,
                    s=12,
                    zorder=3,
                    c=[point_color(series, j) for j in positions],
                )
        self._label_x_axis(data.labels)
        self.ax.set_ylim(bottom=0)

    def _draw_pie(self, data: ChartData, *, hole: bool) -> None:
        values = data.series[0].values
        self.ax.pie(
            values,
            labels=data.labels,
            colors=[CHART_COLORS[i % len(CHART_COLORS)] for i in range(len(values))],
            autopct="%1.0f%%",
            pctdistance=0.8,
            wedgeprops={"width": 0.5} if hole else None,
            textprops={"fontsize": 9, "color": COLORS["text"]},
        )
        self.ax.set_aspect("equal")

    def _label_x_axis(self, labels: list[str]) -> None:
        step = max(1, len(labels) // 10)
        ticks = list(range(0, len(labels), step))
        self.ax.set_xticks(ticks)
        self.ax.set_xticklabels([labels[i] for i in ticks], rotation=45)
        if self._y_label:
            self.ax.set_ylabel(self._y_label, fontsize=10, color=COLORS["text_muted"])
