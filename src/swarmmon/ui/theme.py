"""Theme, color definitions, QSS stylesheet, and display formatting utilities."""

from __future__ import annotations

from swarmmon.models.views import QuotaLevel, StatusLevel, Trend

# ── Color palette (light theme) ──

COLORS = {
    "primary": "#3794FF",
    "bg": "#FFFFFF",
    "panel_bg": "#FAFAFA",
    "border": "#E0E0E0",
    "text": "#1A1A1A",
    "text_muted": "#888888",
    "blue": "#3794FF",
    "green": "#27AE60",
    "red": "#E74C3C",
    "yellow": "#CCA700",
    "purple": "#9B59B6",
    "orange": "#E67E22",
    "warning": "#F39C12",
    "error": "#E74C3C",
}

CHART_COLORS = [
    COLORS["blue"],
    COLORS["green"],
    COLORS["purple"],
    COLORS["orange"],
    COLORS["yellow"],
    COLORS["red"],
]

FONT_FAMILY = "-apple-system, 'SF Pro Text', 'Helvetica Neue', 'Segoe UI', Roboto, sans-serif"


def build_stylesheet() -> str:
    """Build the application-wide QSS stylesheet."""
    c = COLORS
    return f"""
QWidget {{
    font-family: {FONT_FAMILY};
    font-size: 13px;
    color: {c["text"]};
    background-color: {c["bg"]};
}}

QMainWindow {{
    background-color: {c["bg"]};
}}

QStatusBar {{
    background-color: {c["panel_bg"]};
    border-top: 1px solid {c["border"]};
    font-size: 12px;
    color: {c["text_muted"]};
    padding: 4px 12px;
}}

QTabWidget::pane {{
    border: none;
    border-top: 1px solid {c["border"]};
}}

QTabBar::tab {{
    padding: 6px 16px;
    border: none;
    color: {c["text_muted"]};
}}

QTabBar::tab:selected {{
    color: {c["text"]};
    border-bottom: 2px solid {c["primary"]};
}}

QProgressBar {{
    border: 1px solid {c["border"]};
    border-radius: 4px;
    height: 10px;
    text-align: center;
}}
"""


def format_cost(amount: float) -> str:
    """Format a dollar amount; small values keep four decimals."""
    if abs(amount) < 1:
        return f"${amount:.4f}"
    return f"${amount:.2f}"


def format_tokens(count: float) -> str:
    """Format a token count with K/M suffixes for readability."""
    if count < 1000:
        return str(round(count))
    if count < 1_000_000:
        return f"{count / 1000:.1f}K"
    return f"{count / 1_000_000:.1f}M"


def format_percent(fraction: float) -> str:
    """Format a 0-1 fraction as a percentage."""
    return f"{fraction * 100:.1f}%"


def level_color(level: QuotaLevel | StatusLevel) -> str:
    match level:
        case QuotaLevel.CRITICAL | StatusLevel.ERROR | StatusLevel.EXPIRED:
            return COLORS["error"]
        case QuotaLevel.WARNING | StatusLevel.WARNING:
            return COLORS["warning"]
        case StatusLevel.NO_DATA:
            return COLORS["text_muted"]
        case _:
            return COLORS["blue"]


def trend_arrow(trend: Trend | None) -> str:
    match trend:
        case Trend.IMPROVING:
            return " ↓"
        case Trend.DEGRADING:
            return " ↑"
        case _:
            return ""
