"""
Dashboard Configuration

Log severity levels, page sizes and display helpers shared by the views.
"""

from typing import Any, Dict

# Severity levels written by the daemons' log sink (ordered)
LOG_LEVELS: Dict[int, str] = {
    0: "Trace",
    1: "Debug",
    2: "Info",
    3: "Warning",
    4: "Error",
    5: "Critical",
}
DEFAULT_LOG_LEVEL = 3

MAIN_LOG_PAGE_SIZE = 200
SCRIPT_LOG_PAGE_SIZE = 50

LEVEL_CSS_CLASSES = {
    0: "severity-debug",
    1: "severity-debug",
    2: "severity-info",
    3: "severity-warning",
    4: "severity-error",
    5: "severity-error",
}


def get_level_name(level: Any) -> str:
    """Readable name for a numeric level; unknown levels are shown as-is, a missing one as a dash."""
    if level is None or level == "":
        return "—"
    try:
        return LOG_LEVELS.get(int(level), str(level))
    except (TypeError, ValueError):
        return str(level)


def get_level_class(level: Any) -> str:
    try:
        return LEVEL_CSS_CLASSES.get(int(level), "severity-info")
    except (TypeError, ValueError):
        return "severity-info"


def format_reading(value: Any, unit: str = "") -> str:
    """
    Format a sensor value with its unit.

    Values below 10 get two decimals, larger values one; missing values
    render as a dash.
    """
    if value is None or value == '':
        return '—'

    try:
        num_val = float(value)
    except (ValueError, TypeError):
        return '—'

    suffix = f" {unit}" if unit else ""
    if abs(num_val) < 10:
        return f"{num_val:.2f}{suffix}"
    return f"{num_val:.1f}{suffix}"
