"""CSE Whiteboard: customer notes, to-dos, audit history and weekly reports."""

from cse_whiteboard.audit.diff import diff_fields, normalize_value
from cse_whiteboard.reports.render import render_weekly_report, strip_html
from cse_whiteboard.reports.window import week_bounds

__all__ = [
    "diff_fields",
    "normalize_value",
    "render_weekly_report",
    "strip_html",
    "week_bounds",
]
__version__ = "0.1.0"
