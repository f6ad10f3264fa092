"""Plain-text rendering of the weekly report, ready to paste into email."""

import re
from datetime import date, datetime, timezone
from html.parser import HTMLParser
from typing import Sequence

from cse_whiteboard.reports.window import parse_week_ending, week_start

SEPARATOR = "=" * 42
THIN_SEPARATOR = "-" * 50

_BLOCK_TAGS = frozenset({
    "p", "div", "br", "li", "ul", "ol", "h1", "h2", "h3", "h4", "h5", "h6",
    "blockquote", "pre", "tr",
})
_SUMMARY_HEADING_RE = re.compile(r"^\*\*Executive Summary", re.IGNORECASE)


class _TextExtractor(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.parts: list[str] = []

    def handle_starttag(self, tag, attrs):
        if tag in _BLOCK_TAGS:
            self.parts.append("\n")

    def handle_endtag(self, tag):
        if tag in _BLOCK_TAGS:
            self.parts.append("\n")

    def handle_data(self, data):
        self.parts.append(data)


def strip_html(html: str) -> str:
    """Editor HTML to plain text, one line per block element."""
    parser = _TextExtractor()
    parser.feed(html or "")
    parser.close()
    lines = [line.strip() for line in "".join(parser.parts).splitlines()]
    return "\n".join(line for line in lines if line)


def clean_executive_summary(summary: str) -> str:
    """Drop a leading "**Executive Summary for ...**" heading the model tends to add."""
    lines = summary.split("\n")
    cleaned = []
    previous_was_heading = False
    for line in lines:
        trimmed = line.strip()
        if _SUMMARY_HEADING_RE.match(trimmed):
            previous_was_heading = True
            continue
        if trimmed == "**" and previous_was_heading:
            previous_was_heading = False
            continue
        previous_was_heading = False
        cleaned.append(line)
    return "\n".join(cleaned).strip()


def format_date(value: date) -> str:
    """``Jan 8, 2024``"""
    return f"{value:%b} {value.day}, {value.year}"


def format_datetime(value: datetime) -> str:
    """``Jan 8, 2024, 09:30 AM`` in UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return f"{format_date(value)}, {value:%I:%M %p}"


def _customer_block(entry) -> list[str]:
    customer = entry.customer
    out = [f"CUSTOMER: {customer.name}", THIN_SEPARATOR, ""]
    out.append(f"LTS Progress: [{customer.topology.upper()}] Stage {customer.dumbledore_stage}")
    patch_date = format_date(customer.last_patch_date) if customer.last_patch_date else "N/A"
    out.append(f"Last Patch Date: {patch_date}")
    out.append(f"Last Patch Version: {customer.last_patch_version or 'N/A'}")
    out.append(f"Temperament: {customer.temperament.capitalize()}")
    out.append("")

    if entry.executive_summary:
        out.extend(["EXECUTIVE SUMMARY:", THIN_SEPARATOR])
        out.append(clean_executive_summary(entry.executive_summary))
        out.append("")

    if entry.notes:
        out.extend([f"NOTES FOR THIS WEEK ({len(entry.notes)}):", THIN_SEPARATOR, ""])
        for index, note in enumerate(entry.notes):
            if index > 0:
                out.append("")
            out.append(f"[{format_datetime(note.created_at)}]")
            out.append(strip_html(note.note))
    else:
        out.extend(["NOTES FOR THIS WEEK:", THIN_SEPARATOR, "No notes recorded for this week"])
    return out


def render_weekly_report(entries: Sequence, week_ending_date: str | date) -> str:
    """Fixed-format report: header, one section per customer, trailer."""
    end_day = parse_week_ending(week_ending_date)
    start_day = week_start(end_day)

    lines = [
        SEPARATOR,
        "WEEKLY CUSTOMER REPORT",
        f"Week of {format_date(start_day)} - {format_date(end_day)}",
        SEPARATOR,
        "",
    ]
    for index, entry in enumerate(entries):
        if index > 0:
            lines.extend(["", SEPARATOR, ""])
        lines.extend(_customer_block(entry))

    lines.extend(["", SEPARATOR, "End of Report", SEPARATOR])
    return "\n".join(lines) + "\n"
