"""
Reply rendering.

Handlers return ordered lines that may carry ``**bold**`` spans and
``[label](target)`` links. This module joins them into one message, splits
a line back into segments for rich transports, and holds the link paths and
display helpers the handlers share. Link targets are opaque to the
formatter; handlers are responsible for pointing them somewhere real.
"""

import html
import re
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

# Host paths embedded in replies
SCHEDULE_PATH = "/schedule"
QUOTES_PATH = "/quotes"
INVOICES_PATH = "/invoices"
INVENTORY_ORDERS_PATH = "/inventory/orders"


def job_path(job_id: str) -> str:
    return f"/jobs/{job_id}"


def client_path(client_id: str) -> str:
    return f"/clients/{client_id}"


def link(label: str, target: str) -> str:
    return f"[{label}]({target})"


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


def format_number(value: float) -> str:
    """Thousands separators; decimals only when the value has cents."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def format_money(value: float) -> str:
    return f"${format_number(value)}"


def format_clock(moment: datetime) -> str:
    """12-hour clock without a leading zero, e.g. ``2:00 PM``."""
    return moment.strftime("%I:%M %p").lstrip("0")


def format_clock_padded(moment: datetime) -> str:
    """12-hour clock with a two-digit hour, e.g. ``02:00 PM``."""
    return moment.strftime("%I:%M %p")


def format_date(moment: datetime) -> str:
    """Numeric month/day/year, e.g. ``6/5/2026``."""
    return f"{moment.month}/{moment.day}/{moment.year}"


# ---------------------------------------------------------------------------
# Message assembly and parsing
# ---------------------------------------------------------------------------


def format_reply(lines: List[str]) -> str:
    """Join response lines into one message body."""
    return "\n".join(lines)


class SegmentKind(str, Enum):
    TEXT = "text"
    BOLD = "bold"
    LINK = "link"


class Segment(BaseModel):
    kind: SegmentKind
    text: str
    target: Optional[str] = None


_MARKUP = re.compile(r"\[(?P<label>[^\]]+)\]\((?P<target>[^)]+)\)|\*\*(?P<bold>[^*]+)\*\*")


def parse_line(line: str) -> List[Segment]:
    """Split one line into text, bold and link segments, left to right."""
    segments: List[Segment] = []
    last = 0
    for m in _MARKUP.finditer(line):
        if m.start() > last:
            segments.append(Segment(kind=SegmentKind.TEXT, text=line[last:m.start()]))
        if m.group("label") is not None:
            segments.append(Segment(kind=SegmentKind.LINK, text=m.group("label"), target=m.group("target")))
        else:
            segments.append(Segment(kind=SegmentKind.BOLD, text=m.group("bold")))
        last = m.end()
    if last < len(line):
        segments.append(Segment(kind=SegmentKind.TEXT, text=line[last:]))
    return segments


def _segment_html(segment: Segment) -> str:
    text = html.escape(segment.text)
    if segment.kind == SegmentKind.BOLD:
        return f"<strong>{text}</strong>"
    if segment.kind == SegmentKind.LINK:
        return f'<a href="{html.escape(segment.target or "")}">{text}</a>'
    return text


def render_html(content: str) -> str:
    """Render a reply body as HTML paragraphs; blank lines become breaks."""
    out = []
    for line in content.split("\n"):
        if not line.strip():
            out.append("<br>")
            continue
        out.append("<p>" + "".join(_segment_html(s) for s in parse_line(line)) + "</p>")
    return "\n".join(out)
