"""
Tests for reply formatting, markup parsing and HTML rendering.
"""

from datetime import datetime

import pytest

from ops_intent.formatter import (
    Segment,
    SegmentKind,
    client_path,
    format_clock,
    format_clock_padded,
    format_date,
    format_money,
    format_number,
    format_reply,
    job_path,
    link,
    parse_line,
    render_html,
)


class TestDisplayHelpers:

    @pytest.mark.parametrize(
        "value,expected",
        [
            (1500, "1,500"),
            (1500.0, "1,500"),
            (1250.5, "1,250.50"),
            (0, "0"),
        ],
    )
    def test_format_number(self, value, expected):
        assert format_number(value) == expected

    def test_format_money(self):
        assert format_money(270) == "$270"

    def test_clock(self):
        assert format_clock(datetime(2026, 6, 1, 14, 0)) == "2:00 PM"
        assert format_clock(datetime(2026, 6, 1, 9, 5)) == "9:05 AM"

    def test_clock_padded(self):
        assert format_clock_padded(datetime(2026, 6, 5, 14, 0)) == "02:00 PM"

    def test_date(self):
        assert format_date(datetime(2026, 6, 5, 14, 0)) == "6/5/2026"

    def test_links(self):
        assert link("View Job", job_path("job-1")) == "[View Job](/jobs/job-1)"
        assert client_path("c1") == "/clients/c1"


class TestParseLine:

    def test_mixed_segments(self):
        segments = parse_line("Total: **$270.00** [View](/invoices) done")
        assert segments == [
            Segment(kind=SegmentKind.TEXT, text="Total: "),
            Segment(kind=SegmentKind.BOLD, text="$270.00"),
            Segment(kind=SegmentKind.TEXT, text=" "),
            Segment(kind=SegmentKind.LINK, text="View", target="/invoices"),
            Segment(kind=SegmentKind.TEXT, text=" done"),
        ]

    def test_plain_text(self):
        assert parse_line("plain") == [Segment(kind=SegmentKind.TEXT, text="plain")]

    def test_unmatched_markup_kept_verbatim(self):
        assert parse_line("**unclosed [bold") == [Segment(kind=SegmentKind.TEXT, text="**unclosed [bold")]

    def test_empty_line(self):
        assert parse_line("") == []


class TestRendering:

    def test_format_reply_joins_lines(self):
        assert format_reply(["a", "b"]) == "a\nb"

    def test_render_html(self):
        html = render_html("a\n\n**b** [go](/schedule)")
        assert html == '<p>a</p>\n<br>\n<p><strong>b</strong> <a href="/schedule">go</a></p>'

    def test_render_html_escapes(self):
        assert render_html("<script>") == "<p>&lt;script&gt;</p>"
