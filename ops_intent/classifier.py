"""
Deterministic, ordered intent classifier.

No AI models used. Each IntentCategory has one trigger pattern; patterns are
tried top to bottom against the lower-cased input and the first hit wins.
Anything that matches no trigger belongs to the client/job creation and
assignment catch-all, which does its own gating on sub-patterns.
"""

import logging
import re
from typing import List, Optional, Tuple

from .models import IntentCategory, ParsedIntent

logger = logging.getLogger("ops-intent.classifier")


# Order matters: an input that fits several triggers goes to the earliest.
_TRIGGERS: List[Tuple[IntentCategory, re.Pattern]] = [
    (
        IntentCategory.REVENUE_PROJECTION,
        re.compile(r"(?:projected|weekly|week|this\s+week)\s+revenue", re.I),
    ),
    (
        IntentCategory.TECHNICIAN_AVAILABILITY,
        re.compile(
            r"\b(?:is|check\s+if)\s+(?P<name>.+?)\s+(?:free|available)\b"
            r"(?:\s+(?:on\s+)?(?P<day>[^?!.\n]+))?",
            re.I,
        ),
    ),
    (
        IntentCategory.JOB_CANCEL,
        re.compile(r"\bcancel\s+(?:the\s+)?(?:job|appointment)\s+(?:for|of)\s+(?P<client>.+)", re.I),
    ),
    (
        IntentCategory.SCHEDULE_TODAY,
        re.compile(r"(?:schedule|jobs|appointments)\s+(?:for\s+)?today", re.I),
    ),
    (
        IntentCategory.CLIENT_HISTORY,
        re.compile(r"(?:history|past\s+jobs)\s+(?:for|of)\s+(?P<client>.+)", re.I),
    ),
    (
        IntentCategory.INVENTORY_CHECK,
        re.compile(r"(?:check|stock|inventory)\s+(?:for|of)\s+(?P<query>.+)", re.I),
    ),
    (
        IntentCategory.QUOTE_DRAFT,
        re.compile(
            r"(?:draft|create)\s+(?:a\s+)?quote\s+for\s+(?P<client>.+?)\s+"
            r"(?:for|amount)\s+(?P<amount>\$?\d[\d,]*(?:\.\d+)?)",
            re.I,
        ),
    ),
    (
        IntentCategory.INVOICE_SEND,
        re.compile(r"(?:send|create)\s+(?:an\s+)?invoice\s+for\s+(?P<client>.+)", re.I),
    ),
    (
        IntentCategory.TECHNICIAN_LOCATE,
        re.compile(r"(?:where\s+is|locate)\s+(?P<name>.+)", re.I),
    ),
    (
        IntentCategory.INVOICE_OVERDUE,
        re.compile(r"(?:overdue|unpaid)\s+(?:invoices|bills)", re.I),
    ),
]


def triggers() -> List[Tuple[IntentCategory, re.Pattern]]:
    """The ordered (category, pattern) dispatch table."""
    return list(_TRIGGERS)


def _captures(pattern: re.Pattern, text: str) -> dict:
    """Named groups from the original-case text, trimmed."""
    m = pattern.search(text)
    if not m:
        return {}
    return {k: v.strip() for k, v in m.groupdict().items() if v is not None}


def match_trigger(text: str) -> Optional[Tuple[IntentCategory, dict]]:
    """Return the first trigger that fires, with its captured groups."""
    lower = text.lower()
    for category, pattern in _TRIGGERS:
        if pattern.search(lower):
            return category, _captures(pattern, text)
    return None


def classify(text: str) -> ParsedIntent:
    """
    Classify natural language text into an IntentCategory.

    Returns the first matching trigger with confidence 1.0, or the
    creation/assignment catch-all with confidence 0.0 when nothing fires.
    """
    text_clean = (text or "").strip()

    hit = match_trigger(text_clean) if text_clean else None
    if hit is None:
        logger.debug(f"No trigger matched, falling through: {text_clean[:60]!r}")
        return ParsedIntent(
            category=IntentCategory.CREATE_ASSIGN,
            confidence=0.0,
            raw_input=text_clean,
        )

    category, captures = hit
    logger.debug(f"Classified as {category.value}: {text_clean[:60]!r}")
    return ParsedIntent(
        category=category,
        confidence=1.0,
        raw_input=text_clean,
        entities=captures,
    )
