"""
Entity and parameter extraction from natural language.

Low-level extractors search raw text for one kind of value (name, phone,
email, address, date, clock time, duration, amount, vehicle, job title,
assignee) and return an Extraction or None; they never raise. extract()
combines them into the parameter dict for a classified intent.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Optional, Tuple

from dateutil import parser as date_parser

from .classifier import triggers
from .models import IntentCategory

DEFAULT_DURATION_MINUTES = 60
DEFAULT_TITLE = "Service Visit"
DEFAULT_CITY = "Lubbock"


@dataclass
class Extraction:
    value: Any
    span: Tuple[int, int]


def _from_match(m: "re.Match", value: Any, group: int = 0) -> Extraction:
    return Extraction(value=value, span=m.span(group))


def clean_reference(value: Optional[str]) -> str:
    """Trim a captured name or query and drop trailing punctuation."""
    return re.sub(r"[\s?!.,;:]+$", "", (value or "").strip())


# ---------------------------------------------------------------------------
# People and contact details
# ---------------------------------------------------------------------------

_NAME_RUN = r"([A-Z][a-z]+(?:\s[A-Z][a-z]+)+)"


def extract_person_name(text: str) -> Optional[Extraction]:
    """Capitalized two-or-more word run after a cue word, else at the start."""
    m = re.search(r"\b(?:named|client|for)\s+" + _NAME_RUN, text)
    if not m:
        m = re.search(r"^" + _NAME_RUN, text)
    if not m:
        return None
    return _from_match(m, m.group(1), 1)


def extract_phone(text: str) -> Optional[Extraction]:
    m = re.search(r"(?<!\d)(\(?\d{3}\)?[-.\s]?\d{3}[-.]?\d{4})(?!\d)", text)
    if not m:
        return None
    return _from_match(m, m.group(1), 1)


def extract_email(text: str) -> Optional[Extraction]:
    m = re.search(r"([a-zA-Z0-9._-]+@[a-zA-Z0-9._-]+\.[a-zA-Z0-9._-]+)", text)
    if not m:
        return None
    return _from_match(m, m.group(1).rstrip("."), 1)


_CLOCK_AT_START = re.compile(r"^(?:1[0-2]|0?[1-9])(?::\d{2})?\s*(?:am|pm)\b", re.I)
# Phrases that end an address when the operator keeps talking after it
_ADDRESS_STOP = re.compile(r"\s+(?:starts|owns|phone|email|at\s+(?:1[0-2]|0?[1-9])(?::\d{2})?\s*(?:am|pm))\b.*$", re.I)


def extract_address(text: str, fallback_city: str = DEFAULT_CITY) -> Optional[Extraction]:
    """
    Text after "address is" or "at", split on the first comma into street
    and city. The city falls back to ``fallback_city`` when there is no comma.
    Value is a ``(street, city)`` tuple.
    """
    for m in re.finditer(r"\b(?:address\s+is|at)\s+([^.\n]+)", text, re.I):
        candidate = m.group(1).strip()
        if _CLOCK_AT_START.match(candidate):
            continue
        candidate = _ADDRESS_STOP.sub("", candidate).strip()
        if not candidate:
            continue
        parts = candidate.split(",")
        street = parts[0].strip()
        city = parts[1].strip() if len(parts) > 1 and parts[1].strip() else fallback_city
        return _from_match(m, (street, city), 1)
    return None


# ---------------------------------------------------------------------------
# Dates, times and durations
# ---------------------------------------------------------------------------

_MONTHS = {name.lower() for name in calendar.month_name if name} | {
    name.lower() for name in calendar.month_abbr if name
} | {"sept"}

_WEEKDAYS = [name.lower() for name in calendar.day_name]


def _strip_ordinals(text: str) -> str:
    return re.sub(r"(\d+)(?:st|nd|rd|th)\b", r"\1", text, flags=re.I)


def _parse_month_day(month: str, day: str, year: int) -> Optional[date]:
    if month.lower().rstrip(".") not in _MONTHS:
        return None
    try:
        return date_parser.parse(f"{month} {day} {year}").date()
    except (ValueError, OverflowError):
        return None


def _upcoming_weekday(name: str, today: date, skip_today: bool) -> date:
    ahead = (_WEEKDAYS.index(name) - today.weekday()) % 7
    if ahead == 0 and skip_today:
        ahead = 7
    return today + timedelta(days=ahead)


def extract_date(text: str, now: datetime) -> Optional[Extraction]:
    """
    A start date for a new job.

    ``starts``/``on`` followed by a month name and day ("June 5th") in the
    current year; failing that, a weekday ("next Friday", "on Tuesday") or
    "today"/"tomorrow". Unparseable phrases yield None so the caller keeps
    its default.
    """
    for m in re.finditer(r"\b(?:starts|on)\s+([A-Za-z]+\.?)\s+(\d{1,2})(?:st|nd|rd|th)?\b", text, re.I):
        parsed = _parse_month_day(m.group(1), m.group(2), now.year)
        if parsed is not None:
            return _from_match(m, parsed)

    m = re.search(r"\b(next|this|on)\s+(" + "|".join(_WEEKDAYS) + r")\b", text, re.I)
    if m:
        parsed = _upcoming_weekday(m.group(2).lower(), now.date(), m.group(1).lower() == "next")
        return _from_match(m, parsed)

    m = re.search(r"\b(today|tomorrow)\b", text, re.I)
    if m:
        offset = 1 if m.group(1).lower() == "tomorrow" else 0
        return _from_match(m, now.date() + timedelta(days=offset))

    return None


def parse_day_phrase(phrase: str, now: datetime) -> Optional[date]:
    """Resolve an availability day phrase such as "tomorrow" or "June 5th"."""
    cleaned = clean_reference(phrase).lower()
    cleaned = re.sub(r"^(?:on|for)\s+", "", cleaned)
    if not cleaned or cleaned == "today":
        return now.date()
    if cleaned == "tomorrow":
        return now.date() + timedelta(days=1)

    m = re.match(r"^(?:(next|this)\s+)?(" + "|".join(_WEEKDAYS) + r")$", cleaned)
    if m:
        return _upcoming_weekday(m.group(2), now.date(), m.group(1) == "next")

    default = now.replace(hour=0, minute=0, second=0, microsecond=0)
    try:
        return date_parser.parse(_strip_ordinals(cleaned), default=default).date()
    except (ValueError, OverflowError):
        return None


def extract_clock_time(text: str) -> Optional[Extraction]:
    """12-hour clock time with required AM/PM, as a 24-hour ``time``."""
    m = re.search(r"\b(1[0-2]|0?[1-9])(?::([0-5]\d))?\s*(am|pm)\b", text, re.I)
    if not m:
        return None
    hours = int(m.group(1))
    minutes = int(m.group(2) or 0)
    is_pm = m.group(3).lower() == "pm"
    if is_pm and hours < 12:
        hours += 12
    if not is_pm and hours == 12:
        hours = 0
    return _from_match(m, time(hours, minutes))


def extract_duration(text: str) -> Optional[Extraction]:
    """A number (decimals allowed) followed by a minute or hour unit, in whole minutes."""
    m = re.search(r"(?<![\d.])\b(\d+(?:\.\d+)?)\s*(minutes?|mins?|hours?|hrs?)\b", text, re.I)
    if not m:
        return None
    value = float(m.group(1))
    if m.group(2).lower().startswith("h"):
        value *= 60
    return _from_match(m, int(round(value)))


# ---------------------------------------------------------------------------
# Money, vehicles, titles, assignees
# ---------------------------------------------------------------------------


def extract_amount(text: str) -> Optional[Extraction]:
    """A number with an optional leading "$", commas and cents allowed."""
    m = re.search(r"\$?(\d[\d,]*(?:\.\d+)?)", text or "")
    if not m:
        return None
    try:
        value = float(m.group(1).replace(",", ""))
    except ValueError:
        return None
    return _from_match(m, value)


def extract_vehicle(text: str) -> Optional[Extraction]:
    """
    Vehicle phrase after "owns", "vehicle" or "car", read positionally as
    year, make, model. Missing positions get fixed placeholders.
    Value is a ``{"year", "make", "model"}`` dict.
    """
    m = re.search(r"\b(?:owns|vehicle|car)\s+(?:an?\s+)?([^.\n,-]+)", text, re.I)
    if not m:
        return None
    tokens = m.group(1).split()
    value = {
        "year": tokens[0] if tokens else "2024",
        "make": tokens[1] if len(tokens) > 1 else "Unknown",
        "model": " ".join(tokens[2:]) or "Model",
    }
    return _from_match(m, value, 1)


def default_vehicle() -> Dict[str, str]:
    return {"year": "2024", "make": "Vehicle", "model": "Details"}


_TITLE_VERBS = "cleaning|washing|detailing|repairing|fixing|replacing|installing|check"


def extract_job_title(text: str) -> Optional[Extraction]:
    """
    Job title from an explicit "job is X" / "service is X" phrase, else from
    a service verb and its object with possessive pronouns removed.
    """
    m = re.search(r"\b(?:job|service)\s+is\s+([^.\n,]+)", text, re.I)
    if m:
        title = m.group(1).strip()
    else:
        m = re.search(r"\b(" + _TITLE_VERBS + r")\b\s+([^.\n,]+)", text, re.I)
        if not m:
            return None
        title = f"{m.group(1)} {m.group(2)}".strip()
        title = re.sub(r"\b(?:his|her|their|my|the)\b\s+", "", title, flags=re.I)
        title = title[:1].upper() + title[1:]
    title = re.sub(r"[.,;!?]+$", "", title).strip()
    if not title:
        return None
    return _from_match(m, title)


def extract_assignee(text: str) -> Optional[Extraction]:
    """
    Technician phrase after "assign"/"give"/"schedule" + "to"/"for".
    Value is ``(raw_phrase, search_query)``; the query has possessives and
    punctuation removed and is lower-cased.
    """
    m = re.search(
        r"\b(?:assign|give|schedule)\s+(?:(?:this|it|the\s+job|job)\s+)?(?:to|for)\s+(.+)",
        text,
        re.I,
    )
    if not m:
        return None
    raw = m.group(1).strip()
    query = re.sub(r"'s\b", "", raw)
    query = re.sub(r"[^\w\s]", "", query).strip().lower()
    return _from_match(m, (raw, query), 1)


# ---------------------------------------------------------------------------
# Category-aware extraction
# ---------------------------------------------------------------------------


def _trigger_captures(text: str, category: IntentCategory) -> Dict[str, str]:
    for trigger_category, pattern in triggers():
        if trigger_category == category:
            m = pattern.search(text)
            if m:
                return {k: v.strip() for k, v in m.groupdict().items() if v is not None}
    return {}


def _value(extraction: Optional[Extraction]) -> Any:
    return extraction.value if extraction is not None else None


def extract(
    text: str,
    category: IntentCategory,
    now: Optional[datetime] = None,
    fallback_city: str = DEFAULT_CITY,
) -> Dict[str, Any]:
    """
    Extract entities and parameters from text based on intent category.

    Returns a dict of extracted parameter names to values.
    """
    now = now or datetime.now()
    text = text or ""
    if category == IntentCategory.CREATE_ASSIGN:
        return _extract_create_assign(text, now, fallback_city)

    extractors = {
        IntentCategory.REVENUE_PROJECTION: _extract_noop,
        IntentCategory.TECHNICIAN_AVAILABILITY: _extract_availability,
        IntentCategory.JOB_CANCEL: _extract_client_reference,
        IntentCategory.SCHEDULE_TODAY: _extract_noop,
        IntentCategory.CLIENT_HISTORY: _extract_client_reference,
        IntentCategory.INVENTORY_CHECK: _extract_inventory,
        IntentCategory.QUOTE_DRAFT: _extract_quote,
        IntentCategory.INVOICE_SEND: _extract_client_reference,
        IntentCategory.TECHNICIAN_LOCATE: _extract_technician_reference,
        IntentCategory.INVOICE_OVERDUE: _extract_noop,
    }
    extractor = extractors.get(category, _extract_noop)
    return extractor(text, category, now)


def _extract_noop(text: str, category: IntentCategory, now: datetime) -> Dict[str, Any]:
    return {}


def _extract_client_reference(text: str, category: IntentCategory, now: datetime) -> Dict[str, Any]:
    return {"client": clean_reference(_trigger_captures(text, category).get("client"))}


def _extract_technician_reference(text: str, category: IntentCategory, now: datetime) -> Dict[str, Any]:
    return {"name": clean_reference(_trigger_captures(text, category).get("name"))}


def _extract_availability(text: str, category: IntentCategory, now: datetime) -> Dict[str, Any]:
    captures = _trigger_captures(text, category)
    name = clean_reference(captures.get("name"))
    # "check if Maria is available"
    name = re.sub(r"\s+(?:is|are)$", "", name, flags=re.I)

    day_label = clean_reference(captures.get("day")) or "today"
    day = parse_day_phrase(day_label, now)
    params = {"name": name, "day_label": day_label, "day": day}
    if day is None:
        # Handler checks today and tells the operator which phrase it skipped
        params.update(day_label="today", day=now.date(), unparsed_day=day_label)
    return params


def _extract_inventory(text: str, category: IntentCategory, now: datetime) -> Dict[str, Any]:
    query = clean_reference(_trigger_captures(text, category).get("query"))
    return {"query": query.lower()}


def _extract_quote(text: str, category: IntentCategory, now: datetime) -> Dict[str, Any]:
    captures = _trigger_captures(text, category)
    return {
        "client": clean_reference(captures.get("client")),
        "amount": _value(extract_amount(captures.get("amount", ""))),
    }


def _extract_create_assign(text: str, now: datetime, fallback_city: str) -> Dict[str, Any]:
    lower = text.lower()
    params: Dict[str, Any] = {
        "name": _value(extract_person_name(text)),
        "explicit_new_client": bool(re.search(r"create (?:a )?new client|add client", lower)),
        "explicit_new_job": bool(re.search(r"create (?:a )?new job", lower)),
        "job_cue": bool(re.search(r"create (?:a )?(?:new )?job|add job|schedule|starts", lower)),
        "phone": _value(extract_phone(text)),
        "email": _value(extract_email(text)),
        "address": _value(extract_address(text, fallback_city)),
        "date": _value(extract_date(text, now)),
        "time": _value(extract_clock_time(text)),
        "duration_minutes": _value(extract_duration(text)),
        "title": _value(extract_job_title(text)),
        "vehicle": _value(extract_vehicle(text)),
    }
    assignee = extract_assignee(text)
    if assignee is not None:
        params["assignee_raw"], params["assignee_query"] = assignee.value
    return params
