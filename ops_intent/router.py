"""
Intent router that maps IntentCategory to handler functions and dispatches.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from .classifier import classify
from .config import get_config
from .domain import DomainSnapshot
from .entity_extractor import extract
from .formatter import format_reply
from .models import IntentCategory, IntentResult, WRITE_CATEGORIES
from .ports import DomainPorts

logger = logging.getLogger("ops-intent")

# Reply when nothing matched and the creation/assignment flow had nothing to do
CAPABILITY_MENU = [
    "I can help you run your business. Here are some things I can do:",
    '* "What is the projected revenue for this week?"',
    '* "Is Marcus free tomorrow?"',
    '* "Create a job for John Doe next Friday"',
    '* "Send an invoice for the last job"',
    '* "Check inventory for Ceramic Coating"',
]


@dataclass
class HandlerContext:
    """Everything a handler may use for one message."""

    text: str
    params: Dict[str, Any]
    snapshot: DomainSnapshot
    ports: DomainPorts
    now: datetime
    config: Dict[str, Any] = field(default_factory=dict)


# Handlers return the reply lines in order
HandlerFunc = Callable[[HandlerContext], List[str]]

# Registry of category -> handler
_handlers: Dict[IntentCategory, HandlerFunc] = {}


def register(category: IntentCategory, handler: HandlerFunc) -> None:
    """Register a handler function for an intent category."""
    _handlers[category] = handler
    logger.debug(f"Registered handler for {category.value}")


def get_handler(category: IntentCategory) -> Optional[HandlerFunc]:
    """Get the registered handler for a category."""
    return _handlers.get(category)


def _result(category: IntentCategory, lines: List[str], success: bool = True, **kwargs) -> IntentResult:
    return IntentResult(
        success=success,
        category=category,
        lines=lines,
        output=format_reply(lines),
        **kwargs,
    )


def route(
    text: str,
    snapshot: DomainSnapshot,
    ports: DomainPorts,
    now: Optional[datetime] = None,
    config: Optional[Dict[str, Any]] = None,
) -> IntentResult:
    """
    Classify input text, extract parameters, and run the matching handler.

    This is the main entry point for processing one operator message. Any
    mutations happen through ``ports`` before the result is returned.
    """
    config = config if config is not None else get_config()
    now = now or datetime.now()

    # Step 1: Classify (first trigger wins, else the creation catch-all)
    intent = classify(text)

    # Step 2: Extract entities/parameters
    params = extract(intent.raw_input, intent.category, now, config.get("fallback_city", "Lubbock"))
    intent.parameters = params

    # Step 3: Check read-only mode for write operations
    if intent.category in WRITE_CATEGORIES and config.get("read_only"):
        error = "Read-only mode is enabled (OPS_INTENT_READ_ONLY=true)"
        if intent.category == IntentCategory.CREATE_ASSIGN:
            return _result(intent.category, list(CAPABILITY_MENU), success=False, error=error)
        return _result(
            intent.category,
            [f"🔒 I can't do '{intent.category.value}' while the assistant is in read-only mode."],
            success=False,
            error=error,
            suggestions=["Set OPS_INTENT_READ_ONLY=false to enable changes"],
        )

    # Step 4: Find handler
    handler = get_handler(intent.category)
    if handler is None:
        return _result(
            intent.category,
            [f"⚠️ No handler registered for '{intent.category.value}'."],
            success=False,
            error="Handler not found",
        )

    # Step 5: Execute handler
    ctx = HandlerContext(
        text=intent.raw_input,
        params=params,
        snapshot=snapshot,
        ports=ports,
        now=now,
        config=config,
    )
    try:
        lines = handler(ctx)
    except Exception as e:
        logger.error(f"Handler error for {intent.category.value}: {e}", exc_info=True)
        return _result(
            intent.category,
            [f"⚠️ Something went wrong while handling that request: {e}"],
            success=False,
            error=str(e),
            suggestions=["Try rephrasing the request or check the record in the dashboard."],
        )

    # Step 6: Nothing to say means nothing was understood
    if not lines:
        return _result(intent.category, list(CAPABILITY_MENU))

    return _result(intent.category, lines)
