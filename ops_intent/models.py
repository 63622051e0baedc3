"""
Pydantic models for the command interpreter.

Defines the intent categories, the parsed intent structure, and the result
returned to the host for one operator message.
"""

from enum import Enum
from typing import Dict, Any, List, Optional

from pydantic import BaseModel, Field


class IntentCategory(str, Enum):
    """Business intents the assistant understands, in dispatch order."""

    REVENUE_PROJECTION = "revenue.projection"
    TECHNICIAN_AVAILABILITY = "technician.availability"
    JOB_CANCEL = "job.cancel"
    SCHEDULE_TODAY = "schedule.today"
    CLIENT_HISTORY = "client.history"
    INVENTORY_CHECK = "inventory.check"
    QUOTE_DRAFT = "quote.draft"
    INVOICE_SEND = "invoice.send"
    TECHNICIAN_LOCATE = "technician.locate"
    INVOICE_OVERDUE = "invoice.overdue"

    # Catch-all: client/job creation and technician assignment
    CREATE_ASSIGN = "client_job.create_assign"


# Categories that change business data
WRITE_CATEGORIES = frozenset(
    {
        IntentCategory.JOB_CANCEL,
        IntentCategory.QUOTE_DRAFT,
        IntentCategory.INVOICE_SEND,
        IntentCategory.CREATE_ASSIGN,
    }
)


class ParsedIntent(BaseModel):
    """Result of classifying a natural language input."""

    category: IntentCategory
    confidence: float = Field(ge=0.0, le=1.0)
    raw_input: str
    entities: Dict[str, Any] = Field(default_factory=dict)
    parameters: Dict[str, Any] = Field(default_factory=dict)


class IntentResult(BaseModel):
    """Reply produced for one operator message."""

    success: bool
    category: Optional[IntentCategory] = None
    lines: List[str] = Field(default_factory=list)
    output: str
    error: Optional[str] = None
    suggestions: List[str] = Field(default_factory=list)
