"""
Revenue projection handler.
"""

import logging
from datetime import timedelta
from typing import List

from ..domain import JobStatus
from ..formatter import format_money
from ..models import IntentCategory
from ..router import HandlerContext, register

logger = logging.getLogger("ops-intent.handlers.revenue")

PROJECTION_WINDOW = timedelta(days=7)


def handle_revenue_projection(ctx: HandlerContext) -> List[str]:
    """Value of non-cancelled jobs starting in the next seven days."""
    window_end = ctx.now + PROJECTION_WINDOW
    upcoming = [
        j
        for j in ctx.snapshot.jobs
        if ctx.now <= j.start < window_end and j.status != JobStatus.CANCELLED
    ]
    total = sum(j.value for j in upcoming)
    logger.debug(f"{len(upcoming)} jobs in projection window, total {total}")

    lines = [
        "💰 **Weekly Revenue Projection**",
        "Looking at the schedule for the next 7 days, things are looking good!",
        f"We have **{len(upcoming)} active jobs** scheduled, projecting a total revenue of **{format_money(total)}**.",
    ]
    if upcoming:
        top = max(upcoming, key=lambda j: j.value)
        client = ctx.snapshot.client_by_id(top.client_id)
        client_name = client.last_name if client else "Unknown client"
        lines.append("\n**Top Value Job:**")
        lines.append(f"• {top.title} for {client_name}: **{format_money(top.value)}**")
    return lines


def register_handlers() -> None:
    register(IntentCategory.REVENUE_PROJECTION, handle_revenue_projection)
