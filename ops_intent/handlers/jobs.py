"""
Job cancellation handler.
"""

import logging
from typing import List

from ..domain import ACTIVE_JOB_STATUSES
from ..lookup import find_client
from ..models import IntentCategory
from ..router import HandlerContext, register

logger = logging.getLogger("ops-intent.handlers.jobs")

CANCELLATION_REASON = "Cancelled via AI Assistant"


def handle_cancel(ctx: HandlerContext) -> List[str]:
    client_name = ctx.params.get("client", "")
    client = find_client(ctx.snapshot, client_name)
    if client is None:
        return [f'❓ I couldn\'t find a client named "{client_name}".']

    job = next(
        (j for j in ctx.snapshot.jobs if j.client_id == client.id and j.status in ACTIVE_JOB_STATUSES),
        None,
    )
    if job is None:
        return [f"ℹ️ {client.first_name} doesn't have an active job to cancel right now."]

    ctx.ports.cancel_job(job.id, CANCELLATION_REASON)
    logger.info(f"Cancelled job {job.id} for client {client.id}")
    return [
        "🚫 **Job Cancelled**",
        f"I've cancelled the **{job.title}** for {client.full_name}.",
        "The team has been notified and the slot is now open.",
    ]


def register_handlers() -> None:
    register(IntentCategory.JOB_CANCEL, handle_cancel)
