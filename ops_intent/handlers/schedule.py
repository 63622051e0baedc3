"""
Today's schedule handler.
"""

from typing import List

from ..domain import JobStatus
from ..formatter import SCHEDULE_PATH, format_clock, link
from ..models import IntentCategory
from ..router import HandlerContext, register


def handle_schedule_today(ctx: HandlerContext) -> List[str]:
    today = ctx.now.date()
    todays_jobs = sorted(
        (j for j in ctx.snapshot.jobs if j.start.date() == today and j.status != JobStatus.CANCELLED),
        key=lambda j: j.start,
    )
    if not todays_jobs:
        return [
            "☕ **The schedule is clear for today.**",
            "No jobs are currently scheduled.",
        ]

    lines = [f"📝 **Today's Agenda ({len(todays_jobs)} Jobs)**"]
    for job in todays_jobs:
        tech = ctx.snapshot.user_by_id(job.assigned_tech_ids[0]) if job.assigned_tech_ids else None
        who = tech.first_name if tech else "Unassigned"
        lines.append(f"• **{format_clock(job.start)}**: {job.title} _({who})_")
    lines.append("\n" + link("View Full Schedule", SCHEDULE_PATH))
    return lines


def register_handlers() -> None:
    register(IntentCategory.SCHEDULE_TODAY, handle_schedule_today)
