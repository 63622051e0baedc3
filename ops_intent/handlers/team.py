"""
Technician handlers: availability on a given day and current whereabouts.
"""

import logging
from typing import List

from ..domain import JobStatus
from ..formatter import format_clock
from ..lookup import find_technician
from ..models import IntentCategory
from ..router import HandlerContext, register

logger = logging.getLogger("ops-intent.handlers.team")


def handle_availability(ctx: HandlerContext) -> List[str]:
    name = ctx.params.get("name", "")
    day_label = ctx.params.get("day_label", "today")
    day = ctx.params.get("day") or ctx.now.date()

    tech = find_technician(ctx.snapshot, name)
    if tech is None:
        return [f'❓ I couldn\'t find a team member named "{name}".']

    lines: List[str] = []
    unparsed = ctx.params.get("unparsed_day")
    if unparsed:
        logger.debug(f"Unreadable day phrase {unparsed!r}, checking today")
        lines.append(f'ℹ️ I couldn\'t read "{unparsed}" as a day, so I checked today instead.')

    # Source order, no sorting
    busy = [
        j
        for j in ctx.snapshot.jobs
        if tech.id in j.assigned_tech_ids
        and j.start.date() == day
        and j.status != JobStatus.CANCELLED
    ]
    if not busy:
        return lines + [
            f"✅ **{tech.first_name} is fully available** on {day_label}.",
            "Their schedule is currently clear.",
        ]

    lines.append(f"📅 **{tech.first_name} is busy** with {len(busy)} jobs on {day_label}:")
    lines.extend(f"• {format_clock(j.start)}: {j.title}" for j in busy)
    return lines


def handle_locate(ctx: HandlerContext) -> List[str]:
    """Report the job a technician is working on or heading to."""
    name = ctx.params.get("name", "")
    tech = find_technician(ctx.snapshot, name)
    if tech is None:
        return [f'❓ I couldn\'t find a technician named "{name}".']

    active = next(
        (j for j in ctx.snapshot.jobs if tech.id in j.assigned_tech_ids and j.status == JobStatus.IN_PROGRESS),
        None,
    )
    if active is not None:
        client = ctx.snapshot.client_by_id(active.client_id)
        prop = ctx.snapshot.property_for(active)
        return [
            f"📍 **{tech.first_name} is currently active.**",
            f"They are at **{active.title}** for {client.first_name if client else 'an unknown client'}.",
            f"Location: {prop.address.street if prop else 'Unknown address'}",
        ]

    en_route = next(
        (j for j in ctx.snapshot.jobs if j.on_my_way_by == tech.id and j.status == JobStatus.SCHEDULED),
        None,
    )
    if en_route is not None:
        prop = ctx.snapshot.property_for(en_route)
        return [
            f"🚐 **{tech.first_name} is on the way** to **{en_route.title}**.",
            f"Destination: {prop.address.street if prop else 'Unknown address'}",
        ]

    return [
        f"📍 **{tech.first_name} is not on a job.**",
        "Last known status: Available/Idle.",
    ]


def register_handlers() -> None:
    register(IntentCategory.TECHNICIAN_AVAILABILITY, handle_availability)
    register(IntentCategory.TECHNICIAN_LOCATE, handle_locate)
