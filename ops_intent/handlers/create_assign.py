"""
Catch-all handler: create a client and/or job, and assign a technician.

Runs when no other trigger matched. Each step is gated on its own cues, so
a single message can create a client, book a job for them and assign it,
or do any one of those. When no step applies the handler returns no lines
and the router answers with the capability menu.
"""

import logging
from datetime import datetime, time, timedelta
from typing import Any, Dict, List, Optional

from ..domain import Address, Client, Job, JobStatus, LineItem, Property, VehicleDetails
from ..entity_extractor import DEFAULT_DURATION_MINUTES, DEFAULT_TITLE, default_vehicle
from ..formatter import client_path, format_clock_padded, format_date, job_path, link
from ..lookup import find_client, find_technician
from ..models import IntentCategory
from ..ports import StoreError, new_id
from ..router import HandlerContext, register

logger = logging.getLogger("ops-intent.handlers.create-assign")

DEFAULT_START_TIME = time(9, 0)
PLACEHOLDER_PRICE = 150.0
DEFAULT_PHONE = "(555) 000-0000"
DEFAULT_STREET = "Unknown Address"
DEFAULT_ACCESS = "Gate code: N/A"
NEW_CLIENT_TAG = "New"


def _build_client(name: str, params: Dict[str, Any], config: Dict[str, Any], now: datetime) -> Client:
    client_id = new_id("client")
    street, city = params.get("address") or (DEFAULT_STREET, config.get("fallback_city", "Lubbock"))
    address = Address(
        street=street,
        city=city,
        state=config.get("fallback_state", "TX"),
        zip=config.get("fallback_zip", "79401"),
    )
    first, _, last = name.partition(" ")
    return Client(
        id=client_id,
        first_name=first,
        last_name=last,
        email=params.get("email") or f"{name.replace(' ', '.').lower()}@example.com",
        phone=params.get("phone") or DEFAULT_PHONE,
        billing_address=address,
        properties=[
            Property(
                id=new_id("prop"),
                client_id=client_id,
                address=address.model_copy(),
                access_instructions=DEFAULT_ACCESS,
            )
        ],
        tags=[NEW_CLIENT_TAG],
        created_at=now,
    )


def _job_window(params: Dict[str, Any], now: datetime):
    """Start defaults to tomorrow 09:00; extracted date and time override."""
    day = params.get("date") or (now.date() + timedelta(days=1))
    start = datetime.combine(day, params.get("time") or DEFAULT_START_TIME)
    minutes = params.get("duration_minutes") or DEFAULT_DURATION_MINUTES
    return start, start + timedelta(minutes=minutes)


def _build_job(client: Client, params: Dict[str, Any], text: str, now: datetime) -> Job:
    title = params.get("title") or DEFAULT_TITLE
    start, end = _job_window(params, now)
    return Job(
        id=new_id("job"),
        client_id=client.id,
        property_id=client.properties[0].id,
        assigned_tech_ids=[],
        title=title,
        description=f"Created by AI Assistant. Request: {text}",
        start=start,
        end=end,
        status=JobStatus.SCHEDULED,
        priority="MEDIUM",
        vehicle_details=VehicleDetails(**(params.get("vehicle") or default_vehicle())),
        items=[LineItem(id=new_id("item"), description=title, quantity=1, unit_price=PLACEHOLDER_PRICE)],
        notes="",
    )


def handle_create_assign(ctx: HandlerContext) -> List[str]:
    params = ctx.params
    lines: List[str] = []
    name: Optional[str] = params.get("name")
    target: Optional[Client] = None
    created_job: Optional[Job] = None

    # Step 1: client, new or existing
    wants_client = params.get("explicit_new_client") or (
        params.get("explicit_new_job") and find_client(ctx.snapshot, name or "") is None
    )
    if wants_client and name:
        target = _build_client(name, params, ctx.config, ctx.now)
        ctx.ports.create_client(target)
        logger.info(f"Created client {target.id} ({name})")
        lines += [
            f"✅ **New Client Created:** {name}",
            "I've added their details to the database.",
            link("View Profile", client_path(target.id)),
            "---",
        ]
    elif name:
        target = find_client(ctx.snapshot, name)

    # Step 2: job for that client
    if params.get("job_cue"):
        if target is not None:
            created_job = _build_job(target, params, ctx.text, ctx.now)
            ctx.ports.create_job(created_job)
            logger.info(f"Created job {created_job.id} for client {target.id}")
            lines += [
                f"🚗 **Job Scheduled:** {created_job.title}",
                f"**When:** {format_date(created_job.start)} at {format_clock_padded(created_job.start)}",
                link("View Job", job_path(created_job.id)),
            ]
        else:
            lines += [
                "⚠️ I couldn't determine which client to create the job for.",
                'Please specify a name like "create job for John...".',
            ]

    # Step 3: technician assignment
    if "assignee_raw" in params:
        raw = params["assignee_raw"]
        tech = find_technician(ctx.snapshot, params.get("assignee_query", ""))
        if tech is None:
            lines.append(f'⚠️ I couldn\'t find a team member matching "{raw}".')
        else:
            job = created_job or ctx.snapshot.latest_job()
            if job is None:
                lines.append(f"⚠️ I found {tech.name}, but I'm not sure which job to assign.")
            else:
                try:
                    ctx.ports.assign_technician(job.id, tech.id)
                except StoreError as e:
                    # Client/job mutations above stay committed
                    logger.warning(f"Could not assign job {job.id} to {tech.id}: {e}")
                    status = job.status.value.lower().replace("_", " ")
                    lines.append(f"⚠️ I found {tech.name}, but the latest job is {status} so I couldn't assign it.")
                else:
                    logger.info(f"Assigned job {job.id} to {tech.id}")
                    lines += [
                        "---",
                        f"👷 **Assigned to:** {tech.name}",
                        "Notification sent.",
                    ]

    return lines


def register_handlers() -> None:
    register(IntentCategory.CREATE_ASSIGN, handle_create_assign)
