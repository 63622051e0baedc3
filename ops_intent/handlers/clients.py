"""
Client history handler.
"""

from typing import List

from ..domain import JobStatus
from ..formatter import client_path, format_date, format_money, link
from ..lookup import find_client
from ..models import IntentCategory
from ..router import HandlerContext, register

RECENT_VISITS = 3


def handle_client_history(ctx: HandlerContext) -> List[str]:
    client_name = ctx.params.get("client", "")
    client = find_client(ctx.snapshot, client_name)
    if client is None:
        return [f'❓ Client "{client_name}" not found.']

    completed = [j for j in ctx.snapshot.jobs if j.client_id == client.id and j.status == JobStatus.COMPLETED]
    lifetime_value = sum(j.value for j in completed)

    lines = [
        f"📂 **History for {client.full_name}**",
        f"They have completed **{len(completed)} jobs** with us, totaling "
        f"**{format_money(lifetime_value)}** in lifetime value.",
    ]
    if completed:
        lines.append("\n**Recent Visits:**")
        recent = sorted(completed, key=lambda j: j.end, reverse=True)[:RECENT_VISITS]
        lines.extend(f"• {format_date(j.end)}: {j.title}" for j in recent)
    lines.append("\n" + link("View Client Profile", client_path(client.id)))
    return lines


def register_handlers() -> None:
    register(IntentCategory.CLIENT_HISTORY, handle_client_history)
