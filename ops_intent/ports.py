"""
Mutation ports consumed by the interpreter, plus an in-memory host.

The interpreter only ever changes business data through a DomainPorts
implementation. InMemoryStore is the reference host: it applies each call
to the DomainSnapshot it wraps and keeps a log of what was called, which
is what the MCP server and the tests run against.
"""

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from pydantic import BaseModel, Field

from .domain import (
    ChatMessage,
    Client,
    DomainSnapshot,
    Invoice,
    Job,
    JobStatus,
    Quote,
    TERMINAL_JOB_STATUSES,
)

logger = logging.getLogger("ops-intent.store")


class StoreError(Exception):
    """Raised when a mutation breaks a rule the host enforces."""


class DomainPorts(Protocol):
    """Operations the host exposes to the interpreter."""

    def create_client(self, client: Client) -> None: ...

    def create_job(self, job: Job) -> None: ...

    def cancel_job(self, job_id: str, reason: str) -> None: ...

    def assign_technician(self, job_id: str, technician_id: str) -> None: ...

    def create_quote(self, quote: Quote) -> None: ...

    def create_invoice(self, invoice: Invoice) -> None: ...

    def emit_reply(self, conversation_id: str, text: str, sender_id: str) -> None: ...


class Mutation(BaseModel):
    """One recorded call against the store."""

    operation: str
    target_id: str
    details: Dict[str, Any] = Field(default_factory=dict)


def new_id(prefix: str) -> str:
    """Generate a record id such as ``job-3f9a1c2b7d4e``."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class InMemoryStore:
    """DomainPorts implementation that mutates a snapshot in place."""

    def __init__(self, snapshot: Optional[DomainSnapshot] = None) -> None:
        self.snapshot = snapshot if snapshot is not None else DomainSnapshot()
        self.mutations: List[Mutation] = []
        self.replies: List[ChatMessage] = []

    def _record(self, operation: str, target_id: str, **details: Any) -> None:
        self.mutations.append(Mutation(operation=operation, target_id=target_id, details=details))
        logger.info(f"{operation} {target_id}")

    def _require_job(self, job_id: str) -> Job:
        job = self.snapshot.job_by_id(job_id)
        if job is None:
            raise StoreError(f"Unknown job '{job_id}'")
        return job

    def _next_sequence(self) -> int:
        return max((j.sequence for j in self.snapshot.jobs), default=0) + 1

    def create_client(self, client: Client) -> None:
        if self.snapshot.client_by_id(client.id) is not None:
            raise StoreError(f"Client '{client.id}' already exists")
        # Newest clients come first, matching the host's client list
        self.snapshot.clients.insert(0, client)
        self._record("create_client", client.id, name=client.full_name)

    def create_job(self, job: Job) -> None:
        if self.snapshot.job_by_id(job.id) is not None:
            raise StoreError(f"Job '{job.id}' already exists")
        if self.snapshot.client_by_id(job.client_id) is None:
            raise StoreError(f"Job '{job.id}' references unknown client '{job.client_id}'")
        job.sequence = self._next_sequence()
        self.snapshot.jobs.append(job)
        self._record("create_job", job.id, title=job.title, sequence=job.sequence)

    def cancel_job(self, job_id: str, reason: str) -> None:
        job = self._require_job(job_id)
        if job.status in TERMINAL_JOB_STATUSES:
            raise StoreError(f"Job '{job_id}' is already {job.status.value.lower()}")
        job.status = JobStatus.CANCELLED
        job.cancellation_reason = reason
        job.assigned_tech_ids = []
        self._record("cancel_job", job_id, reason=reason)

    def assign_technician(self, job_id: str, technician_id: str) -> None:
        job = self._require_job(job_id)
        if self.snapshot.user_by_id(technician_id) is None:
            raise StoreError(f"Unknown technician '{technician_id}'")
        if job.status in TERMINAL_JOB_STATUSES:
            raise StoreError(f"Cannot assign a {job.status.value.lower()} job")
        job.assigned_tech_ids = [technician_id]
        if job.status == JobStatus.DRAFT:
            job.status = JobStatus.SCHEDULED
        self._record("assign_technician", job_id, technician_id=technician_id)

    def create_quote(self, quote: Quote) -> None:
        self.snapshot.quotes.append(quote)
        self._record("create_quote", quote.id, total=quote.total)

    def create_invoice(self, invoice: Invoice) -> None:
        self.snapshot.invoices.append(invoice)
        self._record("create_invoice", invoice.id, total=invoice.total)

    def emit_reply(self, conversation_id: str, text: str, sender_id: str) -> None:
        message = ChatMessage(
            id=new_id("msg"),
            chat_id=conversation_id,
            sender_id=sender_id,
            content=text,
            timestamp=datetime.now(),
        )
        self.replies.append(message)
        logger.debug(f"Reply emitted to {conversation_id} ({len(text)} chars)")


def load_snapshot(path: Optional[str]) -> DomainSnapshot:
    """Load a JSON snapshot file; a missing path yields an empty snapshot."""
    if not path or not Path(path).is_file():
        logger.warning(f"Snapshot file not found: {path!r}, starting empty")
        return DomainSnapshot()
    data = json.loads(Path(path).read_text())
    snapshot = DomainSnapshot.model_validate(data)
    # Hosts that predate creation sequences: keep file order as creation order
    if snapshot.jobs and all(j.sequence == 0 for j in snapshot.jobs):
        for index, job in enumerate(snapshot.jobs, start=1):
            job.sequence = index
    logger.info(
        f"Loaded snapshot: {len(snapshot.clients)} clients, {len(snapshot.jobs)} jobs, "
        f"{len(snapshot.invoices)} invoices"
    )
    return snapshot
