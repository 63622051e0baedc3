"""
Shared fixtures: a small seeded business and a frozen clock.

The clock is Monday 2026-06-01 10:00 local time.
"""

from datetime import datetime

import pytest

from ops_intent.domain import (
    Address,
    Client,
    DomainSnapshot,
    InventoryProduct,
    InventoryRecord,
    Invoice,
    InvoiceStatus,
    Job,
    JobStatus,
    LineItem,
    Property,
    User,
    UserRole,
)
from ops_intent.ports import InMemoryStore

NOW = datetime(2026, 6, 1, 10, 0)


def _address(street):
    return Address(street=street, city="Lubbock", state="TX", zip="79401")


def _client(client_id, first, last, street):
    return Client(
        id=client_id,
        first_name=first,
        last_name=last,
        email=f"{first.lower()}@example.com",
        phone="(806) 555-0100",
        billing_address=_address(street),
        properties=[Property(id=f"prop-{client_id}", client_id=client_id, address=_address(street))],
        created_at=datetime(2025, 1, 1),
    )


def _job(job_id, client_id, title, start, end, status, techs, price, sequence):
    return Job(
        id=job_id,
        client_id=client_id,
        property_id=f"prop-{client_id}",
        assigned_tech_ids=techs,
        title=title,
        start=start,
        end=end,
        status=status,
        items=[LineItem(id=f"item-{job_id}", description=title, unit_price=price)],
        sequence=sequence,
    )


def build_snapshot() -> DomainSnapshot:
    return DomainSnapshot(
        clients=[
            _client("c1", "John", "Doe", "100 Main St"),
            _client("c2", "Jane", "Smith", "22 Oak Ave"),
        ],
        users=[
            User(id="u1", name="Marcus Johnson", role=UserRole.TECHNICIAN),
            User(id="u2", name="Maria Garcia", role=UserRole.TECHNICIAN),
        ],
        jobs=[
            _job("j1", "c1", "Full Detail", datetime(2026, 6, 1, 14), datetime(2026, 6, 1, 16),
                 JobStatus.SCHEDULED, ["u1"], 300, 1),
            _job("j2", "c2", "Window Tint", datetime(2026, 6, 1, 9), datetime(2026, 6, 1, 11),
                 JobStatus.IN_PROGRESS, ["u2"], 450, 2),
            _job("j3", "c2", "Ceramic Coating", datetime(2026, 6, 3, 10), datetime(2026, 6, 3, 13),
                 JobStatus.SCHEDULED, ["u1"], 1200, 3),
            _job("j4", "c2", "Interior Clean", datetime(2026, 5, 10, 9), datetime(2026, 5, 10, 11),
                 JobStatus.COMPLETED, ["u2"], 200, 4),
            _job("j5", "c2", "Paint Correction", datetime(2026, 5, 20, 9), datetime(2026, 5, 20, 15),
                 JobStatus.COMPLETED, ["u1"], 800, 5),
            _job("j6", "c1", "Oil Change", datetime(2026, 6, 2, 8), datetime(2026, 6, 2, 9),
                 JobStatus.CANCELLED, [], 90, 6),
        ],
        invoices=[
            Invoice(id="i1", client_id="c2", subtotal=450, tax=0, total=450, balance_due=450,
                    status=InvoiceStatus.OVERDUE, due_date=datetime(2026, 5, 1), issued_date=datetime(2026, 4, 1)),
            Invoice(id="i2", client_id="c1", subtotal=300, tax=0, total=300, balance_due=300,
                    status=InvoiceStatus.OVERDUE, due_date=datetime(2026, 5, 15), issued_date=datetime(2026, 4, 15)),
            Invoice(id="i3", client_id="c1", subtotal=100, tax=0, total=100, balance_due=0,
                    status=InvoiceStatus.PAID, due_date=datetime(2026, 5, 20), issued_date=datetime(2026, 5, 1)),
        ],
        inventory_products=[
            InventoryProduct(id="p1", sku="CC-100", name="Ceramic Coating Kit", unit="bottle", min_stock=5),
            InventoryProduct(id="p2", sku="MF-200", name="Microfiber Towels", unit="pack", min_stock=20),
        ],
        inventory_records=[
            InventoryRecord(id="r1", product_id="p1", warehouse_id="w1", quantity=2),
            InventoryRecord(id="r2", product_id="p1", warehouse_id="w2", quantity=1),
            InventoryRecord(id="r3", product_id="p2", warehouse_id="w1", quantity=1500),
        ],
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def snapshot():
    return build_snapshot()


@pytest.fixture
def store(snapshot):
    return InMemoryStore(snapshot)


@pytest.fixture
def config():
    """Explicit configuration so tests never depend on the environment."""
    return {
        "read_only": False,
        "sender_id": "ai-bot",
        "conversation_id": "ai-assistant-chat",
        "fallback_city": "Lubbock",
        "fallback_state": "TX",
        "fallback_zip": "79401",
        "thinking_delay": 0,
        "snapshot_path": "",
    }


@pytest.fixture
def handlers():
    """Make sure every real handler is registered."""
    from ops_intent.handlers import register_all_handlers

    register_all_handlers()
