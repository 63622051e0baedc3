"""
Pydantic models for the business data the assistant reasons about.

The interpreter never owns these records. It reads them from a
DomainSnapshot supplied by the host and changes them only through the
host's mutation ports (see ports.py).

Attributes are snake_case in Python and accept the host's camelCase JSON
keys (firstName, assignedTechIds, ...) on load.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class DomainModel(BaseModel):
    """Base for all snapshot records."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=False,
    )


def _to_local_naive(value):
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    OFFICE = "OFFICE"
    TECHNICIAN = "TECHNICIAN"
    CLIENT = "CLIENT"


class JobStatus(str, Enum):
    DRAFT = "DRAFT"
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Jobs in these states can no longer be cancelled or reassigned
TERMINAL_JOB_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.CANCELLED})

# Jobs the cancellation intent is allowed to pick
ACTIVE_JOB_STATUSES = frozenset({JobStatus.SCHEDULED, JobStatus.IN_PROGRESS})


class QuoteStatus(str, Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    APPROVED = "APPROVED"
    DECLINED = "DECLINED"
    CONVERTED = "CONVERTED"


class InvoiceStatus(str, Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    BAD_DEBT = "BAD_DEBT"


# ---------------------------------------------------------------------------
# Clients and people
# ---------------------------------------------------------------------------


class Address(DomainModel):
    street: str
    city: str
    state: str
    zip: str
    lat: Optional[float] = None
    lng: Optional[float] = None


class Property(DomainModel):
    id: str
    client_id: str
    address: Address
    access_instructions: Optional[str] = None


class Client(DomainModel):
    id: str
    first_name: str
    last_name: str = ""
    company_name: Optional[str] = None
    email: str = ""
    phone: str = ""
    billing_address: Address
    properties: List[Property] = Field(min_length=1)
    tags: List[str] = Field(default_factory=list)
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def normalize_created(cls, value):
        return _to_local_naive(value)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class User(DomainModel):
    """A team member. Technicians are users with jobs assigned to them."""

    id: str
    name: str
    email: str = ""
    role: UserRole = UserRole.TECHNICIAN
    phone: Optional[str] = None
    skills: List[str] = Field(default_factory=list)

    @property
    def first_name(self) -> str:
        return self.name.split(" ")[0]


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------


class LineItem(DomainModel):
    id: str
    description: str
    quantity: float = 1
    unit_price: float
    total: Optional[float] = None

    @model_validator(mode="after")
    def compute_total(self) -> "LineItem":
        if self.total is None:
            self.total = self.quantity * self.unit_price
        return self


def items_total(items: List[LineItem]) -> float:
    return sum(item.total for item in items)


class VehicleDetails(DomainModel):
    make: str
    model: str
    year: str
    color: str = "N/A"
    type: str = "Car"


class ChecklistItem(DomainModel):
    id: str
    label: str
    is_completed: bool = False


class JobPhoto(DomainModel):
    id: str
    url: str
    uploaded_at: Optional[datetime] = None


class Job(DomainModel):
    id: str
    client_id: str
    property_id: str
    assigned_tech_ids: List[str] = Field(default_factory=list)
    title: str
    description: str = ""
    start: datetime
    end: datetime
    status: JobStatus = JobStatus.SCHEDULED
    priority: str = "MEDIUM"
    vehicle_details: Optional[VehicleDetails] = None
    items: List[LineItem] = Field(default_factory=list)
    checklists: List[ChecklistItem] = Field(default_factory=list)
    photos: List[JobPhoto] = Field(default_factory=list)
    notes: Optional[str] = None
    on_my_way_by: Optional[str] = None
    cancellation_reason: Optional[str] = None
    # Creation order; the host assigns increasing values as jobs are created.
    sequence: int = 0

    @field_validator("start", "end")
    @classmethod
    def normalize_times(cls, value):
        return _to_local_naive(value)

    @model_validator(mode="after")
    def check_window(self) -> "Job":
        if self.end < self.start:
            raise ValueError(f"job {self.id} ends before it starts")
        return self

    @property
    def value(self) -> float:
        return items_total(self.items)


# ---------------------------------------------------------------------------
# Billing
# ---------------------------------------------------------------------------


class Quote(DomainModel):
    id: str
    client_id: str
    property_id: str
    items: List[LineItem] = Field(default_factory=list)
    subtotal: float
    tax: float
    total: float
    status: QuoteStatus = QuoteStatus.DRAFT
    issued_date: datetime
    expiry_date: datetime

    @field_validator("issued_date", "expiry_date")
    @classmethod
    def normalize_dates(cls, value):
        return _to_local_naive(value)


class Payment(DomainModel):
    id: str
    invoice_id: str
    amount: float
    method: str = "CREDIT_CARD"
    date: datetime


class Invoice(DomainModel):
    id: str
    client_id: str
    job_id: Optional[str] = None
    items: List[LineItem] = Field(default_factory=list)
    subtotal: float
    tax: float
    total: float
    balance_due: float
    status: InvoiceStatus = InvoiceStatus.SENT
    due_date: datetime
    issued_date: datetime
    payments: List[Payment] = Field(default_factory=list)

    @field_validator("due_date", "issued_date")
    @classmethod
    def normalize_dates(cls, value):
        return _to_local_naive(value)


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------


class InventoryProduct(DomainModel):
    id: str
    sku: str
    name: str
    category: str = ""
    unit: str = "ea"
    cost: float = 0.0
    price: float = 0.0
    min_stock: float = 0


class InventoryRecord(DomainModel):
    id: str
    product_id: str
    warehouse_id: str
    quantity: float = 0
    bin_location: Optional[str] = None


# ---------------------------------------------------------------------------
# Messaging and snapshot
# ---------------------------------------------------------------------------


class ChatMessage(DomainModel):
    id: str
    chat_id: str
    sender_id: str
    content: str
    timestamp: datetime
    type: str = "TEXT"


class DomainSnapshot(DomainModel):
    """Everything the interpreter may read for one invocation."""

    clients: List[Client] = Field(default_factory=list)
    jobs: List[Job] = Field(default_factory=list)
    quotes: List[Quote] = Field(default_factory=list)
    invoices: List[Invoice] = Field(default_factory=list)
    users: List[User] = Field(default_factory=list)
    inventory_products: List[InventoryProduct] = Field(default_factory=list)
    inventory_records: List[InventoryRecord] = Field(default_factory=list)

    def client_by_id(self, client_id: str) -> Optional[Client]:
        return next((c for c in self.clients if c.id == client_id), None)

    def user_by_id(self, user_id: str) -> Optional[User]:
        return next((u for u in self.users if u.id == user_id), None)

    def job_by_id(self, job_id: str) -> Optional[Job]:
        return next((j for j in self.jobs if j.id == job_id), None)

    def property_for(self, job: Job) -> Optional[Property]:
        client = self.client_by_id(job.client_id)
        if client is None:
            return None
        return next((p for p in client.properties if p.id == job.property_id), None)

    def stock_on_hand(self, product: InventoryProduct) -> float:
        """Sum of the product's quantity records across every location."""
        return sum(r.quantity for r in self.inventory_records if r.product_id == product.id)

    def latest_job(self) -> Optional[Job]:
        """The most recently created job, by creation sequence."""
        if not self.jobs:
            return None
        return max(self.jobs, key=lambda j: j.sequence)
