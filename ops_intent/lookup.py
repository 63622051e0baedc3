"""
Fuzzy lookups of clients, technicians and inventory products.

Matching is a case-insensitive substring test so that partial and casual
references ("marcus", "john d") still resolve. When several records match,
the first one in snapshot order wins. That is a known limitation (there is
no disambiguation); callers may pass a ``chooser`` to pick among the
candidates instead.
"""

import logging
from typing import Callable, List, Optional, Sequence, TypeVar

from .domain import Client, DomainSnapshot, InventoryProduct, User

logger = logging.getLogger("ops-intent.lookup")

T = TypeVar("T")

# chooser(query, candidates) -> selected candidate or None
Chooser = Callable[[str, Sequence[T]], Optional[T]]


def first_match(query: str, candidates: Sequence[T]) -> Optional[T]:
    return candidates[0] if candidates else None


def _pick(query: str, candidates: List[T], chooser: Optional[Chooser]) -> Optional[T]:
    if len(candidates) > 1:
        logger.debug(f"{len(candidates)} records match {query!r}; taking the first")
    return (chooser or first_match)(query, candidates)


def match_clients(snapshot: DomainSnapshot, name_part: str) -> List[Client]:
    needle = (name_part or "").strip().lower()
    if not needle:
        return []
    return [c for c in snapshot.clients if needle in f"{c.first_name} {c.last_name}".lower()]


def match_technicians(snapshot: DomainSnapshot, name_part: str) -> List[User]:
    needle = (name_part or "").strip().lower()
    if not needle:
        return []
    return [u for u in snapshot.users if needle in u.name.lower()]


def match_products(snapshot: DomainSnapshot, query: str) -> List[InventoryProduct]:
    needle = (query or "").strip().lower()
    if not needle:
        return []
    return [p for p in snapshot.inventory_products if needle in p.name.lower() or needle in p.sku.lower()]


def find_client(snapshot: DomainSnapshot, name_part: str, chooser: Optional[Chooser] = None) -> Optional[Client]:
    """Client whose "first last" name contains ``name_part``."""
    return _pick(name_part, match_clients(snapshot, name_part), chooser)


def find_technician(snapshot: DomainSnapshot, name_part: str, chooser: Optional[Chooser] = None) -> Optional[User]:
    """Team member whose display name contains ``name_part``."""
    return _pick(name_part, match_technicians(snapshot, name_part), chooser)


def find_product(snapshot: DomainSnapshot, query: str, chooser: Optional[Chooser] = None) -> Optional[InventoryProduct]:
    """Inventory product whose name or SKU contains ``query``."""
    return _pick(query, match_products(snapshot, query), chooser)
