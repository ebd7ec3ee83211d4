# streetfood_connect/services/search_service.py
"""
Supplier search: a filter applied as the AND of all its predicates, plus the
bounded compare selection.
"""

import threading
from dataclasses import asdict, dataclass, replace
from typing import Dict, Iterable, List, Optional

from streetfood_connect.config import settings

CATEGORIES = ("Vegetables", "Fruits", "Grains", "Spices", "Dairy", "Meat")


@dataclass(frozen=True)
class SupplierFilter:
    category: str = ""
    location: str = ""
    min_rating: float = 0
    verified_only: bool = False


DEFAULT_FILTER = SupplierFilter()


def _specialties(supplier: dict) -> List[str]:
    return [s for s in (supplier.get("specialties") or []) if isinstance(s, str)]


def matches_text(supplier: dict, text: str) -> bool:
    needle = (text or "").lower()
    if not needle:
        return True
    if needle in (supplier.get("name") or "").lower():
        return True
    return any(needle in s.lower() for s in _specialties(supplier))


def matches_filter(supplier: dict, flt: SupplierFilter) -> bool:
    if flt.category and flt.category not in _specialties(supplier):
        return False
    if flt.location:
        location = supplier.get("location")
        if not location or flt.location.lower() not in location.lower():
            return False
    if (supplier.get("rating") or 0) < flt.min_rating:
        return False
    if flt.verified_only and not supplier.get("verified"):
        return False
    return True


def filter_suppliers(suppliers: Iterable[dict], flt: SupplierFilter = DEFAULT_FILTER, text: str = "") -> List[dict]:
    return [s for s in suppliers if matches_text(s, text) and matches_filter(s, flt)]


class CompareSet:
    """Ordered selection of at most `limit` suppliers, unique by id."""

    def __init__(self, limit: Optional[int] = None, lock: Optional[threading.Lock] = None):
        self.limit = settings.COMPARE_LIMIT if limit is None else limit
        self._lock = lock or threading.Lock()
        self._items: List[dict] = []

    def __len__(self) -> int:
        return len(self._items)

    def _has(self, supplier_id: str) -> bool:
        return any(s.get("id") == supplier_id for s in self._items)

    def __contains__(self, supplier_id: str) -> bool:
        with self._lock:
            return self._has(supplier_id)

    @property
    def items(self) -> List[dict]:
        with self._lock:
            return list(self._items)

    def add(self, supplier: dict) -> bool:
        """False (and no change) for a duplicate or when already full."""
        with self._lock:
            if self._has(supplier.get("id")) or len(self._items) >= self.limit:
                return False
            self._items.append(supplier)
            return True

    def remove(self, supplier_id: str) -> bool:
        with self._lock:
            before = len(self._items)
            self._items = [s for s in self._items if s.get("id") != supplier_id]
            return len(self._items) != before

    def clear(self) -> None:
        with self._lock:
            self._items = []


class SearchState:
    """A vendor's search inputs, kept on the session between requests."""

    def __init__(self):
        self._lock = threading.Lock()
        self.filter = DEFAULT_FILTER
        self.text = ""
        # compare mutations share the filter lock
        self.compare = CompareSet(lock=self._lock)

    def update(self, text: Optional[str] = None, **changes) -> SupplierFilter:
        with self._lock:
            if changes:
                self.filter = replace(self.filter, **changes)
            if text is not None:
                self.text = text
            return self.filter

    def reset(self) -> None:
        with self._lock:
            self.filter, self.text = DEFAULT_FILTER, ""

    def apply(self, suppliers: Iterable[dict]) -> List[dict]:
        with self._lock:
            flt, text = self.filter, self.text
        return filter_suppliers(suppliers, flt, text)

    def snapshot(self) -> Dict:
        with self._lock:
            return {**asdict(self.filter), "free_text": self.text}
