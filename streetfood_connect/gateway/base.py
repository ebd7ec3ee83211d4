# streetfood_connect/gateway/base.py
"""
Gateway contract: the only way the app reaches the auth provider and the
document database.

Backends implement the generic primitives (records + accounts); the domain
calls used by the services are written once on top of them.
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
SnapshotCallback = Callable[[List[Record]], None]
Unsubscribe = Callable[[], None]

USERS = "users"
ORDERS = "orders"
INVENTORY = "inventory"
REVIEWS = "reviews"

ORDER_PARTY_FIELDS = ("vendorId", "supplierId")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AuthUser:
    uid: str
    email: Optional[str]
    id_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None
    display_name: Optional[str] = None

    @property
    def expired(self) -> bool:
        # refresh a minute early so a token never dies mid-request
        return self.expires_at is not None and utcnow() >= self.expires_at - timedelta(seconds=60)


@dataclass
class _Subscription:
    collection: str
    field: str
    value: Any
    callback: SnapshotCallback
    order_by: Optional[str] = None
    descending: bool = False
    active: bool = field(default=True)


class Gateway(ABC):

    def __init__(self) -> None:
        self._subscriptions: List[_Subscription] = []
        self._sub_lock = threading.Lock()

    # ---------- primitives: records ----------
    @abstractmethod
    def get_record(self, collection: str, record_id: str) -> Optional[Record]:
        ...

    @abstractmethod
    def get_records_by_ids(self, collection: str, ids: Iterable[str]) -> Dict[str, Optional[Record]]:
        """Batch lookup; every requested id is present, None when not found."""

    @abstractmethod
    def get_records_where(
        self,
        collection: str,
        field: str,
        value: Any,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Record]:
        ...

    @abstractmethod
    def set_record(self, collection: str, record_id: str, data: Record) -> None:
        ...

    @abstractmethod
    def create_record(self, collection: str, data: Record) -> str:
        ...

    @abstractmethod
    def update_record(self, collection: str, record_id: str, updates: Record) -> None:
        ...

    @abstractmethod
    def delete_record(self, collection: str, record_id: str) -> None:
        ...

    # ---------- primitives: accounts ----------
    @abstractmethod
    def authenticate(self, email: str, password: str) -> AuthUser:
        ...

    @abstractmethod
    def create_account(self, email: str, password: str, display_name: Optional[str] = None) -> AuthUser:
        ...

    @abstractmethod
    def refresh(self, user: AuthUser) -> AuthUser:
        ...

    def bind(self, user: Optional[AuthUser]) -> "Gateway":
        """Gateway view that acts with `user`'s credential."""
        return self

    def close(self) -> None:
        with self._sub_lock:
            for sub in self._subscriptions:
                sub.active = False
            self._subscriptions.clear()

    # ---------- subscriptions ----------
    def subscribe(
        self,
        collection: str,
        field: str,
        value: Any,
        callback: SnapshotCallback,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> Unsubscribe:
        """Deliver the current snapshot now and again after every write to `collection`."""
        sub = _Subscription(collection, field, value, callback, order_by, descending)
        with self._sub_lock:
            self._subscriptions.append(sub)
        self._deliver(sub)

        def unsubscribe() -> None:
            sub.active = False
            with self._sub_lock:
                if sub in self._subscriptions:
                    self._subscriptions.remove(sub)

        return unsubscribe

    def _notify(self, collection: str) -> None:
        with self._sub_lock:
            targets = [s for s in self._subscriptions if s.collection == collection and s.active]
        for sub in targets:
            self._deliver(sub)

    def _deliver(self, sub: _Subscription) -> None:
        try:
            snapshot = self.get_records_where(sub.collection, sub.field, sub.value, sub.order_by, sub.descending)
        except Exception as e:
            logger.error(f"Snapshot query on {sub.collection} failed: {e}")
            return
        try:
            sub.callback(snapshot)
        except Exception:
            logger.exception(f"Snapshot listener on {sub.collection} raised")

    # ---------- users ----------
    def get_user_profile(self, uid: str) -> Optional[Record]:
        return self.get_record(USERS, uid)

    def get_user_by_id(self, uid: str) -> Optional[Record]:
        return self.get_record(USERS, uid)

    def create_user_profile(self, uid: str, profile: Record) -> None:
        self.set_record(USERS, uid, profile)

    def update_user_profile(self, uid: str, updates: Record) -> None:
        self.update_record(USERS, uid, updates)

    def get_users_by_role(self, role: str) -> List[Record]:
        return self.get_records_where(USERS, "role", role)

    def get_users_by_ids(self, ids: Iterable[str]) -> Dict[str, Optional[Record]]:
        return self.get_records_by_ids(USERS, ids)

    def subscribe_suppliers(self, callback: SnapshotCallback) -> Unsubscribe:
        return self.subscribe(USERS, "role", "supplier", callback)

    # ---------- orders ----------
    def get_orders_where(self, field: str, value: str) -> List[Record]:
        if field not in ORDER_PARTY_FIELDS:
            raise ValueError(f"orders can only be queried by {ORDER_PARTY_FIELDS}, got {field!r}")
        return self.get_records_where(ORDERS, field, value, order_by="createdAt", descending=True)

    def get_order(self, order_id: str) -> Optional[Record]:
        return self.get_record(ORDERS, order_id)

    def create_order(self, data: Record) -> str:
        return self.create_record(ORDERS, {**data, "createdAt": utcnow(), "status": "pending"})

    def update_order_status(self, order_id: str, status: str) -> None:
        self.update_record(ORDERS, order_id, {"status": status, "updatedAt": utcnow()})

    def subscribe_orders(self, user_id: str, role: str, callback: SnapshotCallback) -> Unsubscribe:
        field_name = "vendorId" if role == "vendor" else "supplierId"
        return self.subscribe(ORDERS, field_name, user_id, callback, order_by="createdAt", descending=True)

    # ---------- inventory ----------
    def get_inventory_where(self, supplier_id: str) -> List[Record]:
        return self.get_records_where(INVENTORY, "supplierId", supplier_id)

    def get_inventory_item(self, item_id: str) -> Optional[Record]:
        return self.get_record(INVENTORY, item_id)

    def add_inventory_item(self, item: Record) -> str:
        return self.create_record(INVENTORY, {**item, "createdAt": utcnow()})

    def update_inventory_item(self, item_id: str, updates: Record) -> None:
        self.update_record(INVENTORY, item_id, updates)

    def delete_inventory_item(self, item_id: str) -> None:
        self.delete_record(INVENTORY, item_id)

    def subscribe_inventory(self, supplier_id: str, callback: SnapshotCallback) -> Unsubscribe:
        return self.subscribe(INVENTORY, "supplierId", supplier_id, callback)

    # ---------- reviews ----------
    def add_review(self, data: Record) -> str:
        return self.create_record(REVIEWS, {**data, "createdAt": utcnow()})

    def get_reviews_where(self, supplier_id: str) -> List[Record]:
        return self.get_records_where(REVIEWS, "supplierId", supplier_id, order_by="createdAt", descending=True)
