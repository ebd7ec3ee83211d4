# streetfood_connect/services/analytics_service.py
"""
Derived business metrics over already-fetched order records.

Counterparty profiles come from one batch lookup; entries that are missing
(or a lookup that fails outright) are logged and left out of the rankings,
never fatal to the totals.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

from streetfood_connect.config import settings
from streetfood_connect.gateway.errors import GatewayError

from .formatting import format_currency
from .order_status import STATUSES

logger = logging.getLogger(__name__)

ProfileLookup = Callable[[Iterable[str]], Dict[str, Optional[dict]]]


@dataclass
class OrderSummary:
    total_revenue: float = 0
    total_orders: int = 0
    average_order_value: float = 0
    counterparty_ids: List[str] = field(default_factory=list)

    @property
    def total_customers(self) -> int:
        return len(self.counterparty_ids)


def _amount(order: dict) -> float:
    return order.get("totalAmount") or 0


def distinct_ids(orders: Iterable[dict], id_field: str) -> List[str]:
    """Distinct non-empty ids in first-seen order."""
    return list(dict.fromkeys(o.get(id_field) for o in orders if o.get(id_field)))


def summarize(orders: List[dict], id_field: str = "vendorId") -> OrderSummary:
    total_revenue = sum(_amount(o) for o in orders)
    total_orders = len(orders)
    return OrderSummary(
        total_revenue=total_revenue,
        total_orders=total_orders,
        average_order_value=total_revenue / total_orders if total_orders else 0,
        counterparty_ids=distinct_ids(orders, id_field),
    )


def lookup_profiles(ids: List[str], lookup: ProfileLookup) -> Dict[str, Optional[dict]]:
    if not ids:
        return {}
    try:
        profiles = lookup(ids)
    except GatewayError as e:
        logger.error(f"Profile batch lookup failed for {len(ids)} ids: {e.message}")
        return {i: None for i in ids}
    missing = [i for i in ids if profiles.get(i) is None]
    if missing:
        logger.warning(f"No profile found for {missing}")
    return {i: profiles.get(i) for i in ids}


def group_by(orders: Iterable[dict], id_field: str) -> Dict[str, List[dict]]:
    groups: Dict[str, List[dict]] = {}
    for order in orders:
        key = order.get(id_field)
        if key:
            groups.setdefault(key, []).append(order)
    return groups


def rank_counterparties(
    orders: List[dict],
    profiles: Dict[str, Optional[dict]],
    id_field: str = "vendorId",
    limit: Optional[int] = None,
) -> List[dict]:
    """Top counterparties by spend; ties keep first-seen order."""
    groups = group_by(orders, id_field)
    stats = []
    for cid in distinct_ids(orders, id_field):
        profile = profiles.get(cid)
        if profile is None:
            continue
        own = groups[cid]
        stats.append({
            "id": cid,
            "name": profile.get("name") or profile.get("email"),
            "orders": len(own),
            "spent": sum(_amount(o) for o in own),
            "rating": profile.get("rating") or 0,
        })
    # sorted() is stable
    ranked = sorted(stats, key=lambda s: s["spent"], reverse=True)
    return ranked[: settings.TOP_CUSTOMERS_LIMIT if limit is None else limit]


def recent_trends(summary: OrderSummary) -> List[dict]:
    return [
        {"trend": "Total orders received", "change": f"{summary.total_orders}", "positive": True},
        {"trend": "Total revenue generated", "change": format_currency(summary.total_revenue), "positive": True},
        {"trend": "Average order value", "change": format_currency(summary.average_order_value, 0), "positive": True},
        {"trend": "Total customers served", "change": f"{summary.total_customers}", "positive": True},
    ]


def supplier_analytics(orders: List[dict], lookup: ProfileLookup) -> dict:
    summary = summarize(orders, "vendorId")
    profiles = lookup_profiles(summary.counterparty_ids, lookup)
    return {
        "totalRevenue": summary.total_revenue,
        "totalOrders": summary.total_orders,
        "averageOrderValue": summary.average_order_value,
        "totalCustomers": summary.total_customers,
        "topCustomers": rank_counterparties(orders, profiles, "vendorId"),
        "trends": recent_trends(summary),
    }


def supplier_customers(orders: List[dict], lookup: ProfileLookup) -> List[dict]:
    """Every vendor who ordered from the supplier, with their order history."""
    groups = group_by(orders, "vendorId")
    ids = list(groups)
    profiles = lookup_profiles(ids, lookup)
    customers = []
    for vid in ids:
        profile = profiles.get(vid)
        if not profile or profile.get("role") != "vendor":
            continue
        own = groups[vid]
        customers.append({
            **profile,
            "totalOrders": len(own),
            "totalSpent": sum(_amount(o) for o in own),
            "lastOrder": own[0].get("orderDate") or own[0].get("createdAt"),
            "recentOrders": own[:3],
        })
    return customers


def status_counts(orders: Iterable[dict]) -> Dict[str, int]:
    counts = {s: 0 for s in STATUSES}
    for order in orders:
        status = order.get("status") or "unknown"
        counts[status] = counts.get(status, 0) + 1
    return counts


def dashboard_summary(orders: List[dict], role: str) -> dict:
    id_field = "supplierId" if role == "vendor" else "vendorId"
    summary = summarize(orders, id_field)
    counts = status_counts(orders)
    return {
        "role": role,
        "totalOrders": summary.total_orders,
        "byStatus": counts,
        "totalAmount": summary.total_revenue,
        "totalAmountText": format_currency(summary.total_revenue),
        "recentOrders": orders[:5],
        "extra": {
            "counterparties": summary.total_customers,
            "open": counts["pending"] + counts["confirmed"] + counts["in_transit"],
        },
    }
