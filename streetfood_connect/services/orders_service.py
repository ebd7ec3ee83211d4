# streetfood_connect/services/orders_service.py
import logging
from typing import List

from streetfood_connect.gateway import Gateway
from streetfood_connect.gateway.base import utcnow
from streetfood_connect.middleware.exceptions import (
    PermissionDeniedError,
    ResourceNotFoundError,
)
from streetfood_connect.schemas.orders import OrderCreate

from . import order_status
from .formatting import format_date

logger = logging.getLogger(__name__)


def _with_label(order: dict) -> dict:
    return {**order, "statusLabel": order_status.status_label(order.get("status"))}


def vendor_orders(gateway: Gateway, vendor_id: str) -> List[dict]:
    return [_with_label(o) for o in gateway.get_orders_where("vendorId", vendor_id)]


def supplier_orders(gateway: Gateway, supplier_id: str) -> List[dict]:
    return [_with_label(o) for o in gateway.get_orders_where("supplierId", supplier_id)]


def place_order(gateway: Gateway, vendor_id: str, payload: OrderCreate) -> dict:
    supplier = gateway.get_user_by_id(payload.supplierId)
    if not supplier or supplier.get("role") != "supplier":
        raise ResourceNotFoundError("Supplier", payload.supplierId)

    materials = []
    for line in payload.materials:
        materials.append({
            "materialName": line.materialName,
            "quantity": line.quantity,
            "unit": line.unit,
            "unitPrice": line.unitPrice,
            "total": round(line.quantity * line.unitPrice, 2),
        })
    data = {
        "vendorId": vendor_id,
        "supplierId": payload.supplierId,
        "materials": materials,
        "totalAmount": round(sum(m["total"] for m in materials), 2),
        "paymentStatus": "pending",
        "orderDate": format_date(utcnow()),
    }
    if payload.deliveryDate:
        data["deliveryDate"] = payload.deliveryDate
    if payload.notes:
        data["notes"] = payload.notes

    order_id = gateway.create_order(data)
    logger.info(f"Order {order_id} placed by {vendor_id} with {payload.supplierId} for {data['totalAmount']}")
    return _with_label(gateway.get_order(order_id) or {"id": order_id, **data, "status": order_status.PENDING})


def change_status(gateway: Gateway, supplier_id: str, order_id: str, requested: str) -> dict:
    """Move one of the supplier's orders along the lifecycle and persist it."""
    order = gateway.get_order(order_id)
    if not order:
        raise ResourceNotFoundError("Order", order_id)
    if order.get("supplierId") != supplier_id:
        raise PermissionDeniedError("This order does not belong to you")

    current = order.get("status") or order_status.PENDING
    order_status.validate_transition(current, requested)
    gateway.update_order_status(order_id, requested)
    logger.info(f"Order {order_id}: {current} -> {requested}")
    return _with_label(gateway.get_order(order_id) or {**order, "status": requested})


def accept_order(gateway: Gateway, supplier_id: str, order_id: str) -> dict:
    return change_status(gateway, supplier_id, order_id, order_status.ACCEPT)


def reject_order(gateway: Gateway, supplier_id: str, order_id: str) -> dict:
    return change_status(gateway, supplier_id, order_id, order_status.REJECT)
