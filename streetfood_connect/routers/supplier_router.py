# streetfood_connect/routers/supplier_router.py
from typing import List

from fastapi import APIRouter, Depends

from streetfood_connect.schemas.analytics import CustomerSummary, DashboardSummary, SupplierAnalytics
from streetfood_connect.schemas.inventory import InventoryItemCreate, InventoryItemResponse, InventoryItemUpdate
from streetfood_connect.schemas.orders import OrderResponse, OrderStatusUpdate
from streetfood_connect.schemas.reviews import ReviewResponse
from streetfood_connect.services import analytics_service, inventory_service, order_status, orders_service, review_service
from streetfood_connect.services.session_service import SessionContext

from .deps import failure_message, require_role

router = APIRouter(prefix="/supplier", tags=["supplier"])

supplier_session = require_role("supplier")


@router.get(
    "",
    response_model=DashboardSummary,
    dependencies=[Depends(failure_message("Failed to load dashboard"))],
)
def dashboard(ctx: SessionContext = Depends(supplier_session)):
    gateway = ctx.gateway
    orders = orders_service.supplier_orders(gateway, ctx.uid)
    summary = analytics_service.dashboard_summary(orders, "supplier")
    summary["extra"]["inventoryItems"] = len(inventory_service.list_items(gateway, ctx.uid))
    return DashboardSummary(user=ctx.profile, **summary)


# ---------- orders ----------
@router.get(
    "/orders",
    response_model=List[OrderResponse],
    dependencies=[Depends(failure_message("Failed to load orders"))],
)
def incoming_orders(ctx: SessionContext = Depends(supplier_session)):
    return orders_service.supplier_orders(ctx.gateway, ctx.uid)


@router.put(
    "/orders/{order_id}/status",
    dependencies=[Depends(failure_message("Failed to update order status"))],
)
def update_status(order_id: str, payload: OrderStatusUpdate, ctx: SessionContext = Depends(supplier_session)):
    order = orders_service.change_status(ctx.gateway, ctx.uid, order_id, payload.status)
    return {"message": "Order status updated successfully", "order": OrderResponse(**order)}


@router.post(
    "/orders/{order_id}/accept",
    dependencies=[Depends(failure_message("Failed to update order status"))],
)
def accept(order_id: str, ctx: SessionContext = Depends(supplier_session)):
    order = orders_service.accept_order(ctx.gateway, ctx.uid, order_id)
    return {"message": "Order accepted successfully", "order": OrderResponse(**order)}


@router.post(
    "/orders/{order_id}/reject",
    dependencies=[Depends(failure_message("Failed to update order status"))],
)
def reject(order_id: str, ctx: SessionContext = Depends(supplier_session)):
    order = orders_service.reject_order(ctx.gateway, ctx.uid, order_id)
    return {"message": "Order rejected", "order": OrderResponse(**order)}


@router.get("/orders/statuses", dependencies=[Depends(supplier_session)])
def status_table():
    return {
        status: {"label": order_status.status_label(status), "next": sorted(order_status.allowed_next(status))}
        for status in order_status.STATUSES
    }


# ---------- customers & analytics ----------
@router.get(
    "/customers",
    response_model=List[CustomerSummary],
    dependencies=[Depends(failure_message("Failed to load customers"))],
)
def customers(ctx: SessionContext = Depends(supplier_session)):
    gateway = ctx.gateway
    orders = orders_service.supplier_orders(gateway, ctx.uid)
    return analytics_service.supplier_customers(orders, gateway.get_users_by_ids)


@router.get(
    "/analytics",
    response_model=SupplierAnalytics,
    dependencies=[Depends(failure_message("Failed to load analytics"))],
)
def analytics(ctx: SessionContext = Depends(supplier_session)):
    gateway = ctx.gateway
    orders = orders_service.supplier_orders(gateway, ctx.uid)
    return analytics_service.supplier_analytics(orders, gateway.get_users_by_ids)


# ---------- inventory ----------
@router.get(
    "/inventory",
    response_model=List[InventoryItemResponse],
    dependencies=[Depends(failure_message("Failed to load inventory"))],
)
def list_inventory(ctx: SessionContext = Depends(supplier_session)):
    return inventory_service.list_items(ctx.gateway, ctx.uid)


@router.post(
    "/inventory",
    status_code=201,
    dependencies=[Depends(failure_message("Failed to add item"))],
)
def add_inventory(payload: InventoryItemCreate, ctx: SessionContext = Depends(supplier_session)):
    item = inventory_service.add_item(ctx.gateway, ctx.uid, payload)
    return {"message": "Item added successfully", "item": InventoryItemResponse(**item)}


@router.put(
    "/inventory/{item_id}",
    dependencies=[Depends(failure_message("Failed to update item"))],
)
def update_inventory(item_id: str, payload: InventoryItemUpdate, ctx: SessionContext = Depends(supplier_session)):
    item = inventory_service.update_item(ctx.gateway, ctx.uid, item_id, payload)
    return {"message": "Item updated successfully", "item": InventoryItemResponse(**item)}


@router.delete(
    "/inventory/{item_id}",
    dependencies=[Depends(failure_message("Failed to delete item"))],
)
def delete_inventory(item_id: str, ctx: SessionContext = Depends(supplier_session)):
    inventory_service.delete_item(ctx.gateway, ctx.uid, item_id)
    return {"message": "Item deleted successfully", "id": item_id}


# ---------- reviews ----------
@router.get(
    "/reviews",
    response_model=List[ReviewResponse],
    dependencies=[Depends(failure_message("Failed to load reviews"))],
)
def my_reviews(ctx: SessionContext = Depends(supplier_session)):
    return review_service.reviews_for(ctx.gateway, ctx.uid)
