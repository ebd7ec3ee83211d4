# streetfood_connect/routers/vendor_router.py
import logging
from typing import List

from fastapi import APIRouter, Depends

from streetfood_connect.gateway import GatewayError
from streetfood_connect.middleware.exceptions import ResourceNotFoundError
from streetfood_connect.schemas.analytics import DashboardSummary
from streetfood_connect.schemas.orders import OrderCreate, OrderResponse
from streetfood_connect.schemas.reviews import ReviewCreate, ReviewResponse
from streetfood_connect.schemas.search import CompareResponse, SearchResponse, SupplierFilterIn
from streetfood_connect.schemas.users import UserProfile
from streetfood_connect.services import analytics_service, orders_service, review_service
from streetfood_connect.services.search_service import CATEGORIES, SearchState
from streetfood_connect.services.session_service import SessionContext

from .deps import failure_message, require_role

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vendor", tags=["vendor"])

vendor_session = require_role("vendor")


def _compare(search: SearchState) -> CompareResponse:
    items = search.compare.items
    return CompareResponse(suppliers=items, size=len(items), limit=search.compare.limit)


def _filters(search: SearchState) -> SupplierFilterIn:
    snap = search.snapshot()
    return SupplierFilterIn(
        category=snap["category"],
        location=snap["location"],
        minRating=snap["min_rating"],
        verifiedOnly=snap["verified_only"],
        freeText=snap["free_text"],
    )


def _search_response(ctx: SessionContext) -> SearchResponse:
    # recomputed from a fresh supplier list on every request
    suppliers = ctx.gateway.get_users_by_role("supplier")
    matched = ctx.search.apply(suppliers)
    return SearchResponse(
        filters=_filters(ctx.search),
        categories=list(CATEGORIES),
        total=len(suppliers),
        suppliers=matched,
        compare=_compare(ctx.search),
    )


@router.get(
    "",
    response_model=DashboardSummary,
    dependencies=[Depends(failure_message("Failed to load dashboard"))],
)
def dashboard(ctx: SessionContext = Depends(vendor_session)):
    orders = orders_service.vendor_orders(ctx.gateway, ctx.uid)
    summary = analytics_service.dashboard_summary(orders, "vendor")
    return DashboardSummary(user=ctx.profile, **summary)


# ---------- search & compare ----------
@router.get(
    "/search",
    response_model=SearchResponse,
    dependencies=[Depends(failure_message("Failed to load suppliers"))],
)
def search(ctx: SessionContext = Depends(vendor_session)):
    return _search_response(ctx)


@router.put(
    "/search/filters",
    response_model=SearchResponse,
    dependencies=[Depends(failure_message("Failed to load suppliers"))],
)
def set_filters(payload: SupplierFilterIn, ctx: SessionContext = Depends(vendor_session)):
    ctx.search.update(
        text=payload.freeText,
        category=payload.category,
        location=payload.location,
        min_rating=payload.minRating,
        verified_only=payload.verifiedOnly,
    )
    return _search_response(ctx)


@router.post(
    "/search/reset",
    response_model=SearchResponse,
    dependencies=[Depends(failure_message("Failed to load suppliers"))],
)
def reset_filters(ctx: SessionContext = Depends(vendor_session)):
    ctx.search.reset()
    return _search_response(ctx)


@router.get("/compare", response_model=CompareResponse)
def get_compare(ctx: SessionContext = Depends(vendor_session)):
    return _compare(ctx.search)


@router.post(
    "/compare/{supplier_id}",
    dependencies=[Depends(failure_message("Failed to load supplier"))],
)
def add_to_compare(supplier_id: str, ctx: SessionContext = Depends(vendor_session)):
    supplier = ctx.gateway.get_user_by_id(supplier_id)
    if not supplier or supplier.get("role") != "supplier":
        raise ResourceNotFoundError("Supplier", supplier_id)
    added = ctx.search.compare.add(supplier)
    if added:
        message = f"{supplier.get('name') or 'Supplier'} added to comparison"
    elif supplier_id in ctx.search.compare:
        message = "Supplier is already in the comparison"
    else:
        message = f"You can compare up to {ctx.search.compare.limit} suppliers"
    return {"added": added, "message": message, "compare": _compare(ctx.search)}


@router.delete("/compare/{supplier_id}")
def remove_from_compare(supplier_id: str, ctx: SessionContext = Depends(vendor_session)):
    removed = ctx.search.compare.remove(supplier_id)
    return {"removed": removed, "compare": _compare(ctx.search)}


@router.delete("/compare")
def clear_compare(ctx: SessionContext = Depends(vendor_session)):
    ctx.search.compare.clear()
    return {"message": "Comparison cleared", "compare": _compare(ctx.search)}


# ---------- suppliers & reviews ----------
@router.get(
    "/suppliers",
    response_model=List[UserProfile],
    dependencies=[Depends(failure_message("Failed to load trusted suppliers"))],
)
def trusted_suppliers(ctx: SessionContext = Depends(vendor_session)):
    return ctx.gateway.get_users_by_role("supplier")


@router.get(
    "/suppliers/{supplier_id}",
    dependencies=[Depends(failure_message("Failed to load supplier"))],
)
def supplier_detail(supplier_id: str, ctx: SessionContext = Depends(vendor_session)):
    gateway = ctx.gateway
    try:
        supplier = gateway.get_user_by_id(supplier_id)
    except GatewayError as e:
        # the compare list may still hold a copy
        logger.warning(f"Supplier detail fetch failed for {supplier_id}: {e.message}")
        supplier = next((s for s in ctx.search.compare.items if s.get("id") == supplier_id), None)
    if not supplier or supplier.get("role") != "supplier":
        raise ResourceNotFoundError("Supplier", supplier_id)
    try:
        inventory = gateway.get_inventory_where(supplier_id)
        reviews = review_service.reviews_for(gateway, supplier_id)
    except GatewayError as e:
        logger.warning(f"Supplier extras unavailable for {supplier_id}: {e.message}")
        inventory, reviews = [], []
    return {"supplier": UserProfile(**supplier), "inventory": inventory, "reviews": reviews}


@router.get(
    "/suppliers/{supplier_id}/reviews",
    response_model=List[ReviewResponse],
    dependencies=[Depends(failure_message("Failed to load reviews"))],
)
def supplier_reviews(supplier_id: str, ctx: SessionContext = Depends(vendor_session)):
    return review_service.reviews_for(ctx.gateway, supplier_id)


@router.post(
    "/suppliers/{supplier_id}/reviews",
    status_code=201,
    dependencies=[Depends(failure_message("Failed to submit review"))],
)
def submit_review(supplier_id: str, payload: ReviewCreate, ctx: SessionContext = Depends(vendor_session)):
    review = review_service.submit_review(ctx.gateway, ctx.profile, supplier_id, payload)
    return {"message": "Review submitted successfully", "review": ReviewResponse(**review)}


# ---------- orders ----------
@router.get(
    "/orders",
    response_model=List[OrderResponse],
    dependencies=[Depends(failure_message("Failed to load orders"))],
)
def my_orders(ctx: SessionContext = Depends(vendor_session)):
    return orders_service.vendor_orders(ctx.gateway, ctx.uid)


@router.post(
    "/orders",
    status_code=201,
    dependencies=[Depends(failure_message("Failed to place order"))],
)
def place_order(payload: OrderCreate, ctx: SessionContext = Depends(vendor_session)):
    order = orders_service.place_order(ctx.gateway, ctx.uid, payload)
    return {"message": "Order placed successfully", "order": OrderResponse(**order)}

