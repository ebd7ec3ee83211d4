# streetfood_connect/services/review_service.py
import logging
from typing import List

from streetfood_connect.gateway import Gateway
from streetfood_connect.middleware.exceptions import ResourceNotFoundError
from streetfood_connect.schemas.reviews import ReviewCreate

logger = logging.getLogger(__name__)


def reviews_for(gateway: Gateway, supplier_id: str) -> List[dict]:
    return gateway.get_reviews_where(supplier_id)


def submit_review(gateway: Gateway, vendor: dict, supplier_id: str, payload: ReviewCreate) -> dict:
    supplier = gateway.get_user_by_id(supplier_id)
    if not supplier or supplier.get("role") != "supplier":
        raise ResourceNotFoundError("Supplier", supplier_id)
    data = {
        "supplierId": supplier_id,
        "vendorId": vendor.get("id"),
        "vendorName": vendor.get("name"),
        "rating": payload.rating,
        "comment": payload.comment,
    }
    review_id = gateway.add_review(data)
    logger.info(f"Review {review_id} ({payload.rating}/5) for {supplier_id}")
    return {"id": review_id, **data}
