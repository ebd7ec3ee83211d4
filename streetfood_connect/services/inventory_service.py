# streetfood_connect/services/inventory_service.py
import logging
from typing import List

from streetfood_connect.gateway import Gateway
from streetfood_connect.middleware.exceptions import PermissionDeniedError, ResourceNotFoundError
from streetfood_connect.schemas.inventory import InventoryItemCreate, InventoryItemUpdate

logger = logging.getLogger(__name__)


def list_items(gateway: Gateway, supplier_id: str) -> List[dict]:
    return gateway.get_inventory_where(supplier_id)


def _owned_item(gateway: Gateway, supplier_id: str, item_id: str) -> dict:
    item = gateway.get_inventory_item(item_id)
    if not item:
        raise ResourceNotFoundError("Inventory item", item_id)
    if item.get("supplierId") != supplier_id:
        raise PermissionDeniedError("This item does not belong to you")
    return item


def add_item(gateway: Gateway, supplier_id: str, payload: InventoryItemCreate) -> dict:
    data = {**payload.model_dump(), "supplierId": supplier_id}
    item_id = gateway.add_inventory_item(data)
    logger.info(f"Inventory item {item_id} added by {supplier_id}")
    return gateway.get_inventory_item(item_id) or {"id": item_id, **data}


def update_item(gateway: Gateway, supplier_id: str, item_id: str, payload: InventoryItemUpdate) -> dict:
    item = _owned_item(gateway, supplier_id, item_id)
    updates = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not updates:
        return item
    gateway.update_inventory_item(item_id, updates)
    return gateway.get_inventory_item(item_id) or {**item, **updates}


def delete_item(gateway: Gateway, supplier_id: str, item_id: str) -> None:
    _owned_item(gateway, supplier_id, item_id)
    gateway.delete_inventory_item(item_id)
    logger.info(f"Inventory item {item_id} deleted by {supplier_id}")
