# streetfood_connect/schemas/inventory.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class InventoryItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    quantity: float = Field(ge=0)
    unit: str = Field(default="kg", min_length=1)
    price: float = Field(ge=0)


class InventoryItemUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    quantity: Optional[float] = Field(default=None, ge=0)
    unit: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, ge=0)


class InventoryItemResponse(BaseModel):
    id: str
    supplierId: str
    name: str
    quantity: float = 0
    unit: Optional[str] = None
    price: float = 0
    createdAt: Optional[datetime] = None
