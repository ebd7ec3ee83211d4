# streetfood_connect/schemas/orders.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

OrderStatus = Literal["pending", "confirmed", "in_transit", "delivered", "cancelled"]


class OrderLineIn(BaseModel):
    materialName: str = Field(min_length=1)
    quantity: float = Field(gt=0)
    unit: str = "kg"
    unitPrice: float = Field(ge=0)


class OrderCreate(BaseModel):
    supplierId: str = Field(min_length=1)
    materials: List[OrderLineIn] = Field(min_length=1)
    deliveryDate: Optional[str] = None
    notes: Optional[str] = None


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderLine(BaseModel):
    materialName: str
    quantity: float
    unit: Optional[str] = None
    unitPrice: float = 0
    total: float = 0


class OrderResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    vendorId: str
    supplierId: str
    materials: List[OrderLine] = []
    totalAmount: float = 0
    status: str = "pending"
    statusLabel: Optional[str] = None
    paymentStatus: Optional[str] = None
    orderDate: Optional[str] = None
    deliveryDate: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
