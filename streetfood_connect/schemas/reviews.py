# streetfood_connect/schemas/reviews.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    rating: int = Field(default=5, ge=1, le=5)
    comment: str = Field(default="", max_length=2000)


class ReviewResponse(BaseModel):
    id: str
    supplierId: str
    vendorId: Optional[str] = None
    vendorName: Optional[str] = None
    rating: int
    comment: str = ""
    createdAt: Optional[datetime] = None
