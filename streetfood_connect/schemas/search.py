# streetfood_connect/schemas/search.py
from typing import List, Optional

from pydantic import BaseModel, Field

from .users import UserProfile


class SupplierFilterIn(BaseModel):
    category: str = ""
    location: str = ""
    minRating: float = Field(default=0, ge=0, le=5)
    verifiedOnly: bool = False
    freeText: Optional[str] = None


class CompareResponse(BaseModel):
    suppliers: List[UserProfile] = []
    size: int = 0
    limit: int = 3


class SearchResponse(BaseModel):
    filters: SupplierFilterIn
    categories: List[str]
    total: int
    suppliers: List[UserProfile] = []
    compare: CompareResponse
