# streetfood_connect/schemas/analytics.py
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from .users import UserProfile


class CustomerRank(BaseModel):
    id: str
    name: Optional[str] = None
    orders: int
    spent: float
    rating: float = 0


class SupplierAnalytics(BaseModel):
    totalRevenue: float
    totalOrders: int
    averageOrderValue: float
    totalCustomers: int
    topCustomers: List[CustomerRank] = []
    trends: List[Dict[str, Any]] = []


class CustomerSummary(UserProfile):
    model_config = ConfigDict(extra="allow")

    totalOrders: int
    totalSpent: float
    lastOrder: Optional[Any] = None
    recentOrders: List[Dict[str, Any]] = []


class DashboardSummary(BaseModel):
    role: str
    user: Optional[UserProfile] = None
    totalOrders: int
    byStatus: Dict[str, int]
    totalAmount: float
    totalAmountText: str
    recentOrders: List[Dict[str, Any]] = []
    extra: Dict[str, Any] = {}
