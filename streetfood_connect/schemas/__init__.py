from .users import Role, RegisterPayload, LoginPayload, ProfileUpdate, UserProfile, SessionResponse
from .orders import OrderStatus, OrderLineIn, OrderCreate, OrderStatusUpdate, OrderLine, OrderResponse
from .inventory import InventoryItemCreate, InventoryItemUpdate, InventoryItemResponse
from .reviews import ReviewCreate, ReviewResponse
from .search import SupplierFilterIn, SearchResponse, CompareResponse
from .analytics import CustomerRank, SupplierAnalytics, CustomerSummary, DashboardSummary
