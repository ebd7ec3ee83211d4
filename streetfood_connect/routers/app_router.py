# streetfood_connect/routers/app_router.py
from fastapi import APIRouter

from .auth_router import router as auth_router
from .supplier_router import router as supplier_router
from .vendor_router import router as vendor_router

app_router = APIRouter()

app_router.include_router(auth_router)       # /, /login, /register, /logout, /profile
app_router.include_router(vendor_router)     # /vendor/...
app_router.include_router(supplier_router)   # /supplier/...
