# streetfood_connect/gateway/__init__.py
import logging

from streetfood_connect.config import settings

from .auth_client import AuthClient
from .base import INVENTORY, ORDERS, REVIEWS, USERS, AuthUser, Gateway, Record
from .errors import AuthError, GatewayError

logger = logging.getLogger(__name__)


def create_gateway(backend: str = None) -> Gateway:
    """Gateway for the configured backend ("local" or "firebase")."""
    backend = (backend or settings.GATEWAY_BACKEND).lower()
    if backend == "firebase":
        from .firebase_gateway import FirebaseGateway
        settings.require_firebase()
        logger.info(f"Using Firebase gateway (project {settings.FIREBASE_PROJECT_ID})")
        return FirebaseGateway()
    if backend == "local":
        from .local_gateway import LocalGateway
        logger.info("Using local gateway")
        return LocalGateway()
    raise RuntimeError(f"Unknown GATEWAY_BACKEND: {backend!r} (expected 'local' or 'firebase')")


__all__ = [
    "AuthClient",
    "AuthError",
    "AuthUser",
    "Gateway",
    "GatewayError",
    "Record",
    "create_gateway",
    "USERS",
    "ORDERS",
    "INVENTORY",
    "REVIEWS",
]
