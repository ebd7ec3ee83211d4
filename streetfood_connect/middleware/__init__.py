from .exceptions import (
    AuthenticationError,
    BusinessLogicError,
    InvalidStatusTransition,
    MarketError,
    PermissionDeniedError,
    RedirectRequired,
    ResourceNotFoundError,
    RoleMismatchError,
    register_exception_handlers,
)

__all__ = [
    "AuthenticationError",
    "BusinessLogicError",
    "InvalidStatusTransition",
    "MarketError",
    "PermissionDeniedError",
    "RedirectRequired",
    "ResourceNotFoundError",
    "RoleMismatchError",
    "register_exception_handlers",
]
