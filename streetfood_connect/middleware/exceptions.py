# streetfood_connect/middleware/exceptions.py
"""Exception types and handlers.

Every failure reaches the client as a non-fatal notification:

    {"error": {"code": "ERROR_CODE", "message": "...", "details": {...}}}

Guarded routes raise `RedirectRequired`, rendered as a 303 to the target.
"""

import logging
from typing import Union

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from streetfood_connect.gateway.errors import AuthError, GatewayError

logger = logging.getLogger(__name__)


class MarketError(Exception):
    """Base exception for marketplace errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "INTERNAL_ERROR",
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(self.message)


class AuthenticationError(MarketError):
    def __init__(self, message: str, error_code: str = "AUTHENTICATION_FAILED"):
        super().__init__(message=message, status_code=status.HTTP_401_UNAUTHORIZED, error_code=error_code)


class RoleMismatchError(AuthenticationError):
    """Credentials were fine but the account does not have the requested role."""

    def __init__(self, message: str = "Invalid role selected for this account"):
        super().__init__(message=message, error_code="ROLE_MISMATCH")


class BusinessLogicError(MarketError):
    def __init__(self, message: str, error_code: str = "BUSINESS_LOGIC_ERROR"):
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code=error_code,
        )


class ResourceNotFoundError(MarketError):
    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} not found: {identifier}",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="RESOURCE_NOT_FOUND",
        )


class PermissionDeniedError(MarketError):
    def __init__(self, message: str = "Permission denied"):
        super().__init__(message=message, status_code=status.HTTP_403_FORBIDDEN, error_code="PERMISSION_DENIED")


class InvalidStatusTransition(MarketError):
    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(
            message=f"Cannot change order status from '{current}' to '{requested}'",
            status_code=status.HTTP_409_CONFLICT,
            error_code="INVALID_STATUS_TRANSITION",
        )


class RedirectRequired(Exception):
    """Raised by route guards; the handler turns it into a redirect."""

    def __init__(self, location: str):
        self.location = location
        super().__init__(location)


def create_error_response(
    status_code: int,
    message: str,
    error_code: str = "ERROR",
    details: Union[dict, list, None] = None,
) -> JSONResponse:
    content = {
        "error": {
            "code": error_code,
            "message": message,
        }
    }
    if details:
        content["error"]["details"] = details
    return JSONResponse(status_code=status_code, content=content)


async def market_exception_handler(request: Request, exc: MarketError) -> JSONResponse:
    logger.warning(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
    return create_error_response(
        status_code=exc.status_code,
        message=exc.message,
        error_code=exc.error_code,
    )


async def redirect_handler(request: Request, exc: RedirectRequired) -> RedirectResponse:
    logger.debug(f"Redirecting {request.url.path} -> {exc.location}")
    return RedirectResponse(url=exc.location, status_code=status.HTTP_303_SEE_OTHER)


async def auth_exception_handler(request: Request, exc: AuthError) -> JSONResponse:
    # only reached when an AuthError escapes the session layer unmapped
    logger.warning(f"Auth error on {request.url.path}: {exc.code}")
    return create_error_response(
        status_code=status.HTTP_401_UNAUTHORIZED,
        message="Authentication failed. Please sign in again.",
        error_code="AUTHENTICATION_FAILED",
    )


async def gateway_exception_handler(request: Request, exc: GatewayError) -> JSONResponse:
    logger.error(f"Gateway error on {request.method} {request.url.path}: [{exc.code}] {exc.message}")
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return create_error_response(
            status_code=status.HTTP_404_NOT_FOUND,
            message="The requested record no longer exists.",
            error_code="RESOURCE_NOT_FOUND",
        )
    if exc.status_code == status.HTTP_403_FORBIDDEN:
        return create_error_response(
            status_code=status.HTTP_403_FORBIDDEN,
            message="You do not have access to this data.",
            error_code="PERMISSION_DENIED",
        )
    return create_error_response(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        message=getattr(request.state, "failure_message", None) or "Failed to load data. Please try again.",
        error_code="GATEWAY_UNAVAILABLE",
    )


async def http_exception_handler(
    request: Request,
    exc: Union[HTTPException, StarletteHTTPException],
) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"HTTP {exc.status_code} on {request.url.path}: {exc.detail}")
    return create_error_response(
        status_code=exc.status_code,
        message=str(exc.detail),
        error_code=f"HTTP_{exc.status_code}",
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"Validation error on {request.url.path}")
    errors = []
    for error in exc.errors():
        errors.append({
            "field": " -> ".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        })
    return create_error_response(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        message="Validation error",
        error_code="VALIDATION_ERROR",
        details={"errors": errors},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="An unexpected error occurred. Please try again later.",
        error_code="INTERNAL_SERVER_ERROR",
    )


def register_exception_handlers(app):
    app.add_exception_handler(RedirectRequired, redirect_handler)
    app.add_exception_handler(MarketError, market_exception_handler)
    app.add_exception_handler(AuthError, auth_exception_handler)
    app.add_exception_handler(GatewayError, gateway_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
