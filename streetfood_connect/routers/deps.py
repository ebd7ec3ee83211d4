# streetfood_connect/routers/deps.py
"""Request dependencies: the session behind the cookie and the route guards."""

from typing import Callable, Optional, Tuple, TypeVar

from fastapi import Depends, Request, Response

from streetfood_connect.config import settings
from streetfood_connect.middleware.exceptions import RedirectRequired
from streetfood_connect.services.session_service import SessionContext, SessionStore

T = TypeVar("T")


def get_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def current_session(request: Request, store: SessionStore = Depends(get_store)) -> Optional[SessionContext]:
    ctx = store.get(request.cookies.get(settings.SESSION_COOKIE_NAME))
    if ctx is not None:
        # drops to anonymous when the credential can no longer be refreshed
        ctx.auth.fresh_user()
    return ctx


def set_session_cookie(response: Response, session_id: str) -> None:
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        session_id,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(settings.SESSION_COOKIE_NAME, httponly=True, samesite="lax")


def sign_in_session(
    ctx: Optional[SessionContext],
    store: SessionStore,
    response: Response,
    action: Callable[[SessionContext], T],
) -> Tuple[SessionContext, T]:
    """
    Runs `action` (login or register) on the caller's session. A caller
    without one gets a fresh session that is stored, and the cookie set,
    only once `action` succeeds.
    """
    if ctx is not None:
        return ctx, action(ctx)
    ctx = store.new_context()
    try:
        result = action(ctx)
    except Exception:
        ctx.close()
        raise
    set_session_cookie(response, store.add(ctx))
    return ctx, result


def require_session(ctx: Optional[SessionContext] = Depends(current_session)) -> SessionContext:
    if ctx is None or not ctx.is_authenticated:
        raise RedirectRequired("/login")
    return ctx


def require_role(role: str) -> Callable[..., SessionContext]:
    def guard(ctx: SessionContext = Depends(require_session)) -> SessionContext:
        if ctx.role != role:
            raise RedirectRequired("/")
        return ctx

    return guard


def failure_message(message: str) -> Callable[[Request], None]:
    """Notification text used when the gateway fails during this route."""

    def set_message(request: Request) -> None:
        request.state.failure_message = message

    return set_message
