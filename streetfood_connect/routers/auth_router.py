# streetfood_connect/routers/auth_router.py
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from streetfood_connect.config import settings
from streetfood_connect.middleware.exceptions import RedirectRequired
from streetfood_connect.schemas.users import (
    LoginPayload,
    ProfileUpdate,
    RegisterPayload,
    SessionResponse,
    UserProfile,
)
from streetfood_connect.services import auth_service
from streetfood_connect.services.search_service import CATEGORIES
from streetfood_connect.services.session_service import ANONYMOUS, SessionContext, SessionStore

from .deps import (
    clear_session_cookie,
    current_session,
    failure_message,
    get_store,
    require_session,
    sign_in_session,
)

router = APIRouter(tags=["auth"])


def _session_response(ctx: SessionContext, message: str) -> SessionResponse:
    return SessionResponse(
        message=message,
        state=ctx.state,
        role=ctx.role,
        user=UserProfile(**ctx.profile) if ctx.profile else None,
        redirect=ctx.home() if ctx.is_authenticated else None,
    )


@router.get("/")
def root(ctx: Optional[SessionContext] = Depends(current_session)):
    raise RedirectRequired(ctx.home() if ctx else "/login")


@router.get("/login")
def login_form(ctx: Optional[SessionContext] = Depends(current_session)):
    if ctx is not None and ctx.is_authenticated:
        raise RedirectRequired("/")
    return {"fields": ["email", "password", "role"], "roles": ["vendor", "supplier"]}


@router.post("/login", response_model=SessionResponse)
def login(
    payload: LoginPayload,
    response: Response,
    ctx: Optional[SessionContext] = Depends(current_session),
    store: SessionStore = Depends(get_store),
):
    ctx, message = sign_in_session(
        ctx, store, response, lambda session: session.login(payload.email, payload.password, payload.role)
    )
    return _session_response(ctx, message)


@router.get("/register")
def register_form(ctx: Optional[SessionContext] = Depends(current_session)):
    if ctx is not None and ctx.is_authenticated:
        raise RedirectRequired("/")
    return {
        "fields": ["name", "email", "phone", "location", "role", "businessType", "password", "confirmPassword"],
        "roles": ["vendor", "supplier"],
        "categories": list(CATEGORIES),
    }


@router.post("/register", response_model=SessionResponse, status_code=201)
def register(
    payload: RegisterPayload,
    response: Response,
    ctx: Optional[SessionContext] = Depends(current_session),
    store: SessionStore = Depends(get_store),
):
    ctx, message = sign_in_session(ctx, store, response, lambda session: session.register(payload))
    return _session_response(ctx, message)


@router.post("/logout", response_model=SessionResponse)
def logout(request: Request, response: Response, store: SessionStore = Depends(get_store)):
    session_id = request.cookies.get(settings.SESSION_COOKIE_NAME)
    ctx = store.get(session_id)
    if ctx is not None:
        ctx.logout()
        store.drop(session_id)
    clear_session_cookie(response)
    return SessionResponse(message=auth_service.LOGGED_OUT, state=ANONYMOUS)


@router.get("/profile", response_model=UserProfile)
def get_profile(ctx: SessionContext = Depends(require_session)):
    return UserProfile(**ctx.profile)


@router.patch(
    "/profile",
    response_model=SessionResponse,
    dependencies=[Depends(failure_message("Profile update failed. Please try again."))],
)
def update_profile(payload: ProfileUpdate, ctx: SessionContext = Depends(require_session)):
    updates = payload.model_dump(exclude_unset=True, exclude_none=True)
    message = ctx.update_profile(updates)
    return _session_response(ctx, message)
