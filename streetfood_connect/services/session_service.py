# streetfood_connect/services/session_service.py
"""
Per-client session: who is signed in, with which role, and the vendor's
search state.

    anonymous -> authenticating -> authenticated{role} -> anonymous

The state follows the auth client's change notifications, so a sign-out
or an expired credential drops the session back to anonymous wherever it
happens.
"""

import logging
import secrets
import threading
import time
from typing import Callable, Dict, List, Optional, Tuple

from streetfood_connect.config import settings
from streetfood_connect.gateway import AuthClient, AuthError, AuthUser, Gateway, GatewayError
from streetfood_connect.gateway.base import utcnow
from streetfood_connect.middleware.exceptions import (
    AuthenticationError,
    BusinessLogicError,
    RoleMismatchError,
)
from streetfood_connect.schemas.users import RegisterPayload

from . import auth_service
from .search_service import SearchState

logger = logging.getLogger(__name__)

ANONYMOUS = "anonymous"
AUTHENTICATING = "authenticating"
AUTHENTICATED = "authenticated"


class SessionContext:

    def __init__(self, gateway: Gateway):
        self._gateway = gateway
        self._lock = threading.RLock()
        self.state = ANONYMOUS
        self.profile: Optional[dict] = None
        self.search = SearchState()
        self.auth = AuthClient(gateway)
        self._unsubscribe = self.auth.on_auth_change(self._on_auth_change)

    # ---------- derived state ----------
    @property
    def role(self) -> Optional[str]:
        return self.profile.get("role") if self.state == AUTHENTICATED and self.profile else None

    @property
    def uid(self) -> Optional[str]:
        user = self.auth.current_user
        return user.uid if user else None

    @property
    def is_authenticated(self) -> bool:
        return self.state == AUTHENTICATED

    @property
    def gateway(self) -> Gateway:
        """Gateway acting with this session's (refreshed) credential."""
        return self._gateway.bind(self.auth.fresh_user())

    def home(self) -> str:
        if self.role == "vendor":
            return "/vendor"
        if self.role == "supplier":
            return "/supplier"
        return "/login"

    def _on_auth_change(self, user: Optional[AuthUser]) -> None:
        with self._lock:
            if user is None:
                self._reset()
                return
            if self.state != ANONYMOUS:
                # login/register drive the transition themselves
                return
            try:
                profile = self._gateway.bind(user).get_user_profile(user.uid)
            except GatewayError as e:
                logger.error(f"Error fetching user profile for {user.uid}: {e.message}")
                profile = None
            if profile:
                self._become(profile)

    def _become(self, profile: dict) -> None:
        self.profile = profile
        self.state = AUTHENTICATED

    def _reset(self) -> None:
        self.profile = None
        self.state = ANONYMOUS
        self.search = SearchState()

    def _sign_out(self) -> None:
        self.auth.sign_out()
        self._reset()

    # ---------- operations ----------
    def login(self, email: str, password: str, role: str) -> str:
        with self._lock:
            self.state = AUTHENTICATING
            try:
                user = self.auth.sign_in(email, password)
            except AuthError as e:
                self._sign_out()
                logger.info(f"Login failed for {email}: {e.code}")
                raise AuthenticationError(auth_service.login_error_message(e.code)) from e
            try:
                profile = self._gateway.bind(user).get_user_profile(user.uid)
            except GatewayError as e:
                logger.error(f"Login error for {user.uid}: {e.message}")
                self._sign_out()
                raise AuthenticationError(auth_service.LOGIN_FAILED) from e

            if not profile or profile.get("role") != role:
                logger.warning(f"Role mismatch for {user.uid}: requested {role}")
                self._sign_out()
                raise RoleMismatchError(auth_service.ROLE_MISMATCH)

            self._become(profile)
            return auth_service.welcome_message(profile)

    def register(self, payload: RegisterPayload) -> str:
        if payload.password != payload.confirmPassword:
            raise BusinessLogicError(auth_service.PASSWORDS_DO_NOT_MATCH, error_code="PASSWORD_MISMATCH")
        with self._lock:
            self.state = AUTHENTICATING
            try:
                user = self.auth.sign_up(payload.email, payload.password, payload.name)
            except AuthError as e:
                self._sign_out()
                logger.info(f"Registration failed for {payload.email}: {e.code}")
                raise AuthenticationError(auth_service.register_error_message(e.code)) from e

            gateway = self._gateway.bind(user)
            try:
                gateway.create_user_profile(user.uid, {
                    **payload.profile_fields(),
                    "uid": user.uid,
                    "email": user.email,
                    "createdAt": utcnow(),
                    "rating": 0,
                    "verified": False,
                })
                profile = gateway.get_user_profile(user.uid)
            except GatewayError as e:
                logger.error(f"Registration error for {user.uid}: {e.message}")
                self._sign_out()
                raise AuthenticationError(auth_service.REGISTRATION_FAILED) from e

            self._become(profile)
            logger.info(f"Registered {payload.role} {user.uid}")
            return auth_service.REGISTERED

    def logout(self) -> str:
        self.auth.sign_out()
        return auth_service.LOGGED_OUT

    def update_profile(self, updates: dict) -> str:
        with self._lock:
            if not self.is_authenticated:
                raise AuthenticationError("Please sign in first.")
            gateway = self.gateway
            gateway.update_user_profile(self.uid, updates)
            self.profile = gateway.get_user_profile(self.uid) or self.profile
            return auth_service.PROFILE_UPDATED

    def close(self) -> None:
        self._unsubscribe()


class SessionStore:
    """Sessions keyed by an opaque cookie id, dropped after `idle_timeout` seconds unused."""

    def __init__(
        self,
        gateway: Gateway,
        idle_timeout: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._gateway = gateway
        self._idle_timeout = settings.SESSION_IDLE_MINUTES * 60 if idle_timeout is None else idle_timeout
        self._clock = clock
        self._sessions: Dict[str, SessionContext] = {}
        self._last_seen: Dict[str, float] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def _sweep(self, now: float) -> List[SessionContext]:
        """Pops idle sessions; the caller closes them outside the lock."""
        expired = [sid for sid, seen in self._last_seen.items() if now - seen > self._idle_timeout]
        for sid in expired:
            del self._last_seen[sid]
        return [self._sessions.pop(sid) for sid in expired]

    def _close(self, sessions: List[SessionContext]) -> None:
        if sessions:
            logger.info(f"Dropping {len(sessions)} idle session(s)")
        for ctx in sessions:
            ctx.close()

    def get(self, session_id: Optional[str]) -> Optional[SessionContext]:
        now = self._clock()
        with self._lock:
            expired = self._sweep(now)
            ctx = self._sessions.get(session_id) if session_id else None
            if ctx is not None:
                self._last_seen[session_id] = now
        self._close(expired)
        return ctx

    def new_context(self) -> SessionContext:
        """A session that is not stored until `add` is called."""
        return SessionContext(self._gateway)

    def add(self, ctx: SessionContext) -> str:
        session_id = secrets.token_urlsafe(32)
        now = self._clock()
        with self._lock:
            expired = self._sweep(now)
            self._sessions[session_id] = ctx
            self._last_seen[session_id] = now
        self._close(expired)
        return session_id

    def create(self) -> Tuple[str, SessionContext]:
        ctx = self.new_context()
        return self.add(ctx), ctx

    def get_or_create(self, session_id: Optional[str]) -> Tuple[str, SessionContext, bool]:
        ctx = self.get(session_id)
        if ctx is not None:
            return session_id, ctx, False
        new_id, ctx = self.create()
        return new_id, ctx, True

    def drop(self, session_id: str) -> None:
        with self._lock:
            ctx = self._sessions.pop(session_id, None)
            self._last_seen.pop(session_id, None)
        if ctx is not None:
            ctx.close()

    def clear(self) -> None:
        with self._lock:
            sessions, self._sessions = list(self._sessions.values()), {}
            self._last_seen = {}
        for ctx in sessions:
            ctx.close()
