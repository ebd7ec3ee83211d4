# streetfood_connect/gateway/auth_client.py
import logging
import threading
from typing import Callable, List, Optional

from .base import AuthUser, Gateway, Unsubscribe
from .errors import AuthError

logger = logging.getLogger(__name__)

AuthListener = Callable[[Optional[AuthUser]], None]


class AuthClient:
    """
    Signed-in state of one client: who is logged in, plus listeners that hear
    about every change (sign in, sign up, sign out, expired credentials).
    """

    def __init__(self, gateway: Gateway):
        self._gateway = gateway
        self._user: Optional[AuthUser] = None
        self._listeners: List[AuthListener] = []
        self._lock = threading.RLock()

    @property
    def current_user(self) -> Optional[AuthUser]:
        return self._user

    def sign_in(self, email: str, password: str) -> AuthUser:
        user = self._gateway.authenticate(email, password)
        self._set_user(user)
        return user

    def sign_up(self, email: str, password: str, display_name: Optional[str] = None) -> AuthUser:
        user = self._gateway.create_account(email, password, display_name)
        self._set_user(user)
        return user

    def sign_out(self) -> None:
        self._set_user(None)

    def on_auth_change(self, callback: AuthListener) -> Unsubscribe:
        with self._lock:
            self._listeners.append(callback)
            current = self._user
        callback(current)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    def fresh_user(self) -> Optional[AuthUser]:
        """Current user with a valid token; signs out when it can't be refreshed."""
        with self._lock:
            user = self._user
            if user is None or not user.expired:
                return user
            try:
                refreshed = self._gateway.refresh(user)
            except AuthError as e:
                logger.warning(f"Token refresh failed for {user.uid}: {e.code}")
                refreshed = None
        self._set_user(refreshed)
        return refreshed

    def _set_user(self, user: Optional[AuthUser]) -> None:
        with self._lock:
            changed = (self._user.uid if self._user else None) != (user.uid if user else None)
            self._user = user
            listeners = list(self._listeners)
        if not changed:
            return
        for listener in listeners:
            try:
                listener(user)
            except Exception:
                logger.exception("Auth listener raised")
