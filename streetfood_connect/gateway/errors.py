# streetfood_connect/gateway/errors.py
from typing import Optional


class GatewayError(Exception):
    """A call to the auth/document service failed."""

    def __init__(self, message: str, code: str = "unavailable", status_code: Optional[int] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)


class AuthError(GatewayError):
    """Authentication failure; `code` uses the auth/... vocabulary."""

    USER_NOT_FOUND = "auth/user-not-found"
    WRONG_PASSWORD = "auth/wrong-password"
    INVALID_CREDENTIAL = "auth/invalid-credential"
    INVALID_EMAIL = "auth/invalid-email"
    WEAK_PASSWORD = "auth/weak-password"
    EMAIL_IN_USE = "auth/email-already-in-use"
    TOO_MANY_REQUESTS = "auth/too-many-requests"
    USER_DISABLED = "auth/user-disabled"
    TOKEN_EXPIRED = "auth/user-token-expired"
    UNKNOWN = "auth/unknown"

    def __init__(self, code: str = UNKNOWN, message: Optional[str] = None):
        super().__init__(message or code, code=code, status_code=401)
