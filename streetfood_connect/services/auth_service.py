# streetfood_connect/services/auth_service.py
"""User-facing messages for authentication failures."""

from streetfood_connect.gateway.errors import AuthError

LOGIN_FAILED = "Login failed. Please try again."
REGISTRATION_FAILED = "Registration failed. Please try again."
ROLE_MISMATCH = "Invalid role selected for this account"
PASSWORDS_DO_NOT_MATCH = "Passwords do not match"
REGISTERED = "Registration successful! Welcome to StreetFood Connect."
LOGGED_OUT = "Logged out successfully"
PROFILE_UPDATED = "Profile updated successfully"

_LOGIN_MESSAGES = {
    AuthError.USER_NOT_FOUND: "No account found with this email.",
    AuthError.WRONG_PASSWORD: "Incorrect password.",
    AuthError.INVALID_EMAIL: "Invalid email address.",
}

_REGISTER_MESSAGES = {
    AuthError.EMAIL_IN_USE: "An account with this email already exists.",
    AuthError.WEAK_PASSWORD: "Password should be at least 6 characters.",
    AuthError.INVALID_EMAIL: "Invalid email address.",
}


def login_error_message(code: str) -> str:
    return _LOGIN_MESSAGES.get(code, LOGIN_FAILED)


def register_error_message(code: str) -> str:
    return _REGISTER_MESSAGES.get(code, REGISTRATION_FAILED)


def welcome_message(profile: dict) -> str:
    return f"Welcome back, {profile.get('name') or profile.get('email') or 'there'}!"
