# tests/test_session_service.py
from datetime import timedelta

import pytest

from streetfood_connect.gateway.base import utcnow
from streetfood_connect.gateway.errors import AuthError
from streetfood_connect.middleware.exceptions import AuthenticationError, BusinessLogicError, RoleMismatchError
from streetfood_connect.schemas.users import RegisterPayload
from streetfood_connect.services.session_service import (
    ANONYMOUS,
    AUTHENTICATED,
    SessionContext,
    SessionStore,
)

PASSWORD = "secret123"


def _payload(role="vendor", email="raju@demo.in", name="Raju", **extra):
    return RegisterPayload(
        name=name, email=email, password=PASSWORD, confirmPassword=PASSWORD, role=role, **extra
    )


@pytest.fixture
def ctx(gateway):
    session = SessionContext(gateway)
    yield session
    session.close()


def test_starts_anonymous(ctx):
    assert ctx.state == ANONYMOUS
    assert ctx.role is None
    assert ctx.home() == "/login"


def test_register_writes_profile_without_password(ctx, gateway):
    message = ctx.register(_payload(role="supplier", location="Delhi", specialties=["Spices"]))

    assert message == "Registration successful! Welcome to StreetFood Connect."
    assert ctx.state == AUTHENTICATED
    assert ctx.role == "supplier"
    assert ctx.home() == "/supplier"

    stored = gateway.get_user_profile(ctx.uid)
    assert stored["uid"] == ctx.uid
    assert stored["email"] == "raju@demo.in"
    assert stored["rating"] == 0
    assert stored["verified"] is False
    assert stored["specialties"] == ["Spices"]
    assert "password" not in stored
    assert "confirmPassword" not in stored


def test_register_password_mismatch(ctx):
    payload = _payload()
    payload.confirmPassword = "different"
    with pytest.raises(BusinessLogicError, match="Passwords do not match"):
        ctx.register(payload)
    assert ctx.state == ANONYMOUS


@pytest.mark.parametrize("email,password,message", [
    ("not-an-email", PASSWORD, "Invalid email address."),
    ("short@demo.in", "123", "Password should be at least 6 characters."),
])
def test_register_error_messages(ctx, email, password, message):
    payload = RegisterPayload(name="X", email=email, password=password, confirmPassword=password, role="vendor")
    with pytest.raises(AuthenticationError) as exc:
        ctx.register(payload)
    assert exc.value.message == message
    assert ctx.state == ANONYMOUS


def test_register_duplicate_email(gateway, ctx):
    ctx.register(_payload())
    ctx.logout()
    with pytest.raises(AuthenticationError) as exc:
        ctx.register(_payload(email="RAJU@demo.in"))
    assert exc.value.message == "An account with this email already exists."


def test_login_welcomes_by_name(ctx):
    ctx.register(_payload())
    ctx.logout()
    assert ctx.state == ANONYMOUS

    assert ctx.login("raju@demo.in", PASSWORD, "vendor") == "Welcome back, Raju!"
    assert ctx.state == AUTHENTICATED
    assert ctx.role == "vendor"


def test_role_mismatch_signs_out(ctx):
    ctx.register(_payload(role="vendor"))
    ctx.logout()

    with pytest.raises(RoleMismatchError) as exc:
        ctx.login("raju@demo.in", PASSWORD, "supplier")

    assert exc.value.message == "Invalid role selected for this account"
    assert ctx.state == ANONYMOUS
    assert ctx.auth.current_user is None


@pytest.mark.parametrize("email,password,message", [
    ("nobody@demo.in", PASSWORD, "No account found with this email."),
    ("raju@demo.in", "wrong-pass", "Incorrect password."),
    ("raju-at-demo", PASSWORD, "Invalid email address."),
])
def test_login_error_messages(ctx, email, password, message):
    ctx.register(_payload())
    ctx.logout()
    with pytest.raises(AuthenticationError) as exc:
        ctx.login(email, password, "vendor")
    assert exc.value.message == message
    assert ctx.state == ANONYMOUS


def test_unmapped_login_error_gets_generic_message(ctx, gateway, monkeypatch):
    def too_many(email, password):
        raise AuthError(AuthError.TOO_MANY_REQUESTS)

    monkeypatch.setattr(gateway, "authenticate", too_many)
    with pytest.raises(AuthenticationError) as exc:
        ctx.login("raju@demo.in", PASSWORD, "vendor")
    assert exc.value.message == "Login failed. Please try again."


def test_login_without_profile_is_role_mismatch(ctx, gateway):
    gateway.create_account("ghost@demo.in", PASSWORD)
    with pytest.raises(RoleMismatchError):
        ctx.login("ghost@demo.in", PASSWORD, "vendor")
    assert ctx.auth.current_user is None


def test_external_sign_in_restores_session(ctx, gateway):
    ctx.register(_payload())
    other = SessionContext(gateway)
    try:
        other.auth.sign_in("raju@demo.in", PASSWORD)
        assert other.state == AUTHENTICATED
        assert other.role == "vendor"
    finally:
        other.close()


def test_expired_credential_that_cannot_refresh_drops_session(ctx, gateway, monkeypatch):
    ctx.register(_payload())
    ctx.auth.current_user.expires_at = utcnow() - timedelta(minutes=5)

    def refused(user):
        raise AuthError(AuthError.TOKEN_EXPIRED)

    monkeypatch.setattr(gateway, "refresh", refused)
    assert ctx.auth.fresh_user() is None
    assert ctx.state == ANONYMOUS


def test_expired_credential_is_refreshed(ctx):
    ctx.register(_payload())
    old = ctx.auth.current_user
    old.expires_at = utcnow() - timedelta(minutes=5)

    fresh = ctx.auth.fresh_user()

    assert fresh.uid == old.uid
    assert fresh.id_token != old.id_token
    assert ctx.state == AUTHENTICATED


def test_logout_clears_search_state(ctx):
    ctx.register(_payload())
    ctx.search.update(text="spice")
    assert ctx.logout() == "Logged out successfully"
    assert ctx.search.text == ""
    assert ctx.state == ANONYMOUS


def test_update_profile_rereads(ctx, gateway):
    ctx.register(_payload())
    assert ctx.update_profile({"location": "Chandni Chowk"}) == "Profile updated successfully"
    assert ctx.profile["location"] == "Chandni Chowk"
    assert gateway.get_user_profile(ctx.uid)["location"] == "Chandni Chowk"


def test_update_profile_requires_login(ctx):
    with pytest.raises(AuthenticationError):
        ctx.update_profile({"name": "x"})


def test_store_keys_sessions_by_id(gateway):
    store = SessionStore(gateway)
    sid, ctx = store.create()
    assert store.get(sid) is ctx
    assert store.get("missing") is None
    assert store.get(None) is None

    same_sid, same, created = store.get_or_create(sid)
    assert (same_sid, same, created) == (sid, ctx, False)

    new_sid, _, created = store.get_or_create("stale")
    assert created and new_sid != "stale"

    store.drop(sid)
    assert store.get(sid) is None
    store.clear()
    assert len(store) == 0


def test_store_drops_idle_sessions(gateway):
    now = [0.0]
    store = SessionStore(gateway, idle_timeout=60, clock=lambda: now[0])
    idle_sid, _ = store.create()
    active_sid, active = store.create()

    now[0] = 45
    assert store.get(active_sid) is active

    now[0] = 90
    assert store.get(active_sid) is active
    assert store.get(idle_sid) is None
    assert len(store) == 1


def test_new_context_is_stored_only_when_added(gateway):
    store = SessionStore(gateway)
    ctx = store.new_context()
    assert len(store) == 0

    sid = store.add(ctx)
    assert store.get(sid) is ctx
    assert len(store) == 1


def test_failed_login_drops_previous_user(ctx):
    ctx.register(_payload())
    assert ctx.is_authenticated

    with pytest.raises(AuthenticationError):
        ctx.login("raju@demo.in", "wrong-pass", "vendor")

    assert ctx.state == ANONYMOUS
    assert ctx.uid is None
