# tests/test_firebase_gateway.py
from unittest import mock

import pytest
import requests

from streetfood_connect.gateway.base import AuthUser
from streetfood_connect.gateway.errors import AuthError, GatewayError
from streetfood_connect.gateway.firebase_gateway import FIRESTORE_URL, FirebaseGateway

DOCS = "projects/demo-project/databases/(default)/documents"


def _resp(status=200, body=None):
    r = mock.Mock()
    r.status_code = status
    r.json.return_value = body
    r.content = b"{}" if body is not None else b""
    r.text = ""
    return r


@pytest.fixture
def http():
    session = mock.MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def fb(http):
    return FirebaseGateway(api_key="key-123", project_id="demo-project", timeout=5, poll_interval=60, http=http)


def _call(http, index=-1):
    args, kwargs = http.request.call_args_list[index]
    return args[0], args[1], kwargs


def test_sign_in(fb, http):
    http.request.return_value = _resp(200, {
        "localId": "uid-1", "email": "asha@demo.in", "idToken": "tok", "refreshToken": "ref", "expiresIn": "3600",
    })

    user = fb.authenticate("asha@demo.in", "secret123")

    assert (user.uid, user.id_token, user.refresh_token) == ("uid-1", "tok", "ref")
    assert not user.expired
    method, url, kwargs = _call(http)
    assert method == "POST"
    assert url.endswith("/accounts:signInWithPassword")
    assert kwargs["params"] == {"key": "key-123"}
    assert kwargs["json"]["returnSecureToken"] is True


@pytest.mark.parametrize("message,code", [
    ("EMAIL_NOT_FOUND", AuthError.USER_NOT_FOUND),
    ("INVALID_PASSWORD", AuthError.WRONG_PASSWORD),
    ("INVALID_LOGIN_CREDENTIALS", AuthError.INVALID_CREDENTIAL),
    ("INVALID_EMAIL", AuthError.INVALID_EMAIL),
    ("TOO_MANY_ATTEMPTS_TRY_LATER : Try again later.", AuthError.TOO_MANY_REQUESTS),
    ("SOMETHING_NEW", AuthError.UNKNOWN),
])
def test_sign_in_error_codes(fb, http, message, code):
    http.request.return_value = _resp(400, {"error": {"code": 400, "message": message}})
    with pytest.raises(AuthError) as exc:
        fb.authenticate("asha@demo.in", "x")
    assert exc.value.code == code


def test_sign_up_error_codes(fb, http):
    http.request.return_value = _resp(400, {"error": {"message": "WEAK_PASSWORD : Password should be at least 6 characters"}})
    with pytest.raises(AuthError) as exc:
        fb.create_account("asha@demo.in", "123", "Asha")
    assert exc.value.code == AuthError.WEAK_PASSWORD

    http.request.return_value = _resp(400, {"error": {"message": "EMAIL_EXISTS"}})
    with pytest.raises(AuthError) as exc:
        fb.create_account("asha@demo.in", "secret123", "Asha")
    assert exc.value.code == AuthError.EMAIL_IN_USE


def test_sign_up_sends_display_name(fb, http):
    http.request.return_value = _resp(200, {"localId": "uid-2", "email": "b@demo.in", "idToken": "t"})
    user = fb.create_account("b@demo.in", "secret123", "Bilal")
    assert user.display_name == "Bilal"
    assert _call(http)[2]["json"]["displayName"] == "Bilal"


def test_refresh_uses_securetoken_form(fb, http):
    http.request.return_value = _resp(200, {"id_token": "new", "refresh_token": "ref2", "expires_in": "3600", "user_id": "u"})
    user = fb.refresh(AuthUser(uid="u", email="a@demo.in", id_token="old", refresh_token="ref"))

    assert (user.id_token, user.refresh_token) == ("new", "ref2")
    method, url, kwargs = _call(http)
    assert url == "https://securetoken.googleapis.com/v1/token"
    assert kwargs["data"] == {"grant_type": "refresh_token", "refresh_token": "ref"}


def test_get_record(fb, http):
    http.request.return_value = _resp(200, {
        "name": f"{DOCS}/users/u1", "fields": {"role": {"stringValue": "vendor"}},
    })
    assert fb.get_record("users", "u1") == {"id": "u1", "role": "vendor"}
    assert _call(http)[1] == f"{FIRESTORE_URL}/{DOCS}/users/u1"


def test_get_missing_record(fb, http):
    http.request.return_value = _resp(404, {"error": {"message": "not found"}})
    assert fb.get_record("users", "ghost") is None


def test_batch_get(fb, http):
    http.request.return_value = _resp(200, [
        {"found": {"name": f"{DOCS}/users/a", "fields": {"name": {"stringValue": "A"}}}},
        {"missing": f"{DOCS}/users/x"},
    ])
    result = fb.get_records_by_ids("users", ["a", "x", "a"])

    assert result == {"a": {"id": "a", "name": "A"}, "x": None}
    method, url, kwargs = _call(http)
    assert url.endswith(":batchGet")
    assert kwargs["json"]["documents"] == [f"{DOCS}/users/a", f"{DOCS}/users/x"]


def test_run_query(fb, http):
    http.request.return_value = _resp(200, [
        {"document": {"name": f"{DOCS}/orders/o1", "fields": {"vendorId": {"stringValue": "v"}}}},
        {"readTime": "2024-03-01T00:00:00Z"},
    ])
    rows = fb.get_orders_where("vendorId", "v")

    assert rows == [{"id": "o1", "vendorId": "v"}]
    query = _call(http)[2]["json"]["structuredQuery"]
    assert query["from"] == [{"collectionId": "orders"}]
    assert query["where"]["fieldFilter"] == {
        "field": {"fieldPath": "vendorId"}, "op": "EQUAL", "value": {"stringValue": "v"},
    }
    assert query["orderBy"] == [{"field": {"fieldPath": "createdAt"}, "direction": "DESCENDING"}]


def test_update_uses_mask_and_requires_existing_document(fb, http):
    http.request.return_value = _resp(200, {"name": f"{DOCS}/orders/o1"})
    fb.update_record("orders", "o1", {"status": "confirmed"})

    method, url, kwargs = _call(http)
    assert method == "PATCH"
    assert ("updateMask.fieldPaths", "status") in kwargs["params"]
    assert ("currentDocument.exists", "true") in kwargs["params"]
    assert kwargs["json"] == {"fields": {"status": {"stringValue": "confirmed"}}}


def test_create_returns_generated_id(fb, http):
    http.request.return_value = _resp(200, {"name": f"{DOCS}/reviews/r-99", "fields": {}})
    assert fb.create_record("reviews", {"rating": 5}) == "r-99"
    assert _call(http)[1] == f"{FIRESTORE_URL}/{DOCS}/reviews"


def test_bound_gateway_sends_bearer_token(fb, http):
    http.request.return_value = _resp(404)
    fb.bind(AuthUser(uid="u", email=None, id_token="tok-1")).get_record("users", "u")
    assert _call(http)[2]["headers"]["Authorization"] == "Bearer tok-1"

    fb.get_record("users", "u")
    assert "Authorization" not in _call(http)[2]["headers"]


def test_server_errors_raise_gateway_error(fb, http):
    http.request.return_value = _resp(403, {"error": {"message": "Missing or insufficient permissions."}})
    with pytest.raises(GatewayError) as exc:
        fb.get_users_by_role("supplier")
    assert exc.value.status_code == 403
    assert exc.value.code == "permission-denied"


@pytest.mark.parametrize("error,code", [
    (requests.exceptions.Timeout(), "deadline-exceeded"),
    (requests.exceptions.ConnectionError(), "unavailable"),
])
def test_transport_errors(fb, http, error, code):
    http.request.side_effect = error
    with pytest.raises(GatewayError) as exc:
        fb.get_record("users", "u1")
    assert exc.value.code == code


def test_subscription_polls_for_changes(fb, http):
    rows = [{"document": {"name": f"{DOCS}/inventory/i1", "fields": {"supplierId": {"stringValue": "s"}}}}]
    http.request.return_value = _resp(200, rows)
    seen = []

    unsubscribe = fb.subscribe_inventory("s", seen.append)
    try:
        assert seen == [[{"id": "i1", "supplierId": "s"}]]
        fb._poller.poll_once()
        assert len(seen) == 1

        http.request.return_value = _resp(200, [])
        fb._poller.poll_once()
        assert seen[-1] == []
    finally:
        unsubscribe()
