# streetfood_connect/gateway/firebase_gateway.py
"""
Hosted gateway: Firebase Authentication (Identity Toolkit REST API) and
Cloud Firestore (REST API v1).
"""

import copy
import logging
from datetime import timedelta
from typing import Any, Dict, Iterable, List, Optional

import requests

from streetfood_connect.config import settings

from . import firestore_codec as codec
from .base import AuthUser, Gateway, Record, Unsubscribe, SnapshotCallback, utcnow
from .errors import AuthError, GatewayError
from .subscriptions import SnapshotPoller

logger = logging.getLogger(__name__)

IDENTITY_URL = "https://identitytoolkit.googleapis.com/v1"
TOKEN_URL = "https://securetoken.googleapis.com/v1/token"
FIRESTORE_URL = "https://firestore.googleapis.com/v1"

# Identity Toolkit error message -> auth code
_AUTH_CODES = {
    "EMAIL_NOT_FOUND": AuthError.USER_NOT_FOUND,
    "INVALID_PASSWORD": AuthError.WRONG_PASSWORD,
    "INVALID_LOGIN_CREDENTIALS": AuthError.INVALID_CREDENTIAL,
    "INVALID_EMAIL": AuthError.INVALID_EMAIL,
    "MISSING_EMAIL": AuthError.INVALID_EMAIL,
    "WEAK_PASSWORD": AuthError.WEAK_PASSWORD,
    "MISSING_PASSWORD": AuthError.WEAK_PASSWORD,
    "EMAIL_EXISTS": AuthError.EMAIL_IN_USE,
    "TOO_MANY_ATTEMPTS_TRY_LATER": AuthError.TOO_MANY_REQUESTS,
    "USER_DISABLED": AuthError.USER_DISABLED,
    "USER_NOT_FOUND": AuthError.USER_NOT_FOUND,
    "TOKEN_EXPIRED": AuthError.TOKEN_EXPIRED,
    "INVALID_REFRESH_TOKEN": AuthError.TOKEN_EXPIRED,
}


def _err(resp: requests.Response) -> str:
    try:
        j = resp.json()
        if isinstance(j, list) and j:
            j = j[0]
        if isinstance(j, dict) and isinstance(j.get("error"), dict):
            return str(j["error"].get("message") or j["error"])
        return str(j)
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"


def _auth_code(resp: requests.Response) -> str:
    # messages look like "WEAK_PASSWORD : Password should be at least 6 characters"
    key = _err(resp).split(":")[0].strip().split(" ")[0]
    return _AUTH_CODES.get(key, AuthError.UNKNOWN)


def _status_code(resp: requests.Response) -> str:
    return {
        400: "invalid-argument",
        401: "unauthenticated",
        403: "permission-denied",
        404: "not-found",
        409: "already-exists",
        429: "resource-exhausted",
    }.get(resp.status_code, "unavailable")


class FirebaseGateway(Gateway):

    def __init__(
        self,
        api_key: Optional[str] = None,
        project_id: Optional[str] = None,
        timeout: Optional[int] = None,
        poll_interval: Optional[float] = None,
        http: Optional[requests.Session] = None,
    ):
        super().__init__()
        if api_key is None or project_id is None:
            settings.require_firebase()
        self.api_key = api_key or settings.FIREBASE_API_KEY
        self.project_id = project_id or settings.FIREBASE_PROJECT_ID
        self.timeout = timeout or settings.HTTP_TIMEOUT
        self.http = http or requests.Session()
        self.http.headers.update({"Content-Type": "application/json"})
        self._documents = f"projects/{self.project_id}/databases/(default)/documents"
        self._poller = SnapshotPoller(poll_interval or settings.SUBSCRIPTION_POLL_SECONDS)
        self._id_token: Optional[str] = None

    def bind(self, user: Optional[AuthUser]) -> "FirebaseGateway":
        view = copy.copy(self)
        view._id_token = user.id_token if user else None
        return view

    def close(self) -> None:
        super().close()
        self._poller.stop()
        self.http.close()

    # ---------- http ----------
    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        headers = kwargs.pop("headers", {})
        if self._id_token:
            headers["Authorization"] = f"Bearer {self._id_token}"
        try:
            return self.http.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            raise GatewayError("The request timed out", code="deadline-exceeded") from e
        except requests.exceptions.ConnectionError as e:
            raise GatewayError("Could not connect to the server", code="unavailable") from e
        except requests.exceptions.RequestException as e:
            raise GatewayError(f"Request failed: {e}") from e

    def _call(self, method: str, url: str, **kwargs) -> Any:
        r = self._request(method, url, **kwargs)
        if r.status_code >= 400:
            message = _err(r)
            logger.error(f"Firestore {method} {url} -> {r.status_code}: {message}")
            raise GatewayError(message, code=_status_code(r), status_code=r.status_code)
        return r.json() if r.content else None

    def _doc_url(self, collection: str, record_id: str) -> str:
        return f"{FIRESTORE_URL}/{self._documents}/{collection}/{record_id}"

    # ---------- records ----------
    def get_record(self, collection: str, record_id: str) -> Optional[Record]:
        r = self._request("GET", self._doc_url(collection, record_id))
        if r.status_code == 404:
            return None
        if r.status_code >= 400:
            raise GatewayError(_err(r), code=_status_code(r), status_code=r.status_code)
        return codec.decode_document(r.json())

    def get_records_by_ids(self, collection: str, ids: Iterable[str]) -> Dict[str, Optional[Record]]:
        wanted = list(dict.fromkeys(ids))
        if not wanted:
            return {}
        names = [f"{self._documents}/{collection}/{i}" for i in wanted]
        results = self._call("POST", f"{FIRESTORE_URL}/{self._documents}:batchGet", json={"documents": names})
        found: Dict[str, Optional[Record]] = {}
        for entry in results or []:
            if "found" in entry:
                record = codec.decode_document(entry["found"])
                found[record["id"]] = record
            elif "missing" in entry:
                found[codec.document_id(entry["missing"])] = None
        return {i: found.get(i) for i in wanted}

    def get_records_where(
        self,
        collection: str,
        field: str,
        value: Any,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Record]:
        query: Dict[str, Any] = {
            "from": [{"collectionId": collection}],
            "where": {
                "fieldFilter": {
                    "field": {"fieldPath": field},
                    "op": "EQUAL",
                    "value": codec.encode_value(value),
                }
            },
        }
        if order_by:
            query["orderBy"] = [{
                "field": {"fieldPath": order_by},
                "direction": "DESCENDING" if descending else "ASCENDING",
            }]
        rows = self._call("POST", f"{FIRESTORE_URL}/{self._documents}:runQuery", json={"structuredQuery": query})
        return [codec.decode_document(row["document"]) for row in rows or [] if "document" in row]

    def set_record(self, collection: str, record_id: str, data: Record) -> None:
        self._call("PATCH", self._doc_url(collection, record_id), json={"fields": codec.encode_fields(data)})
        self._notify(collection)

    def create_record(self, collection: str, data: Record) -> str:
        doc = self._call(
            "POST",
            f"{FIRESTORE_URL}/{self._documents}/{collection}",
            json={"fields": codec.encode_fields(data)},
        )
        self._notify(collection)
        return codec.document_id(doc["name"])

    def update_record(self, collection: str, record_id: str, updates: Record) -> None:
        params = [("updateMask.fieldPaths", name) for name in updates]
        params.append(("currentDocument.exists", "true"))
        self._call(
            "PATCH",
            self._doc_url(collection, record_id),
            params=params,
            json={"fields": codec.encode_fields(updates)},
        )
        self._notify(collection)

    def delete_record(self, collection: str, record_id: str) -> None:
        self._call("DELETE", self._doc_url(collection, record_id))
        self._notify(collection)

    def subscribe(
        self,
        collection: str,
        field: str,
        value: Any,
        callback: SnapshotCallback,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> Unsubscribe:
        # writes by other clients are only visible by asking again
        return self._poller.watch(
            lambda: self.get_records_where(collection, field, value, order_by, descending),
            callback,
        )

    # ---------- accounts ----------
    def _auth_call(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        r = self._request("POST", f"{IDENTITY_URL}/accounts:{endpoint}", params={"key": self.api_key}, json=payload)
        if r.status_code >= 400:
            code = _auth_code(r)
            logger.info(f"accounts:{endpoint} rejected: {code}")
            raise AuthError(code)
        return r.json()

    @staticmethod
    def _auth_user(data: Dict[str, Any]) -> AuthUser:
        return AuthUser(
            uid=data["localId"],
            email=data.get("email"),
            id_token=data.get("idToken"),
            refresh_token=data.get("refreshToken"),
            expires_at=utcnow() + timedelta(seconds=int(data.get("expiresIn", 3600))),
            display_name=data.get("displayName"),
        )

    def authenticate(self, email: str, password: str) -> AuthUser:
        data = self._auth_call(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return self._auth_user(data)

    def create_account(self, email: str, password: str, display_name: Optional[str] = None) -> AuthUser:
        payload = {"email": email, "password": password, "returnSecureToken": True}
        if display_name:
            payload["displayName"] = display_name
        data = self._auth_call("signUp", payload)
        data.setdefault("displayName", display_name)
        return self._auth_user(data)

    def refresh(self, user: AuthUser) -> AuthUser:
        if not user.refresh_token:
            raise AuthError(AuthError.TOKEN_EXPIRED)
        r = self._request(
            "POST",
            TOKEN_URL,
            params={"key": self.api_key},
            data={"grant_type": "refresh_token", "refresh_token": user.refresh_token},
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        if r.status_code >= 400:
            raise AuthError(_auth_code(r))
        data = r.json()
        return AuthUser(
            uid=data.get("user_id", user.uid),
            email=user.email,
            id_token=data.get("id_token"),
            refresh_token=data.get("refresh_token", user.refresh_token),
            expires_at=utcnow() + timedelta(seconds=int(data.get("expires_in", 3600))),
            display_name=user.display_name,
        )
