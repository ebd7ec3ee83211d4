# streetfood_connect/gateway/local_gateway.py
"""
Local gateway: the document database and the account store on top of
SQLAlchemy. Used for development, demo data and tests.
"""

import logging
import secrets
import uuid
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from email_validator import EmailNotValidError, validate_email
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from streetfood_connect.config import settings
from streetfood_connect.database.session import create_database_engine, create_session_factory, init_database
from streetfood_connect.models import Account, Document

from .base import AuthUser, Gateway, Record, utcnow
from .errors import AuthError, GatewayError

logger = logging.getLogger(__name__)

TOKEN_TTL = timedelta(hours=1)
MIN_PASSWORD_LENGTH = 6
_DATE_TAG = "$date"


def _dump(value: Any) -> Any:
    """JSON-safe copy of a document value; datetimes are tagged."""
    if isinstance(value, datetime):
        return {_DATE_TAG: value.isoformat()}
    if isinstance(value, dict):
        return {k: _dump(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_dump(v) for v in value]
    return value


def _load(value: Any) -> Any:
    if isinstance(value, dict):
        if set(value) == {_DATE_TAG}:
            return datetime.fromisoformat(value[_DATE_TAG])
        return {k: _load(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_load(v) for v in value]
    return value


def _to_record(doc: Document) -> Record:
    return {"id": doc.id, **_load(doc.data or {})}


def _normalize_email(email: str) -> str:
    try:
        return validate_email(email or "", check_deliverability=False).normalized.lower()
    except EmailNotValidError:
        raise AuthError(AuthError.INVALID_EMAIL) from None


def _json_equals(field: str, value: Any):
    """SQL predicate `data[field] == value`, or None for values without a JSON scalar form."""
    element = Document.data[field]
    if isinstance(value, bool):
        return element.as_boolean() == value
    if isinstance(value, int):
        return element.as_integer() == value
    if isinstance(value, float):
        return element.as_float() == value
    if isinstance(value, str):
        return element.as_string() == value
    return None


class LocalGateway(Gateway):

    def __init__(self, engine=None, bcrypt_rounds: Optional[int] = None):
        super().__init__()
        self.engine = engine or create_database_engine()
        self.SessionLocal = create_session_factory(self.engine)
        init_database(self.engine)
        self._pwd = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=bcrypt_rounds or settings.BCRYPT_ROUNDS,
        )

    @contextmanager
    def _session(self):
        db = self.SessionLocal()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Local store error: {e}")
            raise GatewayError(f"Local store error: {e.__class__.__name__}") from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def close(self) -> None:
        super().close()
        self.engine.dispose()

    # ---------- records ----------
    def get_record(self, collection: str, record_id: str) -> Optional[Record]:
        with self._session() as db:
            doc = db.get(Document, (collection, record_id))
            return _to_record(doc) if doc else None

    def get_records_by_ids(self, collection: str, ids: Iterable[str]) -> Dict[str, Optional[Record]]:
        wanted = list(dict.fromkeys(ids))
        if not wanted:
            return {}
        with self._session() as db:
            docs = db.scalars(
                select(Document).where(Document.collection == collection, Document.id.in_(wanted))
            ).all()
            found = {d.id: _to_record(d) for d in docs}
        return {i: found.get(i) for i in wanted}

    def get_records_where(
        self,
        collection: str,
        field: str,
        value: Any,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Record]:
        query = select(Document).where(Document.collection == collection)
        predicate = _json_equals(field, value)
        if predicate is not None:
            query = query.where(predicate)
        with self._session() as db:
            docs = db.scalars(query.order_by(Document.created_at)).all()
            records = [_to_record(d) for d in docs]

        # SQL narrows the scan; Python equality has the final say
        matches = [r for r in records if r.get(field) == value]
        if order_by:
            # documents without the ordering field drop out of ordered queries
            matches = [r for r in matches if r.get(order_by) is not None]
            matches.sort(key=lambda r: r[order_by], reverse=descending)
        return matches

    def set_record(self, collection: str, record_id: str, data: Record) -> None:
        with self._session() as db:
            doc = db.get(Document, (collection, record_id))
            if doc is None:
                db.add(Document(collection=collection, id=record_id, data=_dump(data)))
            else:
                doc.data = _dump(data)
        self._notify(collection)

    def create_record(self, collection: str, data: Record) -> str:
        record_id = uuid.uuid4().hex[:20]
        with self._session() as db:
            db.add(Document(collection=collection, id=record_id, data=_dump(data)))
        self._notify(collection)
        return record_id

    def update_record(self, collection: str, record_id: str, updates: Record) -> None:
        with self._session() as db:
            doc = db.get(Document, (collection, record_id))
            if doc is None:
                raise GatewayError(f"No document to update: {collection}/{record_id}", code="not-found", status_code=404)
            # reassign so the JSON column is flagged dirty
            doc.data = {**(doc.data or {}), **_dump(updates)}
        self._notify(collection)

    def delete_record(self, collection: str, record_id: str) -> None:
        with self._session() as db:
            doc = db.get(Document, (collection, record_id))
            if doc is not None:
                db.delete(doc)
        self._notify(collection)

    # ---------- accounts ----------
    def _issue(self, account: Account) -> AuthUser:
        return AuthUser(
            uid=account.uid,
            email=account.email,
            id_token=secrets.token_urlsafe(32),
            refresh_token=secrets.token_urlsafe(32),
            expires_at=utcnow() + TOKEN_TTL,
            display_name=account.display_name,
        )

    def authenticate(self, email: str, password: str) -> AuthUser:
        email = _normalize_email(email)
        with self._session() as db:
            account = db.scalars(select(Account).where(Account.email == email)).first()
            if account is None:
                raise AuthError(AuthError.USER_NOT_FOUND)
            if account.disabled:
                raise AuthError(AuthError.USER_DISABLED)
            if not self._pwd.verify(password or "", account.password_hash):
                raise AuthError(AuthError.WRONG_PASSWORD)
            return self._issue(account)

    def create_account(self, email: str, password: str, display_name: Optional[str] = None) -> AuthUser:
        email = _normalize_email(email)
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise AuthError(AuthError.WEAK_PASSWORD)
        with self._session() as db:
            if db.scalars(select(Account).where(Account.email == email)).first() is not None:
                raise AuthError(AuthError.EMAIL_IN_USE)
            account = Account(
                uid=uuid.uuid4().hex[:28],
                email=email,
                password_hash=self._pwd.hash(password),
                display_name=display_name,
            )
            db.add(account)
            db.flush()
            user = self._issue(account)
        logger.info(f"Created account {user.uid}")
        return user

    def refresh(self, user: AuthUser) -> AuthUser:
        with self._session() as db:
            account = db.get(Account, user.uid)
            if account is None:
                raise AuthError(AuthError.USER_NOT_FOUND)
            if account.disabled:
                raise AuthError(AuthError.USER_DISABLED)
            return self._issue(account)
