# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from streetfood_connect.database.session import create_database_engine
from streetfood_connect.gateway.local_gateway import LocalGateway
from streetfood_connect.main import create_app

PASSWORD = "secret123"


@pytest.fixture
def gateway():
    # fresh in-memory store per test; bcrypt's minimum cost keeps hashing fast
    gw = LocalGateway(engine=create_database_engine("sqlite://"), bcrypt_rounds=4)
    yield gw
    gw.close()


@pytest.fixture
def client(gateway):
    app = create_app(gateway=gateway)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register(client):
    def _register(role: str, email: str, name: str, **extra):
        payload = {
            "name": name,
            "email": email,
            "password": PASSWORD,
            "confirmPassword": PASSWORD,
            "role": role,
            **extra,
        }
        return client.post("/register", json=payload)

    return _register


@pytest.fixture
def login(client):
    def _login(email: str, role: str, password: str = PASSWORD):
        return client.post("/login", json={"email": email, "password": password, "role": role})

    return _login


@pytest.fixture
def make_profile(gateway):
    def _make(uid: str, **fields):
        gateway.create_user_profile(uid, {"uid": uid, **fields})
        return {"id": uid, "uid": uid, **fields}

    return _make
