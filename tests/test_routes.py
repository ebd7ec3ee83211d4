# tests/test_routes.py
import pytest

from streetfood_connect.gateway.errors import GatewayError


def _location(resp):
    return resp.headers["location"]


def test_health(client):
    body = client.get("/health").json()
    assert body["status"] == "healthy"
    assert body["gateway_status"] == "connected"


def test_anonymous_is_sent_to_login(client):
    for path in ("/", "/vendor", "/vendor/orders", "/supplier/analytics", "/profile"):
        resp = client.get(path, follow_redirects=False)
        assert resp.status_code == 303, path
        assert _location(resp) == "/login"


def test_register_then_route_by_role(client, register):
    resp = register("vendor", "raju@demo.in", "Raju")
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Registration successful! Welcome to StreetFood Connect."
    assert body["role"] == "vendor"
    assert body["redirect"] == "/vendor"
    assert "password" not in body["user"]

    assert _location(client.get("/", follow_redirects=False)) == "/vendor"
    assert _location(client.get("/login", follow_redirects=False)) == "/"
    assert _location(client.get("/register", follow_redirects=False)) == "/"

    # wrong role: back to the root
    resp = client.get("/supplier/orders", follow_redirects=False)
    assert resp.status_code == 303
    assert _location(resp) == "/"

    assert client.get("/vendor").json()["totalOrders"] == 0


def test_role_mismatch_forces_sign_out(client, register, login):
    register("vendor", "raju@demo.in", "Raju")
    assert client.post("/logout").json()["message"] == "Logged out successfully"

    resp = login("raju@demo.in", "supplier")

    assert resp.status_code == 401
    assert resp.json()["error"] == {"code": "ROLE_MISMATCH", "message": "Invalid role selected for this account"}
    assert _location(client.get("/vendor", follow_redirects=False)) == "/login"

    resp = login("raju@demo.in", "vendor")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Welcome back, Raju!"


def test_login_messages(client, register, login):
    register("vendor", "raju@demo.in", "Raju")
    client.post("/logout")

    assert login("nobody@demo.in", "vendor").json()["error"]["message"] == "No account found with this email."
    assert login("raju@demo.in", "vendor", "bad-pass").json()["error"]["message"] == "Incorrect password."


def test_register_validation(client, register):
    resp = client.post("/register", json={
        "name": "Raju", "email": "raju@demo.in", "password": "secret123",
        "confirmPassword": "secret124", "role": "vendor",
    })
    assert resp.status_code == 422
    assert resp.json()["error"]["message"] == "Passwords do not match"

    resp = register("chef", "chef@demo.in", "Chef")
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
    assert resp.json()["error"]["details"]["errors"][0]["field"].endswith("role")

    assert register("vendor", "raju@demo.in", "Raju").status_code == 201
    client.post("/logout")
    resp = register("vendor", "raju@demo.in", "Raju again")
    assert resp.json()["error"]["message"] == "An account with this email already exists."


def test_profile_update(client, register):
    register("vendor", "raju@demo.in", "Raju")
    resp = client.patch("/profile", json={"location": "Chandni Chowk, Delhi"})
    assert resp.json()["message"] == "Profile updated successfully"
    assert client.get("/profile").json()["location"] == "Chandni Chowk, Delhi"


@pytest.fixture
def supplier_id(client, register):
    resp = register(
        "supplier", "fresh@demo.in", "Fresh Farms",
        location="Azadpur, Delhi", businessType="Wholesaler", specialties=["Vegetables"],
    )
    uid = resp.json()["user"]["id"]
    item = client.post("/supplier/inventory", json={"name": "Onions", "quantity": 500, "unit": "kg", "price": 32})
    assert item.status_code == 201
    client.post("/logout")
    return uid


def test_vendor_search_and_compare(client, register, supplier_id):
    register("vendor", "raju@demo.in", "Raju")

    search = client.get("/vendor/search").json()
    assert [s["id"] for s in search["suppliers"]] == [supplier_id]
    assert "Vegetables" in search["categories"]

    filtered = client.put("/vendor/search/filters", json={"minRating": 4, "freeText": "fresh"}).json()
    assert filtered["suppliers"] == []
    assert filtered["filters"]["freeText"] == "fresh"

    # filters survive across requests
    assert client.get("/vendor/search").json()["suppliers"] == []

    reset = client.post("/vendor/search/reset").json()
    assert [s["id"] for s in reset["suppliers"]] == [supplier_id]
    assert reset["filters"] == {"category": "", "location": "", "minRating": 0, "verifiedOnly": False, "freeText": ""}

    added = client.post(f"/vendor/compare/{supplier_id}").json()
    assert added["added"] is True
    again = client.post(f"/vendor/compare/{supplier_id}").json()
    assert again["added"] is False
    assert again["compare"]["size"] == 1

    assert client.post("/vendor/compare/nobody").status_code == 404
    assert client.delete(f"/vendor/compare/{supplier_id}").json()["compare"]["size"] == 0


def test_order_lifecycle_end_to_end(client, register, login, supplier_id):
    register("vendor", "raju@demo.in", "Raju")

    resp = client.post("/vendor/orders", json={
        "supplierId": supplier_id,
        "materials": [
            {"materialName": "Onions", "quantity": 10, "unit": "kg", "unitPrice": 32},
            {"materialName": "Garlic", "quantity": 2, "unit": "kg", "unitPrice": 150},
        ],
    })
    assert resp.status_code == 201
    order = resp.json()["order"]
    assert order["status"] == "pending"
    assert order["statusLabel"] == "Pending"
    assert order["paymentStatus"] == "pending"
    assert order["totalAmount"] == 620
    assert [m["total"] for m in order["materials"]] == [320, 300]

    review = client.post(f"/vendor/suppliers/{supplier_id}/reviews", json={"rating": 4, "comment": "Good onions"})
    assert review.status_code == 201
    assert client.get(f"/vendor/suppliers/{supplier_id}/reviews").json()[0]["comment"] == "Good onions"
    assert client.post(f"/vendor/suppliers/{supplier_id}/reviews", json={"rating": 6}).status_code == 422

    detail = client.get(f"/vendor/suppliers/{supplier_id}").json()
    assert detail["supplier"]["name"] == "Fresh Farms"
    assert [i["name"] for i in detail["inventory"]] == ["Onions"]

    assert [o["id"] for o in client.get("/vendor/orders").json()] == [order["id"]]
    client.post("/logout")

    assert login("fresh@demo.in", "supplier").status_code == 200
    incoming = client.get("/supplier/orders").json()
    assert [o["id"] for o in incoming] == [order["id"]]

    accepted = client.post(f"/supplier/orders/{order['id']}/accept").json()
    assert accepted["message"] == "Order accepted successfully"
    assert accepted["order"]["status"] == "confirmed"

    resp = client.put(f"/supplier/orders/{order['id']}/status", json={"status": "delivered"})
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"

    resp = client.put(f"/supplier/orders/{order['id']}/status", json={"status": "in_transit"})
    assert resp.json()["order"]["statusLabel"] == "In Transit"

    # persisted, not just echoed back
    assert client.get("/supplier/orders").json()[0]["status"] == "in_transit"

    analytics = client.get("/supplier/analytics").json()
    assert analytics["totalRevenue"] == 620
    assert analytics["averageOrderValue"] == 620
    assert analytics["totalCustomers"] == 1
    assert analytics["topCustomers"][0]["name"] == "Raju"
    assert analytics["trends"][1]["change"] == "₹620"

    customers = client.get("/supplier/customers").json()
    assert customers[0]["name"] == "Raju"
    assert customers[0]["totalSpent"] == 620

    assert client.get("/supplier/reviews").json()[0]["rating"] == 4
    assert client.get("/supplier").json()["byStatus"]["in_transit"] == 1


def test_supplier_cannot_touch_other_suppliers_orders(client, register, login, supplier_id):
    register("vendor", "raju@demo.in", "Raju")
    order_id = client.post("/vendor/orders", json={
        "supplierId": supplier_id,
        "materials": [{"materialName": "Onions", "quantity": 1, "unitPrice": 32}],
    }).json()["order"]["id"]
    client.post("/logout")

    register("supplier", "other@demo.in", "Other Supplier")
    assert client.post(f"/supplier/orders/{order_id}/accept").status_code == 403
    assert client.post("/supplier/orders/missing/reject").status_code == 404


def test_inventory_crud(client, register):
    register("supplier", "fresh@demo.in", "Fresh Farms")
    item = client.post("/supplier/inventory", json={"name": "Tomatoes", "quantity": 100, "price": 28}).json()["item"]

    updated = client.put(f"/supplier/inventory/{item['id']}", json={"quantity": 80}).json()["item"]
    assert updated["quantity"] == 80
    assert updated["price"] == 28

    assert client.delete(f"/supplier/inventory/{item['id']}").status_code == 200
    assert client.get("/supplier/inventory").json() == []


def test_order_with_unknown_supplier(client, register):
    register("vendor", "raju@demo.in", "Raju")
    resp = client.post("/vendor/orders", json={
        "supplierId": "nobody",
        "materials": [{"materialName": "Onions", "quantity": 1, "unitPrice": 32}],
    })
    assert resp.status_code == 404


def test_gateway_failure_is_a_notification(client, register, gateway, monkeypatch):
    register("vendor", "raju@demo.in", "Raju")

    def down(field, value):
        raise GatewayError("backend unavailable")

    monkeypatch.setattr(gateway, "get_orders_where", down)
    resp = client.get("/vendor/orders")

    assert resp.status_code == 503
    assert resp.json()["error"] == {"code": "GATEWAY_UNAVAILABLE", "message": "Failed to load orders"}


def test_failed_sign_ins_and_logout_leave_no_sessions(client, register, login):
    sessions = client.app.state.sessions

    for _ in range(5):
        assert login("nobody@demo.in", "vendor").status_code == 401
    mismatch = client.post("/register", json={
        "name": "Raju", "email": "raju@demo.in", "password": "secret123",
        "confirmPassword": "secret124", "role": "vendor",
    })
    assert mismatch.status_code == 422
    assert len(sessions) == 0
    assert client.cookies.get("session") is None

    register("vendor", "raju@demo.in", "Raju")
    assert len(sessions) == 1

    resp = client.post("/logout")
    assert resp.json()["state"] == "anonymous"
    assert len(sessions) == 0
    assert client.cookies.get("session") is None
    assert _location(client.get("/vendor", follow_redirects=False)) == "/login"
