import pytest

from storefront.errors import StorageWriteError

from .conftest import html_body


def _purchase(client, **body):
    payload = {"email": "ann@example.com", "priceFormatted": "3900"}
    payload.update(body)
    return client.post("/purchase", json=payload)


def _orders(client, email="ann@example.com"):
    return client.get("/orders", query_string={"email": email}).get_json()


# ---------- purchase ----------

def test_purchase_records_order_and_sends_confirmation(client, transport):
    r = _purchase(client, cart=[{"name": "Phone", "qty": 2, "price": 5}])

    assert r.status_code == 200
    assert r.get_json() == {"success": True, "message": "Confirmation sent to your email!"}

    (order,) = _orders(client)
    assert order["status"] == "Active"
    assert order["total"] == "3900"
    assert len(order["items"]) == 1
    assert order["items"][0] == {"name": "Phone", "qty": 2, "price": 5}

    (msg,) = transport.sent
    assert msg["To"] == "ann@example.com"
    assert "3900֏" in html_body(msg)
    assert f"#{order['id']}" in html_body(msg)


def test_purchase_legacy_single_product(client, transport):
    r = _purchase(client, productName="Headphones", priceFormatted="$99")
    assert r.status_code == 200

    (order,) = _orders(client)
    assert order["items"] == []
    assert order["productName"] == "Headphones"
    assert "You have successfully bought: <b>Headphones</b>" in html_body(transport.sent[0])


def test_purchase_requires_email(client, transport):
    r = client.post("/purchase", json={"priceFormatted": "1"})
    assert r.status_code == 400
    assert r.get_json()["success"] is False
    assert r.get_json()["message"] == "Email is required"
    assert transport.sent == []


def test_purchase_notification_failure_fails_request_but_keeps_order(client, transport):
    transport.fail = RuntimeError("smtp down")

    r = _purchase(client, cart=[{"name": "Phone", "qty": 1, "price": 5}])

    assert r.status_code == 500
    assert r.get_json()["success"] is False
    assert r.get_json()["message"] == "Error sending purchase confirmation: smtp down"
    # the order was recorded before the email was attempted
    (order,) = _orders(client)
    assert order["status"] == "Active"


def test_purchase_without_mail_credentials(app_config, transport):
    from storefront import create_app

    app = create_app({**app_config, "GOOGLE_REFRESH_TOKEN": ""}, mail_transport=transport)
    r = app.test_client().post("/purchase", json={"email": "ann@example.com", "priceFormatted": "1"})

    assert r.status_code == 500
    assert r.get_json()["message"] == (
        "Error sending purchase confirmation: Missing Google OAuth credentials in Environment Variables"
    )
    assert transport.sent == []


def test_purchase_persist_failure_does_not_change_response(client, services, transport, monkeypatch):
    def broken_save(name, records):
        raise StorageWriteError("Failed to save orders")

    monkeypatch.setattr(services.store, "save", broken_save)

    r = _purchase(client)
    assert r.status_code == 200
    assert r.get_json()["success"] is True
    assert len(transport.sent) == 1
    monkeypatch.undo()
    assert _orders(client) == []


# ---------- listing ----------

def test_orders_requires_email(client):
    r = client.get("/orders")
    assert r.status_code == 400
    assert r.get_json()["error"] == "Email parameter required"


def test_orders_newest_first_and_owner_only(client):
    _purchase(client, priceFormatted="1")
    _purchase(client, email="bob@example.com", priceFormatted="2")
    _purchase(client, priceFormatted="3")

    mine = _orders(client)
    assert [o["total"] for o in mine] == ["3", "1"]
    assert {o["email"] for o in mine} == {"ann@example.com"}

    everyone = client.get("/admin/orders").get_json()
    assert [o["total"] for o in everyone] == ["3", "2", "1"]


def test_orders_empty_before_first_purchase(client):
    assert _orders(client) == []
    assert client.get("/admin/orders").get_json() == []


def test_corrupt_orders_file_is_500(client, app):
    with open(app.config["DATA_DIR"] + "/orders.json", "w") as fh:
        fh.write("{oops")

    r = client.get("/admin/orders")
    assert r.status_code == 500
    assert r.get_json()["error"] == "Failed to parse orders"
    assert client.get("/orders", query_string={"email": "ann@example.com"}).status_code == 500


# ---------- owner cancellation ----------

@pytest.fixture
def order_id(client, transport):
    _purchase(client, cart=[{"name": "Phone", "qty": 2, "price": 5}])
    transport.sent.clear()
    return _orders(client)[0]["id"]


def test_owner_cancel(client, transport, order_id):
    r = client.post("/cancel-order", json={"orderId": order_id, "email": "ann@example.com"})

    assert r.status_code == 200
    assert r.get_json() == {"success": True, "message": "Order cancelled and email sent"}
    assert _orders(client)[0]["status"] == "Cancelled"
    (msg,) = transport.sent
    assert msg["Subject"] == f"Order Cancelled - #{order_id}"
    assert msg["To"] == "ann@example.com"


def test_owner_cancel_twice_rejected(client, order_id):
    client.post("/cancel-order", json={"orderId": order_id, "email": "ann@example.com"})
    r = client.post("/cancel-order", json={"orderId": order_id, "email": "ann@example.com"})

    assert r.status_code == 400
    assert r.get_json()["message"] == "Order is already cancelled"
    assert _orders(client)[0]["status"] == "Cancelled"


def test_owner_cancel_wrong_email_is_not_found(client, transport, order_id):
    r = client.post("/cancel-order", json={"orderId": order_id, "email": "bob@example.com"})

    assert r.status_code == 404
    assert r.get_json()["message"] == "Order not found"
    assert _orders(client)[0]["status"] == "Active"
    assert transport.sent == []


def test_owner_cancel_missing_fields(client):
    r = client.post("/cancel-order", json={"orderId": "1"})
    assert r.status_code == 400
    assert r.get_json()["message"] == "Missing orderId or email"


def test_owner_cancel_email_failure_still_succeeds(client, transport, order_id):
    transport.fail = RuntimeError("smtp down")

    r = client.post("/cancel-order", json={"orderId": order_id, "email": "ann@example.com"})

    assert r.status_code == 200
    assert r.get_json() == {"success": True, "message": "Order cancelled (Email failed)"}
    assert _orders(client)[0]["status"] == "Cancelled"


def test_owner_cancel_accepts_numeric_order_id(client, order_id):
    r = client.post("/cancel-order", json={"orderId": int(order_id), "email": "ann@example.com"})
    assert r.status_code == 200


# ---------- admin cancellation ----------

def test_admin_cancel_notifies_owner(client, transport, order_id):
    r = client.post("/admin/cancel-order", json={"orderId": order_id})

    assert r.status_code == 200
    assert r.get_json() == {"success": True, "message": "Order cancelled by Admin"}
    (msg,) = transport.sent
    assert msg["To"] == "ann@example.com"
    assert msg["Subject"] == f"Order Cancelled by Admin - #{order_id}"
    assert "cancelled by the administrator" in html_body(msg)


def test_admin_cancel_unknown_order(client):
    r = client.post("/admin/cancel-order", json={"orderId": "nope"})
    assert r.status_code == 404


def test_admin_cancel_missing_order_id(client):
    r = client.post("/admin/cancel-order", json={})
    assert r.status_code == 400
    assert r.get_json()["message"] == "Missing orderId"


def test_admin_cancel_already_cancelled(client, order_id):
    client.post("/cancel-order", json={"orderId": order_id, "email": "ann@example.com"})
    r = client.post("/admin/cancel-order", json={"orderId": order_id})
    assert r.status_code == 400
    assert r.get_json()["message"] == "Order is already cancelled"


def test_admin_cancel_email_failure_still_succeeds(client, transport, order_id):
    transport.fail = RuntimeError("smtp down")

    r = client.post("/admin/cancel-order", json={"orderId": order_id})

    assert r.status_code == 200
    assert r.get_json()["message"] == "Order cancelled (Email failed)"
    assert client.get("/admin/orders").get_json()[0]["status"] == "Cancelled"


# ---------- malformed input ----------

def test_purchase_with_unusable_prices_still_confirms(client, transport):
    cart = [
        {"name": "A", "qty": 1, "price": "Infinity"},
        {"name": "B", "qty": 1, "price": "sNaN"},
        {"name": "C", "qty": 2, "price": 5},
    ]
    r = _purchase(client, cart=cart)

    assert r.status_code == 200
    assert r.get_json()["success"] is True
    assert "3900֏" in html_body(transport.sent[0])
    assert len(_orders(client)[0]["items"]) == 3


def test_stored_order_with_unknown_status_is_500(client, app):
    with open(app.config["DATA_DIR"] + "/orders.json", "w") as fh:
        fh.write('[{"id": "1", "email": "ann@example.com", "status": "Pending"}]')

    r = client.get("/admin/orders")
    assert r.status_code == 500
    assert r.get_json() == {"success": False, "error": "Failed to parse orders", "message": "Failed to parse orders"}
    assert client.get("/orders", query_string={"email": "ann@example.com"}).status_code == 500


@pytest.mark.parametrize("path", ["/purchase", "/cancel-order", "/admin/cancel-order"])
def test_array_body_is_rejected_like_missing_fields(client, transport, path):
    r = client.post(path, json=[1])
    assert r.status_code == 400
    assert r.get_json()["success"] is False
    assert transport.sent == []
