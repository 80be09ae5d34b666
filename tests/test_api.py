"""HTTP tests for the verification and admin routes"""

import pytest
from fastapi.testclient import TestClient

from api.exceptions import StorageUnavailable
from api.storage import InMemoryInvoiceStore
from main import create_app

ADMIN_KEY = "s3cr3t"

NEW_INVOICE = {
    "invoice_number": "INV-001",
    "bank_name": "First Bank",
    "bank_account_number": "12345",
    "beneficiary_name": "ACME Ltd",
}


# ============================================================================
# Verification
# ============================================================================

class TestVerify:

    def test_missing_invoice_parameter(self, client):
        response = client.get("/verify")

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "REQUEST_1000"

    def test_invalid_format(self, client, store):
        response = client.get("/verify", params={"invoice": "<script>alert(1)</script>"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "REQUEST_1001"
        assert store.list_logs(10) == []

    def test_not_found_is_logged(self, client, store):
        response = client.get("/verify", params={"invoice": "INV-404"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data == {"found": False, "invoice_number": "INV-404"}
        assert store.list_logs(10)[0].invoice_number == "INV-404"

    def test_found(self, client, store):
        store.create("INV-001", "First Bank", "12345", "ACME Ltd")

        response = client.get("/verify", params={"invoice": " INV-001 "})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["found"] is True
        assert data["invoice"] == {
            "number": "INV-001",
            "bank_name": "First Bank",
            "account_number": "12345",
            "beneficiary": "ACME Ltd",
        }

    def test_forwarded_for_address_is_logged(self, client, store):
        client.get(
            "/verify",
            params={"invoice": "INV-001"},
            headers={"X-Forwarded-For": "1.2.3.4, 10.0.0.1"},
        )

        assert store.list_logs(1)[0].ip_address == "1.2.3.4"

    def test_storage_failure_is_generic(self, app_config):
        class BrokenStore(InMemoryInvoiceStore):
            def append_log(self, invoice_number, ip_address):
                raise StorageUnavailable("Database connection failed", details="host db.internal unreachable")

        with TestClient(create_app(app_config, BrokenStore())) as broken_client:
            response = broken_client.get("/verify", params={"invoice": "INV-001"})

        assert response.status_code == 503
        error = response.json()["error"]
        assert error["code"] == "SERVICE_3001"
        assert "details" not in error


# ============================================================================
# Admin gate
# ============================================================================

class TestAdminAccess:

    @pytest.mark.parametrize("params", [{}, {"key": "wrong"}, {"key": ""}])
    def test_dashboard_denied(self, client, params):
        response = client.get("/admin", params=params)

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "AUTH_4001"

    def test_dashboard(self, client, store):
        store.create("INV-001", "First Bank", "12345")
        store.append_log("INV-001", "1.2.3.4")

        response = client.get("/admin", params={"key": ADMIN_KEY})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["invoice_count"] == 1
        assert data["invoices"][0]["invoice_number"] == "INV-001"
        assert data["logs"][0]["ip_address"] == "1.2.3.4"

    def test_body_key_is_accepted(self, client, store):
        response = client.post("/admin/create", json={**NEW_INVOICE, "key": ADMIN_KEY})

        assert response.status_code == 201
        assert store.exists("INV-001")

    def test_query_key_wins_over_body_key(self, client, store):
        response = client.post("/admin/create", params={"key": "wrong"}, json={**NEW_INVOICE, "key": ADMIN_KEY})

        assert response.status_code == 403
        assert not store.exists("INV-001")

    def test_denied_before_validation(self, client):
        response = client.post("/admin/create", json={})

        assert response.status_code == 403

    def test_unconfigured_secret_denies(self, store):
        from config import AppConfig, STORE_BACKEND_MEMORY

        app = create_app(AppConfig(admin_key=None, store_backend=STORE_BACKEND_MEMORY), store)
        with TestClient(app) as unconfigured:
            assert unconfigured.get("/admin", params={"key": "anything"}).status_code == 403


# ============================================================================
# Invoice management
# ============================================================================

class TestInvoiceManagement:

    def test_create_with_json(self, client, store):
        response = client.post("/admin/create", params={"key": ADMIN_KEY}, json=NEW_INVOICE)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["invoice_number"] == "INV-001"
        assert isinstance(data["id"], int)
        assert store.get_by_number("INV-001").beneficiary_name == "ACME Ltd"

    def test_create_with_form(self, client, store):
        form = {key: value for key, value in NEW_INVOICE.items() if key != "beneficiary_name"}
        form["key"] = ADMIN_KEY

        response = client.post("/admin/create", data=form)

        assert response.status_code == 201
        assert store.get_by_number("INV-001").beneficiary_name is None

    def test_create_sanitizes_fields(self, client, store):
        payload = {**NEW_INVOICE, "bank_name": "  <b>First Bank</b> "}

        client.post("/admin/create", params={"key": ADMIN_KEY}, json=payload)

        assert store.get_by_number("INV-001").bank_name == "bFirst Bank/b"

    def test_create_duplicate(self, client, store):
        store.create("INV-001", "First Bank", "12345")

        response = client.post("/admin/create", params={"key": ADMIN_KEY}, json=NEW_INVOICE)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "DATA_2001"

    def test_create_validation_errors(self, client):
        response = client.post("/admin/create", params={"key": ADMIN_KEY}, json={"invoice_number": "bad number"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "REQUEST_1002"
        assert [f["field"] for f in error["fields"]] == ["invoice_number", "bank_name", "bank_account_number"]
        assert error["details"] == (
            "Invalid invoice number format, Bank name is required, Bank account number is required"
        )

    def test_get_invoice(self, client, store):
        created = store.create("INV-001", "First Bank", "12345")

        response = client.get(f"/admin/invoices/{created.id}", params={"key": ADMIN_KEY})

        assert response.status_code == 200
        assert response.json()["data"]["id"] == created.id

    def test_get_unknown_invoice(self, client):
        response = client.get("/admin/invoices/999", params={"key": ADMIN_KEY})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "DATA_2000"

    def test_update(self, client, store):
        created = store.create("INV-001", "First Bank", "12345")

        response = client.post(
            f"/admin/update/{created.id}",
            params={"key": ADMIN_KEY},
            json={"invoice_number": "INV-001", "bank_name": "Second Bank", "bank_account_number": "67890"},
        )

        assert response.status_code == 200
        assert store.get_by_id(created.id).bank_name == "Second Bank"

    def test_update_unknown_id(self, client):
        response = client.post("/admin/update/999", params={"key": ADMIN_KEY}, json=NEW_INVOICE)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "DATA_2000"

    def test_update_to_existing_number(self, client, store):
        store.create("INV-001", "First Bank", "12345")
        second = store.create("INV-002", "First Bank", "12345")

        response = client.post(f"/admin/update/{second.id}", params={"key": ADMIN_KEY}, json=NEW_INVOICE)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "DATA_2001"

    def test_delete(self, client, store):
        created = store.create("INV-001", "First Bank", "12345")

        response = client.post(f"/admin/delete/{created.id}", params={"key": ADMIN_KEY})

        assert response.status_code == 200
        assert response.json()["data"]["deleted"] is True
        assert store.get_by_id(created.id) is None

    def test_delete_unknown_id_is_not_an_error(self, client):
        response = client.post("/admin/delete/999", params={"key": ADMIN_KEY})

        assert response.status_code == 200
        assert response.json()["data"] == {"deleted": False, "id": 999}

    def test_logs_endpoint_clamps_limit(self, client, store):
        for i in range(3):
            store.append_log(f"INV-{i}", "1.2.3.4")

        response = client.get("/admin/logs", params={"key": ADMIN_KEY, "limit": 0})

        assert response.status_code == 200
        body = response.json()
        assert body["metadata"]["limit"] == 1
        assert body["data"][0]["invoice_number"] == "INV-2"


# ============================================================================
# Application-wide behavior
# ============================================================================

def test_security_headers(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_unknown_page(client):
    response = client.get("/nope")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "INTERNAL_5004"


def test_non_integer_id_is_rejected(client):
    response = client.post("/admin/delete/abc", params={"key": ADMIN_KEY})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "REQUEST_1002"


def test_unexpected_error_keeps_envelope_and_headers(app_config):
    class FailingStore(InMemoryInvoiceStore):
        def append_log(self, invoice_number, ip_address):
            raise RuntimeError("boom")

    app = create_app(app_config, FailingStore())
    with TestClient(app, raise_server_exceptions=False) as failing_client:
        response = failing_client.get("/verify", params={"invoice": "INV-001"})

    assert response.status_code == 500
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "INTERNAL_5000"
    assert "timestamp" in body
    assert "details" not in body["error"]


def test_method_not_allowed(client):
    response = client.put("/verify")

    assert response.status_code == 405
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    body = response.json()
    assert body["error"]["code"] == "REQUEST_1003"
    assert body["error"]["suggestion"]
    assert "timestamp" in body


# ============================================================================
# Rate limiting
# ============================================================================

class TestRateLimit:

    @pytest.fixture
    def limited_client(self, store):
        from config import AppConfig, STORE_BACKEND_MEMORY

        config = AppConfig(
            admin_key=ADMIN_KEY,
            store_backend=STORE_BACKEND_MEMORY,
            rate_limit_max=2,
            rate_limit_window_seconds=60
        )
        with TestClient(create_app(config, store)) as test_client:
            yield test_client

    def test_requests_over_the_limit_are_rejected(self, limited_client, store):
        for _ in range(2):
            assert limited_client.get("/verify", params={"invoice": "INV-001"}).status_code == 200

        response = limited_client.get("/verify", params={"invoice": "INV-001"})

        assert response.status_code == 429
        assert int(response.headers["Retry-After"]) >= 1
        assert response.headers["X-Frame-Options"] == "DENY"
        body = response.json()
        assert body["error"]["code"] == "REQUEST_1004"
        assert "timestamp" in body
        assert len(store.list_logs(10)) == 2

    def test_limit_is_per_client_address(self, limited_client):
        for _ in range(3):
            limited_client.get("/verify", params={"invoice": "INV-001"}, headers={"X-Forwarded-For": "1.2.3.4"})

        response = limited_client.get("/verify", params={"invoice": "INV-001"}, headers={"X-Forwarded-For": "5.6.7.8"})

        assert response.status_code == 200

    def test_zero_disables_limit(self, store):
        from config import AppConfig, STORE_BACKEND_MEMORY

        config = AppConfig(store_backend=STORE_BACKEND_MEMORY, rate_limit_max=0)
        with TestClient(create_app(config, store)) as unlimited:
            statuses = {unlimited.get("/health").status_code for _ in range(5)}

        assert statuses == {200}
