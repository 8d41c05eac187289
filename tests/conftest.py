import os

# Le lifespan ne tente pas de joindre Redis pendant les tests
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import pytest
from typing import Any, Dict, Generator, List, Optional
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from vault.app import app as fastapi_app
from vault.payments import gateway as payments_gateway
from vault.utils.security import require_user, require_admin

BUYER_ID = "user456"

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

@pytest.fixture
def admin_client(app, client):
    def _override_require_admin():
        return {"id": "admin-user-id", "role": "admin", "email": "admin@example.com"}
    app.dependency_overrides[require_admin] = _override_require_admin
    try:
        yield client
    finally:
        app.dependency_overrides.pop(require_admin, None)

# Simuler un acheteur authentifié pour les endpoints protégés
@pytest.fixture(autouse=True)
def _override_require_user(app):
    fake_user: Dict[str, Any] = {
        "id": BUYER_ID,
        "email": "buyer@example.com",
        "role": "user",
        "metadata": {},
        "token": "fake-token",
    }
    app.dependency_overrides[require_user] = lambda: fake_user
    try:
        yield
    finally:
        app.dependency_overrides.pop(require_user, None)

# Aucun test ne doit joindre Supabase
@pytest.fixture(autouse=True)
def mock_db_dependency(monkeypatch):
    monkeypatch.setattr("vault.infra.supabase_client.get_supabase", lambda: MagicMock())
    monkeypatch.setattr("vault.infra.supabase_client.get_service_supabase", lambda: MagicMock())


class FakeBinding:
    """Binding SDK factice: enregistre les appels, renvoie ou lève ce qu'on lui indique."""

    name = "fake"

    def __init__(self):
        self.client_token: Optional[str] = "fake-client-token"
        self.token_error: Optional[BaseException] = None
        self.sale_result: Any = {"success": True, "transaction": {"id": "tx_1", "status": "submitted_for_settlement"}}
        self.sale_error: Optional[BaseException] = None
        self.sales: List[tuple] = []

    def generate_client_token(self):
        if self.token_error is not None:
            raise self.token_error
        return self.client_token

    def sale(self, amount, nonce):
        self.sales.append((amount, nonce))
        if self.sale_error is not None:
            raise self.sale_error
        return self.sale_result


# Aucun test ne doit joindre la passerelle de paiement
@pytest.fixture(autouse=True)
def fake_binding(monkeypatch) -> FakeBinding:
    binding = FakeBinding()
    monkeypatch.setattr(payments_gateway, "_gateway", payments_gateway.PaymentGateway(binding))
    return binding


class FakeOrdersStore:
    def __init__(self):
        self.rows: List[Dict[str, Any]] = []
        self.insert_error: Optional[BaseException] = None

    def insert_order(self, document):
        if self.insert_error is not None:
            raise self.insert_error
        row = dict(document, id=f"order-{len(self.rows) + 1}")
        self.rows.append(row)
        return row

    def find_order_by_idempotency_key(self, buyer, idempotency_key):
        for row in self.rows:
            if row.get("buyer") == buyer and row.get("idempotency_key") == idempotency_key:
                return row
        return None


@pytest.fixture(autouse=True)
def orders_store(monkeypatch) -> FakeOrdersStore:
    store = FakeOrdersStore()
    monkeypatch.setattr("vault.orders.repository.insert_order", store.insert_order)
    monkeypatch.setattr("vault.orders.repository.find_order_by_idempotency_key", store.find_order_by_idempotency_key)
    return store
