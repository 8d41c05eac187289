from unittest.mock import MagicMock

import pytest

from vault.orders.repository import (
    fetch_all_orders,
    fetch_buyer_orders,
    get_order_by_id,
    insert_order,
    update_order_status,
)


def _client_returning(data):
    client = MagicMock()
    # Toute chaîne table().insert()/select()...execute() renvoie le même résultat
    query = client.table.return_value
    for name in ("insert", "select", "update", "eq", "order", "limit"):
        getattr(query, name).return_value = query
    query.execute.return_value = MagicMock(data=data)
    return client

def _use_client(monkeypatch, client):
    monkeypatch.setattr("vault.infra.supabase_client.get_service_supabase", lambda: client)

def test_insert_order_returns_created_row(monkeypatch):
    client = _client_returning([{"id": "o1", "buyer": "user456"}])
    _use_client(monkeypatch, client)

    row = insert_order({"buyer": "user456"})

    assert row == {"id": "o1", "buyer": "user456"}
    client.table.assert_called_with("orders")
    client.table.return_value.insert.assert_called_once_with({"buyer": "user456"})

def test_insert_order_without_row_raises(monkeypatch):
    _use_client(monkeypatch, _client_returning([]))
    with pytest.raises(RuntimeError):
        insert_order({"buyer": "user456"})

def test_insert_order_propagates_store_errors(monkeypatch):
    client = _client_returning([])
    client.table.return_value.execute.side_effect = ConnectionError("postgrest down")
    _use_client(monkeypatch, client)
    with pytest.raises(ConnectionError):
        insert_order({"buyer": "user456"})

def test_fetch_orders_return_empty_list_on_error(monkeypatch):
    client = _client_returning([])
    client.table.return_value.execute.side_effect = ConnectionError("postgrest down")
    _use_client(monkeypatch, client)

    assert fetch_buyer_orders("user456") == []
    assert fetch_all_orders() == []
    assert get_order_by_id("o1") is None
    assert update_order_status("o1", "Processing", "2024-01-01T00:00:00+00:00") is None

def test_fetch_buyer_orders_without_buyer(monkeypatch):
    client = _client_returning([{"id": "o1"}])
    _use_client(monkeypatch, client)
    assert fetch_buyer_orders("") == []
    client.table.assert_not_called()

def test_get_order_by_id_found(monkeypatch):
    _use_client(monkeypatch, _client_returning([{"id": "o1", "status": "Shipped"}]))
    assert get_order_by_id("o1") == {"id": "o1", "status": "Shipped"}
