# tests/core/engine/test_store_connections.py
"""
Testes de conexões no GraphStore: flag `connected` e deleção.

Invariantes:
    - `connected` é verdadeiro sse alguma conexão referencia a porta
    - Deletar uma conexão nunca invalida módulos
    - Deletar uma conexão inexistente é no-op
"""

import pytest

try:
    from spaceflow.core.graph.types import Connection, ModuleStatus
except Exception as e:  # noqa: BLE001
    Connection = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing src/spaceflow/core/engine/store.py. Import error: {_IMPORT_ERR}")


def test_connected_flags_follow_connections(store, add_done):
    _require_imports()
    a = add_done(store, "source")
    b = store.add_module("relay")

    conn = store.add_connection(a.id, "out-1", b.id, "in-1")

    assert a.output_port("out-1").connected
    assert b.input_port("in-1").connected
    assert not b.output_port("out-1").connected

    store.delete_connection(conn.id)

    assert not a.output_port("out-1").connected
    assert not b.input_port("in-1").connected


def test_port_stays_connected_while_any_connection_remains(store, add_done):
    _require_imports()
    a = add_done(store, "source")
    b = store.add_module("relay")
    c = store.add_module("relay")
    first = store.add_connection(a.id, "out-1", b.id, "in-1")
    store.add_connection(a.id, "out-1", c.id, "in-1")

    store.delete_connection(first.id)

    assert a.output_port("out-1").connected
    assert not b.input_port("in-1").connected


def test_duplicate_connections_are_allowed(store, add_done):
    _require_imports()
    a = add_done(store, "source")
    b = store.add_module("relay")

    first = store.add_connection(a.id, "out-1", b.id, "in-1")
    second = store.add_connection(a.id, "out-1", b.id, "in-1")

    assert isinstance(second, Connection)
    assert first.id != second.id
    assert len(store.connections) == 2


def test_delete_connection_does_not_invalidate(chain):
    _require_imports()
    store, (a, b, c) = chain
    conn = store.connections[0]

    store.delete_connection(conn.id)

    assert [m.status for m in store.modules] == [ModuleStatus.DONE] * 3


def test_delete_unknown_connection_is_noop(chain):
    _require_imports()
    store, _ = chain
    before = store.snapshot()

    store.delete_connection("conn-ghost")

    assert store.snapshot() == before


def test_connection_events_are_logged(store, add_done):
    _require_imports()
    a = add_done(store, "source")
    b = store.add_module("relay")
    conn = store.add_connection(a.id, "out-1", b.id, "in-1")
    store.delete_connection(conn.id)

    assert [e.details["connection_id"] for e in store.log.of_event("connection_added")] == [conn.id]
    assert [e.details["connection_id"] for e in store.log.of_event("connection_deleted")] == [conn.id]
