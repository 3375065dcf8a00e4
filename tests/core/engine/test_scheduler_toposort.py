# tests/core/engine/test_scheduler_toposort.py
"""
Testes da ordenação topológica do scheduler.

Este módulo valida que o scheduler:
- respeita todas as arestas (origem sempre antes do destino)
- produz ordem dependente apenas das arestas, não da inserção, quando
  o grafo é uma cadeia
- desempata módulos independentes pela ordem de inserção (FIFO)

Invariantes:
    - Todos os módulos aparecem exatamente uma vez
    - A saída é determinística para o mesmo grafo
"""

import pytest

try:
    from spaceflow.core.engine.scheduler import plan_execution
    from spaceflow.core.graph.types import Connection, DataType
except Exception as e:  # noqa: BLE001
    plan_execution = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing src/spaceflow/core/engine/scheduler.py. Import error: {_IMPORT_ERR}")


def _edge(src, dst):
    return Connection(
        id=f"{src}-{dst}",
        source_module_id=src,
        source_port_id="out-1",
        target_module_id=dst,
        target_port_id="in-1",
        data_type=DataType.JSON,
    )


def test_chain_order_ignores_insertion_order():
    """
    Cenário: cadeia A → B → C → D com módulos inseridos como [D, B, A, C].

    A saída deve ser [A, B, C, D].
    """
    _require_imports()
    conns = [_edge("A", "B"), _edge("B", "C"), _edge("C", "D")]
    assert plan_execution(["D", "B", "A", "C"], conns) == ["A", "B", "C", "D"]


def test_independent_modules_keep_insertion_order():
    _require_imports()
    assert plan_execution(["x", "y", "z"], []) == ["x", "y", "z"]


def test_diamond_respects_every_edge():
    _require_imports()
    conns = [_edge("a", "b"), _edge("a", "c"), _edge("b", "d"), _edge("c", "d")]
    order = plan_execution(["d", "c", "b", "a"], conns)

    assert sorted(order) == ["a", "b", "c", "d"]
    for c in conns:
        assert order.index(c.source_module_id) < order.index(c.target_module_id)


def test_duplicate_connections_do_not_break_ordering():
    _require_imports()
    conns = [_edge("a", "b"), _edge("a", "b")]
    assert plan_execution(["b", "a"], conns) == ["a", "b"]


def test_store_execution_order_is_topological(chain):
    """Propriedade: para toda conexão (a, b) do store, index(a) < index(b)."""
    _require_imports()
    store, (a, b, c) = chain
    order = store.execution_order()

    assert order == [a.id, b.id, c.id]
    for conn in store.connections:
        assert order.index(conn.source_module_id) < order.index(conn.target_module_id)
