# tests/core/engine/test_store_space_metadata.py
"""
Testes de metadados do Space no GraphStore (`update_space`).

Os testes asseguram que:
- o nome pode ser alterado sem tocar módulos e conexões
- `configuration` é mesclada de forma rasa, preservando chaves antigas
- cada alteração atualiza `updated_at`, registra `space_updated` e notifica
- chamadas sem alteração não registram nem notificam
"""

import pytest

try:
    from spaceflow.core.engine.store import GraphStore
except Exception as e:  # noqa: BLE001
    GraphStore = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing src/spaceflow/core/engine/store.py. Import error: {_IMPORT_ERR}")


def test_update_space_merges_configuration(dummy_config):
    _require_imports()
    store = GraphStore(dummy_config, configuration={"api_key": "k1", "theme": "dark"})
    seen = []
    store.subscribe(seen.append)
    before = store.space.updated_at

    store.update_space(name="Launch", configuration={"api_key": "k2", "locale": "pt-BR"})

    assert store.space.name == "Launch"
    assert store.space.configuration == {"api_key": "k2", "theme": "dark", "locale": "pt-BR"}
    assert store.space.updated_at >= before
    assert [c["action"] for c in seen] == ["space_updated"]
    assert seen[0]["fields"] == ["name", "configuration"]

    [entry] = store.log.of_event("space_updated")
    assert entry.details["configuration_keys"] == ["api_key", "locale"]


def test_update_space_without_changes_is_silent(store):
    _require_imports()
    seen = []
    store.subscribe(seen.append)

    store.update_space()
    store.update_space(name=store.space.name, configuration={})

    assert seen == []
    assert store.log.of_event("space_updated") == []


def test_update_space_keeps_graph_and_survives_snapshot(chain, dummy_config):
    _require_imports()
    store, modules = chain
    store.update_space(configuration={"brand": "acme"})

    assert [m.id for m in store.modules] == [m.id for m in modules]
    assert len(store.connections) == 2

    other = GraphStore(dummy_config)
    other.restore(store.snapshot())
    assert other.space.configuration == {"brand": "acme"}
    assert other.space.name == "Test space"


def test_update_space_rejects_wrong_types(store):
    _require_imports()
    with pytest.raises(TypeError):
        store.update_space(name=42)
    with pytest.raises(TypeError):
        store.update_space(configuration=["not", "a", "dict"])
    assert store.space.name == "Test space"
