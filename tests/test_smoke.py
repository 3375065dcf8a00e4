# tests/test_smoke.py
"""
Testes de sanidade estrutural (smoke tests) do Spaceflow.

Este módulo garante apenas que:
- o pacote pode ser importado
- o pytest consegue descobrir e executar testes
- os defaults embarcados permitem construir um GraphStore

Limites explícitos:
    - Não testar lógica de validação, invalidação ou execução
    - Não evoluir para testes unitários ou de integração
"""


def test_smoke():
    """Sentinela mínima: o pacote importa e expõe a API pública."""
    import spaceflow

    assert hasattr(spaceflow, "GraphStore")
    assert hasattr(spaceflow, "FlowRunner")


def test_store_builds_from_packaged_defaults():
    from spaceflow import GraphStore

    store = GraphStore()
    assert store.modules == []
    assert "reader-engine" in store.catalog
