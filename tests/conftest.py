# tests/conftest.py
"""
Fixtures compartilhados para testes do Spaceflow.

Este módulo define fixtures reutilizáveis que fornecem:
- configurações mínimas e determinísticas (catálogo reduzido)
- um GraphStore isolado por teste
- construtores de cadeias de módulos já conectados
- executores dummy para testes do FlowRunner

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Executores dummy utilizam duck typing em vez de herança
    - Imports do core são realizados de forma lazy para
      melhorar a clareza de erros durante falhas

Invariantes:
    - Nenhuma fixture realiza I/O
    - Nenhuma fixture contém lógica de domínio
    - Cada teste recebe um Space novo e vazio

Este módulo existe como infraestrutura de teste e não
como validação funcional do engine.
"""

import pytest


# =====================================================
# Config fixtures
# =====================================================

@pytest.fixture
def project_like_config_defaults_yaml() -> str:
    """
    YAML de defaults semelhante ao `defaults.yaml` embarcado, reduzido a
    dois tipos de módulo.

    Returns:
        str: Conteúdo YAML representando configuração padrão (defaults).
    """
    return """\
flow:
  stop_on_error: true
logs:
  max_entries: 100
modules:
  source:
    name: Source
    ports:
      input: []
      output:
        - {id: out-1, label: Data, data_type: json}
"""


@pytest.fixture
def project_like_config_local_yaml() -> str:
    """
    YAML de override local: altera apenas políticas, nunca o catálogo.

    Returns:
        str: Conteúdo YAML representando configuração local de override.
    """
    return """\
flow:
  stop_on_error: false
logs:
  max_entries: 10
"""


@pytest.fixture
def dummy_config() -> dict:
    """
    Configuração mínima já resolvida para exercitar store, validator e runner.

    Catálogo:
        - source: sem entradas; out-1 (json)
        - relay:  in-1 [json]; out-1 (json)
        - namer:  in-1 [json]; out-1 (text)
        - artist: in-1 [json, text]; out-1 (image)
        - viewer: in-1 [image]; sem saídas
        - broken: sem entradas; out-1 sem data_type (porta degenerada)

    Returns:
        dict: Configuração resolvida (sem I/O).
    """
    return {
        "flow": {"stop_on_error": True},
        "logs": {"max_entries": 100},
        "modules": {
            "source": {
                "name": "Source",
                "ports": {
                    "input": [],
                    "output": [{"id": "out-1", "label": "Data", "data_type": "json"}],
                },
            },
            "relay": {
                "name": "Relay",
                "ports": {
                    "input": [{"id": "in-1", "label": "In", "accepted_types": ["json"]}],
                    "output": [{"id": "out-1", "label": "Out", "data_type": "json"}],
                },
            },
            "namer": {
                "name": "Namer",
                "ports": {
                    "input": [{"id": "in-1", "label": "Data", "accepted_types": ["json"]}],
                    "output": [{"id": "out-1", "label": "Names", "data_type": "text"}],
                },
            },
            "artist": {
                "name": "Artist",
                "size": {"width": 320, "height": 280},
                "ports": {
                    "input": [{"id": "in-1", "label": "Brief", "accepted_types": ["json", "text"]}],
                    "output": [{"id": "out-1", "label": "Images", "data_type": "image"}],
                },
            },
            "viewer": {
                "name": "Viewer",
                "ports": {
                    "input": [{"id": "in-1", "label": "Image", "accepted_types": ["image"]}],
                    "output": [],
                },
            },
            "broken": {
                "name": "Broken",
                "ports": {
                    "input": [],
                    "output": [{"id": "out-1", "label": "Nothing"}],
                },
            },
        },
    }


# =====================================================
# Store fixtures
# =====================================================

@pytest.fixture
def store(dummy_config):
    """GraphStore isolado, com o catálogo reduzido de `dummy_config`."""
    from spaceflow.core.engine.store import GraphStore

    return GraphStore(dummy_config, space_id="space-test", name="Test space")


@pytest.fixture
def add_done():
    """
    Fixture factory: adiciona um módulo já `done` com outputs conhecidos.

    Conexões só podem partir de módulos `done`; este helper evita repetir
    o par add_module/update_module em cada teste.
    """

    def _add_done(store, kind, outputs=None):
        m = store.add_module(kind)
        store.update_module(m.id, status="done", outputs=outputs or {"value": m.id})
        return m

    return _add_done


@pytest.fixture
def chain(store, add_done):
    """
    Cadeia `source → relay → relay`, todos `done` e conectados por out-1 → in-1.

    Returns:
        tuple: (store, [a, b, c]).
    """
    from spaceflow.core.graph.types import Connection

    a = add_done(store, "source")
    b = add_done(store, "relay")
    c = add_done(store, "relay")
    for src, dst in ((a, b), (b, c)):
        res = store.add_connection(src.id, "out-1", dst.id, "in-1")
        assert isinstance(res, Connection)
    return store, [a, b, c]


# =====================================================
# Executor fixtures
# =====================================================

@pytest.fixture
def RecordingExecutor():
    """
    Fixture factory que fornece um executor duck-typed.

    O executor registra a ordem de chamada em `calls` (lista compartilhada)
    e devolve um `ExecutionOutcome` com o status configurado. Quando
    `raises` é informado, a exceção é levantada em vez do retorno.

    Returns:
        type: Classe _RecordingExecutor que pode ser instanciada pelos testes.
    """
    from spaceflow.core.engine.executor import ExecutionOutcome

    class _RecordingExecutor:
        def __init__(self, calls, status="done", raises=None, on_execute=None):
            self.calls = calls
            self.status = status
            self.raises = raises
            self.on_execute = on_execute
            self.upstreams = {}

        def execute(self, module, upstream):
            self.calls.append(module.id)
            self.upstreams[module.id] = upstream
            if self.on_execute is not None:
                self.on_execute(module)
            if self.raises is not None:
                raise self.raises
            return ExecutionOutcome(
                status=self.status,
                outputs={"by": module.id},
                error_message="falhou" if self.status in ("error", "fatal_error") else None,
            )

    return _RecordingExecutor
