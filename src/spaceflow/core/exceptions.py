"""
Spaceflow — Canonical Exceptions (v1)

Este módulo define exceções tipadas internas do Spaceflow.

Objetivo:
- Sinalizar violações de invariantes do grafo (erros de programação)
- Falhar de forma ruidosa em vez de coagir estado silenciosamente
- Carregar dados estruturados (serializáveis) para diagnóstico

Regras:
- Erros de validação de conexão NÃO são exceções: são retornados como
  `ConnectionErrorPayload` (ver `spaceflow.core.errors`).
- Exceções aqui indicam que o chamador contornou a API validada.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class SpaceflowException(Exception):
    """Base class para exceções internas do Spaceflow.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Catálogo / Módulos
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UnknownModuleKindError(SpaceflowException):
    """Tipo de módulo não declarado no catálogo."""


@dataclass(frozen=True)
class UnknownModuleError(SpaceflowException):
    """Identificador de módulo não resolve para nenhum módulo do Space."""


@dataclass(frozen=True)
class ImmutableFieldError(SpaceflowException):
    """Tentativa de alterar campo fixado na criação do módulo (id, kind, ports)."""


@dataclass(frozen=True)
class CatalogDefinitionError(SpaceflowException):
    """Declaração de tipo de módulo malformada ou duplicada."""


# ---------------------------------------------------------------------------
# Grafo / Snapshot
# ---------------------------------------------------------------------------

GRAPH_CYCLE = "GRAPH_CYCLE"


@dataclass(frozen=True)
class GraphCycleError(SpaceflowException):
    """O grafo de conexões contém um ciclo (nunca deveria ocorrer via API validada)."""

    code: str = GRAPH_CYCLE


@dataclass(frozen=True)
class InvalidSnapshotError(SpaceflowException):
    """Snapshot estruturalmente inválido (referências pendentes, ids duplicados)."""
