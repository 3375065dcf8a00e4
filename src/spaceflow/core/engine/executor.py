# src/spaceflow/core/engine/executor.py
"""
Contrato de execução de módulos.

O engine trata módulos como caixas opacas: a lógica de cada tipo
(análise de projeto, geração de nomes, ícones, etc.) vive fora dele e é
plugada no FlowRunner através de um `ModuleExecutor` por `kind`.

Princípios fundamentais:
    - Executores não conhecem o GraphStore nem o scheduler
    - Executores não alteram status diretamente: devolvem um
      `ExecutionOutcome` e o FlowRunner aplica a transição
    - Conformidade é garantida por duck typing (@runtime_checkable)

Limites explícitos:
    - Não define retry nem timeout
    - Não registra eventos no log do Space
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from spaceflow.core.graph.types import Module, ModuleStatus, TERMINAL_STATUSES


@dataclass(frozen=True)
class ExecutionOutcome:
    """
    Resultado imutável da execução de um módulo.

    Campos:
        - status: estado terminal (done, warning, error, fatal_error)
        - outputs: payload opaco exposto aos descendentes
        - error_message: mensagem legível quando o status é de erro
    """

    status: ModuleStatus = ModuleStatus.DONE
    outputs: Dict[str, Any] = field(default_factory=dict)
    error_message: Optional[str] = None

    def __post_init__(self) -> None:
        status = ModuleStatus(self.status)
        if status not in TERMINAL_STATUSES:
            raise ValueError(f"ExecutionOutcome status must be terminal, got '{status.value}'")
        object.__setattr__(self, "status", status)


@runtime_checkable
class ModuleExecutor(Protocol):
    """
    Executor da lógica de um tipo de módulo.

    `upstream` agrupa, por porta de entrada, os `outputs` dos módulos de
    origem conectados (ver `GraphStore.upstream_outputs`).
    """

    def execute(self, module: Module, upstream: Dict[str, List[Dict[str, Any]]]) -> ExecutionOutcome:
        ...
