"""
Engine do Spaceflow.

Este pacote reúne as regras que operam sobre um Space: validação de
conexões, detecção de ciclos, propagação de invalidação, ordenação
topológica, o GraphStore (única porta de mutação) e o FlowRunner.

Componentes principais:
    - validator    → aceita ou rejeita propostas de conexão (ordem fixa de checagens)
    - cycles       → alcançabilidade e detecção de ciclo pré-inserção
    - invalidation → marca descendentes como `invalid`, transitivamente
    - scheduler    → ordem de execução determinística (Kahn, FIFO)
    - store        → CRUD de módulos/conexões, snapshot/restore, observadores
    - flow         → execução em ordem topológica via executores plugáveis

Invariantes:
    - Conexões só entram no grafo após passar pelo validator
    - O grafo de conexões permanece acíclico
    - Regressões de status nunca deixam descendentes com status obsoleto

Limites explícitos:
    - Não contém lógica de módulos (análise, geração de mídia, etc.)
    - Não depende de UI nem de frameworks web
"""

from .cycles import reaches, would_create_cycle
from .executor import ExecutionOutcome, ModuleExecutor
from .flow import FlowExecutionState, FlowResult, FlowRunner
from .invalidation import downstream_of, invalidate_downstream
from .scheduler import plan_execution
from .store import GraphStore, is_status_regression
from .validator import validate_connection

__all__ = [
    "ExecutionOutcome",
    "FlowExecutionState",
    "FlowResult",
    "FlowRunner",
    "GraphStore",
    "ModuleExecutor",
    "downstream_of",
    "invalidate_downstream",
    "is_status_regression",
    "plan_execution",
    "reaches",
    "validate_connection",
    "would_create_cycle",
]
