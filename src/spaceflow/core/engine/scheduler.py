# src/spaceflow/core/engine/scheduler.py
"""
Scheduler topológico do Space.

Este módulo produz a ordem de execução de um "run flow": uma sequência
de ids de módulo tal que, para toda conexão `a → b`, `a` precede `b`.

Decisões arquiteturais:
    - Algoritmo de Kahn
    - Empates resolvidos em FIFO pela ordem de inserção dos módulos,
      de modo que a saída depende apenas das arestas e dessa ordem
    - Um grafo não totalmente visitado é erro fatal (`GRAPH_CYCLE`):
      nenhum nó é descartado silenciosamente

Invariantes:
    - Nenhum módulo aparece antes de suas dependências
    - Todos os módulos aparecem exatamente uma vez

Limites explícitos:
    - Não executa módulos
    - Não aguarda término de execuções
    - Não altera status
"""

from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, List

from spaceflow.core.exceptions import GraphCycleError, UnknownModuleError
from spaceflow.core.graph.types import Connection


def plan_execution(module_ids: Iterable[str], connections: Iterable[Connection]) -> List[str]:
    """
    Valida e produz a ordem topológica dos módulos.

    Args:
        module_ids (Iterable[str]): Ids dos módulos, na ordem de inserção.
        connections (Iterable[Connection]): Conexões do Space.

    Returns:
        List[str]: Ids em ordem topológica.

    Raises:
        ValueError: Se houver id de módulo duplicado.
        UnknownModuleError: Se uma conexão referenciar módulo inexistente.
        GraphCycleError: Se o grafo contiver ciclo.
    """
    ids = list(module_ids)
    in_degree: Dict[str, int] = {}
    for mid in ids:
        if mid in in_degree:
            raise ValueError(f"Duplicate module id: {mid}")
        in_degree[mid] = 0

    outgoing: Dict[str, List[str]] = {mid: [] for mid in ids}
    for c in connections:
        for endpoint in (c.source_module_id, c.target_module_id):
            if endpoint not in in_degree:
                raise UnknownModuleError(
                    f"Connection '{c.id}' references unknown module '{endpoint}'",
                    details={"connection_id": c.id, "module_id": endpoint},
                )
        outgoing[c.source_module_id].append(c.target_module_id)
        in_degree[c.target_module_id] += 1

    ready = deque(mid for mid in ids if in_degree[mid] == 0)
    order: List[str] = []

    while ready:
        mid = ready.popleft()
        order.append(mid)
        for child in outgoing[mid]:
            in_degree[child] -= 1
            if in_degree[child] == 0:
                ready.append(child)

    if len(order) != len(ids):
        stuck = [mid for mid in ids if in_degree[mid] > 0]
        raise GraphCycleError(
            "Cycle detected in module connection graph",
            details={"unscheduled_module_ids": stuck},
            hint="Remova uma das conexões que formam o ciclo",
        )

    return order
