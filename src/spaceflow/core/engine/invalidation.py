# src/spaceflow/core/engine/invalidation.py
"""
Propagador de invalidação.

Quando o resultado de um módulo deixa de ser confiável (reset para
`idle`, ou entrada em `error`/`fatal_error`), todo módulo que depende
dele, direta ou indiretamente, passa a `invalid`: suas entradas estão
obsoletas e ele precisa ser reexecutado.

Decisões arquiteturais:
    - A propagação é sempre transitiva (busca em largura sobre todos os
      descendentes), em todos os caminhos que regridem um status
    - `outputs` dos módulos invalidados são preservados (a UI pode
      exibir o último resultado marcado como desatualizado)
    - Módulos `running` também são marcados; não há adiamento

Invariantes:
    - O módulo de origem nunca é alterado pelo propagador
    - Cada descendente aparece exatamente uma vez no resultado
    - A ordem do resultado é a ordem de descoberta da BFS
"""

from __future__ import annotations

from collections import deque
from typing import List, Set

from spaceflow.core.graph.space import Space
from spaceflow.core.graph.types import ModuleStatus

from .cycles import adjacency


def downstream_of(space: Space, module_id: str) -> List[str]:
    """Ids de todos os descendentes de `module_id` (exclusive), em ordem BFS."""
    edges = adjacency(space.connections)
    visited: Set[str] = {module_id}
    order: List[str] = []
    queue = deque(edges.get(module_id, []))

    while queue:
        current = queue.popleft()
        if current in visited:
            continue
        visited.add(current)
        order.append(current)
        queue.extend(edges.get(current, []))

    return order


def invalidate_downstream(space: Space, module_id: str) -> List[str]:
    """
    Marca como `invalid` todos os descendentes de `module_id`.

    Returns:
        List[str]: Ids dos módulos cujo status mudou para `invalid`
        (descendentes que já estavam `invalid` não são repetidos).
    """
    changed: List[str] = []
    for mid in downstream_of(space, module_id):
        m = space.get_module(mid)
        if m is None or m.status == ModuleStatus.INVALID:
            continue
        m.status = ModuleStatus.INVALID
        changed.append(mid)
    return changed
