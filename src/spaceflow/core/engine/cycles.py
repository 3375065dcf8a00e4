# src/spaceflow/core/engine/cycles.py
"""
Detector de ciclos usado pelo validator de conexões.

Dada a aresta candidata `source → target`, um ciclo seria fechado se
`target` já alcança `source` pelas arestas existentes. A verificação é
uma busca em largura a partir de `target` seguindo conexões de saída.

Complexidade O(V+E) por verificação; aceitável porque conexões são
adicionadas uma a uma, interativamente.
"""

from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, List, Set

from spaceflow.core.graph.types import Connection


def adjacency(connections: Iterable[Connection]) -> Dict[str, List[str]]:
    """Mapa `module_id → [target_module_id, ...]`, preservando a ordem das conexões."""
    out: Dict[str, List[str]] = {}
    for c in connections:
        out.setdefault(c.source_module_id, []).append(c.target_module_id)
    return out


def reaches(connections: Iterable[Connection], start: str, goal: str) -> bool:
    """Verdadeiro se `goal` é alcançável a partir de `start` (inclusive `start == goal`)."""
    edges = adjacency(connections)
    visited: Set[str] = set()
    queue = deque([start])

    while queue:
        current = queue.popleft()
        if current == goal:
            return True
        if current in visited:
            continue
        visited.add(current)
        queue.extend(edges.get(current, []))

    return False


def would_create_cycle(
    connections: Iterable[Connection],
    source_module_id: str,
    target_module_id: str,
) -> bool:
    """
    Decide se adicionar `source → target` fecharia um ciclo.

    Um auto-laço (`source == target`) é sempre um ciclo.
    """
    return reaches(connections, target_module_id, source_module_id)
