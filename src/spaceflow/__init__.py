"""
Spaceflow — engine de grafos de módulos para workspaces visuais.

Um Space é um grafo dirigido e acíclico de módulos com portas tipadas.
Este pacote mantém esse grafo consistente: valida conexões, impede
ciclos, propaga invalidação quando um resultado a montante deixa de ser
confiável e produz uma ordem determinística de execução.

Arquitetura em alto nível:
    - core.graph        → módulos, portas, conexões e catálogo de tipos
    - core.engine       → GraphStore, validator, scheduler e FlowRunner
    - core.config       → configuração do engine
    - core.traceability → log do Space
    - persistence       → snapshots de Spaces em disco

Limites explícitos:
    - Não renderiza o canvas
    - Não implementa a lógica dos módulos
"""

from .core.engine import FlowRunner, GraphStore

__all__ = ["FlowRunner", "GraphStore"]
