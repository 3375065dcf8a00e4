"""
Pacote de rastreabilidade do Spaceflow.

API pública exposta:
    - SpaceLog  → registro ordenado e limitado de eventos de um Space
    - LogEntry  → entrada imutável e serializável
    - LogLevel  → info, success, warning, error
    - parse_entries → reconstrói entradas serializadas (InvalidSnapshotError)

Eventos são registrados apenas por chamadas explícitas do GraphStore e
do FlowRunner; a ordem do log reflete a ordem das mutações.
"""

from .log import LogEntry, LogLevel, SpaceLog, parse_entries

__all__ = ["LogEntry", "LogLevel", "SpaceLog", "parse_entries"]
