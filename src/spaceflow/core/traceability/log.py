# src/spaceflow/core/traceability/log.py
"""
Log do Space — registro estruturado de eventos do grafo.

Este módulo define o `SpaceLog`, o registro ordenado de tudo o que
aconteceu em um Space: módulos adicionados ou removidos, mudanças de
status, conexões aceitas ou rejeitadas, invalidações, resets e
execuções de flow.

Princípios fundamentais:
    - Nenhuma entrada é emitida implicitamente: o GraphStore e o
      FlowRunner registram cada evento por chamada explícita
    - A ordem das entradas reflete a ordem real das mutações
    - O log é serializável e reconstruível (round-trip)

Decisões arquiteturais:
    - UTC é o timezone canônico para todos os timestamps
    - O log é limitado (`logs.max_entries`); as entradas mais antigas
      são descartadas primeiro
    - Níveis seguem o vocabulário exibido na UI: info, success,
      warning, error

Limites explícitos:
    - Não persiste em disco (o log viaja dentro do snapshot)
    - Não notifica observadores (responsabilidade do GraphStore)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from spaceflow.core.exceptions import InvalidSnapshotError


def _ensure_tzaware_utc(dt: datetime) -> datetime:
    """Normaliza um timestamp para timezone-aware em UTC (naive é assumido UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


class LogLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class LogEntry:
    """Entrada imutável do log do Space."""

    id: str
    timestamp: str
    level: LogLevel
    event: str
    message: str
    module_id: Optional[str] = None
    module_name: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "level": self.level.value,
            "event": self.event,
            "message": self.message,
            "module_id": self.module_id,
            "module_name": self.module_name,
            "details": dict(self.details),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogEntry":
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            level=LogLevel(data.get("level", LogLevel.INFO.value)),
            event=data.get("event", ""),
            message=data.get("message", ""),
            module_id=data.get("module_id"),
            module_name=data.get("module_name"),
            details=dict(data.get("details", {}) or {}),
        )


@dataclass
class SpaceLog:
    """
    Registro ordenado e limitado de eventos de um Space.

    Invariantes:
        - `entries` é sempre uma lista ordenada por chamada
        - `len(entries) <= max_entries` após cada `log`
    """

    max_entries: int = 100
    entries: List[LogEntry] = field(default_factory=list)

    def log(
        self,
        *,
        level: LogLevel,
        event: str,
        message: str,
        module_id: Optional[str] = None,
        module_name: Optional[str] = None,
        ts: Optional[datetime] = None,
        **details: Any,
    ) -> LogEntry:
        entry = LogEntry(
            id=f"log-{uuid4().hex[:12]}",
            timestamp=_ensure_tzaware_utc(ts or datetime.now(timezone.utc)).isoformat(),
            level=LogLevel(level),
            event=event,
            message=message,
            module_id=module_id,
            module_name=module_name,
            details=details,
        )
        self.entries.append(entry)
        if self.max_entries > 0 and len(self.entries) > self.max_entries:
            del self.entries[: len(self.entries) - self.max_entries]
        return entry

    def for_module(self, module_id: str) -> List[LogEntry]:
        return [e for e in self.entries if e.module_id == module_id]

    def of_event(self, event: str) -> List[LogEntry]:
        return [e for e in self.entries if e.event == event]

    def clear(self) -> None:
        self.entries.clear()

    def to_list(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self.entries]

    def load(self, raw: List[Dict[str, Any]]) -> None:
        """Substitui o conteúdo pelas entradas serializadas (ordem preservada)."""
        self.entries = parse_entries(raw)


def parse_entries(raw: Optional[List[Dict[str, Any]]]) -> List[LogEntry]:
    """
    Reconstrói entradas serializadas sem tocar em nenhum log.

    Raises:
        InvalidSnapshotError: entrada sem `id`/`timestamp`, com nível
            desconhecido ou que não é um objeto.
    """
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise InvalidSnapshotError(
            "Log entries must be a list", details={"type": type(raw).__name__}
        )
    try:
        return [LogEntry.from_dict(e) for e in raw]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise InvalidSnapshotError(
            "Malformed log entry in snapshot",
            details={"error": f"{type(e).__name__}: {e}"},
            hint="Each entry needs 'id', 'timestamp' and a level among info/success/warning/error.",
        ) from e
