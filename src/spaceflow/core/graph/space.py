# src/spaceflow/core/graph/space.py
"""
Representação canônica de um Space (o grafo de um workspace).

Um Space agrega módulos e conexões, junto com metadados leves
(identidade, nome, timestamps e configuração opaca do workspace).

Responsabilidades do módulo:
    - Manter módulos e conexões na ordem de inserção
    - Oferecer consultas estruturais (lookup, arestas de entrada/saída)
    - Verificar integridade referencial das conexões
    - Serializar e reconstruir o Space (round-trip sem perdas)

Decisões arquiteturais:
    - A ordem de inserção dos módulos é preservada e usada como
      desempate determinístico pelo scheduler
    - Timestamps são sempre UTC timezone-aware
    - Aciclicidade não é verificada aqui: é garantida antes da
      inserção pelo validator e conferida no restore pelo scheduler

Limites explícitos:
    - Não valida propostas de conexão
    - Não propaga invalidação
    - Não notifica observadores

Este módulo existe para concentrar o estado do grafo em uma estrutura
simples, inspecionável e serializável.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from spaceflow.core.exceptions import InvalidSnapshotError

from .types import Connection, Module


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_ts(value: Any) -> datetime:
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value))
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass
class Space:
    """
    Grafo completo de um workspace: módulos + conexões.

    Invariantes:
        - toda conexão referencia módulos existentes e portas com a
          direção correta
        - o grafo de conexões é acíclico (garantido pré-inserção)
        - o tipo da porta de origem é aceito pela porta de destino
          (garantido pré-inserção)
    """

    id: str
    name: str
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    configuration: Dict[str, Any] = field(default_factory=dict)
    modules: List[Module] = field(default_factory=list)
    connections: List[Connection] = field(default_factory=list)

    # -----------------------------
    # Lookup
    # -----------------------------
    def get_module(self, module_id: str) -> Optional[Module]:
        for m in self.modules:
            if m.id == module_id:
                return m
        return None

    def has_module(self, module_id: str) -> bool:
        return self.get_module(module_id) is not None

    def module_ids(self) -> List[str]:
        return [m.id for m in self.modules]

    def get_connection(self, connection_id: str) -> Optional[Connection]:
        for c in self.connections:
            if c.id == connection_id:
                return c
        return None

    # -----------------------------
    # Edges
    # -----------------------------
    def outgoing(self, module_id: str) -> Iterator[Connection]:
        return (c for c in self.connections if c.source_module_id == module_id)

    def incoming(self, module_id: str) -> Iterator[Connection]:
        return (c for c in self.connections if c.target_module_id == module_id)

    def touching(self, module_id: str) -> List[Connection]:
        return [
            c
            for c in self.connections
            if c.source_module_id == module_id or c.target_module_id == module_id
        ]

    def touch(self) -> None:
        self.updated_at = _utcnow()

    # -----------------------------
    # Integrity
    # -----------------------------
    def check_integrity(self) -> None:
        """
        Verifica unicidade de ids, integridade referencial e
        compatibilidade de tipos das conexões.

        Raises:
            InvalidSnapshotError: se houver ids duplicados ou conexões que
                não resolvem para módulos/portas de direção correta.
        """
        seen_modules = set()
        for m in self.modules:
            if m.id in seen_modules:
                raise InvalidSnapshotError(
                    f"Duplicate module id: {m.id}", details={"module_id": m.id}
                )
            seen_modules.add(m.id)

        seen_connections = set()
        for c in self.connections:
            if c.id in seen_connections:
                raise InvalidSnapshotError(
                    f"Duplicate connection id: {c.id}", details={"connection_id": c.id}
                )
            seen_connections.add(c.id)

            source = self.get_module(c.source_module_id)
            target = self.get_module(c.target_module_id)
            if source is None or target is None:
                raise InvalidSnapshotError(
                    f"Connection '{c.id}' references an unknown module",
                    details={
                        "connection_id": c.id,
                        "source_module_id": c.source_module_id,
                        "target_module_id": c.target_module_id,
                    },
                )
            source_port = source.output_port(c.source_port_id)
            if source_port is None:
                raise InvalidSnapshotError(
                    f"Connection '{c.id}' references unknown output port '{c.source_port_id}'",
                    details={"connection_id": c.id, "module_id": source.id},
                )
            target_port = target.input_port(c.target_port_id)
            if target_port is None:
                raise InvalidSnapshotError(
                    f"Connection '{c.id}' references unknown input port '{c.target_port_id}'",
                    details={"connection_id": c.id, "module_id": target.id},
                )
            # O tipo efetivo é o da porta de origem; o da conexão é só cópia.
            if source_port.data_type is None or source_port.data_type != c.data_type:
                raise InvalidSnapshotError(
                    f"Connection '{c.id}' data type does not match its source port",
                    details={
                        "connection_id": c.id,
                        "data_type": c.data_type.value,
                        "source_data_type": (
                            source_port.data_type.value if source_port.data_type is not None else None
                        ),
                    },
                )
            if not target_port.accepts(source_port.data_type):
                raise InvalidSnapshotError(
                    f"Connection '{c.id}' carries '{c.data_type.value}', not accepted by its target port",
                    details={"connection_id": c.id, "data_type": c.data_type.value},
                )

    # -----------------------------
    # Serialization
    # -----------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "configuration": dict(self.configuration),
            "modules": [m.to_dict() for m in self.modules],
            "connections": [c.to_dict() for c in self.connections],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Space":
        try:
            return cls(
                id=data["id"],
                name=data.get("name", data["id"]),
                created_at=_parse_ts(data.get("created_at") or _utcnow()),
                updated_at=_parse_ts(data.get("updated_at") or _utcnow()),
                configuration=dict(data.get("configuration", {}) or {}),
                modules=[Module.from_dict(m) for m in (data.get("modules") or [])],
                connections=[Connection.from_dict(c) for c in (data.get("connections") or [])],
            )
        except (KeyError, ValueError, TypeError) as e:
            raise InvalidSnapshotError(
                "Malformed space snapshot",
                details={"error": str(e), "exception_class": e.__class__.__name__},
            ) from e
