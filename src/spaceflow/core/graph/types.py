# src/spaceflow/core/graph/types.py
"""
Tipos canônicos do grafo de módulos do Spaceflow.

Este módulo define as estruturas e enums fundamentais que descrevem um
Space: módulos, portas tipadas e conexões entre portas.

Componentes principais:
    - DataType        → tipos de payload transportados por conexões
    - ModuleStatus    → estados do ciclo de vida de um módulo
    - PortDirection   → direção de uma porta (input/output)
    - Port            → ponto de conexão tipado de um módulo
    - Module          → nó do grafo (status, payloads opacos, portas)
    - Connection      → aresta dirigida e imutável entre portas

Princípios fundamentais:
    - Tipos são estáveis e serializáveis (to_dict/from_dict)
    - Enums possuem valores textuais canônicos
    - Nenhuma regra de validação ou propagação vive neste módulo

Invariantes:
    - Portas de saída carregam no máximo um `data_type`
    - Portas de entrada carregam uma lista de `accepted_types`
    - `Connection` nunca é alterada após criada

Limites explícitos:
    - Não valida conexões (responsabilidade do validator)
    - Não mantém o flag `connected` (responsabilidade do GraphStore)
    - Não interpreta `inputs`/`outputs` dos módulos

Este módulo existe para garantir um vocabulário único e
serializável entre store, validator, scheduler e persistência.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class DataType(str, Enum):
    """
    Tipos de payload transportados por uma conexão.

    Conjunto fechado: uma porta de saída declara exatamente um destes
    valores e uma porta de entrada aceita um subconjunto não vazio.
    """
    JSON = "json"
    TEXT = "text"
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    MIXED = "mixed"


class ModuleStatus(str, Enum):
    """
    Estados possíveis de um módulo.

    Transições próprias:
        idle → running → {done, warning, error, fatal_error}
        {qualquer terminal} → idle (reset explícito)

    `invalid` não é alcançado por transição própria: é aplicado pelo
    propagador de invalidação aos descendentes de um módulo cujo
    resultado deixou de ser confiável.
    """
    IDLE = "idle"
    RUNNING = "running"
    WARNING = "warning"
    DONE = "done"
    ERROR = "error"
    FATAL_ERROR = "fatal_error"
    INVALID = "invalid"


ERROR_STATUSES = frozenset({ModuleStatus.ERROR, ModuleStatus.FATAL_ERROR})
TERMINAL_STATUSES = frozenset(
    {ModuleStatus.DONE, ModuleStatus.WARNING, ModuleStatus.ERROR, ModuleStatus.FATAL_ERROR}
)


class PortDirection(str, Enum):
    INPUT = "input"
    OUTPUT = "output"


@dataclass
class Position:
    x: float = 0.0
    y: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Position":
        return cls(x=data.get("x", 0.0), y=data.get("y", 0.0))


@dataclass
class Size:
    width: float = 400.0
    height: float = 400.0

    def to_dict(self) -> Dict[str, Any]:
        return {"width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Size":
        return cls(width=data.get("width", 400.0), height=data.get("height", 400.0))


@dataclass
class Port:
    """
    Ponto de conexão tipado de um módulo.

    Campos:
        - id: identificador único dentro do módulo (ex.: "out-1")
        - direction: input ou output
        - label: rótulo legível
        - data_type: tipo ofertado (apenas portas de saída; None = porta degenerada)
        - accepted_types: tipos aceitos (apenas portas de entrada)
        - connected: derivado; verdadeiro sse alguma conexão referencia a porta

    Limites explícitos:
        - `connected` é mantido exclusivamente pelo GraphStore
    """
    id: str
    direction: PortDirection
    label: str
    data_type: Optional[DataType] = None
    accepted_types: List[DataType] = field(default_factory=list)
    connected: bool = False

    def accepts(self, data_type: DataType) -> bool:
        return data_type in self.accepted_types

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "direction": self.direction.value,
            "label": self.label,
            "data_type": self.data_type.value if self.data_type is not None else None,
            "accepted_types": [t.value for t in self.accepted_types],
            "connected": self.connected,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Port":
        raw_type = data.get("data_type")
        return cls(
            id=data["id"],
            direction=PortDirection(data["direction"]),
            label=data.get("label", data["id"]),
            data_type=DataType(raw_type) if raw_type is not None else None,
            accepted_types=[DataType(t) for t in (data.get("accepted_types") or [])],
            connected=bool(data.get("connected", False)),
        )


@dataclass
class Module:
    """
    Nó do grafo: uma unidade opaca de execução com portas tipadas.

    O engine se importa apenas com `status`, com as portas e com a
    presença/ausência de `outputs`; o conteúdo de `inputs` e `outputs`
    pertence à lógica externa de cada tipo de módulo.

    Invariantes:
        - `ports` é fixado na criação a partir do catálogo do `kind`
        - Um módulo é criado `idle` e com `outputs` vazio
    """
    id: str
    kind: str
    name: str
    position: Position = field(default_factory=Position)
    size: Size = field(default_factory=Size)
    status: ModuleStatus = ModuleStatus.IDLE
    inputs: Dict[str, Any] = field(default_factory=dict)
    outputs: Dict[str, Any] = field(default_factory=dict)
    input_ports: List[Port] = field(default_factory=list)
    output_ports: List[Port] = field(default_factory=list)
    error_message: Optional[str] = None

    def input_port(self, port_id: str) -> Optional[Port]:
        for p in self.input_ports:
            if p.id == port_id:
                return p
        return None

    def output_port(self, port_id: str) -> Optional[Port]:
        for p in self.output_ports:
            if p.id == port_id:
                return p
        return None

    @property
    def ports(self) -> Dict[str, List[Port]]:
        return {"input": self.input_ports, "output": self.output_ports}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind,
            "name": self.name,
            "position": self.position.to_dict(),
            "size": self.size.to_dict(),
            "status": self.status.value,
            "inputs": dict(self.inputs),
            "outputs": dict(self.outputs),
            "ports": {
                "input": [p.to_dict() for p in self.input_ports],
                "output": [p.to_dict() for p in self.output_ports],
            },
            "error_message": self.error_message,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Module":
        ports = data.get("ports", {}) or {}
        return cls(
            id=data["id"],
            kind=data["kind"],
            name=data.get("name", data["kind"]),
            position=Position.from_dict(data.get("position", {}) or {}),
            size=Size.from_dict(data.get("size", {}) or {}),
            status=ModuleStatus(data.get("status", ModuleStatus.IDLE.value)),
            inputs=dict(data.get("inputs", {}) or {}),
            outputs=dict(data.get("outputs", {}) or {}),
            input_ports=[Port.from_dict(p) for p in (ports.get("input") or [])],
            output_ports=[Port.from_dict(p) for p in (ports.get("output") or [])],
            error_message=data.get("error_message"),
        )


@dataclass(frozen=True)
class Connection:
    """
    Aresta dirigida entre a porta de saída de um módulo e a porta de
    entrada de outro.

    `data_type` é copiado da porta de origem no momento da criação.
    Conexões nunca são mutadas: são criadas via `add_connection` e
    removidas por deleção explícita ou em cascata.
    """
    id: str
    source_module_id: str
    source_port_id: str
    target_module_id: str
    target_port_id: str
    data_type: DataType

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source_module_id": self.source_module_id,
            "source_port_id": self.source_port_id,
            "target_module_id": self.target_module_id,
            "target_port_id": self.target_port_id,
            "data_type": self.data_type.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Connection":
        return cls(
            id=data["id"],
            source_module_id=data["source_module_id"],
            source_port_id=data["source_port_id"],
            target_module_id=data["target_module_id"],
            target_port_id=data["target_port_id"],
            data_type=DataType(data["data_type"]),
        )
