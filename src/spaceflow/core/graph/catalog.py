# src/spaceflow/core/graph/catalog.py
"""
Catálogo estrutural de tipos de módulo.

Este módulo define o `ModuleCatalog`, responsável por registrar os tipos
de módulo (`kind`) disponíveis em um Space e validar suas declarações
antes que qualquer módulo seja instanciado.

Cada tipo declara, fora de banda:
    - nome de exibição e tamanho padrão no canvas
    - layout fixo de portas (entradas e saídas tipadas)
    - chaves de payload que lê (`reads`) e escreve (`writes`)

As chaves declaradas permitem que a lógica de cada módulo seja tipada
internamente sem que o engine precise interpretar `inputs`/`outputs`.

Decisões arquiteturais:
    - A validação ocorre no registro, antes do GraphStore
    - A ordem de registro é preservada separadamente
    - O catálogo é construído a partir da configuração (`modules.<kind>`)
    - Erros de declaração são tratados como falhas fatais

Invariantes:
    - Cada `kind` registrado é único
    - Portas de entrada declaram ao menos um tipo aceito
    - Ids de porta são únicos por direção dentro de um tipo

Limites explícitos:
    - Não cria módulos no Space (responsabilidade do GraphStore)
    - Não valida conexões
    - Não executa lógica de módulos

Este módulo existe para garantir que o layout de portas de cada tipo
seja explícito, validado e fixo desde a criação do módulo.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from spaceflow.core.exceptions import CatalogDefinitionError, UnknownModuleKindError

from .types import DataType, Port, PortDirection, Size


@dataclass(frozen=True)
class PortTemplate:
    """Declaração imutável de uma porta; instanciada como `Port` a cada módulo criado."""

    id: str
    direction: PortDirection
    label: str
    data_type: Optional[DataType] = None
    accepted_types: Tuple[DataType, ...] = ()

    def build(self) -> Port:
        return Port(
            id=self.id,
            direction=self.direction,
            label=self.label,
            data_type=self.data_type,
            accepted_types=list(self.accepted_types),
            connected=False,
        )


@dataclass(frozen=True)
class ModuleKindSpec:
    """Declaração canônica de um tipo de módulo."""

    kind: str
    name: str
    size: Tuple[float, float] = (400.0, 400.0)
    inputs: Tuple[PortTemplate, ...] = ()
    outputs: Tuple[PortTemplate, ...] = ()
    reads: Tuple[str, ...] = ()
    writes: Tuple[str, ...] = ()

    def default_size(self) -> Size:
        return Size(width=self.size[0], height=self.size[1])

    def build_ports(self) -> Tuple[List[Port], List[Port]]:
        return [t.build() for t in self.inputs], [t.build() for t in self.outputs]


def _parse_data_type(kind: str, raw: Any) -> DataType:
    try:
        return DataType(raw)
    except ValueError as e:
        raise CatalogDefinitionError(
            f"Unknown data type '{raw}' in module kind '{kind}'",
            details={"kind": kind, "data_type": raw},
        ) from e


def _parse_port(kind: str, direction: PortDirection, raw: Dict[str, Any]) -> PortTemplate:
    if not isinstance(raw, dict) or not isinstance(raw.get("id"), str) or not raw["id"].strip():
        raise CatalogDefinitionError(
            f"Port declaration in module kind '{kind}' must have a non-empty id",
            details={"kind": kind, "port": raw},
        )

    if direction == PortDirection.INPUT:
        accepted = raw.get("accepted_types") or []
        if not accepted:
            raise CatalogDefinitionError(
                f"Input port '{raw['id']}' of '{kind}' must accept at least one data type",
                details={"kind": kind, "port_id": raw["id"]},
            )
        return PortTemplate(
            id=raw["id"],
            direction=direction,
            label=raw.get("label", raw["id"]),
            accepted_types=tuple(_parse_data_type(kind, t) for t in accepted),
        )

    raw_type = raw.get("data_type")
    return PortTemplate(
        id=raw["id"],
        direction=direction,
        label=raw.get("label", raw["id"]),
        data_type=_parse_data_type(kind, raw_type) if raw_type is not None else None,
    )


def parse_kind_spec(kind: str, raw: Dict[str, Any]) -> ModuleKindSpec:
    """
    Converte a declaração de um tipo (bloco `modules.<kind>` da config)
    em um `ModuleKindSpec` validado.

    Raises:
        CatalogDefinitionError: se a declaração for malformada.
    """
    if not isinstance(raw, dict):
        raise CatalogDefinitionError(
            f"Module kind '{kind}' must be declared as a mapping",
            details={"kind": kind, "received": type(raw).__name__},
        )

    ports = raw.get("ports", {}) or {}
    inputs = tuple(_parse_port(kind, PortDirection.INPUT, p) for p in (ports.get("input") or []))
    outputs = tuple(_parse_port(kind, PortDirection.OUTPUT, p) for p in (ports.get("output") or []))

    for label, group in (("input", inputs), ("output", outputs)):
        ids = [p.id for p in group]
        if len(ids) != len(set(ids)):
            raise CatalogDefinitionError(
                f"Duplicate {label} port id in module kind '{kind}'",
                details={"kind": kind, "port_ids": ids},
            )

    size = raw.get("size", {}) or {}
    return ModuleKindSpec(
        kind=kind,
        name=raw.get("name", kind),
        size=(float(size.get("width", 400)), float(size.get("height", 400))),
        inputs=inputs,
        outputs=outputs,
        reads=tuple(raw.get("reads") or ()),
        writes=tuple(raw.get("writes") or ()),
    )


@dataclass
class ModuleCatalog:
    """
    Registro canônico de tipos de módulo.

    Decisões arquiteturais:
        - O conjunto de tipos é fechado após a construção do GraphStore
        - Um `kind` desconhecido é erro de programação, não de validação

    Invariantes:
        - Cada `kind` é único no catálogo
        - `list()` reflete exatamente a ordem de registro
    """

    _specs: Dict[str, ModuleKindSpec] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)

    def add(self, spec: ModuleKindSpec) -> None:
        if not isinstance(spec.kind, str) or not spec.kind.strip():
            raise CatalogDefinitionError("module kind must be a non-empty string")

        if spec.kind in self._specs:
            raise CatalogDefinitionError(
                f"Duplicate module kind: {spec.kind}", details={"kind": spec.kind}
            )

        self._specs[spec.kind] = spec
        self._order.append(spec.kind)

    def get(self, kind: str) -> ModuleKindSpec:
        if kind not in self._specs:
            raise UnknownModuleKindError(
                f"Unknown module kind: {kind}",
                details={"kind": kind, "known_kinds": list(self._order)},
                hint="Declare o tipo em `modules.<kind>` na configuração",
            )
        return self._specs[kind]

    def __contains__(self, kind: object) -> bool:
        return kind in self._specs

    def list(self) -> List[ModuleKindSpec]:
        return [self._specs[k] for k in self._order]

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ModuleCatalog":
        catalog = cls()
        for kind, raw in ((config or {}).get("modules", {}) or {}).items():
            catalog.add(parse_kind_spec(kind, raw))
        return catalog
