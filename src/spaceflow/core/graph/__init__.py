"""
# Graph Model — Spaceflow

Este pacote define o **modelo de dados** de um Space: módulos com portas
tipadas, conexões entre portas e o catálogo fechado de tipos de módulo.

## Componentes

- **types**
  - `DataType`, `ModuleStatus`, `PortDirection`
  - `Port`, `Module`, `Connection`, `Position`, `Size`

- **space**
  - `Space`: módulos + conexões + metadados, com verificação de integridade referencial

- **catalog**
  - `ModuleCatalog` / `ModuleKindSpec`: layout fixo de portas por tipo

## Limites Explícitos

- Não valida propostas de conexão (ver `core.engine.validator`)
- Não agenda execução nem propaga invalidação
- Não interpreta payloads de módulos
"""

from .catalog import ModuleCatalog, ModuleKindSpec, PortTemplate
from .space import Space
from .types import (
    Connection,
    DataType,
    ERROR_STATUSES,
    Module,
    ModuleStatus,
    Port,
    PortDirection,
    Position,
    Size,
    TERMINAL_STATUSES,
)

__all__ = [
    "ModuleCatalog",
    "ModuleKindSpec",
    "PortTemplate",
    "Space",
    "Connection",
    "DataType",
    "ERROR_STATUSES",
    "Module",
    "ModuleStatus",
    "Port",
    "PortDirection",
    "Position",
    "Size",
    "TERMINAL_STATUSES",
]
