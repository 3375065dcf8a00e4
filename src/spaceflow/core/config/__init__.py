# src/spaceflow/core/config/__init__.py

"""
Camada de configuração do Spaceflow.

Carrega, mescla e identifica (hash) a configuração efetiva do engine:

    - flow.stop_on_error → interrompe o "run flow" na primeira falha
    - logs.max_entries   → limite de entradas do log do Space
    - modules.<kind>     → catálogo fechado de tipos de módulo

A configuração é declarativa, determinística e separada do estado do
grafo: nenhum módulo ou conexão vive aqui.
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash
from .loader import DEFAULTS_PATH, load_config, load_engine_config
from .merge import deep_merge

__all__ = [
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "InvalidConfigRootTypeError",
    "UnsupportedConfigFormatError",
    "compute_config_hash",
    "DEFAULTS_PATH",
    "load_config",
    "load_engine_config",
    "deep_merge",
]
