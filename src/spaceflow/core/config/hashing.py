# src/spaceflow/core/config/hashing.py
"""
Hash da configuração efetiva do Spaceflow.

O hash é gravado em cada snapshot (`config_hash`) para que um restore
sob outro catálogo de módulos ou outra política seja detectável.
Configurações equivalentes produzem o mesmo hash, independentemente da
ordem das chaves: JSON canônico (chaves ordenadas, separadores
compactos, UTF-8) → SHA-256 hexadecimal.
"""

import hashlib
import json
from typing import Any, Dict


def canonical_json(config: Dict[str, Any]) -> str:
    if not isinstance(config, dict):
        raise TypeError(f"Config para hashing deve ser dict, recebido: {type(config).__name__}")
    return json.dumps(config, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def compute_config_hash(config: Dict[str, Any]) -> str:
    """SHA-256 do JSON canônico de `config`. Levanta TypeError se não for dict."""
    return hashlib.sha256(canonical_json(config).encode("utf-8")).hexdigest()
