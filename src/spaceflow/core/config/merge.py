# src/spaceflow/core/config/merge.py
"""
Deep-merge canônico de configuração.

Resolve a configuração efetiva do engine a partir dos defaults
empacotados e de um override explícito do usuário.

Política de merge (v1):
    - dict → merge recursivo por chave
    - list → sobrescrita total (ex.: `modules.<kind>.ports.input`)
    - escalar → sobrescrita direta
    - conflito de tipos → erro estrutural explícito

A sobrescrita total de listas é o que permite redefinir o layout de
portas de um tipo de módulo sem herdar portas dos defaults.

Limites explícitos:
    - Não carrega arquivos
    - Não realiza coerção de tipos
    - Não valida o catálogo de módulos
"""

from copy import deepcopy
from typing import Any, Dict

from .errors import ConfigTypeConflictError


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Realiza um deep-merge determinístico entre dois dicionários.

    Nenhum dos inputs é mutado; o resultado é sempre um novo dicionário.

    Args:
        base (Dict[str, Any]): Configuração base (defaults).
        override (Dict[str, Any]): Overrides explícitos.

    Returns:
        Dict[str, Any]: Nova configuração resultante.

    Raises:
        ConfigTypeConflictError: Se uma chave tiver tipos incompatíveis.
    """

    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, override_value in override.items():
        if key not in result:
            result[key] = deepcopy(override_value)
            continue

        base_value = result[key]

        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(base_value, override_value)
            continue

        # listas: sobrescrita total
        if isinstance(override_value, list):
            result[key] = deepcopy(override_value)
            continue

        # None nos defaults funciona como "sem valor"; aceita qualquer override
        if base_value is not None and type(base_value) is not type(override_value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{key}': "
                f"{type(base_value).__name__} vs {type(override_value).__name__}"
            )

        result[key] = deepcopy(override_value)

    return result
