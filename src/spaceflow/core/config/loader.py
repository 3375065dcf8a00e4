# src/spaceflow/core/config/loader.py
"""
Loader canônico de configuração do Spaceflow.

A configuração efetiva do engine é resolvida a partir de:
    - um arquivo de defaults (obrigatório; o pacote embarca `defaults.yaml`)
    - um arquivo local de overrides (opcional)

Invariantes:
    - O arquivo de defaults é obrigatório
    - O resultado é sempre um dicionário puro (`dict`)
    - Overrides nunca mutam os defaults

Limites explícitos:
    - Não valida o catálogo de módulos (responsabilidade do ModuleCatalog)
    - Não persiste configuração ou hash
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import yaml  # PyYAML

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge


DEFAULTS_PATH = Path(__file__).with_name("defaults.yaml")

PathLike = Union[str, Path]

_PARSERS: Dict[str, Callable[[Any], Any]] = {
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
    ".json": json.load,
}


def _load_file(path: Path) -> Dict[str, Any]:
    """Lê YAML/JSON; arquivo vazio vale `{}`, raiz não-mapping é erro."""
    if not path.exists():
        raise DefaultsNotFoundError(f"Arquivo de configuração não encontrado: {path}")

    parser = _PARSERS.get(path.suffix.lower())
    if parser is None:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    with path.open("r", encoding="utf-8") as f:
        data = parser(f)

    data = {} if data is None else data
    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(data).__name__}"
        )
    return data


def load_config(
    *,
    defaults_path: PathLike,
    local_path: Optional[PathLike] = None,
) -> Dict[str, Any]:
    """
    Carrega os defaults e aplica o override local, quando ele existir.

    Um `local_path` inexistente é ignorado (o usuário ainda não criou o
    arquivo); defaults ausentes são erro fatal, pois sem eles não há
    catálogo de módulos.

    Raises:
        DefaultsNotFoundError: Se o arquivo de defaults não existir.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo não for um dicionário.
        ConfigTypeConflictError: Se ocorrer conflito estrutural durante o merge.
    """
    defaults = _load_file(Path(defaults_path))
    if local_path is None or not Path(local_path).exists():
        return defaults
    return deep_merge(defaults, _load_file(Path(local_path)))


def load_engine_config(local_path: Optional[PathLike] = None) -> Dict[str, Any]:
    """Resolve os defaults embarcados no pacote com um override opcional do usuário."""
    return load_config(defaults_path=DEFAULTS_PATH, local_path=local_path)
