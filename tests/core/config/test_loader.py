# tests/core/config/test_loader.py
"""
Testes do carregador de configuração (load_config / load_engine_config).

Os testes asseguram que:
- o arquivo defaults é obrigatório
- o arquivo local é opcional e atua apenas como override
- formatos e tipos raiz inválidos são rejeitados
- os defaults embarcados no pacote resolvem o catálogo completo

Decisões arquiteturais:
    - Defaults representam a base canônica do engine
    - Configuração local atua apenas como override explícito
    - Erros estruturais são tratados como falhas fatais

Limites explícitos:
    - Não valida hashing de configuração
    - Não valida semântica do catálogo (ver tests/core/graph)
"""

import pytest
from pathlib import Path

try:
    from spaceflow.core.config.loader import load_config, load_engine_config
    from spaceflow.core.config.errors import (
        DefaultsNotFoundError,
        InvalidConfigRootTypeError,
        UnsupportedConfigFormatError,
    )
except Exception as e:  # noqa: BLE001
    load_config = None
    load_engine_config = None
    DefaultsNotFoundError = None
    InvalidConfigRootTypeError = None
    UnsupportedConfigFormatError = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """Falha explicitamente quando o loader ou suas exceções não podem ser importados."""
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing loader/errors modules. Implement:\n"
            "- src/spaceflow/core/config/loader.py (load_config, load_engine_config)\n"
            "- src/spaceflow/core/config/errors.py (typed exceptions)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_missing_defaults_raises(tmp_path: Path):
    """
    Verifica que a ausência do arquivo defaults é erro fatal.

    Invariantes:
        - A exceção utilizada é específica (`DefaultsNotFoundError`)
        - Nenhuma configuração parcial é retornada
    """
    _require_imports()
    missing = tmp_path / "defaults.yaml"
    with pytest.raises(DefaultsNotFoundError):
        load_config(defaults_path=str(missing), local_path=None)


def test_missing_local_is_ok(tmp_path: Path, project_like_config_defaults_yaml):
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text(project_like_config_defaults_yaml, encoding="utf-8")

    out = load_config(defaults_path=str(defaults), local_path=str(tmp_path / "local.yaml"))
    assert out["flow"]["stop_on_error"] is True
    assert out["logs"]["max_entries"] == 100


def test_load_defaults_and_local(tmp_path: Path, project_like_config_defaults_yaml, project_like_config_local_yaml):
    """
    Verifica o merge defaults + local.

    O resultado deve refletir os valores sobrescritos pelo arquivo local
    e preservar o catálogo de módulos declarado apenas nos defaults.
    """
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    local = tmp_path / "local.yaml"
    defaults.write_text(project_like_config_defaults_yaml, encoding="utf-8")
    local.write_text(project_like_config_local_yaml, encoding="utf-8")

    out = load_config(defaults_path=str(defaults), local_path=str(local))
    assert out["flow"]["stop_on_error"] is False
    assert out["logs"]["max_entries"] == 10
    assert "source" in out["modules"]


def test_json_local_is_supported(tmp_path: Path, project_like_config_defaults_yaml):
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    local = tmp_path / "local.json"
    defaults.write_text(project_like_config_defaults_yaml, encoding="utf-8")
    local.write_text('{"logs": {"max_entries": 5}}', encoding="utf-8")

    out = load_config(defaults_path=str(defaults), local_path=str(local))
    assert out["logs"]["max_entries"] == 5


def test_unsupported_format_raises(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.toml"
    defaults.write_text("a = 1", encoding="utf-8")
    with pytest.raises(UnsupportedConfigFormatError):
        load_config(defaults_path=str(defaults))


def test_root_must_be_mapping(tmp_path: Path):
    """Uma lista na raiz do YAML é rejeitada com `InvalidConfigRootTypeError`."""
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(InvalidConfigRootTypeError):
        load_config(defaults_path=str(defaults))


def test_empty_file_is_empty_config(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text("", encoding="utf-8")
    assert load_config(defaults_path=str(defaults)) == {}


def test_packaged_defaults_declare_module_catalog():
    """
    Verifica que os defaults embarcados no pacote carregam e declaram os
    oito tipos de módulo conhecidos e as políticas do engine.
    """
    _require_imports()
    cfg = load_engine_config()

    assert cfg["flow"]["stop_on_error"] is True
    assert cfg["logs"]["max_entries"] == 100
    assert set(cfg["modules"]) == {
        "local-project-analysis",
        "reader-engine",
        "naming-engine",
        "icon-generator",
        "logo-variant",
        "app-icon-generator",
        "metadata-generator",
        "marketing-pack",
    }
