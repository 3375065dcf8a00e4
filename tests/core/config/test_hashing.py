# tests/core/config/test_hashing.py
"""
Testes do hashing determinístico de configuração.

O hash acompanha cada snapshot de Space para detectar um restore sob
outro catálogo de módulos; por isso precisa ser estável e sensível a
qualquer mudança de valor.
"""

import pytest

try:
    from spaceflow.core.config.hashing import compute_config_hash
except Exception as e:  # noqa: BLE001
    compute_config_hash = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing src/spaceflow/core/config/hashing.py. Import error: {_IMPORT_ERR}")


def test_hash_is_stable_for_key_order():
    _require_imports()
    a = {"flow": {"stop_on_error": True}, "logs": {"max_entries": 100}}
    b = {"logs": {"max_entries": 100}, "flow": {"stop_on_error": True}}
    assert compute_config_hash(a) == compute_config_hash(b)


def test_hash_changes_when_value_changes():
    _require_imports()
    a = {"logs": {"max_entries": 100}}
    b = {"logs": {"max_entries": 99}}
    assert compute_config_hash(a) != compute_config_hash(b)


def test_hash_is_sha256_hex():
    _require_imports()
    h = compute_config_hash({})
    assert len(h) == 64
    int(h, 16)


def test_hash_rejects_non_dict():
    _require_imports()
    with pytest.raises(TypeError):
        compute_config_hash(["not", "a", "dict"])
