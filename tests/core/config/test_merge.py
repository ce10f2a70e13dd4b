# tests/core/config/test_merge.py
"""
Testes da política de deep-merge das settings.

Os testes asseguram que:
- valores escalares são sobrescritos
- dicionários são mesclados de forma recursiva
- listas são sobrescritas integralmente
- conflitos de tipo são rejeitados com o caminho da chave
- objetos de entrada não são mutados

Invariantes:
    - Nenhum merge parcial é produzido em caso de erro
"""

import copy

import pytest

try:
    from dcd.core.config.errors import SettingsTypeConflictError
    from dcd.core.config.merge import merge_settings
except Exception as e:  # noqa: BLE001
    merge_settings = None
    SettingsTypeConflictError = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Falha ao importar merge de settings: {_IMPORT_ERR}")


def test_merge_overrides_scalars_and_keeps_other_keys():
    _require_imports()
    base = {"preflight": {"remote": "origin", "branch": "main"}}
    override = {"preflight": {"branch": "release"}}
    base_before, override_before = copy.deepcopy(base), copy.deepcopy(override)

    merged = merge_settings(base, override)

    assert merged == {"preflight": {"remote": "origin", "branch": "release"}}
    assert base == base_before
    assert override == override_before


def test_merge_is_recursive_for_nested_dicts():
    _require_imports()
    base = {"a": {"b": {"c": 1, "d": 2}}}

    merged = merge_settings(base, {"a": {"b": {"d": 3, "e": 4}}})

    assert merged == {"a": {"b": {"c": 1, "d": 3, "e": 4}}}


def test_merge_replaces_lists():
    _require_imports()
    merged = merge_settings({"items": [1, 2, 3]}, {"items": [9]})

    assert merged == {"items": [9]}


def test_merge_adds_new_keys():
    _require_imports()
    merged = merge_settings({"engine": {"event_buffer": 32}}, {"extra": True})

    assert merged == {"engine": {"event_buffer": 32}, "extra": True}


def test_merge_rejects_type_conflict_with_dotted_path():
    _require_imports()
    with pytest.raises(SettingsTypeConflictError) as excinfo:
        merge_settings({"engine": {"event_buffer": 32}}, {"engine": {"event_buffer": "big"}})

    assert "engine.event_buffer" in str(excinfo.value)


def test_merge_accepts_value_over_none():
    _require_imports()
    merged = merge_settings({"backend": {"path": None}}, {"backend": {"path": "/srv/dcd"}})

    assert merged["backend"]["path"] == "/srv/dcd"
