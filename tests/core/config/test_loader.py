# tests/core/config/test_loader.py
"""
Testes do loader de settings.

Os testes asseguram que:
- sem arquivo, os defaults embutidos são usados integralmente
- arquivos YAML e JSON são mesclados sobre os defaults
- arquivos vazios equivalem a nenhum override
- caminho inexistente, formato desconhecido e raiz não-dict falham explicitamente
- valores inválidos (backend desconhecido, inteiros não positivos) são rejeitados
"""

import json

import pytest

from dcd.core.config import (
    DEFAULT_SETTINGS,
    InvalidSettingsFormatError,
    InvalidSettingsRootTypeError,
    InvalidSettingsValueError,
    Settings,
    SettingsError,
    SettingsNotFoundError,
    SettingsTypeConflictError,
    UnsupportedSettingsFormatError,
    load_settings,
)


def test_defaults_without_file():
    settings = load_settings()

    assert settings == Settings()
    assert settings.remote == "origin"
    assert settings.branch == "main"
    assert settings.backend_kind == "file"
    assert settings.event_buffer == 32
    assert settings.chunk_size == 16 * 1024


def test_yaml_overrides_are_merged_over_defaults(tmp_path):
    path = tmp_path / "dcd.yaml"
    path.write_text(
        "preflight:\n  branch: release\nbackend:\n  kind: memory\n", encoding="utf-8"
    )

    settings = load_settings(path)

    assert settings.branch == "release"
    assert settings.remote == "origin"
    assert settings.backend_kind == "memory"
    assert settings.backend_path == DEFAULT_SETTINGS["backend"]["path"]


def test_json_overrides_are_supported(tmp_path):
    path = tmp_path / "dcd.json"
    path.write_text(json.dumps({"engine": {"event_buffer": 4}}), encoding="utf-8")

    assert load_settings(path).event_buffer == 4


def test_empty_yaml_means_defaults(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")

    assert load_settings(path) == Settings()


def test_missing_file_fails(tmp_path):
    with pytest.raises(SettingsNotFoundError):
        load_settings(tmp_path / "nope.yaml")


def test_unknown_format_fails(tmp_path):
    path = tmp_path / "dcd.toml"
    path.write_text("x = 1\n", encoding="utf-8")

    with pytest.raises(UnsupportedSettingsFormatError):
        load_settings(path)


def test_non_mapping_root_fails(tmp_path):
    path = tmp_path / "dcd.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(InvalidSettingsRootTypeError):
        load_settings(path)


def test_type_conflict_fails(tmp_path):
    path = tmp_path / "dcd.yaml"
    path.write_text("engine: fast\n", encoding="utf-8")

    with pytest.raises(SettingsTypeConflictError):
        load_settings(path)


@pytest.mark.parametrize(
    "data",
    [
        {"backend": {"kind": "dynamodb"}},
        {"engine": {"event_buffer": 0}},
        {"engine": {"chunk_size": -1}},
        {"engine": {"event_buffer": True}},
    ],
)
def test_invalid_values_are_rejected(data):
    with pytest.raises(InvalidSettingsValueError):
        Settings.from_dict(data)


def test_all_settings_errors_share_a_base():
    for cls in (
        SettingsNotFoundError,
        UnsupportedSettingsFormatError,
        InvalidSettingsFormatError,
        InvalidSettingsRootTypeError,
        SettingsTypeConflictError,
        InvalidSettingsValueError,
    ):
        assert issubclass(cls, SettingsError)


@pytest.mark.parametrize(
    "name, content",
    [
        ("dcd.yaml", b"backend: [unclosed\n"),
        ("dcd.json", b'{"backend": '),
        ("dcd.yml", b"backend:\n  path: \xff\xfe\n"),
    ],
)
def test_unparseable_file_fails_with_settings_error(tmp_path, name, content):
    path = tmp_path / name
    path.write_bytes(content)

    with pytest.raises(InvalidSettingsFormatError) as excinfo:
        load_settings(path)

    assert excinfo.value.__cause__ is not None
