# src/dcd/core/config/loader.py
"""
Loader canônico de settings do dcd.

As settings controlam *como* o executor roda (qual upstream verificar,
qual backend usar, tamanho do buffer de eventos), nunca *o que* roda:
isso pertence à definição do pipeline.

A configuração é resolvida a partir de:
    - defaults embutidos (`DEFAULT_SETTINGS`)
    - um arquivo de overrides (opcional, YAML ou JSON)

Princípios fundamentais:
    - A mesma entrada sempre produz as mesmas settings
    - Overrides nunca mutam os defaults
    - Erros estruturais são tratados como falhas fatais (antes do run)
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml  # PyYAML

from .errors import (
    InvalidSettingsFormatError,
    InvalidSettingsRootTypeError,
    InvalidSettingsValueError,
    SettingsNotFoundError,
    UnsupportedSettingsFormatError,
)
from .merge import merge_settings


BACKEND_KINDS = ("memory", "file")

DEFAULT_SETTINGS: Dict[str, Any] = {
    "preflight": {"remote": "origin", "branch": "main"},
    "backend": {"kind": "file", "path": "~/.dcd"},
    "engine": {"event_buffer": 32, "chunk_size": 16 * 1024},
}


@dataclass(frozen=True)
class Settings:
    """
    Settings efetivas do executor.

    Campos:
        - remote / branch: upstream usado pelo pre-flight de sincronização
        - backend_kind: "memory" ou "file"
        - backend_path: diretório do FileBackend
        - event_buffer: capacidade do stream de eventos
        - chunk_size: tamanho máximo de cada leitura da saída de um Step
    """

    remote: str = "origin"
    branch: str = "main"
    backend_kind: str = "file"
    backend_path: str = "~/.dcd"
    event_buffer: int = 32
    chunk_size: int = 16 * 1024

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        preflight = data.get("preflight") or {}
        backend = data.get("backend") or {}
        engine = data.get("engine") or {}

        kind = str(backend.get("kind", cls.backend_kind))
        if kind not in BACKEND_KINDS:
            raise InvalidSettingsValueError(
                f"backend.kind inválido: {kind!r} (esperado: {', '.join(BACKEND_KINDS)})"
            )

        return cls(
            remote=str(preflight.get("remote", cls.remote)),
            branch=str(preflight.get("branch", cls.branch)),
            backend_kind=kind,
            backend_path=str(backend.get("path", cls.backend_path)),
            event_buffer=_positive_int(engine.get("event_buffer", cls.event_buffer), "engine.event_buffer"),
            chunk_size=_positive_int(engine.get("chunk_size", cls.chunk_size), "engine.chunk_size"),
        )


def _positive_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidSettingsValueError(f"{key} deve ser inteiro positivo, recebido: {value!r}")
    return value


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Carrega um arquivo de settings e valida sua estrutura básica.

    Arquivos vazios são interpretados como dicionários vazios.

    Raises:
        SettingsNotFoundError: Se o arquivo não existir.
        UnsupportedSettingsFormatError: Se o formato não for suportado.
        InvalidSettingsFormatError: Se o arquivo não puder ser lido ou interpretado.
        InvalidSettingsRootTypeError: Se o conteúdo raiz não for um dicionário.
    """
    if not path.exists():
        raise SettingsNotFoundError(f"Arquivo de settings não encontrado: {path}")

    suffix = path.suffix.lower()
    if suffix not in {".yaml", ".yml", ".json"}:
        raise UnsupportedSettingsFormatError(f"Formato não suportado: {path.suffix}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) if suffix != ".json" else json.load(f)
    except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidSettingsFormatError(f"Não foi possível interpretar {path}: {exc}") from exc
    except OSError as exc:
        raise InvalidSettingsFormatError(f"Não foi possível ler {path}: {exc}") from exc

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidSettingsRootTypeError(
            f"Settings root deve ser dict, recebido: {type(data).__name__}"
        )

    return data


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Resolve as settings efetivas do executor.

    Política de resolução:
        - Sem `path`, os defaults embutidos são usados integralmente
        - Com `path`, o arquivo é obrigatório e tem prioridade sobre os defaults

    Args:
        path (Optional[Union[str, Path]]): Caminho opcional do arquivo de overrides.

    Returns:
        Settings: Settings efetivas, validadas.
    """
    effective = DEFAULT_SETTINGS
    if path is not None:
        effective = merge_settings(DEFAULT_SETTINGS, _load_file(Path(path)))
    return Settings.from_dict(effective)
