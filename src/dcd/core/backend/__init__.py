# src/dcd/core/backend/__init__.py
"""
Backends de persistência do dcd.

    - Backend        → protocolo consumido pelo orquestrador
    - InMemoryBackend → sem persistência (testes, uso embutido)
    - FileBackend     → diretório local com JSON e lock exclusivo
    - create_backend  → fábrica a partir das Settings
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from ..config.errors import InvalidSettingsValueError
from ..config.loader import Settings
from .base import Backend
from .file import FileBackend
from .memory import InMemoryBackend


def create_backend(settings: Settings, *, base_dir: Optional[Union[str, Path]] = None) -> Backend:
    """
    Instancia o backend configurado.

    `~` é expandido; `backend_path` relativo é resolvido a partir de `base_dir`
    (padrão: diretório atual). O padrão fica fora do repositório para não
    sujar a working tree verificada pelo pre-flight.
    """
    if settings.backend_kind == "memory":
        return InMemoryBackend()
    if settings.backend_kind == "file":
        root = Path(settings.backend_path).expanduser()
        if not root.is_absolute() and base_dir is not None:
            root = Path(base_dir) / root
        return FileBackend(root)
    raise InvalidSettingsValueError(f"backend.kind inválido: {settings.backend_kind!r}")


__all__ = ["Backend", "InMemoryBackend", "FileBackend", "create_backend"]
