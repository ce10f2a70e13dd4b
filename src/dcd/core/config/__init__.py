# src/dcd/core/config/__init__.py

"""
Camada de configuração do dcd.

Este pacote carrega, mescla e valida as settings do executor
(upstream do pre-flight, backend de persistência, buffer de eventos).

A configuração no dcd é:
    - declarativa
    - determinística
    - separada da definição do pipeline

Limites explícitos:
    - Não valida a definição de Steps
    - Não executa pipeline
"""

from .errors import (
    InvalidSettingsFormatError,
    InvalidSettingsRootTypeError,
    InvalidSettingsValueError,
    SettingsError,
    SettingsNotFoundError,
    SettingsTypeConflictError,
    UnsupportedSettingsFormatError,
)
from .hashing import compute_canonical_hash
from .loader import DEFAULT_SETTINGS, Settings, load_settings
from .merge import merge_settings

__all__ = [
    "DEFAULT_SETTINGS",
    "Settings",
    "load_settings",
    "merge_settings",
    "compute_canonical_hash",
    "SettingsError",
    "SettingsNotFoundError",
    "UnsupportedSettingsFormatError",
    "InvalidSettingsFormatError",
    "InvalidSettingsRootTypeError",
    "InvalidSettingsValueError",
    "SettingsTypeConflictError",
]
