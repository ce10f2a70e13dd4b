# src/dcd/core/config/merge.py
"""
Deep-merge das settings do dcd.

Política de merge (v1):
    - dict → merge recursivo por chave
    - list → sobrescrita total
    - escalar → sobrescrita direta
    - conflito de tipos → SettingsTypeConflictError

O merge é puramente funcional: nenhum input é mutado.
"""

from copy import deepcopy
from typing import Any, Dict

from .errors import SettingsTypeConflictError


def merge_settings(base: Dict[str, Any], override: Dict[str, Any], *, _path: str = "") -> Dict[str, Any]:
    """
    Combina `override` sobre `base` e retorna um novo dicionário.

    Args:
        base (Dict[str, Any]): Settings base (ex.: DEFAULT_SETTINGS).
        override (Dict[str, Any]): Overrides explícitos (arquivo local).

    Returns:
        Dict[str, Any]: Nova estrutura resultante do merge.

    Raises:
        SettingsTypeConflictError: Se a mesma chave possuir tipos incompatíveis.
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise SettingsTypeConflictError(
            f"Merge de settings requer dicts, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    merged: Dict[str, Any] = deepcopy(base)

    for key, value in override.items():
        dotted = f"{_path}.{key}" if _path else str(key)
        if key not in merged:
            merged[key] = deepcopy(value)
            continue

        current = merged[key]
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_settings(current, value, _path=dotted)
        elif isinstance(value, list):
            merged[key] = deepcopy(value)
        elif current is not None and type(current) is not type(value):
            raise SettingsTypeConflictError(
                f"Conflito de tipo na chave '{dotted}': "
                f"{type(current).__name__} vs {type(value).__name__}"
            )
        else:
            merged[key] = deepcopy(value)

    return merged
