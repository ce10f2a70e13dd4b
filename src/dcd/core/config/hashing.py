# src/dcd/core/config/hashing.py
"""
Hashing canônico de estruturas declarativas do dcd.

O hash representa a identidade estrutural de uma definição de pipeline
(ou de settings resolvidas) e aparece nos logs de início de run para
rastreabilidade.

Política de hashing (v1):
    - Serialização JSON canônica (chaves ordenadas, separadores compactos)
    - Codificação UTF-8
    - SHA-256, hexadecimal (64 caracteres)
"""

import hashlib
import json
from typing import Any, Dict


def compute_canonical_hash(data: Dict[str, Any]) -> str:
    """
    Gera um hash determinístico de um dicionário serializável.

    Estruturas equivalentes produzem o mesmo hash, independentemente
    da ordem original das chaves.

    Raises:
        TypeError: Se `data` não for um dicionário.
    """
    if not isinstance(data, dict):
        raise TypeError(f"Hash canônico requer dict, recebido: {type(data).__name__}")

    canonical_json = json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()
