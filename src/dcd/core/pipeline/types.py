# src/dcd/core/pipeline/types.py
"""
Tipos canônicos do pipeline do dcd.

Este módulo define as estruturas imutáveis que descrevem *o que* um run
executa e *como* ele é registrado:

    - Metadata           → component e git sha do build
    - Step               → um comando externo nomeado
    - PipelineDefinition → Steps ordenados + ambiente global
    - PipelineStatus     → valores de status gravados pelo dcd
    - PipelineState      → registro persistido de um run (build ID + status)

Princípios fundamentais:
    - Tipos são estáveis e serializáveis
    - Nenhuma lógica de execução vive neste módulo

Invariantes:
    - A ordem de `PipelineDefinition.steps` é a ordem de execução
    - Instâncias nunca são alteradas após criadas
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple


@dataclass(frozen=True)
class Metadata:
    """Metadados ambientes de um build (imutáveis após carregados)."""

    component: str
    git_sha: str


@dataclass(frozen=True)
class Step:
    """
    Um Step do pipeline: nome (apenas rótulo de eventos) e script executável.

    O nome não precisa ser único; o script é executado sem argumentos.
    """

    name: str
    script: str


@dataclass(frozen=True)
class PipelineDefinition:
    """
    Definição declarativa de um pipeline.

    Campos:
        - steps: Steps em ordem de execução
        - global_env: variáveis injetadas em todos os Steps

    `global_env` é exposto como mapeamento somente-leitura.
    """

    steps: Tuple[Step, ...] = ()
    global_env: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "steps", tuple(self.steps))
        object.__setattr__(self, "global_env", MappingProxyType(dict(self.global_env)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PipelineDefinition):
            return NotImplemented
        return self.steps == other.steps and dict(self.global_env) == dict(other.global_env)

    def __hash__(self) -> int:
        return hash((self.steps, tuple(sorted(self.global_env.items()))))


class PipelineStatus(str, Enum):
    """
    Status de um run gravados pelo dcd.

    O campo persistido é uma string aberta: backends podem gravar outros
    valores terminais. Estes são os valores usados pelo próprio dcd.
    """

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class PipelineState:
    """
    Registro persistido de um run.

    O orquestrador apenas constrói e envia o estado inicial ("pending");
    a partir daí o registro pertence ao backend.
    """

    build_id: int
    status: str
    component: str = ""
    git_sha: str = ""
    updated_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "build_id": self.build_id,
            "status": str(getattr(self.status, "value", self.status)),
            "component": self.component,
            "git_sha": self.git_sha,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineState":
        return cls(
            build_id=int(data["build_id"]),
            status=str(data.get("status", "")),
            component=str(data.get("component", "")),
            git_sha=str(data.get("git_sha", "")),
            updated_at=str(data.get("updated_at", "")),
        )
