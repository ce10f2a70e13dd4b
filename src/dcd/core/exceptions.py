"""
dcd: Exceções canônicas (v1)

Este módulo define as exceções tipadas internas do dcd.

Objetivo:
- Permitir que pre-flight, engine e backends levantem exceções semânticas tipadas
- Facilitar o mapeamento determinístico para DcdErrorPayload
- Evitar RuntimeError genéricos nas fronteiras críticas (antes do run)

Regras:
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
- A causa original é sempre preservada via `raise ... from`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(eq=False)
class DcdException(Exception):
    """Base class para exceções internas do dcd.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Pre-flight (estado do repositório)
# ---------------------------------------------------------------------------

class PreflightError(DcdException):
    """Falha de verificação do repositório antes do run."""


class UncommittedChangesError(PreflightError):
    """Working tree contém alterações não commitadas (modificadas, adicionadas ou untracked)."""

    def __init__(self, paths: Optional[list] = None) -> None:
        super().__init__(
            message="the working directory contains uncommitted changes",
            details={"paths": list(paths or [])},
            hint="Commit ou descarte as alterações locais antes de executar o pipeline",
        )


class UnsyncedChangesError(PreflightError):
    """Branch local e upstream divergem (em qualquer direção)."""

    def __init__(self, remote_ahead: int, local_ahead: int) -> None:
        self.remote_ahead = remote_ahead
        self.local_ahead = local_ahead
        parts = []
        if local_ahead == 1:
            parts.append("1 local commit")
        elif local_ahead > 1:
            parts.append(f"{local_ahead} local commits")
        if remote_ahead == 1:
            parts.append("1 remote commit")
        elif remote_ahead > 1:
            parts.append(f"{remote_ahead} remote commits")
        super().__init__(
            message=(
                "the local repository is out of sync with the upstream repository: "
                + " and ".join(parts)
            ),
            details={"remote_ahead": remote_ahead, "local_ahead": local_ahead},
            hint="Faça push/pull até que local e upstream apontem para o mesmo commit",
        )


class GitCommandError(PreflightError):
    """Comando git falhou ou produziu saída inesperada."""


# ---------------------------------------------------------------------------
# Metadata / Backend / Engine
# ---------------------------------------------------------------------------

class MetadataError(DcdException):
    """Não foi possível descobrir component/git sha a partir do ambiente."""


class BackendError(DcdException):
    """Falha interna de um backend de persistência."""


class BuildIdAllocationError(DcdException):
    """Backend não conseguiu alocar um build ID."""


class PipelineStateSubmissionError(DcdException):
    """Backend rejeitou o estado inicial do pipeline."""


class CommandFailedError(DcdException):
    """Processo de um Step falhou (start, leitura da saída ou exit status != 0)."""

    def __init__(self, step_name: str, message: str) -> None:
        self.step_name = step_name
        super().__init__(message=message, details={"step_name": step_name})
