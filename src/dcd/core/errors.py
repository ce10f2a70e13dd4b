"""
dcd: Estruturas canônicas de erro (v1)

Este módulo define o padrão canônico de erros reportados ao operador.
Erros que abortam um run antes do streaming de eventos são convertidos
em um payload:

- explícito
- serializável
- acionável (hint)

Nenhuma decisão implícita é permitida: o payload descreve a falha,
não tenta recuperá-la.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from .config.errors import SettingsError
from .exceptions import (
    BackendError,
    BuildIdAllocationError,
    CommandFailedError,
    DcdException,
    GitCommandError,
    MetadataError,
    PipelineStateSubmissionError,
    UncommittedChangesError,
    UnsyncedChangesError,
)
from .pipeline.definition import DefinitionError


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DcdErrorPayload:
    """
    Payload canônico de erro do dcd.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

PREFLIGHT_UNCOMMITTED_CHANGES = "PREFLIGHT_UNCOMMITTED_CHANGES"
PREFLIGHT_UNSYNCED_CHANGES = "PREFLIGHT_UNSYNCED_CHANGES"
GIT_COMMAND_FAILED = "GIT_COMMAND_FAILED"
METADATA_DISCOVERY_FAILED = "METADATA_DISCOVERY_FAILED"
DEFINITION_INVALID = "DEFINITION_INVALID"
SETTINGS_INVALID = "SETTINGS_INVALID"
BUILD_ID_ALLOCATION_FAILED = "BUILD_ID_ALLOCATION_FAILED"
PIPELINE_STATE_SUBMISSION_FAILED = "PIPELINE_STATE_SUBMISSION_FAILED"
STEP_COMMAND_FAILED = "STEP_COMMAND_FAILED"
BACKEND_FAILURE = "BACKEND_FAILURE"
UNEXPECTED_ERROR = "UNEXPECTED_ERROR"

# Ordem importa: subclasses antes das bases.
_DCD_CODES = (
    (UncommittedChangesError, PREFLIGHT_UNCOMMITTED_CHANGES),
    (UnsyncedChangesError, PREFLIGHT_UNSYNCED_CHANGES),
    (GitCommandError, GIT_COMMAND_FAILED),
    (MetadataError, METADATA_DISCOVERY_FAILED),
    (BuildIdAllocationError, BUILD_ID_ALLOCATION_FAILED),
    (PipelineStateSubmissionError, PIPELINE_STATE_SUBMISSION_FAILED),
    (CommandFailedError, STEP_COMMAND_FAILED),
    (BackendError, BACKEND_FAILURE),
)


def to_error_payload(exc: BaseException) -> DcdErrorPayload:
    """Converte exceções em DcdErrorPayload (serializável, acionável).

    Regras:
    - DcdException: já vem com message/details/hint; o código vem do catálogo.
    - DefinitionError / SettingsError: código estável, mensagem da exceção.
    - Outras exceções: UNEXPECTED_ERROR sem expor stack trace.
    """
    if isinstance(exc, DcdException):
        code = UNEXPECTED_ERROR
        for cls, candidate in _DCD_CODES:
            if isinstance(exc, cls):
                code = candidate
                break
        details = dict(exc.details or {})
        if exc.__cause__ is not None:
            details.setdefault("cause", str(exc.__cause__))
        return DcdErrorPayload(type=code, message=exc.message, details=details, hint=exc.hint)

    if isinstance(exc, DefinitionError):
        return DcdErrorPayload(
            type=DEFINITION_INVALID,
            message=str(exc),
            details={"exception_class": exc.__class__.__name__},
            hint="Revise o arquivo de definição do pipeline (global-env / steps)",
        )

    if isinstance(exc, SettingsError):
        return DcdErrorPayload(
            type=SETTINGS_INVALID,
            message=str(exc),
            details={"exception_class": exc.__class__.__name__},
            hint="Revise o arquivo de configuração do dcd",
        )

    return DcdErrorPayload(
        type=UNEXPECTED_ERROR,
        message=str(exc) or "Erro inesperado",
        details={"exception_class": exc.__class__.__name__},
    )
