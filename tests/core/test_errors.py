# tests/core/test_errors.py
"""
Testes das exceções tipadas e do payload canônico de erro.

Os testes asseguram que:
- cada exceção do dcd é mapeada para um código estável do catálogo
- a causa original aparece em `details["cause"]`
- erros de definição e de settings têm código e hint próprios
- exceções desconhecidas viram UNEXPECTED_ERROR sem stack trace
"""

import pytest

from dcd.core import errors
from dcd.core.config import InvalidSettingsValueError
from dcd.core.errors import to_error_payload
from dcd.core.exceptions import (
    BackendError,
    BuildIdAllocationError,
    CommandFailedError,
    DcdException,
    GitCommandError,
    MetadataError,
    PipelineStateSubmissionError,
    PreflightError,
    UncommittedChangesError,
    UnsyncedChangesError,
)
from dcd.core.pipeline import InvalidDefinitionError


@pytest.mark.parametrize(
    "exc, code",
    [
        (UncommittedChangesError(["a"]), errors.PREFLIGHT_UNCOMMITTED_CHANGES),
        (UnsyncedChangesError(remote_ahead=1, local_ahead=0), errors.PREFLIGHT_UNSYNCED_CHANGES),
        (GitCommandError(message="git failed"), errors.GIT_COMMAND_FAILED),
        (MetadataError(message="no origin"), errors.METADATA_DISCOVERY_FAILED),
        (BuildIdAllocationError(message="x"), errors.BUILD_ID_ALLOCATION_FAILED),
        (PipelineStateSubmissionError(message="x"), errors.PIPELINE_STATE_SUBMISSION_FAILED),
        (CommandFailedError("build", "command failed: exit status 1"), errors.STEP_COMMAND_FAILED),
        (BackendError(message="disk"), errors.BACKEND_FAILURE),
        (DcdException(message="generic"), errors.UNEXPECTED_ERROR),
    ],
)
def test_dcd_exceptions_map_to_catalog(exc, code):
    payload = to_error_payload(exc)

    assert payload.type == code
    assert payload.message == str(exc)


def test_preflight_errors_share_a_base():
    assert issubclass(UncommittedChangesError, PreflightError)
    assert issubclass(UnsyncedChangesError, PreflightError)
    assert issubclass(GitCommandError, PreflightError)


def test_cause_is_recorded_in_details():
    try:
        try:
            raise RuntimeError("connection refused")
        except RuntimeError as inner:
            raise BuildIdAllocationError(message=f"failed to get build ID: {inner}") from inner
    except BuildIdAllocationError as exc:
        payload = to_error_payload(exc)

    assert payload.details["cause"] == "connection refused"


def test_hint_is_carried():
    payload = to_error_payload(UncommittedChangesError())

    assert payload.hint
    assert payload.to_dict() == {
        "type": errors.PREFLIGHT_UNCOMMITTED_CHANGES,
        "message": "the working directory contains uncommitted changes",
        "details": {"paths": []},
        "hint": payload.hint,
    }


def test_unsynced_message_pluralization():
    assert str(UnsyncedChangesError(remote_ahead=0, local_ahead=2)).endswith("2 local commits")
    assert str(UnsyncedChangesError(remote_ahead=1, local_ahead=3)).endswith(
        "3 local commits and 1 remote commit"
    )


def test_definition_and_settings_errors():
    definition = to_error_payload(InvalidDefinitionError("'steps' é obrigatório"))
    settings = to_error_payload(InvalidSettingsValueError("engine.chunk_size inválido"))

    assert definition.type == errors.DEFINITION_INVALID
    assert definition.details == {"exception_class": "InvalidDefinitionError"}
    assert definition.hint
    assert settings.type == errors.SETTINGS_INVALID


def test_unknown_exception_is_unexpected():
    payload = to_error_payload(KeyError("x"))

    assert payload.type == errors.UNEXPECTED_ERROR
    assert payload.details == {"exception_class": "KeyError"}
    assert payload.hint is None


def test_command_failed_keeps_step_name():
    exc = CommandFailedError("deploy", "command failed: exit status 2")

    assert exc.step_name == "deploy"
    assert exc.details == {"step_name": "deploy"}
