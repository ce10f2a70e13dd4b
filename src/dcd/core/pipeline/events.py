# src/dcd/core/pipeline/events.py
"""
Eventos canônicos de um run do dcd.

Um run é observado exclusivamente através de um stream ordenado de
eventos imutáveis. Cada variante é um dataclass congelado com um
`timestamp` UTC e um `kind` (EventKind) fixo por classe, o que permite
aos consumidores despachar de forma exaustiva sobre `event.kind`.

Variantes:
    - PipelineStartEvent   → primeiro evento do run (build_id)
    - StepStartEvent       → início de um Step
    - StepOutputEvent      → linhas completas da saída combinada do Step
    - StepSuccessEvent     → Step terminou com exit status 0
    - StepFailureEvent     → Step falhou (reason)
    - PipelineFailureEvent → evento terminal de falha
    - PipelineSuccessEvent → evento terminal de sucesso

Invariantes:
    - Exatamente um PipelineStartEvent por run
    - Exatamente um evento terminal fecha o stream
    - Eventos são serializáveis (`to_dict`) e reconstruíveis (`event_from_dict`)
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Dict, Type, Union


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EventKind(str, Enum):
    PIPELINE_START = "pipeline_start"
    STEP_START = "step_start"
    STEP_OUTPUT = "step_output"
    STEP_SUCCESS = "step_success"
    STEP_FAILURE = "step_failure"
    PIPELINE_FAILURE = "pipeline_failure"
    PIPELINE_SUCCESS = "pipeline_success"


class _EventMixin:
    kind: ClassVar[EventKind]
    timestamp: datetime

    def log_message(self) -> str:  # pragma: no cover - sobrescrito por todas as variantes
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind.value}
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            data[f.name] = value.isoformat() if isinstance(value, datetime) else value
        return data


@dataclass(frozen=True)
class PipelineStartEvent(_EventMixin):
    kind: ClassVar[EventKind] = EventKind.PIPELINE_START
    build_id: int
    timestamp: datetime = field(default_factory=_utcnow)

    def log_message(self) -> str:
        return "Pipeline start"


@dataclass(frozen=True)
class StepStartEvent(_EventMixin):
    kind: ClassVar[EventKind] = EventKind.STEP_START
    step_name: str
    timestamp: datetime = field(default_factory=_utcnow)

    def log_message(self) -> str:
        return f"Step started: {self.step_name}"


@dataclass(frozen=True)
class StepOutputEvent(_EventMixin):
    """Saída combinada (stdout + stderr) de um Step, em linhas completas."""

    kind: ClassVar[EventKind] = EventKind.STEP_OUTPUT
    step_name: str
    output: str
    timestamp: datetime = field(default_factory=_utcnow)

    def log_message(self) -> str:
        return f"Output from {self.step_name}: {self.output}"


@dataclass(frozen=True)
class StepSuccessEvent(_EventMixin):
    kind: ClassVar[EventKind] = EventKind.STEP_SUCCESS
    step_name: str
    timestamp: datetime = field(default_factory=_utcnow)

    def log_message(self) -> str:
        return f"Step succeeded: {self.step_name}"


@dataclass(frozen=True)
class StepFailureEvent(_EventMixin):
    kind: ClassVar[EventKind] = EventKind.STEP_FAILURE
    step_name: str
    reason: str
    timestamp: datetime = field(default_factory=_utcnow)

    def log_message(self) -> str:
        return f"Step failed: {self.step_name}, Reason: {self.reason}"


@dataclass(frozen=True)
class PipelineFailureEvent(_EventMixin):
    kind: ClassVar[EventKind] = EventKind.PIPELINE_FAILURE
    reason: str
    timestamp: datetime = field(default_factory=_utcnow)

    def log_message(self) -> str:
        return f"Pipeline failed: {self.reason}"


@dataclass(frozen=True)
class PipelineSuccessEvent(_EventMixin):
    kind: ClassVar[EventKind] = EventKind.PIPELINE_SUCCESS
    timestamp: datetime = field(default_factory=_utcnow)

    def log_message(self) -> str:
        return "Pipeline succeeded"


Event = Union[
    PipelineStartEvent,
    StepStartEvent,
    StepOutputEvent,
    StepSuccessEvent,
    StepFailureEvent,
    PipelineFailureEvent,
    PipelineSuccessEvent,
]

_BY_KIND: Dict[EventKind, Type[Any]] = {
    cls.kind: cls
    for cls in (
        PipelineStartEvent,
        StepStartEvent,
        StepOutputEvent,
        StepSuccessEvent,
        StepFailureEvent,
        PipelineFailureEvent,
        PipelineSuccessEvent,
    )
}


def is_terminal(event: Event) -> bool:
    """True para os eventos que encerram um run."""
    return event.kind in (EventKind.PIPELINE_SUCCESS, EventKind.PIPELINE_FAILURE)


def event_from_dict(data: Dict[str, Any]) -> Event:
    """
    Reconstrói um evento a partir de `to_dict`.

    Raises:
        ValueError: Se `kind` for desconhecido.
    """
    try:
        cls = _BY_KIND[EventKind(data["kind"])]
    except (KeyError, ValueError) as exc:
        raise ValueError(f"Unknown event kind: {data.get('kind')!r}") from exc

    kwargs = {f.name: data[f.name] for f in fields(cls) if f.name in data}
    if "timestamp" in kwargs:
        kwargs["timestamp"] = datetime.fromisoformat(kwargs["timestamp"])
    return cls(**kwargs)
