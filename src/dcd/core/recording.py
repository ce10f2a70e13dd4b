# src/dcd/core/recording.py
"""
Gravação do histórico de um run no backend.

`record_events` envolve o stream de eventos de um run: cada evento é
anexado ao histórico do backend e repassado inalterado ao consumidor.
Ao receber o evento terminal, o registro do run é atualizado para
"succeeded" ou "failed".

Limites explícitos:
    - Erros do backend são propagados ao consumidor
    - O orquestrador não depende deste módulo
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable, Iterator

from .backend.base import Backend
from .pipeline.events import Event, EventKind, is_terminal
from .pipeline.types import PipelineState, PipelineStatus

logger = logging.getLogger(__name__)


def final_status(event: Event) -> PipelineStatus:
    """Status persistido correspondente a um evento terminal."""
    if event.kind is EventKind.PIPELINE_SUCCESS:
        return PipelineStatus.SUCCEEDED
    if event.kind is EventKind.PIPELINE_FAILURE:
        return PipelineStatus.FAILED
    raise ValueError(f"not a terminal event: {event.kind.value}")


def record_events(
    stream: Iterable[Event],
    backend: Backend,
    state: PipelineState,
) -> Iterator[Event]:
    """
    Repassa os eventos de `stream`, gravando cada um em `backend`.

    Args:
        stream: Eventos do run (tipicamente o EventStream do orquestrador).
        backend: Destino do histórico e do registro final.
        state: Registro inicial do run; `build_id` identifica o histórico.

    Yields:
        Event: Os mesmos eventos, na mesma ordem.
    """
    for event in stream:
        backend.record_pipeline_event(state.build_id, event)
        if is_terminal(event):
            status = final_status(event)
            backend.submit_pipeline_state(
                replace(
                    state,
                    status=status.value,
                    updated_at=datetime.now(timezone.utc).isoformat(),
                )
            )
            logger.debug("build %d recorded as %s", state.build_id, status.value)
        yield event
