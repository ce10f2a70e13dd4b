# src/dcd/core/engine/orchestrator.py
"""
Orquestrador de runs do dcd.

Máquina de estados (terminais entre colchetes):

    Init → PreflightChecked → BuildIDAllocated → StateRecorded
         → Running(i) → [Succeeded] | [Failed]

Fase síncrona (`Pipeline.run`):
    - pre-flight do repositório
    - alocação do build ID no backend
    - envio do PipelineState inicial ("pending")
  Qualquer falha aqui é levantada ao chamador; nenhum evento é produzido.

Fase assíncrona (thread produtora):
    - PipelineStart → (StepStart → StepOutput* → StepSuccess)* → PipelineSuccess
    - na primeira falha: StepFailure → PipelineFailure, e os Steps restantes
      não são executados
  O stream é fechado logo após o evento terminal.

Invariantes:
    - Steps executam estritamente em sequência
    - Exatamente um PipelineStart e exatamente um evento terminal por run
    - Nenhum estado global: cada `Pipeline` é isolado
"""

from __future__ import annotations

import logging
import os
import queue
import threading
from pathlib import Path
from typing import Callable, Iterator, List, Mapping, Optional, Protocol, Union

from ..backend.base import Backend
from ..exceptions import BuildIdAllocationError, PipelineStateSubmissionError
from ..pipeline.definition import compute_definition_hash
from ..pipeline.events import (
    Event,
    PipelineFailureEvent,
    PipelineStartEvent,
    PipelineSuccessEvent,
    StepFailureEvent,
    StepStartEvent,
    StepSuccessEvent,
)
from ..pipeline.types import Metadata, PipelineDefinition, PipelineState, PipelineStatus
from ..preflight import GitPreflight
from .runner import DEFAULT_CHUNK_SIZE, run_step

logger = logging.getLogger(__name__)

DEFAULT_EVENT_BUFFER = 32

_CLOSED = object()


class Preflight(Protocol):
    def check(self) -> None:
        ...


class EventStream:
    """
    Stream ordenado de eventos de um run (produtor único, consumidor único).

    Iterar consome os eventos até o evento terminal; o buffer é limitado,
    então um consumidor lento bloqueia o produtor (back-pressure).
    """

    def __init__(self, build_id: int, maxsize: int = DEFAULT_EVENT_BUFFER) -> None:
        self.build_id = build_id
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=maxsize)
        self._thread: Optional[threading.Thread] = None
        self._exhausted = False

    def put(self, event: Event) -> None:
        self._queue.put(event)

    def close(self) -> None:
        self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[Event]:
        while not self._exhausted:
            item = self._queue.get()
            if item is _CLOSED:
                self._exhausted = True
                return
            yield item  # type: ignore[misc]

    def start(self, target: Callable[["EventStream"], None], *, name: str) -> None:
        self._thread = threading.Thread(target=target, args=(self,), name=name, daemon=True)
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> None:
        """Aguarda a thread produtora terminar (após o consumidor drenar o stream)."""
        if self._thread is not None:
            self._thread.join(timeout)


class Pipeline:
    """
    Orquestrador canônico: valor de entrada (definição, metadata, backend),
    stream de eventos de saída.
    """

    def __init__(
        self,
        definition: PipelineDefinition,
        metadata: Metadata,
        backend: Backend,
        *,
        preflight: Optional[Preflight] = None,
        event_buffer: int = DEFAULT_EVENT_BUFFER,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        cwd: Optional[Union[str, Path]] = None,
        base_env: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.definition = definition
        self.metadata = metadata
        self.backend = backend
        self.preflight: Preflight = preflight if preflight is not None else GitPreflight(cwd=cwd)
        self.event_buffer = event_buffer
        self.chunk_size = chunk_size
        self.cwd = cwd
        self.base_env = base_env

    # ------------------------------------------------------------------
    # Fase síncrona
    # ------------------------------------------------------------------

    def run(self) -> EventStream:
        """
        Valida o repositório, reserva um build ID e inicia o run.

        Returns:
            EventStream: Stream de eventos do run, já em produção.

        Raises:
            PreflightError: Repositório sujo ou fora de sincronia.
            BuildIdAllocationError: Backend não alocou o build ID.
            PipelineStateSubmissionError: Backend rejeitou o estado inicial.
        """
        self.preflight.check()

        try:
            build_id = self.backend.allocate_build_id()
        except Exception as exc:
            raise BuildIdAllocationError(f"failed to get build ID: {exc}") from exc

        state = PipelineState(
            build_id=build_id,
            status=PipelineStatus.PENDING.value,
            component=self.metadata.component,
            git_sha=self.metadata.git_sha,
        )
        try:
            self.backend.submit_pipeline_state(state)
        except Exception as exc:
            raise PipelineStateSubmissionError(
                f"failed to put pipeline: {exc}", details={"build_id": build_id}
            ) from exc

        logger.info(
            "pipeline %s build %d starting (%d steps, definition %s)",
            self.metadata.component,
            build_id,
            len(self.definition.steps),
            compute_definition_hash(self.definition)[:12],
        )

        stream = EventStream(build_id, maxsize=self.event_buffer)
        stream.start(self._execute, name=f"dcd-pipeline-{build_id}")
        return stream

    # ------------------------------------------------------------------
    # Fase assíncrona
    # ------------------------------------------------------------------

    def build_env(self, build_id: int) -> List[str]:
        """
        Ambiente de todos os Steps: herdado → global-env → COMPONENT/GIT_SHA/BUILD_ID.

        Entradas posteriores sombreiam anteriores de mesmo nome.
        """
        inherited = os.environ if self.base_env is None else self.base_env
        env = [f"{k}={v}" for k, v in inherited.items()]
        env.extend(f"{k}={v}" for k, v in self.definition.global_env.items())
        env.append(f"COMPONENT={self.metadata.component}")
        env.append(f"GIT_SHA={self.metadata.git_sha}")
        env.append(f"BUILD_ID={build_id}")
        return env

    def _execute(self, stream: EventStream) -> None:
        build_id = stream.build_id
        try:
            stream.put(PipelineStartEvent(build_id=build_id))
            env = self.build_env(build_id)
            for step in self.definition.steps:
                stream.put(StepStartEvent(step_name=step.name))
                try:
                    run_step(env, step, stream.put, chunk_size=self.chunk_size, cwd=self.cwd)
                except Exception as exc:
                    reason = f"step '{step.name}' failed"
                    logger.info("build %d: %s: %s", build_id, reason, exc)
                    stream.put(StepFailureEvent(step_name=step.name, reason=str(exc)))
                    stream.put(PipelineFailureEvent(reason=reason))
                    return
                stream.put(StepSuccessEvent(step_name=step.name))
            stream.put(PipelineSuccessEvent())
            logger.info("build %d succeeded", build_id)
        finally:
            stream.close()
