# src/dcd/core/backend/base.py
"""
Contrato de backend do dcd.

O backend é o colaborador externo responsável por:
    - alocar build IDs estritamente crescentes (1, 2, 3, ...)
    - persistir o registro (PipelineState) de cada run
    - opcionalmente, persistir o histórico de eventos de um run

O orquestrador depende apenas deste protocolo. A conformidade é
verificada por duck typing (`@runtime_checkable`), sem herança.

Invariantes exigidas das implementações:
    - `allocate_build_id` nunca repete um valor, mesmo após runs falhos
    - `allocate_build_id` é seguro sob chamadores concorrentes
    - a primeira alocação de um backend novo retorna 1
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..pipeline.events import Event
from ..pipeline.types import PipelineState


@runtime_checkable
class Backend(Protocol):
    def allocate_build_id(self) -> int:
        """Reserva o próximo build ID."""
        ...

    def submit_pipeline_state(self, state: PipelineState) -> None:
        """Persiste (ou substitui) o registro de um run."""
        ...

    def record_pipeline_event(self, build_id: int, event: Event) -> None:
        """Anexa um evento ao histórico do run `build_id`."""
        ...
