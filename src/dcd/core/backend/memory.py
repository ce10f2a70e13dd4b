# src/dcd/core/backend/memory.py
"""Backend em memória: contador sob lock, estados e eventos em dicionários."""

from __future__ import annotations

import threading
from typing import Dict, List

from ..pipeline.events import Event
from ..pipeline.types import PipelineState


class InMemoryBackend:
    """
    Implementação de `Backend` sem persistência.

    Útil para testes e para embutir o engine em outros processos. Os
    dados vivem enquanto a instância viver.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last_id = 0
        self.states: Dict[int, PipelineState] = {}
        self.events: Dict[int, List[Event]] = {}

    def allocate_build_id(self) -> int:
        with self._lock:
            self._last_id += 1
            return self._last_id

    def submit_pipeline_state(self, state: PipelineState) -> None:
        with self._lock:
            self.states[state.build_id] = state

    def record_pipeline_event(self, build_id: int, event: Event) -> None:
        with self._lock:
            self.events.setdefault(build_id, []).append(event)
