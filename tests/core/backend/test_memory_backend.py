# tests/core/backend/test_memory_backend.py
"""
Testes do backend em memória.

Os testes asseguram que:
- build IDs são 1..N, estritamente crescentes
- alocação concorrente nunca repete IDs
- estados e eventos são armazenados por build ID
- a implementação satisfaz o protocolo Backend
"""

import threading

from dcd.core.backend import Backend, InMemoryBackend
from dcd.core.pipeline import PipelineStartEvent, PipelineState


def test_allocates_one_to_n():
    backend = InMemoryBackend()

    assert [backend.allocate_build_id() for _ in range(5)] == [1, 2, 3, 4, 5]


def test_concurrent_allocation_never_repeats():
    backend = InMemoryBackend()
    allocated = []
    lock = threading.Lock()

    def worker():
        for _ in range(50):
            build_id = backend.allocate_build_id()
            with lock:
                allocated.append(build_id)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(allocated) == list(range(1, 401))


def test_stores_states_and_events():
    backend = InMemoryBackend()
    state = PipelineState(build_id=1, status="pending")
    event = PipelineStartEvent(build_id=1)

    backend.submit_pipeline_state(state)
    backend.record_pipeline_event(1, event)

    assert backend.states == {1: state}
    assert backend.events == {1: [event]}


def test_satisfies_backend_protocol():
    assert isinstance(InMemoryBackend(), Backend)
