# src/dcd/core/engine/__init__.py
"""
Engine do dcd.

Este pacote executa um pipeline já validado:

    - runner       → executa um Step como processo filho e transmite sua saída
    - orchestrator → pre-flight, build ID, estado inicial e execução sequencial

O Engine não interpreta a saída dos Steps nem decide políticas de retry:
o primeiro Step com falha encerra o run.
"""

from .orchestrator import DEFAULT_EVENT_BUFFER, EventStream, Pipeline, Preflight
from .runner import DEFAULT_CHUNK_SIZE, OutputChunker, env_list_to_mapping, run_step

__all__ = [
    "Pipeline",
    "EventStream",
    "Preflight",
    "DEFAULT_EVENT_BUFFER",
    "DEFAULT_CHUNK_SIZE",
    "OutputChunker",
    "env_list_to_mapping",
    "run_step",
]
