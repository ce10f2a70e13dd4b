# src/dcd/core/pipeline/__init__.py
"""
# Pipeline Core (dcd)

Este pacote define os **tipos canônicos** de um pipeline do dcd:
o que é executado (definição), o que é observado (eventos) e o que é
persistido (estado do run).

## Componentes

- **types**
  - `Step`, `PipelineDefinition`, `Metadata`
  - `PipelineStatus`, `PipelineState`

- **events**
  - variantes imutáveis de evento e `EventKind`

- **definition**
  - `load_definition`, `parse_definition`, `dump_definition`

## Limites Explícitos

- Não executa Steps
- Não verifica o estado do repositório
"""

from .definition import (
    DefinitionError,
    DefinitionNotFoundError,
    InvalidDefinitionError,
    UnsupportedDefinitionFormatError,
    compute_definition_hash,
    definition_to_dict,
    dump_definition,
    load_definition,
    parse_definition,
)
from .events import (
    Event,
    EventKind,
    PipelineFailureEvent,
    PipelineStartEvent,
    PipelineSuccessEvent,
    StepFailureEvent,
    StepOutputEvent,
    StepStartEvent,
    StepSuccessEvent,
    event_from_dict,
    is_terminal,
)
from .types import Metadata, PipelineDefinition, PipelineState, PipelineStatus, Step

__all__ = [
    "Metadata",
    "Step",
    "PipelineDefinition",
    "PipelineState",
    "PipelineStatus",
    "Event",
    "EventKind",
    "PipelineStartEvent",
    "StepStartEvent",
    "StepOutputEvent",
    "StepSuccessEvent",
    "StepFailureEvent",
    "PipelineFailureEvent",
    "PipelineSuccessEvent",
    "event_from_dict",
    "is_terminal",
    "DefinitionError",
    "DefinitionNotFoundError",
    "UnsupportedDefinitionFormatError",
    "InvalidDefinitionError",
    "load_definition",
    "parse_definition",
    "definition_to_dict",
    "dump_definition",
    "compute_definition_hash",
]
