# src/dcd/__init__.py
"""
dcd: executor de pipelines de entrega contínua orientado a eventos.

Um pipeline é uma lista ordenada de Steps (scripts executáveis) mais um
ambiente global. Antes de executar, o dcd garante que o repositório git
está limpo e sincronizado com o upstream e reserva um build ID
estritamente crescente no backend. A execução é observada como um
stream ordenado de eventos.

Arquitetura em alto nível:
    - core.pipeline  → definição, eventos e estado
    - core.preflight → verificações do repositório
    - core.engine    → runner de Steps e orquestrador
    - core.backend   → build IDs e persistência
    - cli            → comando `dcd`
"""

from .core.engine import EventStream, Pipeline
from .core.pipeline import Metadata, PipelineDefinition, Step, load_definition

__version__ = "0.1.0"

__all__ = ["Pipeline", "EventStream", "PipelineDefinition", "Step", "Metadata", "load_definition"]
