# src/dcd/core/pipeline/definition.py
"""
Loader canônico da definição de pipeline do dcd.

Este módulo transforma um arquivo declarativo (YAML ou JSON) em uma
`PipelineDefinition` imutável, e faz o caminho inverso para inspeção
e round-trip.

Formato (v1):

    global-env:          # opcional, mapeamento string → string
      KEY: value
    steps:               # obrigatório, lista ordenada
      - name: build
        script: ./ci/build.sh

Princípios fundamentais:
    - Estrutura inválida é erro fatal, detectado antes do run
    - Nenhuma coerção implícita (ex.: números em global-env são rejeitados)
    - A ordem dos Steps no arquivo é a ordem de execução

Invariantes:
    - dump → parse preserva ordem dos Steps e o mapeamento global-env

Limites explícitos:
    - Não valida existência ou permissão de execução dos scripts
    - Não executa Steps
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml  # PyYAML

from ..config.hashing import compute_canonical_hash
from .types import PipelineDefinition, Step


GLOBAL_ENV_KEY = "global-env"
STEPS_KEY = "steps"


class DefinitionError(Exception):
    """Exceção base para falhas de carregamento da definição de pipeline."""


class DefinitionNotFoundError(DefinitionError):
    """Arquivo de definição não encontrado."""


class UnsupportedDefinitionFormatError(DefinitionError):
    """Extensão do arquivo de definição não suportada (apenas YAML/JSON)."""


class InvalidDefinitionError(DefinitionError):
    """Conteúdo da definição não respeita a estrutura esperada."""


def parse_definition(data: Any) -> PipelineDefinition:
    """
    Valida a estrutura bruta (já desserializada) e constrói a definição.

    Args:
        data (Any): Conteúdo desserializado do arquivo.

    Returns:
        PipelineDefinition: Definição imutável.

    Raises:
        InvalidDefinitionError: Se a estrutura não for a esperada.
    """
    if not isinstance(data, dict):
        raise InvalidDefinitionError(
            f"Definition root deve ser dict, recebido: {type(data).__name__}"
        )

    raw_env = data.get(GLOBAL_ENV_KEY)
    if raw_env is None:
        raw_env = {}
    if not isinstance(raw_env, dict):
        raise InvalidDefinitionError(f"'{GLOBAL_ENV_KEY}' deve ser um mapeamento")
    for key, value in raw_env.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise InvalidDefinitionError(
                f"'{GLOBAL_ENV_KEY}' aceita apenas strings: {key!r}={value!r}"
            )

    if STEPS_KEY not in data:
        raise InvalidDefinitionError(f"'{STEPS_KEY}' é obrigatório")
    raw_steps = data[STEPS_KEY]
    if raw_steps is None:
        raw_steps = []
    if not isinstance(raw_steps, list):
        raise InvalidDefinitionError(f"'{STEPS_KEY}' deve ser uma lista")

    steps: List[Step] = []
    for index, raw in enumerate(raw_steps):
        if not isinstance(raw, dict):
            raise InvalidDefinitionError(f"steps[{index}] deve ser um mapeamento")
        name = raw.get("name")
        script = raw.get("script")
        if not isinstance(name, str) or not isinstance(script, str):
            raise InvalidDefinitionError(
                f"steps[{index}] requer 'name' e 'script' do tipo string"
            )
        steps.append(Step(name=name, script=script))

    return PipelineDefinition(steps=tuple(steps), global_env=dict(raw_env))


def load_definition(path: Union[str, Path]) -> PipelineDefinition:
    """
    Carrega e valida a definição de pipeline a partir do disco.

    Raises:
        DefinitionNotFoundError: Se o arquivo não existir.
        UnsupportedDefinitionFormatError: Se a extensão não for .yaml/.yml/.json.
        InvalidDefinitionError: Se o arquivo não puder ser lido ou o conteúdo for malformado.
    """
    file = Path(path)
    if not file.is_file():
        raise DefinitionNotFoundError(f"Arquivo de definição não encontrado: {file}")

    suffix = file.suffix.lower()
    if suffix not in {".yaml", ".yml", ".json"}:
        raise UnsupportedDefinitionFormatError(f"Formato não suportado: {file.suffix}")

    try:
        with file.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) if suffix != ".json" else json.load(f)
    except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidDefinitionError(f"Não foi possível interpretar {file}: {exc}") from exc
    except OSError as exc:
        raise InvalidDefinitionError(f"Não foi possível ler {file}: {exc}") from exc

    return parse_definition(data)


def definition_to_dict(definition: PipelineDefinition) -> Dict[str, Any]:
    return {
        GLOBAL_ENV_KEY: dict(definition.global_env),
        STEPS_KEY: [{"name": s.name, "script": s.script} for s in definition.steps],
    }


def dump_definition(definition: PipelineDefinition) -> str:
    """Serializa a definição em YAML, preservando a ordem dos Steps."""
    return yaml.safe_dump(definition_to_dict(definition), sort_keys=False, default_flow_style=False)


def compute_definition_hash(definition: PipelineDefinition) -> str:
    """Identidade estrutural da definição (SHA-256 do JSON canônico)."""
    return compute_canonical_hash(definition_to_dict(definition))
