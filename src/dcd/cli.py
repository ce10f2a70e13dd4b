# src/dcd/cli.py
"""
Interface de linha de comando do dcd.

Comandos:
    dcd run <pipeline-file>   → executa o pipeline e imprime um evento por linha
    dcd image-usage-message   → aviso para quem executa a imagem base diretamente

Códigos de saída:
    0 → PipelineSuccessEvent
    1 → PipelineFailureEvent ou erro antes do run (pre-flight, definição, backend)
    2 → uso incorreto (argparse)

A CLI é um adapter fino: toda a lógica vive em `dcd.core`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from .core.backend import create_backend
from .core.config import Settings, SettingsError, load_settings
from .core.engine import Pipeline
from .core.errors import to_error_payload
from .core.exceptions import DcdException
from .core.metadata import load_metadata
from .core.pipeline import DefinitionError, PipelineState, PipelineStatus, load_definition
from .core.pipeline.events import EventKind
from .core.preflight import GitPreflight
from .core.recording import record_events

logger = logging.getLogger(__name__)

IMAGE_USAGE_MESSAGE = (
    "This image should be used as a base image, not run directly - "
    "see README.md for more information."
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dcd", description="Continuous delivery pipeline runner")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="run a pipeline definition")
    run.add_argument("pipeline_file")
    run.add_argument("--config", help="settings file (YAML or JSON)")
    run.add_argument("--remote", help="upstream remote name (default: origin)")
    run.add_argument("--branch", help="upstream branch name (default: main)")
    run.add_argument("--backend", choices=["memory", "file"], help="backend kind")
    run.add_argument("--state-dir", help="directory of the file backend")
    run.add_argument("-v", "--verbose", action="store_true", help="debug logging on stderr")

    subparsers.add_parser("image-usage-message", help="print the base image notice")
    return parser


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides = {}
    if args.remote:
        overrides["remote"] = args.remote
    if args.branch:
        overrides["branch"] = args.branch
    if args.backend:
        overrides["backend_kind"] = args.backend
    if args.state_dir:
        overrides["backend_path"] = args.state_dir
    return replace(settings, **overrides) if overrides else settings


def _report_error(exc: BaseException) -> None:
    payload = to_error_payload(exc)
    print(f"error: {payload.message}", file=sys.stderr)
    if payload.hint:
        print(f"hint: {payload.hint}", file=sys.stderr)
    logger.debug("error payload: %s", payload.to_dict())


def _run(args: argparse.Namespace) -> int:
    try:
        settings = _apply_overrides(load_settings(args.config), args)
        definition = load_definition(args.pipeline_file)
        metadata = load_metadata()
        backend = create_backend(settings)
        pipeline = Pipeline(
            definition,
            metadata,
            backend,
            preflight=GitPreflight(remote_name=settings.remote, branch_name=settings.branch),
            event_buffer=settings.event_buffer,
            chunk_size=settings.chunk_size,
        )
        stream = pipeline.run()
    except (DcdException, DefinitionError, SettingsError) as exc:
        _report_error(exc)
        return 1

    state = PipelineState(
        build_id=stream.build_id,
        status=PipelineStatus.PENDING.value,
        component=metadata.component,
        git_sha=metadata.git_sha,
    )
    exit_code = 1
    try:
        for event in record_events(stream, backend, state):
            print(event.log_message(), flush=True)
            if event.kind is EventKind.PIPELINE_SUCCESS:
                exit_code = 0
    except DcdException as exc:
        _report_error(exc)
        return 1
    stream.join()
    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "image-usage-message":
        print(IMAGE_USAGE_MESSAGE)
        return 1
    if args.command == "run":
        return _run(args)
    parser.error(f"unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
