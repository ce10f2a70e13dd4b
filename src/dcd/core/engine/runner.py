# src/dcd/core/engine/runner.py
"""
Execução de um único Step como processo filho.

Protocolo:
    1. O script do Step é iniciado sem argumentos, com o ambiente
       totalmente substituído pela lista `KEY=VALUE` recebida.
    2. stderr é redirecionado para stdout: o consumidor recebe um único
       stream combinado, na ordem em que os bytes chegam.
    3. Uma thread leitora drena o pipe em blocos limitados e re-segmenta
       os bytes em linhas completas (StepOutputEvent).
    4. A thread chamadora aguarda o término do processo; em seguida a
       thread leitora é unida (join). Nenhum evento é emitido depois que
       `run_step` retorna.

Qualquer falha (start, leitura, exit status != 0) vira um único
`CommandFailedError`, com o motivo na mensagem.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from pathlib import Path
from typing import IO, Callable, Dict, Optional, Sequence, Union

from ..exceptions import CommandFailedError
from ..pipeline.events import Event, StepOutputEvent
from ..pipeline.types import Step

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 16 * 1024

EmitFn = Callable[[Event], None]


def env_list_to_mapping(env: Sequence[str]) -> Dict[str, str]:
    """
    Converte `KEY=VALUE` ordenado em dict; entradas posteriores sombreiam anteriores.

    Entradas sem `=` são ignoradas.
    """
    mapping: Dict[str, str] = {}
    for entry in env:
        key, sep, value = entry.partition("=")
        if not sep or not key:
            continue
        mapping[key] = value
    return mapping


class OutputChunker:
    """
    Re-segmenta blocos de bytes arbitrários em texto de linhas completas.

    `feed` devolve todas as linhas terminadas em `\\n` acumuladas até o
    momento (concatenadas) ou None; a linha parcial final é retida e
    prefixada ao próximo bloco. `flush` devolve o resto sem `\\n`.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding
        self._remainder = b""

    def feed(self, chunk: bytes) -> Optional[str]:
        data = self._remainder + chunk
        cut = data.rfind(b"\n")
        if cut == -1:
            self._remainder = data
            return None
        self._remainder = data[cut + 1:]
        return data[: cut + 1].decode(self._encoding, errors="replace")

    def flush(self) -> Optional[str]:
        if not self._remainder:
            return None
        text = self._remainder.decode(self._encoding, errors="replace")
        self._remainder = b""
        return text


class _OutputDrain:
    """Corpo da thread leitora: lê o pipe até EOF e emite StepOutputEvent."""

    def __init__(self, stream: IO[bytes], step_name: str, emit: EmitFn, chunk_size: int) -> None:
        self.stream = stream
        self.step_name = step_name
        self.emit = emit
        self.chunk_size = chunk_size
        self.error: Optional[BaseException] = None

    def __call__(self) -> None:
        chunker = OutputChunker()
        try:
            while True:
                chunk = self.stream.read1(self.chunk_size)  # type: ignore[attr-defined]
                if not chunk:
                    break
                text = chunker.feed(chunk)
                if text is not None:
                    self.emit(StepOutputEvent(step_name=self.step_name, output=text))
            tail = chunker.flush()
            if tail is not None:
                self.emit(StepOutputEvent(step_name=self.step_name, output=tail))
        except BaseException as exc:  # noqa: BLE001 - repassado à thread chamadora
            self.error = exc


def run_step(
    env: Sequence[str],
    step: Step,
    emit: EmitFn,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    cwd: Optional[Union[str, Path]] = None,
) -> None:
    """
    Executa `step.script` e transmite sua saída combinada via `emit`.

    Args:
        env (Sequence[str]): Ambiente completo do processo (`KEY=VALUE`).
        step (Step): Step a executar.
        emit (Callable[[Event], None]): Destino dos StepOutputEvent.
        chunk_size (int): Tamanho máximo de cada leitura do pipe.
        cwd: Diretório de trabalho do processo (padrão: o atual).

    Raises:
        CommandFailedError: Falha ao iniciar, ao ler a saída ou exit status != 0.
    """
    try:
        process = subprocess.Popen(
            [step.script],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            env=env_list_to_mapping(env),
            cwd=str(cwd) if cwd is not None else None,
        )
    except (OSError, ValueError) as exc:
        # ValueError: NUL em argumento ou variável de ambiente
        raise CommandFailedError(step.name, f"command failed: {exc}") from exc

    logger.debug("step %r started (pid=%s, script=%s)", step.name, process.pid, step.script)

    drain = _OutputDrain(process.stdout, step.name, emit, chunk_size)  # type: ignore[arg-type]
    reader = threading.Thread(target=drain, name=f"dcd-output-{step.name}", daemon=True)
    reader.start()
    try:
        returncode = process.wait()
    finally:
        reader.join()
        process.stdout.close()  # type: ignore[union-attr]

    logger.debug("step %r exited with status %s", step.name, returncode)

    if returncode != 0:
        raise CommandFailedError(step.name, f"command failed: {_describe_exit(returncode)}")
    if drain.error is not None:
        raise CommandFailedError(
            step.name, f"reading command output failed: {drain.error}"
        ) from drain.error


def _describe_exit(returncode: int) -> str:
    if returncode < 0:
        return f"signal: {-returncode}"
    return f"exit status {returncode}"

