# src/dcd/core/git.py
"""
Execução de comandos git usada pelo pre-flight e pela descoberta de metadata.

Única responsabilidade: rodar `git <args>` de forma síncrona e devolver
stdout, convertendo qualquer falha em `GitCommandError` com o stderr
preservado em `details`.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional, Sequence, Union

from .exceptions import GitCommandError

logger = logging.getLogger(__name__)


def run_git(args: Sequence[str], *, cwd: Optional[Union[str, Path]] = None) -> str:
    """
    Executa git e retorna stdout (texto).

    Raises:
        GitCommandError: Se o git não puder ser executado ou sair com status != 0.
    """
    command = ["git", *args]
    logger.debug("running %s (cwd=%s)", " ".join(command), cwd or ".")
    try:
        completed = subprocess.run(
            command,
            cwd=str(cwd) if cwd is not None else None,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise GitCommandError(
            message=f"failed to run {' '.join(command)}: {exc}",
            details={"command": command},
            hint="Verifique se o git está instalado e disponível no PATH",
        ) from exc

    if completed.returncode != 0:
        raise GitCommandError(
            message=f"{' '.join(command)} exited with status {completed.returncode}",
            details={
                "command": command,
                "returncode": completed.returncode,
                "stderr": completed.stderr.strip(),
            },
        )
    return completed.stdout
