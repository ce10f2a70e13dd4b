# src/dcd/core/preflight.py
"""
Verificações de pre-flight do repositório.

Antes de um run ser autorizado, o dcd exige que:
    - a working tree esteja limpa (nada modificado, adicionado ou untracked)
    - HEAD e `<remote>/<branch>` apontem para o mesmo histórico

A regra de sincronização é estrita: commits apenas locais *ou* apenas
remotos invalidam o run. Não basta "não estar atrás" do upstream.

As verificações são síncronas e executadas uma única vez, antes da
alocação de build ID e antes de qualquer evento.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .exceptions import GitCommandError, UncommittedChangesError, UnsyncedChangesError
from .git import run_git


def check_clean_working_tree(cwd: Optional[Union[str, Path]] = None) -> None:
    """
    Falha se a working tree contém qualquer alteração não commitada.

    Raises:
        UncommittedChangesError: Se `git status --porcelain` reportar algum path.
        GitCommandError: Se o git falhar.
    """
    output = run_git(["status", "--porcelain"], cwd=cwd)
    if output.strip():
        paths = [line[3:] for line in output.splitlines() if line.strip()]
        raise UncommittedChangesError(paths)


def check_synchronized_with_upstream(
    remote_name: str,
    branch_name: str,
    cwd: Optional[Union[str, Path]] = None,
) -> None:
    """
    Falha se HEAD e `<remote_name>/<branch_name>` divergem em qualquer direção.

    Usa `git rev-list --left-right --count <remote>/<branch>...HEAD`:
    a coluna esquerda conta commits só do remoto, a direita só do local.

    Raises:
        UnsyncedChangesError: Se qualquer contagem for diferente de zero.
        GitCommandError: Se o git falhar ou a saída não puder ser interpretada.
    """
    upstream = f"{remote_name}/{branch_name}"
    output = run_git(["rev-list", "--left-right", "--count", f"{upstream}...HEAD"], cwd=cwd)
    counts = output.split()
    if len(counts) != 2:
        raise GitCommandError(
            message="unexpected output from rev-list",
            details={"output": output, "upstream": upstream},
        )
    try:
        remote_ahead, local_ahead = int(counts[0]), int(counts[1])
    except ValueError as exc:
        raise GitCommandError(
            message=f"failed to parse rev-list counts: {output.strip()!r}",
            details={"output": output, "upstream": upstream},
        ) from exc

    if remote_ahead > 0 or local_ahead > 0:
        raise UnsyncedChangesError(remote_ahead=remote_ahead, local_ahead=local_ahead)


@dataclass(frozen=True)
class GitPreflight:
    """Pre-flight padrão do orquestrador: working tree limpa + sincronização estrita."""

    remote_name: str = "origin"
    branch_name: str = "main"
    cwd: Optional[Union[str, Path]] = None

    def check(self) -> None:
        check_clean_working_tree(cwd=self.cwd)
        check_synchronized_with_upstream(self.remote_name, self.branch_name, cwd=self.cwd)
