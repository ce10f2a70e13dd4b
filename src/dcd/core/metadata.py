# src/dcd/core/metadata.py
"""
Descoberta de metadata do build a partir do repositório git.

    - component → nome do repositório, extraído da URL do remote `origin`
    - git_sha   → `git rev-parse HEAD`

O engine não valida o formato desses valores; eles são repassados aos
Steps como COMPONENT e GIT_SHA.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional, Union

from .exceptions import GitCommandError, MetadataError
from .git import run_git
from .pipeline.types import Metadata

_REPO_PATH = re.compile(r"[:/]([^/:]+/[^/]+)\.git$")


def repo_name_from_git_url(git_url: str) -> str:
    """
    Extrai o nome do repositório de uma URL git (ssh ou https).

    Exemplos:
        git@github.com:progsoftware/dcd.git     → dcd
        https://github.com/progsoftware/dcd.git → dcd

    Raises:
        MetadataError: Se a URL não contiver `<owner>/<repo>.git`.
    """
    match = _REPO_PATH.search(git_url.strip())
    if match is None:
        raise MetadataError(f"no repository name found in URL: {git_url!r}")
    return match.group(1).split("/")[-1]


def load_metadata(cwd: Optional[Union[str, Path]] = None) -> Metadata:
    """
    Lê component e git sha do repositório em `cwd`.

    Raises:
        MetadataError: Se o git falhar ou a URL do remote não for reconhecida.
    """
    try:
        url = run_git(["remote", "get-url", "origin"], cwd=cwd)
    except GitCommandError as exc:
        raise MetadataError(f"failed to get git remote origin: {exc}", details=exc.details) from exc

    component = repo_name_from_git_url(url)

    try:
        sha = run_git(["rev-parse", "HEAD"], cwd=cwd).strip()
    except GitCommandError as exc:
        raise MetadataError(f"failed to get git SHA: {exc}", details=exc.details) from exc

    return Metadata(component=component, git_sha=sha)
