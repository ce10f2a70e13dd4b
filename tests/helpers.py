# tests/helpers.py
"""
Utilitários de teste do dcd (importados explicitamente pelos módulos de teste).

- NullPreflight / FailingPreflight → pre-flights controlados
- AllocationFailingBackend / SubmissionFailingBackend → backends que falham
- git / commit_file → git isolado da configuração do usuário
"""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path
from typing import List

import pytest

from dcd.core.backend import InMemoryBackend

GIT_AVAILABLE = shutil.which("git") is not None

requires_git = pytest.mark.skipif(not GIT_AVAILABLE, reason="git não disponível")


class NullPreflight:
    """Pre-flight que sempre aprova; conta as chamadas."""

    def __init__(self) -> None:
        self.calls = 0

    def check(self) -> None:
        self.calls += 1


class FailingPreflight:
    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    def check(self) -> None:
        raise self.exc


class AllocationFailingBackend(InMemoryBackend):
    def allocate_build_id(self) -> int:
        raise RuntimeError("backend unavailable")


class SubmissionFailingBackend(InMemoryBackend):
    def submit_pipeline_state(self, state) -> None:
        raise RuntimeError("write rejected")


def git(cwd: Path, *args: str) -> str:
    """Executa git com identidade fixa, isolado da configuração do usuário."""
    env = dict(os.environ)
    env.update(
        {
            "GIT_CONFIG_NOSYSTEM": "1",
            "GIT_CONFIG_GLOBAL": os.devnull,
            "GIT_AUTHOR_NAME": "dcd",
            "GIT_AUTHOR_EMAIL": "dcd@example.com",
            "GIT_COMMITTER_NAME": "dcd",
            "GIT_COMMITTER_EMAIL": "dcd@example.com",
        }
    )
    completed = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        env=env,
        capture_output=True,
        text=True,
        check=True,
    )
    return completed.stdout


def commit_file(repo: Path, name: str, content: str, message: str) -> None:
    (repo / name).write_text(content, encoding="utf-8")
    git(repo, "add", name)
    git(repo, "commit", "-q", "-m", message)


def event_kinds(events: List) -> List[str]:
    return [e.kind.value for e in events]
