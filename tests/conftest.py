# tests/conftest.py
"""
Fixtures compartilhados para testes do dcd.

Este módulo define fixtures reutilizáveis que fornecem:
- scripts executáveis de Step (`#!/bin/sh`) escritos em `tmp_path`
- backend em memória e metadata fixa
- pre-flight nulo
- um repositório git real com remote bare (para pre-flight e metadata)

Decisões arquiteturais:
    - Steps são scripts reais: o runner é sempre exercitado via subprocess
    - O ambiente herdado pelos Steps é mínimo (apenas PATH)
    - Testes que dependem de git são pulados quando o git não está disponível

Invariantes:
    - Nenhuma fixture escreve fora de `tmp_path`
    - Nenhuma fixture depende da configuração global do git do usuário
"""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Callable

import pytest

from dcd.core.backend import InMemoryBackend
from dcd.core.pipeline import Metadata
from tests.helpers import GIT_AVAILABLE, NullPreflight, commit_file, git


# =====================================================
# Steps
# =====================================================

@pytest.fixture
def make_script(tmp_path: Path) -> Callable[[str, str], str]:
    """
    Fábrica de scripts de Step.

    `make_script("build", "echo ok")` cria `tmp_path/scripts/build.sh`
    executável com o corpo informado e retorna o caminho absoluto.
    """
    scripts_dir = tmp_path / "scripts"
    scripts_dir.mkdir(exist_ok=True)

    def _make(name: str, body: str) -> str:
        path = scripts_dir / f"{name}.sh"
        path.write_text("#!/bin/sh\n" + body + "\n", encoding="utf-8")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(path)

    return _make


@pytest.fixture
def base_env() -> dict:
    """Ambiente herdado mínimo para os Steps."""
    return {"PATH": os.environ.get("PATH", "/usr/bin:/bin")}


@pytest.fixture
def metadata() -> Metadata:
    return Metadata(component="dcd", git_sha="abc123")


@pytest.fixture
def null_preflight() -> NullPreflight:
    return NullPreflight()


@pytest.fixture
def memory_backend() -> InMemoryBackend:
    return InMemoryBackend()


# =====================================================
# Git
# =====================================================

@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """
    Clone de trabalho limpo e sincronizado com `origin/main`.

    O remote bare fica em `tmp_path/remotes/acme/widget.git`, de modo que
    o component descoberto a partir da URL é `widget`.
    """
    if not GIT_AVAILABLE:
        pytest.skip("git não disponível")

    remote = tmp_path / "remotes" / "acme" / "widget.git"
    remote.mkdir(parents=True)
    git(remote, "init", "-q", "--bare")

    work = tmp_path / "work"
    work.mkdir()
    git(work, "init", "-q")
    git(work, "symbolic-ref", "HEAD", "refs/heads/main")
    commit_file(work, "README.md", "widget\n", "initial commit")
    git(work, "remote", "add", "origin", str(remote))
    git(work, "push", "-q", "origin", "main")
    return work
