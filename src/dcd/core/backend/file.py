# src/dcd/core/backend/file.py
"""
Backend local baseado em arquivos JSON.

Layout do diretório raiz:

    <root>/
        .lock                       → lock exclusivo entre processos (fcntl.flock)
        build_id.json               → {"id": <último build ID alocado>}
        pipelines/<id>.json         → PipelineState do run
        pipelines/<id>.events.jsonl → histórico de eventos (uma linha por evento)

Decisões arquiteturais:
    - Toda leitura-modificação-escrita ocorre sob o lock exclusivo, o que
      torna a alocação de build ID atômica entre threads e processos
    - Arquivos JSON são substituídos atomicamente (escrita em temporário
      + os.replace); um crash nunca deixa o contador truncado
    - Eventos são apenas anexados; a ordem do arquivo é a ordem do stream

Limites explícitos:
    - Apenas POSIX (fcntl)
    - Não realiza compactação nem expiração de runs antigos
"""

from __future__ import annotations

import fcntl
import json
import logging
import os
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from ..exceptions import BackendError
from ..pipeline.events import Event, event_from_dict
from ..pipeline.types import PipelineState

logger = logging.getLogger(__name__)

COUNTER_FILE = "build_id.json"
LOCK_FILE = ".lock"
PIPELINES_DIR = "pipelines"


def _write_json_atomic(path: Path, data: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.tmp")
    tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True), encoding="utf-8")
    os.replace(tmp, path)


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise BackendError(f"corrupted backend file: {path}", details={"path": str(path)}) from exc
    if not isinstance(data, dict):
        raise BackendError(f"corrupted backend file: {path}", details={"path": str(path)})
    return data


class FileBackend:
    """Implementação de `Backend` persistida em um diretório local."""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)
        self._thread_lock = threading.Lock()

    # -----------------------------
    # Lock
    # -----------------------------
    @contextmanager
    def _locked(self) -> Iterator[None]:
        with self._thread_lock:
            try:
                self.root.mkdir(parents=True, exist_ok=True)
                with open(self.root / LOCK_FILE, "a+") as lock_file:
                    fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
                    try:
                        yield
                    finally:
                        fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
            except OSError as exc:
                raise BackendError(
                    f"backend I/O failed under {self.root}: {exc}", details={"root": str(self.root)}
                ) from exc

    def _state_path(self, build_id: int) -> Path:
        return self.root / PIPELINES_DIR / f"{build_id}.json"

    def _events_path(self, build_id: int) -> Path:
        return self.root / PIPELINES_DIR / f"{build_id}.events.jsonl"

    # -----------------------------
    # Backend
    # -----------------------------
    def allocate_build_id(self) -> int:
        counter = self.root / COUNTER_FILE
        with self._locked():
            last = 0
            if counter.exists():
                raw = _read_json(counter).get("id", 0)
                if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
                    raise BackendError(f"invalid build ID counter in {counter}: {raw!r}")
                last = raw
            build_id = last + 1
            _write_json_atomic(counter, {"id": build_id})
        logger.debug("allocated build ID %d in %s", build_id, self.root)
        return build_id

    def submit_pipeline_state(self, state: PipelineState) -> None:
        data = state.to_dict()
        if not data["updated_at"]:
            data["updated_at"] = datetime.now(timezone.utc).isoformat()
        with self._locked():
            _write_json_atomic(self._state_path(state.build_id), data)
        logger.debug("stored state %r for build %d", data["status"], state.build_id)

    def record_pipeline_event(self, build_id: int, event: Event) -> None:
        line = json.dumps(event.to_dict(), ensure_ascii=False, sort_keys=True)
        path = self._events_path(build_id)
        with self._locked():
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")

    # -----------------------------
    # Leitura
    # -----------------------------
    def load_pipeline(self, build_id: int) -> Tuple[Optional[PipelineState], List[Event]]:
        """
        Restaura o registro e o histórico de eventos de um run.

        Raises:
            BackendError: Se nada foi gravado para `build_id` ou os arquivos estão corrompidos.
        """
        state_path = self._state_path(build_id)
        events_path = self._events_path(build_id)
        if not state_path.exists() and not events_path.exists():
            raise BackendError(f"unknown build ID: {build_id}", details={"build_id": build_id})

        state = PipelineState.from_dict(_read_json(state_path)) if state_path.exists() else None

        events: List[Event] = []
        if events_path.exists():
            with events_path.open("r", encoding="utf-8") as f:
                for number, line in enumerate(f, start=1):
                    if not line.strip():
                        continue
                    try:
                        events.append(event_from_dict(json.loads(line)))
                    except ValueError as exc:
                        raise BackendError(
                            f"corrupted event at {events_path}:{number}",
                            details={"path": str(events_path), "line": number},
                        ) from exc
        return state, events
