from __future__ import annotations

import json
import os
import sys
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

try:
    import fcntl
except Exception:  # pragma: no cover
    fcntl = None


def _lock_for(path: Path) -> Path:
    return path.parent / f".{path.name}.lock"


@contextmanager
def _file_lock(lock_path: Path, exclusive: bool = True) -> Iterator[None]:
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    with lock_path.open("a+", encoding="utf-8") as fh:
        if fcntl is not None:
            mode = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
            fcntl.flock(fh.fileno(), mode)
        try:
            yield
        finally:
            if fcntl is not None:
                fcntl.flock(fh.fileno(), fcntl.LOCK_UN)


class Journal:
    """Append-only record of what happened during one game.

    Events are always kept in memory; with a ``path`` they are also written
    as JSON lines so a session can be audited afterwards.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path
        self._events: List[Dict[str, Any]] = []
        if path is not None:
            path.parent.mkdir(parents=True, exist_ok=True)
            if fcntl is None:
                print(
                    "WARNING: fcntl unavailable; journal locking disabled.",
                    file=sys.stderr,
                    flush=True,
                )

    def emit(self, event_type: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        event = {
            "event_id": f"EVT-{uuid.uuid4().hex[:10]}",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "type": event_type,
            "payload": payload,
        }
        self._events.append(event)
        if self.path is not None:
            with _file_lock(_lock_for(self.path)):
                with self.path.open("a", encoding="utf-8") as fh:
                    fh.write(json.dumps(event) + "\n")
                    fh.flush()
                    os.fsync(fh.fileno())
        return event

    def events(self, event_type: Optional[str] = None) -> List[Dict[str, Any]]:
        if event_type is None:
            return list(self._events)
        return [e for e in self._events if e["type"] == event_type]


def read_events(path: Path) -> List[Dict[str, Any]]:
    if not path.exists():
        return []
    events = []
    with _file_lock(_lock_for(path), exclusive=False):
        with path.open("r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line:
                    continue
                try:
                    events.append(json.loads(line))
                except json.JSONDecodeError:
                    # Skip malformed lines instead of failing the whole read.
                    continue
    return events
