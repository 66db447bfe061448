"""File-based activity log and statistics.

Every completed submission becomes a :class:`LogEntry` and is folded into the
running :class:`Stats`.  Both live in one JSON document,
``~/.guardnet/activity/activity.json``, and are rewritten together so a
verdict is never logged without being counted or the other way round.
"""

from __future__ import annotations

import json
import os
import threading
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

from guardnet.moderation.models import AnalysisResult, LogEntry, Stats, as_utc, utcnow
from guardnet.moderation.stats import absorb, reset_stats

SNIPPET_LENGTH = 50


def make_snippet(text: str) -> str:
    return text[:SNIPPET_LENGTH] + ("..." if len(text) > SNIPPET_LENGTH else "")


class ActivityStore:
    """JSON-backed log of verdicts with cumulative statistics."""

    def __init__(self, base_dir: str | Path | None = None) -> None:
        self._base = Path(base_dir) if base_dir else Path.home() / ".guardnet" / "activity"
        self._base.mkdir(parents=True, exist_ok=True)
        self._path = self._base / "activity.json"
        self._lock = threading.Lock()

    # -- persistence ---------------------------------------------------------

    def _load(self) -> tuple[list[dict], Stats]:
        if not self._path.exists():
            return [], reset_stats()
        try:
            data = json.loads(self._path.read_text())
        except (json.JSONDecodeError, OSError):
            return [], reset_stats()
        if not isinstance(data, dict):
            return [], reset_stats()
        logs = data.get("logs", [])
        return (logs if isinstance(logs, list) else []), Stats.from_dict(data.get("stats", {}))

    def _save(self, logs: list[dict], stats: Stats) -> None:
        tmp = self._path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps({"logs": logs, "stats": stats.to_dict()}, indent=2))
        os.replace(tmp, self._path)

    # -- recording -----------------------------------------------------------

    def record(
        self, text: str, result: AnalysisResult, now: Optional[datetime] = None
    ) -> LogEntry:
        """Append a log entry for *result* and fold it into the stats."""
        entry = LogEntry(
            id=str(uuid.uuid4()),
            timestamp=as_utc(now) if now else utcnow(),
            snippet=make_snippet(text),
            result=result,
        )
        with self._lock:
            logs, stats = self._load()
            logs.insert(0, entry.to_dict())
            self._save(logs, absorb(stats, result))
        return entry

    # -- querying ------------------------------------------------------------

    def list_logs(self, limit: Optional[int] = None) -> list[LogEntry]:
        """Return log entries, newest first."""
        with self._lock:
            logs, _ = self._load()
        entries = []
        for item in (logs[:limit] if limit is not None else logs):
            try:
                entries.append(LogEntry.from_dict(item))
            except (KeyError, TypeError, ValueError):
                continue
        return entries

    def get_stats(self) -> Stats:
        with self._lock:
            _, stats = self._load()
        return stats

    # -- resetting -----------------------------------------------------------

    def clear(self) -> None:
        """Drop all log entries and zero the statistics."""
        with self._lock:
            self._save([], reset_stats())

    def wipe(self) -> None:
        with self._lock:
            self._path.unlink(missing_ok=True)
