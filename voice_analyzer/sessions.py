"""Saved analysis sessions, kept as a JSON list on disk."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from voice_analyzer.analysis import AnalysisRecord


logger = logging.getLogger(__name__)

DEFAULT_SESSIONS_PATH = Path.home() / ".voice_analyzer" / "sessions.json"


class SessionStoreError(Exception):
    """Raised when the session file cannot be read."""
    pass


@dataclass
class Session:
    """A named, saved analysis record."""
    id: str
    name: str
    timestamp: int
    data: AnalysisRecord

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "timestamp": self.timestamp,
            "data": self.data.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Session:
        return cls(
            id=str(data["id"]),
            name=data["name"],
            timestamp=int(data["timestamp"]),
            data=AnalysisRecord.from_dict(data["data"]),
        )


def session_name(now: datetime) -> str:
    """Format a session name like 'Session_07-03-2025_14-05'."""
    return now.strftime("Session_%d-%m-%Y_%H-%M")


class SessionStore:
    """Load, save, delete and export sessions in a single JSON file."""

    def __init__(self, path: str | Path = DEFAULT_SESSIONS_PATH) -> None:
        self.path = Path(path)

    def load(self) -> list[Session]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text())
            return [Session.from_dict(item) for item in raw]
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise SessionStoreError(f"Cannot read sessions from {self.path}: {e}") from e

    def _write(self, sessions: list[Session]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps([s.to_dict() for s in sessions]))

    def get(self, session_id: str) -> Session:
        for session in self.load():
            if session.id == session_id:
                return session
        raise KeyError(f"No session with id {session_id!r}")

    def save(self, record: AnalysisRecord, now: datetime | None = None) -> Session | None:
        """Append *record* as a new session.

        Returns None without writing if a session with the same id exists.
        """
        sessions = self.load()
        if any(s.id == record.id for s in sessions):
            logger.debug("Session %s already saved", record.id)
            return None

        session = Session(
            id=record.id,
            name=session_name(now or datetime.now()),
            timestamp=record.timestamp,
            data=record,
        )
        sessions.append(session)
        self._write(sessions)
        logger.info("Saved session %s (%s)", session.name, session.id)
        return session

    def delete(self, session_id: str) -> bool:
        sessions = self.load()
        remaining = [s for s in sessions if s.id != session_id]
        if len(remaining) == len(sessions):
            return False
        self._write(remaining)
        logger.info("Deleted session %s", session_id)
        return True

    def export(self, session_id: str, output_dir: str | Path) -> Path:
        """Write one session to ``output_dir/<name>.json`` and return the path."""
        session = self.get(session_id)
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        out_path = output_dir / f"{session.name}.json"
        out_path.write_text(json.dumps(session.to_dict(), indent=2))
        return out_path
