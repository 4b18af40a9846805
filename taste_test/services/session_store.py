"""
Local persisted session.

One session blob (access + refresh token) under a fixed key in a small JSON
state file. Overwritten on every sign-in, removed on sign-out.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

SESSION_KEY = "supabaseSession"
SESSION_FILE_MODE = 0o600


@dataclass(frozen=True)
class StoredSession:
    access_token: str
    refresh_token: str
    user_id: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_auth_session(cls, session: Any) -> "StoredSession":
        user = getattr(session, "user", None)
        return cls(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            user_id=str(user.id) if user is not None else None,
            email=getattr(user, "email", None),
        )


class LocalSessionStore:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logging.warning("[SESSION] Could not read %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        # Tokens inside: owner read/write only
        tmp.unlink(missing_ok=True)
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, SESSION_FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f)
        tmp.replace(self.path)

    def save(self, session: StoredSession) -> None:
        """Call right after sign-in, sign-up or a token refresh."""
        with self._lock:
            data = self._read_all()
            data[SESSION_KEY] = json.dumps(asdict(session))
            self._write_all(data)

    def load(self) -> Optional[StoredSession]:
        with self._lock:
            raw = self._read_all().get(SESSION_KEY)
        if not raw:
            return None
        try:
            payload = json.loads(raw)
            return StoredSession(
                access_token=payload["access_token"],
                refresh_token=payload["refresh_token"],
                user_id=payload.get("user_id"),
                email=payload.get("email"),
            )
        except (TypeError, ValueError, KeyError) as e:
            logging.warning("[SESSION] Failed to decode session: %s", e)
            return None

    def clear(self) -> None:
        """Call on sign-out."""
        with self._lock:
            data = self._read_all()
            if data.pop(SESSION_KEY, None) is not None:
                self._write_all(data)
