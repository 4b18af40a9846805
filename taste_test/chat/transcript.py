from __future__ import annotations

import threading
from typing import Dict, List, Optional

from .models import ChatEntry


class Transcript:
    """
    Ordered, append-only list of chat entries.

    Entries are never removed or edited. Appends can arrive from worker
    threads, so they go through a lock.
    """

    def __init__(self) -> None:
        self._entries: List[ChatEntry] = []
        self._lock = threading.Lock()

    def append(self, entry: ChatEntry) -> ChatEntry:
        with self._lock:
            self._entries.append(entry)
        return entry

    def entries(self) -> List[ChatEntry]:
        with self._lock:
            return list(self._entries)

    def text_entries(self) -> List[ChatEntry]:
        """Text-bearing entries in chronological order (images dropped)."""
        return [entry for entry in self.entries() if entry.is_text]

    def image_refs(self) -> List[str]:
        return [entry.image_ref for entry in self.entries() if entry.image_ref]

    def has_image(self, ref: str) -> bool:
        return ref in self.image_refs()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# Simple in-memory store: conversation_id -> Transcript
class TranscriptStore:
    def __init__(self) -> None:
        self._transcripts: Dict[str, Transcript] = {}
        self._lock = threading.Lock()

    def get(self, conversation_id: str) -> Optional[Transcript]:
        with self._lock:
            return self._transcripts.get(str(conversation_id))

    def get_or_create(self, conversation_id: str) -> Transcript:
        key = str(conversation_id)
        with self._lock:
            transcript = self._transcripts.get(key)
            if transcript is None:
                transcript = Transcript()
                self._transcripts[key] = transcript
            return transcript

    def all(self) -> List[Transcript]:
        with self._lock:
            return list(self._transcripts.values())

    def clear(self, conversation_id: Optional[str] = None) -> None:
        """Drop one conversation, or all of them when no id is given."""
        with self._lock:
            if conversation_id is None:
                self._transcripts.clear()
            else:
                self._transcripts.pop(str(conversation_id), None)
