"""
Media storage utilities.

Bitmaps behind transcript image entries live here, keyed by an opaque
reference. In memory only: photos do not survive a restart.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, Iterable, Optional
from uuid import uuid4


@dataclass(frozen=True)
class StoredImage:
    ref: str
    data: bytes
    content_type: str


class ImageStore:
    def __init__(self) -> None:
        self._images: Dict[str, StoredImage] = {}
        self._lock = threading.Lock()

    def save(self, image_bytes: bytes, content_type: str = "image/jpeg") -> str:
        """
        Keep one bitmap.

        Returns:
            str: The reference to put on the chat entry.
        """
        ref = uuid4().hex
        with self._lock:
            self._images[ref] = StoredImage(ref=ref, data=image_bytes, content_type=content_type)
        return ref

    def load(self, ref: str) -> Optional[StoredImage]:
        with self._lock:
            return self._images.get(ref)

    def discard(self, refs: Iterable[str]) -> int:
        """Drop bitmaps no transcript points at any more. Returns how many went."""
        removed = 0
        with self._lock:
            for ref in refs:
                if self._images.pop(ref, None) is not None:
                    removed += 1
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._images)
