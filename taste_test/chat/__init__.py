"""
Chat core.

Transcript, entry types, the markdown normalizer, and the orchestrator that
turns user actions into completion requests. Nothing in this package talks
directly to Flask or Supabase.
"""

from .models import ChatEntry, CompletionMessage, EntryKind
from .transcript import Transcript, TranscriptStore

__all__ = [
    "ChatEntry",
    "CompletionMessage",
    "EntryKind",
    "Transcript",
    "TranscriptStore",
]
