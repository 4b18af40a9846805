from __future__ import annotations

from typing import Any, Dict, Iterable, List

from taste_test.chat.markdown import normalize_markdown
from taste_test.chat.models import ChatEntry, EntryKind

EntryDict = Dict[str, Any]

# Shown above an empty transcript, in order.
INSTRUCTIONS = [
    "First, take a photo of the menu ↗",
    "🥇 Get the top choices",
    "🧑‍🍳 Ask follow ups",
]


def render_entry(entry: ChatEntry) -> EntryDict:
    """
    Build the client-facing view of one entry.

    Text is normalized here, at render time; the stored entry keeps the raw
    completion text.
    """
    view: EntryDict = {
        "id": entry.id,
        "kind": entry.kind.value,
        "sender": "assistant" if entry.kind is EntryKind.ASSISTANT_TEXT else "user",
        "created_at": entry.created_at,
    }
    if entry.kind is EntryKind.USER_IMAGE:
        view["image_url"] = f"/chat/images/{entry.image_ref}"
    else:
        view["text"] = normalize_markdown(entry.text)
    return view


def render_transcript(entries: Iterable[ChatEntry], busy: bool = False) -> Dict[str, Any]:
    rendered: List[EntryDict] = [render_entry(entry) for entry in entries]
    payload: Dict[str, Any] = {"entries": rendered, "busy": busy}
    if not rendered:
        payload["instructions"] = list(INSTRUCTIONS)
    return payload
