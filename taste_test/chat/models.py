from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Literal, Optional, TypedDict
from uuid import uuid4

from taste_test.utils.time import timestamp

Role = Literal["system", "user", "assistant"]


class EntryKind(str, Enum):
    USER_TEXT = "user_text"
    ASSISTANT_TEXT = "assistant_text"
    USER_IMAGE = "user_image"


class CompletionMessageDict(TypedDict):
    role: Role
    content: str


@dataclass(frozen=True)
class ChatEntry:
    """
    One item of the transcript.

    Fields:
        kind: user_text, assistant_text or user_image.
        text: Message text. Empty for images.
        image_ref: Opaque handle into the image store (images only).
        id: Display identity only, carries no meaning.
        created_at: UTC ISO timestamp of the append.
    """

    kind: EntryKind
    text: str = ""
    image_ref: Optional[str] = None
    id: str = field(default_factory=lambda: uuid4().hex)
    created_at: str = field(default_factory=timestamp)

    def __post_init__(self) -> None:
        if self.kind is EntryKind.USER_IMAGE:
            if not self.image_ref:
                raise ValueError("user_image entries need an image_ref")
            if self.text:
                raise ValueError("user_image entries carry no text")
        elif self.image_ref is not None:
            raise ValueError(f"{self.kind.value} entries carry no image_ref")

    @property
    def is_text(self) -> bool:
        return self.kind is not EntryKind.USER_IMAGE

    @property
    def role(self) -> Role:
        return "assistant" if self.kind is EntryKind.ASSISTANT_TEXT else "user"

    # ------------------------------------------------------------------ #
    # Constructors
    # ------------------------------------------------------------------ #
    @classmethod
    def user_text(cls, text: str) -> "ChatEntry":
        return cls(kind=EntryKind.USER_TEXT, text=text)

    @classmethod
    def assistant_text(cls, text: str) -> "ChatEntry":
        return cls(kind=EntryKind.ASSISTANT_TEXT, text=text)

    @classmethod
    def user_image(cls, image_ref: str) -> "ChatEntry":
        return cls(kind=EntryKind.USER_IMAGE, image_ref=image_ref)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "text": self.text,
            "image_ref": self.image_ref,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class CompletionMessage:
    role: Role
    content: str

    @classmethod
    def from_entry(cls, entry: ChatEntry) -> "CompletionMessage":
        if not entry.is_text:
            raise ValueError("Image entries cannot be sent to the completion API")
        return cls(role=entry.role, content=entry.text)

    def to_dict(self) -> CompletionMessageDict:
        return {"role": self.role, "content": self.content}
