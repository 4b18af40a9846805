"""
Screen state for the client.

One value instead of a pile of visibility flags: the screen plus at most
one overlay, and overlays only exist on the chat screen.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict


class Screen(str, Enum):
    SIGN_IN = "sign_in"
    SIGN_UP = "sign_up"
    CHAT = "chat"


class Overlay(str, Enum):
    NONE = "none"
    SIDE_PANEL = "side_panel"
    ATTACH_MENU = "attach_menu"


@dataclass(frozen=True)
class UIState:
    screen: Screen = Screen.SIGN_IN
    overlay: Overlay = Overlay.NONE

    def __post_init__(self) -> None:
        if self.screen is not Screen.CHAT and self.overlay is not Overlay.NONE:
            raise ValueError(f"Overlay {self.overlay.value!r} is only valid on the chat screen")

    @classmethod
    def initial(cls, signed_in: bool) -> "UIState":
        return cls(screen=Screen.CHAT) if signed_in else cls()

    def _toggle(self, overlay: Overlay) -> "UIState":
        if self.screen is not Screen.CHAT:
            raise ValueError(f"Cannot open {overlay.value!r} outside the chat screen")
        return replace(self, overlay=Overlay.NONE if self.overlay is overlay else overlay)

    def apply(self, action: str) -> "UIState":
        """Return the next state. Unknown or impossible actions raise ValueError."""
        if action == "signed_in":
            return UIState(screen=Screen.CHAT)
        if action == "signed_out":
            return UIState(screen=Screen.SIGN_IN)

        if action in ("show_sign_up", "show_sign_in"):
            if self.screen is Screen.CHAT:
                raise ValueError("Already signed in")
            return UIState(screen=Screen.SIGN_UP if action == "show_sign_up" else Screen.SIGN_IN)

        if action == "toggle_side_panel":
            return self._toggle(Overlay.SIDE_PANEL)
        if action == "toggle_attach_menu":
            return self._toggle(Overlay.ATTACH_MENU)
        if action == "dismiss":
            return replace(self, overlay=Overlay.NONE)

        raise ValueError(f"Unknown action: {action!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {"screen": self.screen.value, "overlay": self.overlay.value}
