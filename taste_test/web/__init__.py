from .state import Overlay, Screen, UIState
from .ux import render_entry, render_transcript

__all__ = [
    "Overlay",
    "Screen",
    "UIState",
    "render_entry",
    "render_transcript",
]
