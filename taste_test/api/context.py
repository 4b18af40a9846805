from __future__ import annotations

import threading
from dataclasses import dataclass, field

from flask import current_app

from taste_test.auth.service import AuthService
from taste_test.chat.orchestrator import Conversations
from taste_test.config import Settings
from taste_test.web.state import UIState

EXTENSION_KEY = "taste_test"


@dataclass
class AppServices:
    """Everything the routes need, built once in create_app()."""

    settings: Settings
    auth: AuthService
    conversations: Conversations
    ui_state: UIState = field(default_factory=UIState)
    ui_lock: threading.Lock = field(default_factory=threading.Lock)

    def apply_ui_action(self, action: str) -> UIState:
        with self.ui_lock:
            self.ui_state = self.ui_state.apply(action)
            return self.ui_state


def services() -> AppServices:
    return current_app.extensions[EXTENSION_KEY]
