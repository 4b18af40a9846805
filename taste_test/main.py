from __future__ import annotations

import logging
from functools import partial
from typing import Optional

from flask import Flask

from taste_test.api.context import EXTENSION_KEY, AppServices
from taste_test.api.routes import api
from taste_test.auth.service import AuthService
from taste_test.chat.orchestrator import Conversations
from taste_test.config import Settings, load_settings, require_credentials
from taste_test.media.ocr import perform_ocr
from taste_test.services.completion import CompletionClient
from taste_test.services.session_store import LocalSessionStore
from taste_test.web.state import UIState

LOG_FORMAT = "%(asctime)s %(levelname)s:%(message)s"


def create_app(
    settings: Optional[Settings] = None,
    *,
    auth: Optional[AuthService] = None,
    conversations: Optional[Conversations] = None,
) -> Flask:
    """
    Build the Flask app.

    Missing API credentials raise ConfigError here and stop the process.
    Collaborators may be passed in (tests); otherwise they are built from
    the settings.
    """
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    settings = settings if settings is not None else load_settings()
    if auth is None or conversations is None:
        require_credentials(settings)

    if auth is None:
        auth = AuthService(LocalSessionStore(settings.state_file))

    if conversations is None:
        completion_client = CompletionClient(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
        )
        conversations = Conversations(
            completion_client,
            ocr=partial(perform_ocr, lang=settings.tesseract_lang),
        )

    # Attempt to restore a Supabase session on launch
    profile, error = auth.restore_session()
    if profile:
        logging.info("[STARTUP] Session restored for %s", profile.email)
    elif error:
        logging.info("[STARTUP] %s", error)

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = settings.max_image_bytes + 1024 * 1024
    app.extensions[EXTENSION_KEY] = AppServices(
        settings=settings,
        auth=auth,
        conversations=conversations,
        ui_state=UIState.initial(auth.is_signed_in),
    )
    app.register_blueprint(api)
    return app
