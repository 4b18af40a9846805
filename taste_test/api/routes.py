from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Dict

from flask import Blueprint, Response, jsonify, request

from taste_test.auth.models import UserProfile
from taste_test.chat.orchestrator import ConversationBusy
from taste_test.media.validation import validate_image
from taste_test.web.ux import render_entry, render_transcript

from .context import services
from .validator import validate_payload

api = Blueprint("api", __name__)


def _json_body(schema: str) -> tuple[Dict[str, Any] | None, Any]:
    """
    Parse and validate the JSON body.

    Returns:
        (payload, None) when valid, (None, error_response) otherwise.
    """
    payload = request.get_json(silent=True)
    if payload is None:
        return None, (jsonify({"ok": False, "error": "Expected a JSON body"}), 400)

    is_valid, err = validate_payload(schema, payload)
    if not is_valid:
        return None, (jsonify({"ok": False, "error": err}), 400)
    return payload, None


def signed_in_required(func):
    """
    Reject chat requests with 401 unless a user is signed in.

    The profile is read once and handed to the view as `profile`, so a
    sign-out landing mid-request cannot pull it away.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        auth = services().auth
        profile = auth.profile
        if not auth.is_signed_in or profile is None:
            logging.info("[AUTH] Rejected %s %s: signed out", request.method, request.path)
            return jsonify({"ok": False, "error": "Sign in first"}), 401
        return func(*args, profile=profile, **kwargs)

    return wrapper


def _conversation(profile: UserProfile):
    return services().conversations.get(profile.id)


@api.route("/", methods=["GET"])
def healthcheck() -> str:
    return "Taste Test running"


# ================================
# AUTH
# ================================
@api.route("/auth/signup", methods=["POST"])
def sign_up() -> Any:
    payload, error_response = _json_body("signup")
    if error_response:
        return error_response

    ctx = services()
    profile, error = ctx.auth.sign_up(
        payload["first_name"],
        payload["last_name"],
        payload["email"],
        payload["password"],
    )
    if error:
        return jsonify({"ok": False, "error": error}), 401

    ui = ctx.apply_ui_action("signed_in")
    return jsonify({"ok": True, "profile": profile.to_dict(), "ui": ui.to_dict()})


@api.route("/auth/signin", methods=["POST"])
def sign_in() -> Any:
    payload, error_response = _json_body("signin")
    if error_response:
        return error_response

    ctx = services()
    profile, error = ctx.auth.sign_in(payload["email"], payload["password"])
    if error:
        return jsonify({"ok": False, "error": error}), 401

    ui = ctx.apply_ui_action("signed_in")
    return jsonify({"ok": True, "profile": profile.to_dict(), "ui": ui.to_dict()})


@api.route("/auth/signout", methods=["POST"])
def sign_out() -> Any:
    ctx = services()
    profile = ctx.auth.profile
    if profile is not None:
        ctx.conversations.clear(profile.id)
    ctx.auth.sign_out()
    ui = ctx.apply_ui_action("signed_out")
    return jsonify({"ok": True, "ui": ui.to_dict()})


@api.route("/auth/me", methods=["GET"])
def me() -> Any:
    auth = services().auth
    profile = auth.profile
    return jsonify({
        "state": auth.state.value,
        "profile": profile.to_dict() if profile else None,
    })


# ================================
# CHAT
# ================================
@api.route("/chat/transcript", methods=["GET"])
@signed_in_required
def transcript(profile: UserProfile) -> Any:
    conversation = _conversation(profile)
    return jsonify(render_transcript(conversation.transcript.entries(), busy=conversation.is_busy))


@api.route("/chat/messages", methods=["POST"])
@signed_in_required
def post_message(profile: UserProfile) -> Any:
    payload, error_response = _json_body("message")
    if error_response:
        return error_response

    try:
        turn = _conversation(profile).submit_user_text(payload["text"])
    except ConversationBusy as e:
        return jsonify({"ok": False, "error": str(e)}), 409

    if turn is None:
        # Blank input: nothing to do
        return "", 204
    return jsonify({"ok": True, "entry": render_entry(turn.entry)}), 202


@api.route("/chat/images", methods=["POST"])
@signed_in_required
def post_image(profile: UserProfile) -> Any:
    upload = request.files.get("image")
    data = upload.read() if upload is not None else b""
    if not data:
        # Picker cancelled: no image, no action
        return "", 204

    ctx = services()
    error = validate_image(upload.mimetype, len(data), ctx.settings.max_image_bytes)
    if error:
        return jsonify({"ok": False, "error": error}), 400

    try:
        turn = _conversation(profile).submit_image(data, upload.mimetype)
    except ConversationBusy as e:
        return jsonify({"ok": False, "error": str(e)}), 409

    return jsonify({"ok": True, "entry": render_entry(turn.entry)}), 202


@api.route("/chat/images/<ref>", methods=["GET"])
@signed_in_required
def get_image(ref: str, profile: UserProfile) -> Any:
    conversations = services().conversations
    # Only images shown in this user's own transcript
    image = None
    if _conversation(profile).transcript.has_image(ref):
        image = conversations.image_store.load(ref)
    if image is None:
        return jsonify({"ok": False, "error": "Unknown image"}), 404
    return Response(image.data, mimetype=image.content_type)


# ================================
# UI STATE
# ================================
@api.route("/ui", methods=["GET"])
def ui_state() -> Any:
    return jsonify(services().ui_state.to_dict())


@api.route("/ui/actions", methods=["POST"])
def ui_action() -> Any:
    payload, error_response = _json_body("ui_action")
    if error_response:
        return error_response

    try:
        ui = services().apply_ui_action(payload["action"])
    except ValueError as e:
        return jsonify({"ok": False, "error": str(e)}), 409
    return jsonify({"ok": True, "ui": ui.to_dict()})
