"""
Sign-up, sign-in, sign-out and session restore against Supabase.

Two states: SIGNED_OUT and SIGNED_IN. Every operation returns a
(profile, error) tuple; a failure never leaves the service half signed in.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, Tuple

from taste_test.services.session_store import LocalSessionStore, StoredSession
from taste_test.services.supabase import PROFILES_TABLE, get_client, insert_record, select_one
from taste_test.utils.time import timestamp

from .models import AuthState, UserProfile

AuthResult = Tuple[Optional[UserProfile], Optional[str]]

FILL_ALL_FIELDS = "Please fill in all fields."


def _describe(error: Exception) -> str:
    return getattr(error, "message", None) or str(error) or error.__class__.__name__


class AuthService:
    def __init__(
        self,
        session_store: LocalSessionStore,
        client_factory: Callable[[], Any] = get_client,
    ) -> None:
        self.session_store = session_store
        self._client_factory = client_factory
        self._lock = threading.Lock()
        self.state = AuthState.SIGNED_OUT
        self.profile: Optional[UserProfile] = None

    @property
    def is_signed_in(self) -> bool:
        return self.state is AuthState.SIGNED_IN

    @property
    def client(self) -> Any:
        return self._client_factory()

    # ------------------------------------------------------------------ #
    # Transitions
    # ------------------------------------------------------------------ #
    def _enter_signed_in(self, session: Any, profile: UserProfile) -> UserProfile:
        self.session_store.save(StoredSession.from_auth_session(session))
        self.state = AuthState.SIGNED_IN
        self.profile = profile
        logging.info("[AUTH] Signed in user_id=%s", profile.id)
        return profile

    def _load_profile(self, user: Any) -> UserProfile:
        user_id = str(user.id)
        email = getattr(user, "email", None) or ""
        row, error = select_one(PROFILES_TABLE, "id", user_id, client=self.client)
        if error:
            logging.warning("[AUTH] Could not load profile for %s: %s", user_id, error)
        if not row:
            return UserProfile(id=user_id, email=email)
        return UserProfile.from_row(row, fallback_email=email)

    def sign_up(self, first_name: str, last_name: str, email: str, password: str) -> AuthResult:
        """
        Register a new user, persist the session and write the profile row.
        """
        if not all(value and value.strip() for value in (first_name, last_name, email, password)):
            return None, FILL_ALL_FIELDS

        with self._lock:
            try:
                response = self.client.auth.sign_up(
                    {
                        "email": email.strip(),
                        "password": password,
                        "options": {
                            "data": {"first_name": first_name.strip(), "last_name": last_name.strip()},
                        },
                    }
                )
            except Exception as e:
                logging.warning("[AUTH] Sign up failed: %s", e)
                return None, f"Sign up failed: {_describe(e)}"

            user = getattr(response, "user", None)
            session = getattr(response, "session", None)
            if user is None or session is None:
                # Supabase returns no session while the email is unconfirmed.
                return None, "Sign up failed: check your inbox to confirm your email, then sign in."

            profile = UserProfile(
                id=str(user.id),
                email=email.strip(),
                first_name=first_name.strip(),
                last_name=last_name.strip(),
            )
            row = {**profile.to_row(), "created_at": timestamp()}
            _, error = insert_record(PROFILES_TABLE, row, client=self.client)
            if error:
                logging.warning("[AUTH] Profile row not written for %s: %s", profile.id, error)

            return self._enter_signed_in(session, profile), None

    def sign_in(self, email: str, password: str) -> AuthResult:
        if not email or not email.strip() or not password:
            return None, FILL_ALL_FIELDS

        with self._lock:
            try:
                response = self.client.auth.sign_in_with_password(
                    {"email": email.strip(), "password": password}
                )
            except Exception as e:
                logging.warning("[AUTH] Sign in failed: %s", e)
                return None, f"Sign in failed: {_describe(e)}"

            user = getattr(response, "user", None)
            session = getattr(response, "session", None)
            if user is None or session is None:
                return None, "Sign in failed: no session returned"

            return self._enter_signed_in(session, self._load_profile(user)), None

    def sign_out(self) -> None:
        """Always ends in SIGNED_OUT, even if the remote call fails."""
        with self._lock:
            try:
                self.client.auth.sign_out()
            except Exception as e:
                logging.warning("[AUTH] Remote sign out failed: %s", e)
            self.session_store.clear()
            self.state = AuthState.SIGNED_OUT
            self.profile = None
            logging.info("[AUTH] Signed out")

    def restore_session(self) -> AuthResult:
        """
        Reuse a persisted session, once, at process start. No retry.
        """
        stored = self.session_store.load()
        if stored is None:
            return None, None

        with self._lock:
            try:
                response = self.client.auth.set_session(stored.access_token, stored.refresh_token)
            except Exception as e:
                logging.warning("[AUTH] Failed to restore session: %s", e)
                self.session_store.clear()
                return None, f"Session expired: {_describe(e)}"

            user = getattr(response, "user", None)
            session = getattr(response, "session", None)
            if user is None or session is None:
                self.session_store.clear()
                return None, "Session expired"

            # set_session may hand back refreshed tokens; keep those.
            return self._enter_signed_in(session, self._load_profile(user)), None
