"""Tests for AuthService against an in-memory Supabase stand-in. A "fresh process" is a new AuthService sharing only the state file and the backend."""

import json
import os
import stat
import tempfile
import unittest
from pathlib import Path

from taste_test.auth.models import AuthState
from taste_test.auth.service import FILL_ALL_FIELDS, AuthService
from taste_test.services.session_store import SESSION_KEY, LocalSessionStore, StoredSession
from tests.fakes import FakeSupabase


class AuthTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.state_file = Path(self._tmp.name) / "state.json"
        self.backend = FakeSupabase()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def new_process(self) -> AuthService:
        return AuthService(LocalSessionStore(self.state_file), client_factory=lambda: self.backend)

    def register(self, auth: AuthService) -> None:
        profile, error = auth.sign_up("Ada", "Lovelace", "ada@example.com", "hunter22")
        self.assertIsNone(error)
        self.assertIsNotNone(profile)


class SignUpTests(AuthTestCase):
    def test_sign_up_signs_in_and_writes_profile_row(self) -> None:
        auth = self.new_process()
        profile, error = auth.sign_up("Ada", "Lovelace", "ada@example.com", "hunter22")

        self.assertIsNone(error)
        self.assertEqual(auth.state, AuthState.SIGNED_IN)
        self.assertEqual(profile.first_name, "Ada")
        rows = self.backend.tables["profiles"]
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["id"], profile.id)
        self.assertEqual(rows[0]["email"], "ada@example.com")
        self.assertIsNotNone(LocalSessionStore(self.state_file).load())

    def test_missing_fields(self) -> None:
        auth = self.new_process()
        profile, error = auth.sign_up("Ada", "", "ada@example.com", "hunter22")
        self.assertIsNone(profile)
        self.assertEqual(error, FILL_ALL_FIELDS)
        self.assertEqual(auth.state, AuthState.SIGNED_OUT)

    def test_duplicate_email_stays_signed_out(self) -> None:
        self.register(self.new_process())
        auth = self.new_process()
        profile, error = auth.sign_up("Ada", "L", "ada@example.com", "other")
        self.assertIsNone(profile)
        self.assertIn("already registered", error)
        self.assertEqual(auth.state, AuthState.SIGNED_OUT)


class SignInTests(AuthTestCase):
    def test_sign_in_loads_profile_and_persists_session(self) -> None:
        self.register(self.new_process())

        auth = self.new_process()
        profile, error = auth.sign_in("ada@example.com", "hunter22")

        self.assertIsNone(error)
        self.assertEqual(auth.state, AuthState.SIGNED_IN)
        self.assertEqual(profile.last_name, "Lovelace")

        restored = self.new_process()
        profile, error = restored.restore_session()
        self.assertIsNone(error)
        self.assertEqual(restored.state, AuthState.SIGNED_IN)
        self.assertEqual(profile.email, "ada@example.com")

    def test_wrong_password(self) -> None:
        self.register(self.new_process())
        auth = self.new_process()
        auth.sign_out()
        profile, error = auth.sign_in("ada@example.com", "wrong")

        self.assertIsNone(profile)
        self.assertEqual(error, "Sign in failed: Invalid login credentials")
        self.assertEqual(auth.state, AuthState.SIGNED_OUT)

    def test_blank_fields(self) -> None:
        auth = self.new_process()
        self.assertEqual(auth.sign_in("", "pw"), (None, FILL_ALL_FIELDS))
        self.assertEqual(auth.sign_in("a@b.c", ""), (None, FILL_ALL_FIELDS))


class SignOutAndRestoreTests(AuthTestCase):
    def test_sign_out_clears_persisted_session(self) -> None:
        auth = self.new_process()
        self.register(auth)
        auth.sign_out()

        self.assertEqual(auth.state, AuthState.SIGNED_OUT)
        self.assertIsNone(auth.profile)
        self.assertIsNone(LocalSessionStore(self.state_file).load())

        restored = self.new_process()
        self.assertEqual(restored.restore_session(), (None, None))
        self.assertEqual(restored.state, AuthState.SIGNED_OUT)

    def test_sign_out_is_unconditional(self) -> None:
        auth = self.new_process()
        self.register(auth)
        self.backend.auth.sign_out_error = RuntimeError("offline")

        auth.sign_out()

        self.assertEqual(auth.state, AuthState.SIGNED_OUT)
        self.assertIsNone(LocalSessionStore(self.state_file).load())

    def test_restore_with_revoked_tokens_stays_signed_out(self) -> None:
        LocalSessionStore(self.state_file).save(StoredSession("stale-access", "stale-refresh"))

        auth = self.new_process()
        profile, error = auth.restore_session()

        self.assertIsNone(profile)
        self.assertIn("Invalid Refresh Token", error)
        self.assertEqual(auth.state, AuthState.SIGNED_OUT)
        self.assertIsNone(LocalSessionStore(self.state_file).load())

    def test_restore_persists_refreshed_tokens(self) -> None:
        self.register(self.new_process())
        before = LocalSessionStore(self.state_file).load()

        self.new_process().restore_session()

        after = LocalSessionStore(self.state_file).load()
        self.assertNotEqual(before.refresh_token, after.refresh_token)


class LocalSessionStoreTests(AuthTestCase):
    def test_blob_lives_under_fixed_key(self) -> None:
        store = LocalSessionStore(self.state_file)
        store.save(StoredSession("a", "r", user_id="u1", email="e@x.y"))

        with open(self.state_file, encoding="utf-8") as f:
            data = json.load(f)
        self.assertEqual(json.loads(data[SESSION_KEY])["refresh_token"], "r")
        self.assertEqual(store.load(), StoredSession("a", "r", user_id="u1", email="e@x.y"))

    def test_new_save_overwrites(self) -> None:
        store = LocalSessionStore(self.state_file)
        store.save(StoredSession("a1", "r1"))
        store.save(StoredSession("a2", "r2"))
        self.assertEqual(store.load().access_token, "a2")

    def test_corrupt_blob_loads_as_none(self) -> None:
        with open(self.state_file, "w", encoding="utf-8") as f:
            json.dump({SESSION_KEY: "{not json"}, f)
        self.assertIsNone(LocalSessionStore(self.state_file).load())

    @unittest.skipUnless(os.name == "posix", "file modes are POSIX only")
    def test_session_file_is_owner_only(self) -> None:
        self.state_file.write_text("{}", encoding="utf-8")
        os.chmod(self.state_file, 0o644)
        LocalSessionStore(self.state_file).save(StoredSession("a", "r"))
        self.assertEqual(stat.S_IMODE(os.stat(self.state_file).st_mode), 0o600)

    def test_missing_file(self) -> None:
        store = LocalSessionStore(Path(self._tmp.name) / "nested" / "state.json")
        self.assertIsNone(store.load())
        store.clear()
        self.assertFalse(os.path.exists(store.path))


if __name__ == "__main__":
    unittest.main()
