"""Tests for CompletionClient with a stubbed OpenAI client: checks the request message list and that every failure comes back as None."""

import unittest
from unittest import mock

from taste_test.chat.models import ChatEntry
from taste_test.services.completion import SYSTEM_PROMPT, CompletionClient, build_messages
from tests.fakes import StubCompletion, StubOpenAI


class BuildMessagesTests(unittest.TestCase):
    def test_empty_transcript_still_starts_with_system(self) -> None:
        messages = build_messages([])
        self.assertEqual(len(messages), 1)
        self.assertEqual(messages[0].role, "system")
        self.assertEqual(messages[0].content, SYSTEM_PROMPT)

    def test_history_roles_and_order(self) -> None:
        entries = [
            ChatEntry.user_image("img-1"),
            ChatEntry.assistant_text("1. Ramen"),
            ChatEntry.user_text("Is it spicy?"),
        ]
        messages = build_messages(entries, extra=None)
        self.assertEqual(
            [(m.role, m.content) for m in messages[1:]],
            [("assistant", "1. Ramen"), ("user", "Is it spicy?")],
        )

    def test_extra_message_goes_last(self) -> None:
        messages = build_messages([ChatEntry.user_text("hi")], extra="RAMEN 12\nGYOZA 6")
        self.assertEqual(messages[0].role, "system")
        self.assertEqual(messages[-1].role, "user")
        self.assertEqual(messages[-1].content, "RAMEN 12\nGYOZA 6")
        self.assertEqual(len(messages), 3)


class GetRecommendationTests(unittest.TestCase):
    def test_sends_model_and_messages_and_returns_content(self) -> None:
        stub = StubOpenAI(reply="Ramen\nGyoza\nMochi")
        client = CompletionClient(stub, model="fake-model")

        reply = client.get_recommendation([ChatEntry.user_text("What's good?")])

        self.assertEqual(reply, "Ramen\nGyoza\nMochi")
        self.assertEqual(len(stub.calls), 1)
        recorded = stub.calls[0]
        self.assertEqual(recorded["model"], "fake-model")
        self.assertEqual(recorded["messages"][0]["role"], "system")
        self.assertEqual(recorded["messages"][-1], {"role": "user", "content": "What's good?"})

    def test_transport_error_returns_none(self) -> None:
        stub = StubOpenAI(error=ConnectionError("network down"))
        client = CompletionClient(stub)
        self.assertIsNone(client.get_recommendation([ChatEntry.user_text("hi")]))

    def test_missing_choices_returns_none(self) -> None:
        stub = StubOpenAI()
        stub.response = type("Empty", (), {"choices": []})()
        client = CompletionClient(stub)
        self.assertIsNone(client.get_recommendation([]))

    def test_null_content_returns_none(self) -> None:
        stub = StubOpenAI()
        stub.response = StubCompletion(None)
        client = CompletionClient(stub)
        self.assertIsNone(client.get_recommendation([]))

    def test_missing_api_key_returns_none(self) -> None:
        client = CompletionClient(api_key=None)
        with mock.patch.dict("os.environ", {}, clear=True):
            self.assertIsNone(client.get_recommendation([]))


if __name__ == "__main__":
    unittest.main()
