from __future__ import annotations

import logging
import os
from typing import Any, Iterable, List, Optional

from openai import OpenAI

from taste_test.chat.models import ChatEntry, CompletionMessage
from taste_test.config import DEFAULT_MODEL

SYSTEM_PROMPT = """
You are a friendly food and drink expert helping someone order at a restaurant.
You will be given the text of a menu, read from a photo, and possibly follow-up
questions about it.

When given a menu:
- Give the top 3 recommendations from that menu, best first.
- For each one, give the dish name exactly as written and one short sentence
  on why it is worth ordering.

When asked a follow-up question, answer it briefly using the menu you were given.

Formatting rules:
- Plain text only. No markdown, no headers, no bold, no tables.
- Separate each recommendation with a line break.
- Never invent dishes that are not on the menu.
"""


def build_messages(
    text_entries: Iterable[ChatEntry],
    extra: Optional[str] = None,
) -> List[CompletionMessage]:
    """
    Assemble the request message list.

    The system prompt always comes first, even for an empty transcript.
    Then one message per text-bearing entry in chronological order, then
    the optional trailing user message (OCR text that is not shown as its
    own entry).
    """
    messages = [CompletionMessage(role="system", content=SYSTEM_PROMPT)]
    for entry in text_entries:
        if entry.is_text:
            messages.append(CompletionMessage.from_entry(entry))
    if extra:
        messages.append(CompletionMessage(role="user", content=extra))
    return messages


def _extract_content(response: Any) -> Optional[str]:
    """Read choices[0].message.content, or None for any other shape."""
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, KeyError, TypeError):
        return None
    if not isinstance(content, str) or not content.strip():
        return None
    return content


class CompletionClient:
    """
    One request/response exchange with the chat completion API per call.

    No retry, no backoff. Any failure (transport, non-2xx status, unexpected
    response shape) is logged and reported as None.
    """

    def __init__(
        self,
        client: Optional[Any] = None,
        *,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self.model = model

    def _get_client(self) -> Any:
        """
        Lazily initialize the OpenAI client so that constructing this
        object does not explode if the key is missing (e.g. during tests).
        """
        if self._client is None:
            api_key = self._api_key or os.getenv("OPENAI_API_KEY")
            if not api_key:
                logging.error("OPENAI_API_KEY is not set; completions are unavailable.")
                raise RuntimeError("OPENAI_API_KEY is not set")
            self._client = OpenAI(api_key=api_key)
        return self._client

    def get_recommendation(
        self,
        text_entries: Iterable[ChatEntry],
        extra: Optional[str] = None,
    ) -> Optional[str]:
        messages = build_messages(text_entries, extra)

        try:
            client = self._get_client()
            response = client.chat.completions.create(
                model=self.model,
                messages=[message.to_dict() for message in messages],
            )
        except Exception as e:  # noqa: BLE001
            logging.error("[COMPLETION ERROR] %s", e)
            return None

        content = _extract_content(response)
        if content is None:
            logging.error("[COMPLETION ERROR] Missing 'choices' or 'message' in the response.")
            return None

        logging.info("[COMPLETION] %d messages sent, %d chars received", len(messages), len(content))
        return content
