"""
Conversation orchestrator.

Turns user actions (typed text, a menu photo) into completion requests and
folds the replies back into the transcript.

Every user action appends its own entry synchronously, so the user sees the
message or photo right away. OCR and the completion call then run on the
executor. Only one turn per conversation may be outstanding; a second
submission while one is pending is refused with ConversationBusy, so replies
land in the order the requests were issued.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from taste_test.media.ocr import OcrResult, perform_ocr
from taste_test.media.storage import ImageStore
from taste_test.services.completion import CompletionClient

from .models import ChatEntry
from .transcript import Transcript, TranscriptStore

NOT_A_MENU_MESSAGE = (
    "Sorry, I couldn't read a menu in that photo. "
    "Try again with the menu flat, well lit, and filling the frame."
)

OcrFn = Callable[[bytes], OcrResult]


class ConversationBusy(RuntimeError):
    """A turn is already in flight for this conversation."""


@dataclass
class Turn:
    """
    entry: The entry appended synchronously by the submission.
    future: Background OCR/completion work. Resolves to the assistant entry
            that was appended, or None when the completion failed.
    """

    entry: ChatEntry
    future: "Future[Optional[ChatEntry]]"


class ConversationOrchestrator:
    def __init__(
        self,
        transcript: Transcript,
        completion_client: CompletionClient,
        *,
        image_store: Optional[ImageStore] = None,
        ocr: OcrFn = perform_ocr,
        executor: Optional[Executor] = None,
    ) -> None:
        self.transcript = transcript
        self.completion_client = completion_client
        self.image_store = image_store if image_store is not None else ImageStore()
        self.ocr = ocr
        self._executor = executor if executor is not None else ThreadPoolExecutor(max_workers=1)
        self._lock = threading.Lock()
        self._pending = False

    @property
    def is_busy(self) -> bool:
        with self._lock:
            return self._pending

    # ------------------------------------------------------------------ #
    # Single-flight guard
    # ------------------------------------------------------------------ #
    def _acquire(self) -> None:
        with self._lock:
            if self._pending:
                raise ConversationBusy("A reply is still on its way. Wait for it before sending more.")
            self._pending = True

    def _release(self) -> None:
        with self._lock:
            self._pending = False

    def _schedule(self, work: Callable[[], Optional[ChatEntry]]) -> "Future[Optional[ChatEntry]]":
        def run() -> Optional[ChatEntry]:
            # Release before the future resolves, so a caller waiting on it
            # can submit again straight away.
            try:
                return work()
            finally:
                self._release()

        try:
            return self._executor.submit(run)
        except Exception:
            self._release()
            raise

    # ------------------------------------------------------------------ #
    # User actions
    # ------------------------------------------------------------------ #
    def submit_user_text(self, text: str) -> Optional[Turn]:
        """
        Send a typed message.

        Blank input is a no-op and returns None. Otherwise one user_text entry
        is appended before any network call, and the full transcript goes to
        the completion client in the background.
        """
        if not text or not text.strip():
            return None

        self._acquire()
        try:
            entry = self.transcript.append(ChatEntry.user_text(text))
        except Exception:
            self._release()
            raise

        future = self._schedule(self._complete)
        return Turn(entry=entry, future=future)

    def submit_image(self, image_bytes: bytes, content_type: str = "image/jpeg") -> Optional[Turn]:
        """
        Send a menu photo.

        The image entry is appended right away. OCR then runs in the
        background: recognized text goes to the completion client as a
        trailing user message that is not shown as its own entry; no text
        (or an OCR failure) appends NOT_A_MENU_MESSAGE instead and the
        completion client is not called.

        Empty bytes mean the picker was cancelled: no action, returns None.
        """
        if not image_bytes:
            return None

        self._acquire()
        try:
            ref = self.image_store.save(image_bytes, content_type)
            entry = self.transcript.append(ChatEntry.user_image(ref))
        except Exception:
            self._release()
            raise

        future = self._schedule(lambda: self._read_menu(image_bytes))
        return Turn(entry=entry, future=future)

    # ------------------------------------------------------------------ #
    # Background work
    # ------------------------------------------------------------------ #
    def _read_menu(self, image_bytes: bytes) -> Optional[ChatEntry]:
        try:
            result = self.ocr(image_bytes)
        except Exception as e:  # noqa: BLE001
            logging.warning("[OCR] Unexpected error: %s", e)
            result = OcrResult(failed=True)

        if not result.recognized:
            if result.failed:
                logging.info("[OCR] Engine failed; reporting image as not a menu")
            else:
                logging.info("[OCR] No text found; reporting image as not a menu")
            return self.transcript.append(ChatEntry.assistant_text(NOT_A_MENU_MESSAGE))

        return self._complete(extra=result.text)

    def _complete(self, extra: Optional[str] = None) -> Optional[ChatEntry]:
        reply = self.completion_client.get_recommendation(self.transcript.text_entries(), extra)
        if reply is None:
            # Failure is logged by the client; the transcript stays as it is.
            return None
        return self.transcript.append(ChatEntry.assistant_text(reply))


class Conversations:
    """
    One orchestrator per conversation, sharing the completion client,
    image store and worker pool.
    """

    def __init__(
        self,
        completion_client: CompletionClient,
        *,
        transcripts: Optional[TranscriptStore] = None,
        image_store: Optional[ImageStore] = None,
        ocr: OcrFn = perform_ocr,
        executor: Optional[Executor] = None,
    ) -> None:
        self.completion_client = completion_client
        self.transcripts = transcripts if transcripts is not None else TranscriptStore()
        self.image_store = image_store if image_store is not None else ImageStore()
        self.ocr = ocr
        self.executor = (
            executor if executor is not None
            else ThreadPoolExecutor(max_workers=4, thread_name_prefix="taste-test")
        )
        self._orchestrators: Dict[str, ConversationOrchestrator] = {}
        self._lock = threading.Lock()

    def get(self, conversation_id: str) -> ConversationOrchestrator:
        key = str(conversation_id)
        with self._lock:
            orchestrator = self._orchestrators.get(key)
            if orchestrator is None:
                orchestrator = ConversationOrchestrator(
                    self.transcripts.get_or_create(key),
                    self.completion_client,
                    image_store=self.image_store,
                    ocr=self.ocr,
                    executor=self.executor,
                )
                self._orchestrators[key] = orchestrator
            return orchestrator

    def clear(self, conversation_id: Optional[str] = None) -> None:
        with self._lock:
            if conversation_id is None:
                self._orchestrators.clear()
            else:
                self._orchestrators.pop(str(conversation_id), None)

        if conversation_id is None:
            transcripts = self.transcripts.all()
        else:
            transcript = self.transcripts.get(conversation_id)
            transcripts = [transcript] if transcript is not None else []
        self.transcripts.clear(conversation_id)

        # Bitmaps belong to the transcript that shows them
        removed = self.image_store.discard(
            [ref for transcript in transcripts for ref in transcript.image_refs()]
        )
        if removed:
            logging.info("[IMAGES] Dropped %d stored images", removed)
