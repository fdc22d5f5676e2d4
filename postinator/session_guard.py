"""Per-chat admission control: at most one render job in flight per chat."""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator

from .errors import AdmissionRejected
from .models import ChatSession, RenderMode

logger = logging.getLogger(__name__)


class SessionGuard:
    """Track which chats have a job running and which mode each chat selected.

    Sessions are created lazily and live only in memory.
    """

    def __init__(self) -> None:
        self._sessions: Dict[int, ChatSession] = {}
        self._lock = threading.Lock()

    def try_start(self, chat_id: int) -> bool:
        """Mark ``chat_id`` as processing; False if it already is."""
        with self._lock:
            session = self._sessions.get(chat_id)
            if session is None:
                session = self._sessions[chat_id] = ChatSession(chat_id)
            if session.processing:
                return False
            session.processing = True
            return True

    def finish(self, chat_id: int) -> None:
        """Return ``chat_id`` to idle; safe to call when nothing is running."""
        with self._lock:
            session = self._sessions.get(chat_id)
            if session is None:
                return
            session.processing = False
            if session.mode is RenderMode.NONE:
                del self._sessions[chat_id]

    def is_processing(self, chat_id: int) -> bool:
        with self._lock:
            session = self._sessions.get(chat_id)
            return session is not None and session.processing

    def set_mode(self, chat_id: int, mode: RenderMode) -> None:
        with self._lock:
            session = self._sessions.get(chat_id)
            if session is None:
                session = self._sessions[chat_id] = ChatSession(chat_id)
            session.mode = mode
            if mode is RenderMode.NONE and not session.processing:
                del self._sessions[chat_id]

    def get_mode(self, chat_id: int) -> RenderMode:
        with self._lock:
            session = self._sessions.get(chat_id)
            return session.mode if session is not None else RenderMode.NONE

    def active_count(self) -> int:
        with self._lock:
            return sum(1 for session in self._sessions.values() if session.processing)

    @contextmanager
    def job(self, chat_id: int) -> Iterator[None]:
        """Run the block as the chat's only job, raising AdmissionRejected if busy."""
        if not self.try_start(chat_id):
            logger.info("Chat %s is busy, job rejected", chat_id)
            raise AdmissionRejected(chat_id)
        try:
            yield
        finally:
            self.finish(chat_id)
