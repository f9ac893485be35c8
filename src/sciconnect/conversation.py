"""Chat threads with a mock scientist responder."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .models import OTHER, SELF, Expert, Message
from .scheduler import Scheduler, TimerHandle

logger = logging.getLogger("sciconnect")

GENERAL_THREAD = "general"
DEFAULT_GREETING = "Hi! I'm here to answer your questions about science."
DEFAULT_ACKNOWLEDGEMENT = "Thanks! I'll get back to you shortly."
DEFAULT_REPLY_DELAY_S = 0.6


class ConversationThread:
    def __init__(self, key: str) -> None:
        self.key = key
        self._messages: List[Message] = []

    @property
    def messages(self) -> List[Message]:
        return list(self._messages)

    @property
    def state(self) -> str:
        return "has-messages" if self._messages else "empty"

    def append(self, message: Message) -> None:
        self._messages.append(message)

    def __len__(self) -> int:
        return len(self._messages)

    def __repr__(self) -> str:
        return f"ConversationThread(key={self.key!r}, messages={len(self._messages)})"


class ConversationManager:
    """Owns one thread per scientist (plus the general thread).

    Each ``send`` schedules an acknowledgement against the thread it was sent
    on. Pending acknowledgements are tracked per thread key so ``discard`` and
    ``shutdown`` can cancel them; a callback that fires for a thread the
    manager no longer holds does nothing.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        greeting: str = DEFAULT_GREETING,
        acknowledgement: str = DEFAULT_ACKNOWLEDGEMENT,
        reply_delay: float = DEFAULT_REPLY_DELAY_S,
    ) -> None:
        self.scheduler = scheduler
        self.greeting = greeting
        self.acknowledgement = acknowledgement
        self.reply_delay = reply_delay
        self._threads: Dict[str, ConversationThread] = {}
        self._pending: Dict[str, List[TimerHandle]] = {}

    @staticmethod
    def thread_key(expert: Optional[Expert]) -> str:
        return expert.id if expert is not None else GENERAL_THREAD

    def open_thread(self, expert: Optional[Expert] = None) -> ConversationThread:
        key = self.thread_key(expert)
        thread = self._threads.get(key)
        if thread is None:
            thread = ConversationThread(key)
            thread.append(Message(sender=OTHER, text=self.greeting))
            self._threads[key] = thread
            logger.debug("Opened thread %s", key)
        return thread

    def get_thread(self, key: str) -> Optional[ConversationThread]:
        return self._threads.get(key)

    def send(self, thread: ConversationThread, text: str | None) -> ConversationThread:
        body = (text or "").strip()
        if not body:
            return thread
        thread.append(Message(sender=SELF, text=body))
        handle = self.scheduler.call_later(self.reply_delay, self._deliver_reply, thread)
        self._pending.setdefault(thread.key, []).append(handle)
        return thread

    def pending_replies(self, key: str) -> int:
        return len(self._pending.get(key, []))

    def _deliver_reply(self, thread: ConversationThread) -> None:
        if self._threads.get(thread.key) is not thread:
            logger.debug("Dropped reply for discarded thread %s", thread.key)
            return
        pending = self._pending.get(thread.key)
        if pending:
            pending.pop(0)
        thread.append(Message(sender=OTHER, text=self.acknowledgement))

    def discard(self, key: str) -> None:
        for handle in self._pending.pop(key, []):
            handle.cancel()
        if self._threads.pop(key, None) is not None:
            logger.debug("Discarded thread %s", key)

    def shutdown(self) -> None:
        for key in list(self._pending):
            for handle in self._pending.pop(key):
                handle.cancel()
