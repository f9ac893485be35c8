"""Application shell tying the directory, chat, calls and donations together."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from .capture import CaptureBackend
from .config import Config, ProfileConfig, save_config
from .conversation import ConversationManager, ConversationThread
from .directory import DirectoryStore, ExpertNotFound
from .donations import DonationResult, DonationService, PaymentProvider
from .filters import TagIndex, update_query, update_tag
from .media import CallController, MediaSession, MediaSessionManager
from .models import PERSONALITY_TYPES, CaptureKind, Expert, FilterState, UserProfile
from .navigation import (
    AppState,
    View,
    call_kind,
    is_call_view,
    navigate,
    start_call,
    start_chat,
)
from .scheduler import Scheduler

logger = logging.getLogger("sciconnect")


class SciConnectApp:
    """Routes user intents to the component that owns the state.

    Call views own a media session: every transition out of a call view
    (navigation, switching between audio and video, ``close``) releases it.
    """

    def __init__(
        self,
        config: Config,
        directory: DirectoryStore,
        scheduler: Scheduler,
        backend: CaptureBackend,
        payments: PaymentProvider,
        config_path: Optional[str] = None,
    ) -> None:
        self.config = config
        self.config_path = config_path
        self.directory = directory
        self.state = AppState()
        self.filter_state = FilterState()
        self._index = TagIndex(directory.list_experts())
        self.conversations = ConversationManager(
            scheduler,
            greeting=config.chat.greeting,
            acknowledgement=config.chat.acknowledgement,
            reply_delay=config.chat.reply_delay_s,
        )
        self.media = MediaSessionManager(backend)
        self.call = CallController(self.media)
        self.donations = DonationService(directory, payments, currency=config.donations.currency)
        self.profile = UserProfile(
            display_name=config.profile.display_name,
            personality=config.profile.personality,
            interests=config.profile.interests,
        )

    def results(self) -> List[Expert]:
        return self._index.apply(self.filter_state)

    def search(self, query: str) -> List[Expert]:
        self.filter_state = update_query(self.filter_state, query)
        return self.results()

    def select_tag(self, tag: str) -> List[Expert]:
        self.filter_state = update_tag(self.filter_state, tag)
        return self.results()

    @property
    def selected_expert(self) -> Optional[Expert]:
        if self.state.selected_expert_id is None:
            return None
        try:
            return self.directory.find_expert(self.state.selected_expert_id)
        except ExpertNotFound:
            return None

    def current_thread(self) -> ConversationThread:
        return self.conversations.open_thread(self.selected_expert)

    def start_chat(self, expert_id: Optional[str]) -> ConversationThread:
        self._leave_call()
        self.state = start_chat(self.state, expert_id)
        return self.current_thread()

    def send_message(self, text: str) -> ConversationThread:
        return self.conversations.send(self.current_thread(), text)

    async def go(self, view: View) -> AppState:
        kind = call_kind(view)
        if kind is None or self.call.kind is not kind:
            self.call.leave()
        self.state = navigate(self.state, view)
        if kind is not None and self.call.kind is None:
            self.call.enter(kind)
        return self.state

    async def start_call(
        self, expert_id: Optional[str], kind: CaptureKind
    ) -> Optional[MediaSession]:
        self._leave_call()
        self.state = start_call(self.state, expert_id, kind)
        self.call.enter(kind)
        return await self.call.ready()

    def end_call(self) -> None:
        self._leave_call()
        if is_call_view(self.state.active_view):
            self.state = navigate(self.state, View.SCIENTISTS)

    def _leave_call(self) -> None:
        self.call.leave()

    def donate(self, cause_id: Optional[str], amount: Any) -> DonationResult:
        return self.donations.donate(cause_id or self.config.donations.default_cause, amount)

    def save_profile(self, display_name: str, personality: str, interests: str) -> UserProfile:
        self.profile = UserProfile(
            display_name=display_name.strip() or self.profile.display_name,
            personality=personality.upper()
            if personality and personality.upper() in PERSONALITY_TYPES
            else self.profile.personality,
            interests=interests,
        )
        self.config.profile = ProfileConfig(
            display_name=self.profile.display_name,
            personality=self.profile.personality,
            interests=self.profile.interests,
        )
        if self.config_path:
            save_config(self.config_path, self.config)
            logger.info("Profile saved to %s", self.config_path)
        return self.profile

    def close(self) -> None:
        self.call.leave()
        self.conversations.shutdown()
