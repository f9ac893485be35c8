"""Which screen is active and which scientist is selected."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .models import CaptureKind


class View(str, Enum):
    SCIENTISTS = "scientists"
    CHAT = "chat"
    CALL = "call"
    VIDEO = "video"
    DONATE = "donate"
    PROFILE = "profile"


@dataclass(frozen=True)
class AppState:
    active_view: View = View.SCIENTISTS
    selected_expert_id: Optional[str] = None


def is_call_view(view: View) -> bool:
    return view in (View.CALL, View.VIDEO)


def call_kind(view: View) -> Optional[CaptureKind]:
    if view is View.CALL:
        return CaptureKind.AUDIO
    if view is View.VIDEO:
        return CaptureKind.VIDEO
    return None


def navigate(state: AppState, view: View) -> AppState:
    return replace(state, active_view=view)


def start_chat(state: AppState, expert_id: Optional[str]) -> AppState:
    return AppState(active_view=View.CHAT, selected_expert_id=expert_id)


def start_call(state: AppState, expert_id: Optional[str], kind: CaptureKind) -> AppState:
    view = View.VIDEO if kind.wants_video else View.CALL
    return AppState(active_view=view, selected_expert_id=expert_id)
