from sciconnect.models import CaptureKind
from sciconnect.navigation import (
    AppState,
    View,
    call_kind,
    is_call_view,
    navigate,
    start_call,
    start_chat,
)


def test_default_state():
    state = AppState()
    assert state.active_view is View.SCIENTISTS
    assert state.selected_expert_id is None


def test_transitions_return_new_values():
    state = AppState()
    chat = start_chat(state, "s2")
    assert chat == AppState(View.CHAT, "s2")
    assert state == AppState()

    donate = navigate(chat, View.DONATE)
    assert donate.active_view is View.DONATE
    assert donate.selected_expert_id == "s2"


def test_start_call_picks_view_from_kind():
    assert start_call(AppState(), "s1", CaptureKind.VIDEO).active_view is View.VIDEO
    assert start_call(AppState(), "s1", CaptureKind.AUDIO).active_view is View.CALL


def test_call_views():
    assert is_call_view(View.CALL)
    assert is_call_view(View.VIDEO)
    assert not is_call_view(View.CHAT)
    assert call_kind(View.CALL) is CaptureKind.AUDIO
    assert call_kind(View.VIDEO) is CaptureKind.VIDEO
    assert call_kind(View.PROFILE) is None
