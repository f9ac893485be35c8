import os
import tempfile

import pytest

from sciconnect.app import SciConnectApp
from sciconnect.capture import PermissionDenied
from sciconnect.config import Config, load_config
from sciconnect.conversation import DEFAULT_ACKNOWLEDGEMENT, DEFAULT_GREETING
from sciconnect.directory import seed_directory
from sciconnect.donations import SandboxPaymentProvider
from sciconnect.models import OTHER, SELF, CaptureKind
from sciconnect.navigation import View
from sciconnect.scheduler import ManualScheduler


@pytest.fixture
def make_app(backend):
    def _make(scheduler=None, config_path=None, capture=None):
        return SciConnectApp(
            config=Config(),
            directory=seed_directory(),
            scheduler=scheduler or ManualScheduler(),
            backend=capture or backend,
            payments=SandboxPaymentProvider(),
            config_path=config_path,
        )

    return _make


def test_search_scenarios(make_app):
    app = make_app()
    assert [e.field for e in app.search("climate")] == ["Climate Science"]
    app.search("")
    assert [e.personality for e in app.select_tag("ENFP")] == ["ENFP"]
    assert len(app.select_tag("ALL")) == 4


def test_chat_scenario(make_app):
    scheduler = ManualScheduler()
    app = make_app(scheduler=scheduler)
    thread = app.start_chat("s3")
    assert app.state.active_view is View.CHAT
    app.send_message("hi")
    assert [(m.sender, m.text) for m in thread.messages] == [
        (OTHER, DEFAULT_GREETING),
        (SELF, "hi"),
    ]
    scheduler.advance(0.6)
    assert thread.messages[-1].text == DEFAULT_ACKNOWLEDGEMENT
    assert len(thread) == 3


def test_chat_with_unknown_expert_uses_general_thread(make_app):
    thread = make_app().start_chat("missing")
    assert thread.key == "general"


@pytest.mark.asyncio
async def test_leaving_call_view_releases_session(make_app, backend):
    app = make_app()
    await app.go(View.VIDEO)
    session = await app.call.ready()
    assert session.live
    await app.go(View.SCIENTISTS)
    assert session.closed
    assert not backend.streams[0].active


@pytest.mark.asyncio
async def test_switching_audio_to_video_swaps_session(make_app, backend):
    app = make_app()
    await app.go(View.CALL)
    audio = await app.call.ready()
    await app.go(View.CALL)
    assert app.call.session is audio
    await app.go(View.VIDEO)
    video = await app.call.ready()
    app.close()

    assert backend.calls == 2
    assert audio.closed
    assert video.closed
    assert audio.kind is CaptureKind.AUDIO
    assert video.kind is CaptureKind.VIDEO


@pytest.mark.asyncio
async def test_leaving_call_with_stuck_device_does_not_raise(make_app, failing_backend):
    app = make_app(capture=failing_backend)
    session = await app.start_call("s1", CaptureKind.VIDEO)
    await app.go(View.CHAT)
    assert session.closed
    assert all(t.stopped for t in session.stream.tracks)
    assert app.media.active is None


@pytest.mark.asyncio
async def test_denied_call_keeps_screen_usable(make_app, make_backend):
    app = make_app(capture=make_backend(error=PermissionDenied("nope")))
    session = await app.start_call("s1", CaptureKind.VIDEO)
    assert app.state.active_view is View.VIDEO
    assert app.call.toggle_mic() is False
    app.end_call()
    assert session.degraded
    assert session.notice
    assert app.state.active_view is View.SCIENTISTS


@pytest.mark.asyncio
async def test_start_chat_ends_active_call(make_app):
    app = make_app()
    session = await app.start_call("s2", CaptureKind.AUDIO)
    app.start_chat("s2")
    assert session.closed


def test_donate_uses_default_cause(make_app):
    result = make_app().donate(None, "-5")
    assert result.cause_id == "c1"
    assert result.amount == 1
    assert result.succeeded


def test_save_profile_persists_to_config(make_app):
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "sciconnect_config.yml")
        app = make_app(config_path=path)
        profile = app.save_profile("Sam", "intj", "oceans, fungi")
        loaded = load_config(path)

    assert profile.personality == "INTJ"
    assert profile.interest_list() == ["oceans", "fungi"]
    assert loaded.profile.display_name == "Sam"
    assert loaded.profile.interests == "oceans, fungi"


def test_save_profile_keeps_valid_personality(make_app):
    profile = make_app().save_profile("", "nope", "space")
    assert profile.display_name == "Alex"
    assert profile.personality == "ENFP"
