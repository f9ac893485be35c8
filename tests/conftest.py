import threading

import pytest

from sciconnect.capture import DeviceStream, Track


class FailingTrack(Track):
    """Track whose device refuses to stop."""

    def _release(self):
        raise OSError("PortAudio stop failed")


class FakeBackend:
    """Hands out in-memory tracks; optionally blocks or fails."""

    def __init__(self, error=None, gate=None, tracks=None):
        self.error = error
        self.gate = gate
        self.tracks = tracks
        self.calls = 0
        self.streams = []

    def acquire(self, kind):
        self.calls += 1
        if self.gate is not None:
            self.gate.wait(5)
        if self.error is not None:
            raise self.error
        if self.tracks is not None:
            tracks = self.tracks(kind)
        else:
            tracks = [Track("audio", "fake mic")]
            if kind.wants_video:
                tracks.append(Track("video", "fake camera"))
        stream = DeviceStream(tracks)
        self.streams.append(stream)
        return stream


@pytest.fixture
def make_backend():
    return FakeBackend


@pytest.fixture
def backend(make_backend):
    return make_backend()


@pytest.fixture
def failing_backend(make_backend):
    return make_backend(
        tracks=lambda kind: [FailingTrack("audio", "stuck mic"), Track("video", "camera")]
    )


@pytest.fixture
def gate():
    return threading.Event()
