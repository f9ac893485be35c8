"""Call session lifecycle: acquire, toggle and release capture devices."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from .capture import CaptureBackend, CaptureError, DeviceStream, PermissionDenied
from .models import CaptureKind

logger = logging.getLogger("sciconnect")


class MediaSession:
    def __init__(
        self,
        kind: CaptureKind,
        stream: Optional[DeviceStream] = None,
        notice: Optional[str] = None,
    ) -> None:
        self.kind = kind
        self.stream = stream
        self.notice = notice
        self.mic_enabled = stream is not None
        self.camera_enabled = stream is not None and kind.wants_video
        self.closed = False

    @property
    def degraded(self) -> bool:
        return self.stream is None

    @property
    def live(self) -> bool:
        return self.stream is not None and not self.closed

    def enabled_tracks(self) -> int:
        if self.stream is None:
            return 0
        return sum(1 for t in self.stream.tracks if t.enabled and not t.stopped)

    def __repr__(self) -> str:
        if self.closed:
            state = "closed"
        elif self.degraded:
            state = "degraded"
        else:
            state = "live"
        return (
            f"MediaSession({self.kind.value}, {state}, "
            f"mic={self.mic_enabled}, camera={self.camera_enabled})"
        )


def _release_late(future: "asyncio.Future[DeviceStream]") -> None:
    if future.cancelled() or future.exception() is not None:
        return
    logger.info("Releasing capture that finished after the call view closed")
    future.result().stop()


class MediaSessionManager:
    """Opens at most one live session at a time.

    ``open`` never raises for device problems: denied permission or missing
    hardware produce a degraded session carrying a notice for the user.
    """

    def __init__(self, backend: CaptureBackend) -> None:
        self.backend = backend
        self.active: Optional[MediaSession] = None

    async def open(self, kind: CaptureKind) -> MediaSession:
        if self.active is not None:
            self.close(self.active)
        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(None, self.backend.acquire, kind)
        try:
            stream = await asyncio.shield(future)
        except asyncio.CancelledError:
            future.add_done_callback(_release_late)
            raise
        except PermissionDenied as exc:
            logger.warning("Capture permission denied (%s): %s", kind.value, exc)
            return MediaSession(
                kind, notice="Permission to use your microphone or camera was denied."
            )
        except CaptureError as exc:
            logger.warning("Capture unavailable (%s): %s", kind.value, exc)
            return MediaSession(kind, notice=f"Media unavailable: {exc}")
        except Exception as exc:
            logger.exception("Capture failed")
            return MediaSession(kind, notice=f"Media unavailable: {exc}")

        session = MediaSession(kind, stream)
        self.active = session
        logger.info("Opened %s session", kind.value)
        return session

    def set_mic(self, session: Optional[MediaSession], enabled: bool) -> None:
        if session is None or not session.live:
            return
        for track in session.stream.audio_tracks():
            track.enabled = enabled
        session.mic_enabled = enabled

    def set_camera(self, session: Optional[MediaSession], enabled: bool) -> None:
        if session is None or not session.live or not session.kind.wants_video:
            return
        for track in session.stream.video_tracks():
            track.enabled = enabled
        session.camera_enabled = enabled

    def close(self, session: Optional[MediaSession]) -> None:
        if session is None or session.closed:
            return
        session.closed = True
        try:
            if session.stream is not None:
                session.stream.stop()
        finally:
            session.mic_enabled = False
            session.camera_enabled = False
            if self.active is session:
                self.active = None
        logger.info("Closed %s session", session.kind.value)

    @asynccontextmanager
    async def session(self, kind: CaptureKind) -> AsyncIterator[MediaSession]:
        current = await self.open(kind)
        try:
            yield current
        finally:
            self.close(current)


class CallController:
    """Owns the media session of one call view from enter to leave.

    ``leave`` is safe in every state: before ``enter``, while acquisition is
    still in flight (the late result is released on arrival), after a
    degraded open, or twice in a row.
    """

    def __init__(self, manager: MediaSessionManager) -> None:
        self.manager = manager
        self.kind: Optional[CaptureKind] = None
        self._task: Optional["asyncio.Task[MediaSession]"] = None

    @property
    def session(self) -> Optional[MediaSession]:
        task = self._task
        if task is None or not task.done() or task.cancelled():
            return None
        return task.result()

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def enter(self, kind: CaptureKind) -> "asyncio.Task[MediaSession]":
        self.leave()
        self.kind = kind
        self._task = asyncio.get_running_loop().create_task(self.manager.open(kind))
        return self._task

    async def ready(self) -> Optional[MediaSession]:
        if self._task is None:
            return None
        try:
            return await self._task
        except asyncio.CancelledError:
            return None

    def leave(self) -> None:
        task, self._task = self._task, None
        self.kind = None
        if task is None:
            return
        if not task.done():
            task.cancel()
            logger.info("Call view left during acquisition")
            return
        if not task.cancelled():
            self.manager.close(task.result())

    def toggle_mic(self) -> bool:
        session = self.session
        if session is None:
            return False
        self.manager.set_mic(session, not session.mic_enabled)
        return session.mic_enabled

    def toggle_camera(self) -> bool:
        session = self.session
        if session is None:
            return False
        self.manager.set_camera(session, not session.camera_enabled)
        return session.camera_enabled
