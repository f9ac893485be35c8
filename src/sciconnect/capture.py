"""Local capture devices for call previews."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional, Protocol

import numpy as np

from .models import CaptureKind

logger = logging.getLogger("sciconnect")


class CaptureError(RuntimeError):
    """Base class for failed device acquisition."""


class PermissionDenied(CaptureError):
    pass


class DeviceUnavailable(CaptureError):
    pass


class Track:
    """One captured media track. ``stop`` releases the device and is idempotent."""

    def __init__(self, kind: str, label: str = "") -> None:
        self.kind = kind
        self.label = label
        self.enabled = True
        self.stopped = False

    def stop(self) -> None:
        if self.stopped:
            return
        self.stopped = True
        self.enabled = False
        self._release()

    def _release(self) -> None:
        pass

    def __repr__(self) -> str:
        state = "stopped" if self.stopped else ("on" if self.enabled else "off")
        return f"Track({self.kind}, {self.label!r}, {state})"


class DeviceStream:
    def __init__(self, tracks: List[Track]) -> None:
        self.tracks = list(tracks)

    def audio_tracks(self) -> List[Track]:
        return [t for t in self.tracks if t.kind == "audio"]

    def video_tracks(self) -> List[Track]:
        return [t for t in self.tracks if t.kind == "video"]

    def stop(self) -> None:
        for track in self.tracks:
            try:
                track.stop()
            except Exception:
                logger.exception("Failed to release %s track %s", track.kind, track.label)

    @property
    def active(self) -> bool:
        return any(not t.stopped for t in self.tracks)


class CaptureBackend(Protocol):
    def acquire(self, kind: CaptureKind) -> DeviceStream: ...


def list_input_devices() -> List[Dict[str, Any]]:
    try:
        import sounddevice as sd
    except Exception as exc:  # pragma: no cover - environment-dependent
        raise DeviceUnavailable("sounddevice is required for device detection.") from exc

    return [d for d in sd.query_devices() if d.get("max_input_channels", 0) > 0]


def select_preferred_device(
    candidates: List[Dict[str, Any]],
    prefer_name: Optional[str] = None,
) -> Dict[str, Any]:
    if not candidates:
        raise DeviceUnavailable("No input devices found.")
    if prefer_name:
        preferred = [
            d for d in candidates if prefer_name.lower() in d.get("name", "").lower()
        ]
        if preferred:
            return preferred[0]
        logger.info(
            "Preferred device %r not found, using %s",
            prefer_name,
            candidates[0].get("name"),
        )
    return candidates[0]


class MicrophoneTrack(Track):
    """Audio track backed by a running ``sounddevice.InputStream``.

    The stream keeps running while muted; disabled tracks report a level of
    zero instead of the measured RMS.
    """

    def __init__(self, stream: Any, label: str) -> None:
        super().__init__("audio", label)
        self._stream = stream
        self._lock = threading.Lock()
        self._level = 0.0

    @property
    def level(self) -> float:
        with self._lock:
            return self._level if self.enabled else 0.0

    def update_level(self, indata: Any) -> None:
        if not self.enabled or indata is None:
            return
        data = np.asarray(indata, dtype=np.float32) / 32768.0
        rms = float(np.sqrt(np.mean(np.square(data)))) if data.size else 0.0
        with self._lock:
            self._level = rms

    def _release(self) -> None:
        try:
            self._stream.stop()
        finally:
            self._stream.close()
        logger.debug("Released audio device %s", self.label)


def _classify_portaudio_error(exc: Exception) -> CaptureError:
    text = str(exc)
    lowered = text.lower()
    if "permission" in lowered or "denied" in lowered or "not authorized" in lowered:
        return PermissionDenied(f"Microphone permission denied: {text}")
    return DeviceUnavailable(f"Microphone unavailable: {text}")


class SoundDeviceBackend:
    """Acquires the microphone through PortAudio.

    No camera backend is bundled, so video requests fail as unavailable and
    the session degrades.
    """

    def __init__(
        self,
        device_name: Optional[str] = None,
        sample_rate_hz: int = 44100,
        channels: int = 1,
    ) -> None:
        self.device_name = device_name
        self.sample_rate_hz = sample_rate_hz
        self.channels = channels

    def acquire(self, kind: CaptureKind) -> DeviceStream:
        if kind.wants_video:
            raise DeviceUnavailable("No camera capture backend is available.")
        try:
            import sounddevice as sd
        except Exception as exc:  # pragma: no cover - environment-dependent
            raise DeviceUnavailable("sounddevice is required for calls.") from exc

        device = select_preferred_device(list_input_devices(), self.device_name)
        max_in = device.get("max_input_channels", 0)
        channels = min(self.channels, max_in) if max_in else 1
        if channels != self.channels:
            logger.info("Adjusting mic channels to %s (max %s)", channels, max_in)

        track: Optional[MicrophoneTrack] = None

        def _callback(indata, _frames, _time, status):
            if status:
                logger.debug("Mic status: %s", status)
            if track is not None:
                track.update_level(indata)

        try:
            stream = sd.InputStream(
                samplerate=self.sample_rate_hz,
                channels=channels,
                dtype="int16",
                device=device.get("index"),
                callback=_callback,
            )
        except sd.PortAudioError as exc:
            raise _classify_portaudio_error(exc) from exc
        try:
            stream.start()
        except sd.PortAudioError as exc:
            stream.close()
            raise _classify_portaudio_error(exc) from exc
        track = MicrophoneTrack(stream, device.get("name", ""))
        logger.info("Acquired audio device %s", track.label)
        return DeviceStream([track])
