"""Configuration handling."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional
import yaml

from .conversation import DEFAULT_ACKNOWLEDGEMENT, DEFAULT_GREETING


@dataclass
class ChatConfig:
    greeting: str = DEFAULT_GREETING
    acknowledgement: str = DEFAULT_ACKNOWLEDGEMENT
    reply_delay_ms: int = 600

    @property
    def reply_delay_s(self) -> float:
        return max(0, self.reply_delay_ms) / 1000.0


@dataclass
class MediaConfig:
    device_name: Optional[str] = None
    sample_rate_hz: int = 44100
    channels: int = 1


@dataclass
class DonationConfig:
    currency: str = "USD"
    default_cause: str = "c1"
    default_amount: str = "25"


@dataclass
class ProfileConfig:
    display_name: str = "Alex"
    personality: str = "ENFP"
    interests: str = "space, climate, biotech"


@dataclass
class Config:
    base_dir: str = ""
    log_dir: Optional[str] = None
    directory_path: Optional[str] = None
    debug_logging: bool = False
    chat: ChatConfig = field(default_factory=ChatConfig)
    media: MediaConfig = field(default_factory=MediaConfig)
    donations: DonationConfig = field(default_factory=DonationConfig)
    profile: ProfileConfig = field(default_factory=ProfileConfig)


def load_config(path: str) -> Config:
    with open(path, "r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    chat = ChatConfig(**data.get("chat", {}))
    media = MediaConfig(**data.get("media", {}))
    donations = DonationConfig(**data.get("donations", {}))
    profile = ProfileConfig(**data.get("profile", {}))

    return Config(
        base_dir=data.get("base_dir", ""),
        log_dir=data.get("log_dir"),
        directory_path=data.get("directory_path"),
        debug_logging=bool(data.get("debug_logging", False)),
        chat=chat,
        media=media,
        donations=donations,
        profile=profile,
    )


def save_config(path: str, config: Config) -> None:
    data = {
        "base_dir": config.base_dir,
        "log_dir": config.log_dir,
        "directory_path": config.directory_path,
        "debug_logging": config.debug_logging,
        "chat": {
            "greeting": config.chat.greeting,
            "acknowledgement": config.chat.acknowledgement,
            "reply_delay_ms": config.chat.reply_delay_ms,
        },
        "media": {
            "device_name": config.media.device_name,
            "sample_rate_hz": config.media.sample_rate_hz,
            "channels": config.media.channels,
        },
        "donations": {
            "currency": config.donations.currency,
            "default_cause": config.donations.default_cause,
            "default_amount": config.donations.default_amount,
        },
        "profile": {
            "display_name": config.profile.display_name,
            "personality": config.profile.personality,
            "interests": config.profile.interests,
        },
    }
    with open(path, "w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False)
