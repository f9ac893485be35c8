"""Data models for SciConnect."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

ALL_TAGS = "ALL"

PERSONALITY_TYPES = (
    "INTJ",
    "INFJ",
    "INTP",
    "ENTP",
    "ENFP",
    "ENTJ",
    "ISTJ",
    "ISFJ",
)

SELF = "self"
OTHER = "other"


class CaptureKind(str, Enum):
    AUDIO = "audio"
    VIDEO = "video"

    @property
    def wants_video(self) -> bool:
        return self is CaptureKind.VIDEO


@dataclass(frozen=True)
class Expert:
    id: str
    name: str
    field: str
    personality: str
    bio: str
    avatar: str = ""
    causes: Tuple[str, ...] = ()

    @property
    def initials(self) -> str:
        return "".join(part[0] for part in self.name.split() if part)


@dataclass(frozen=True)
class Cause:
    id: str
    name: str
    description: str
    impact: str


@dataclass(frozen=True)
class Message:
    sender: str
    text: str


@dataclass(frozen=True)
class FilterState:
    query: str = ""
    tag: str = ALL_TAGS


@dataclass
class UserProfile:
    display_name: str = "Alex"
    personality: str = "ENFP"
    interests: str = "space, climate, biotech"

    def interest_list(self) -> list[str]:
        return [item.strip() for item in self.interests.split(",") if item.strip()]
