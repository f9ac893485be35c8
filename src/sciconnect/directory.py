"""Scientist and cause catalog."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

from .models import PERSONALITY_TYPES, Cause, Expert

logger = logging.getLogger("sciconnect")


class DirectoryError(RuntimeError):
    """Raised when catalog data cannot be loaded."""


class CauseNotFound(LookupError):
    def __init__(self, cause_id: str) -> None:
        super().__init__(f"Unknown cause: {cause_id}")
        self.cause_id = cause_id


class ExpertNotFound(LookupError):
    def __init__(self, expert_id: str) -> None:
        super().__init__(f"Unknown scientist: {expert_id}")
        self.expert_id = expert_id


@dataclass(frozen=True)
class CauseView:
    """What the donate screen shows for the selected cause."""

    cause_id: str
    name: str = ""
    description: str = ""
    impact: str = ""

    @property
    def found(self) -> bool:
        return bool(self.name)


SEED_EXPERTS: List[Dict[str, Any]] = [
    {
        "id": "s1",
        "name": "Dr. Amina Patel",
        "field": "Astrophysics",
        "personality": "INTJ",
        "bio": "Researches exoplanet atmospheres and biosignatures.",
        "avatar": "https://images.unsplash.com/photo-1527980965255-d3b416303d12?q=80&w=300&auto=format&fit=crop",
        "causes": ["Girls in STEM", "Space Education"],
    },
    {
        "id": "s2",
        "name": "Prof. Luca Romano",
        "field": "Neuroscience",
        "personality": "ENFP",
        "bio": "Studies memory consolidation and learning.",
        "avatar": "https://images.unsplash.com/photo-1544005313-94ddf0286df2?q=80&w=300&auto=format&fit=crop",
        "causes": ["Neurodiversity", "Open Science"],
    },
    {
        "id": "s3",
        "name": "Dr. Mei Lin",
        "field": "Climate Science",
        "personality": "INFJ",
        "bio": "Models regional climate adaptation strategies.",
        "avatar": "https://images.unsplash.com/photo-1556157382-97eda2d62296?q=80&w=300&auto=format&fit=crop",
        "causes": ["Reforestation", "Clean Water"],
    },
    {
        "id": "s4",
        "name": "Dr. Kwame Mensah",
        "field": "Biotech",
        "personality": "ENTP",
        "bio": "Develops low-cost point-of-care diagnostics.",
        "avatar": "https://images.unsplash.com/photo-1506794778202-cad84cf45f1d?q=80&w=300&auto=format&fit=crop",
        "causes": ["Global Health", "Lab Access"],
    },
]

SEED_CAUSES: List[Dict[str, Any]] = [
    {
        "id": "c1",
        "name": "Girls in STEM",
        "description": "Scholarships and mentorship for girls in science.",
        "impact": "$25 buys 1hr mentorship",
    },
    {
        "id": "c2",
        "name": "Space Education",
        "description": "Hands-on astronomy kits for classrooms.",
        "impact": "$50 funds a star party",
    },
    {
        "id": "c3",
        "name": "Neurodiversity",
        "description": "Support inclusive learning tools.",
        "impact": "$20 funds accessibility tools",
    },
    {
        "id": "c4",
        "name": "Open Science",
        "description": "Grants to open-source research software.",
        "impact": "$30 sponsors compute time",
    },
    {
        "id": "c5",
        "name": "Reforestation",
        "description": "Tree-planting in climate-vulnerable regions.",
        "impact": "$10 plants 5 trees",
    },
    {
        "id": "c6",
        "name": "Clean Water",
        "description": "Affordable water purification kits.",
        "impact": "$40 funds 1 family/month",
    },
    {
        "id": "c7",
        "name": "Global Health",
        "description": "Diagnostics for remote clinics.",
        "impact": "$35 equips 1 kit",
    },
    {
        "id": "c8",
        "name": "Lab Access",
        "description": "Microgrants for community labs.",
        "impact": "$15 buys lab consumables",
    },
]


class DirectoryStore:
    """Read-only catalog of scientists and causes.

    Contents are fixed at construction time; every accessor returns
    immutable values in catalog order.
    """

    def __init__(self, experts: Iterable[Expert], causes: Iterable[Cause]) -> None:
        self._experts: Tuple[Expert, ...] = tuple(experts)
        self._causes: Tuple[Cause, ...] = tuple(causes)
        self._causes_by_id = {cause.id: cause for cause in self._causes}
        self._causes_by_name = {cause.name: cause for cause in self._causes}
        self._experts_by_id = {expert.id: expert for expert in self._experts}

    def list_experts(self) -> Tuple[Expert, ...]:
        return self._experts

    def list_causes(self) -> Tuple[Cause, ...]:
        return self._causes

    def find_cause(self, cause_id: str) -> Cause:
        try:
            return self._causes_by_id[cause_id]
        except KeyError:
            raise CauseNotFound(cause_id) from None

    def find_expert(self, expert_id: str) -> Expert:
        try:
            return self._experts_by_id[expert_id]
        except KeyError:
            raise ExpertNotFound(expert_id) from None

    def describe_cause(self, cause_id: str) -> CauseView:
        try:
            cause = self.find_cause(cause_id)
        except CauseNotFound:
            logger.debug("Cause lookup fell back to empty view: %s", cause_id)
            return CauseView(cause_id=cause_id)
        return CauseView(
            cause_id=cause.id,
            name=cause.name,
            description=cause.description,
            impact=cause.impact,
        )

    def causes_for(self, expert: Expert) -> Tuple[Cause, ...]:
        return tuple(
            self._causes_by_name[name]
            for name in expert.causes
            if name in self._causes_by_name
        )


def _build_expert(data: Dict[str, Any]) -> Expert:
    try:
        expert = Expert(
            id=str(data["id"]),
            name=str(data["name"]),
            field=str(data.get("field", "")),
            personality=str(data.get("personality", "")).upper(),
            bio=str(data.get("bio", "")),
            avatar=str(data.get("avatar", "")),
            causes=tuple(data.get("causes") or ()),
        )
    except KeyError as exc:
        raise DirectoryError(f"Scientist entry missing {exc}") from exc
    if expert.personality not in PERSONALITY_TYPES:
        raise DirectoryError(
            f"Scientist {expert.id} has unknown personality {expert.personality!r}"
        )
    return expert


def _build_cause(data: Dict[str, Any]) -> Cause:
    try:
        return Cause(
            id=str(data["id"]),
            name=str(data["name"]),
            description=str(data.get("description", "")),
            impact=str(data.get("impact", "")),
        )
    except KeyError as exc:
        raise DirectoryError(f"Cause entry missing {exc}") from exc


def build_directory(
    experts: Iterable[Dict[str, Any]], causes: Iterable[Dict[str, Any]]
) -> DirectoryStore:
    return DirectoryStore(
        [_build_expert(item) for item in experts],
        [_build_cause(item) for item in causes],
    )


def seed_directory() -> DirectoryStore:
    return build_directory(SEED_EXPERTS, SEED_CAUSES)


def load_directory(path: Optional[str]) -> DirectoryStore:
    if not path:
        return seed_directory()
    with open(path, "r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise DirectoryError(f"{path}: expected a mapping with experts and causes")
    store = build_directory(data.get("experts", []), data.get("causes", []))
    logger.info(
        "Loaded directory from %s (%s scientists, %s causes)",
        path,
        len(store.list_experts()),
        len(store.list_causes()),
    )
    return store


def save_directory(path: str, store: DirectoryStore) -> None:
    data = {
        "experts": [
            {
                "id": expert.id,
                "name": expert.name,
                "field": expert.field,
                "personality": expert.personality,
                "bio": expert.bio,
                "avatar": expert.avatar,
                "causes": list(expert.causes),
            }
            for expert in store.list_experts()
        ],
        "causes": [
            {
                "id": cause.id,
                "name": cause.name,
                "description": cause.description,
                "impact": cause.impact,
            }
            for cause in store.list_causes()
        ],
    }
    with open(path, "w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False)
