"""Scientist search and personality filtering."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List, Sequence

from .models import ALL_TAGS, PERSONALITY_TYPES, Expert, FilterState


def _matches_query(expert: Expert, needle: str) -> bool:
    if not needle:
        return True
    return (
        needle in expert.name.lower()
        or needle in expert.field.lower()
        or needle in expert.bio.lower()
    )


def apply_filter(experts: Iterable[Expert], state: FilterState) -> List[Expert]:
    needle = state.query.lower()
    return [
        expert
        for expert in experts
        if (state.tag == ALL_TAGS or expert.personality == state.tag)
        and _matches_query(expert, needle)
    ]


def update_query(state: FilterState, query: str | None) -> FilterState:
    return replace(state, query=query or "")


def update_tag(state: FilterState, tag: str | None) -> FilterState:
    value = (tag or "").strip().upper()
    if value not in PERSONALITY_TYPES:
        value = ALL_TAGS
    return replace(state, tag=value)


class TagIndex:
    """Experts bucketed by personality so a tag filter skips the full scan."""

    def __init__(self, experts: Sequence[Expert]) -> None:
        self._experts = tuple(experts)
        self._by_tag: Dict[str, List[Expert]] = {}
        for expert in self._experts:
            self._by_tag.setdefault(expert.personality, []).append(expert)

    def apply(self, state: FilterState) -> List[Expert]:
        if state.tag == ALL_TAGS:
            candidates: Sequence[Expert] = self._experts
        else:
            candidates = self._by_tag.get(state.tag, [])
        return apply_filter(candidates, state)
