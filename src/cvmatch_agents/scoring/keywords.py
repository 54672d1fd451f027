"""Weighted keyword extraction from job postings."""

from __future__ import annotations

import re

from cvmatch_agents.tools.text import extract_keywords
from cvmatch_core.constants import (
    BEHAVIORAL_TERMS,
    COMMON_TERMS,
    POSITION_MULTIPLIERS,
    RARE_TERMS,
    RARITY_MULTIPLIERS,
    TECHNICAL_TERMS,
    TYPE_MULTIPLIERS,
)
from cvmatch_core.models.job import JobData
from cvmatch_core.models.scoring import WeightedKeyword


def classify_type(keyword: str) -> str:
    """Classify a keyword as technique, comportemental or sectoriel."""
    lowered = keyword.lower()
    if any(term in lowered for term in TECHNICAL_TERMS):
        return "technique"
    if any(term in lowered for term in BEHAVIORAL_TERMS):
        return "comportemental"
    return "sectoriel"


def classify_rarity(keyword: str) -> str:
    """Classify how sought-after a keyword is on the market."""
    lowered = keyword.lower()
    if any(term in lowered for term in RARE_TERMS):
        return "rare"
    if any(term in lowered for term in COMMON_TERMS):
        return "commune"
    return "intermediaire"


def keyword_position(keyword: str, title: str, text: str) -> str:
    """Locate a keyword: in the title, or by its first offset in the body text."""
    lowered = keyword.lower()
    if lowered in title.lower():
        return "titre"
    index = text.find(lowered)
    if index < 0 or not text:
        return "fin"
    if index < len(text) * 0.2:
        return "debut"
    if index < len(text) * 0.6:
        return "milieu"
    return "fin"


def keyword_weight(frequency: int, position: str, kw_type: str, rarity: str) -> float:
    """Combine frequency with the position, type and rarity multipliers.

    A keyword that never occurs in the body still counts once.
    """
    return (
        max(frequency, 1)
        * POSITION_MULTIPLIERS[position]
        * TYPE_MULTIPLIERS[kw_type]
        * RARITY_MULTIPLIERS[rarity]
    )


def extract_weighted_keywords(job: JobData) -> list[WeightedKeyword]:
    """Weight every job keyword, heaviest first."""
    text = "\n".join([job.description, *job.requirements]).lower()
    keywords = job.extracted_keywords or extract_keywords(job.description)

    weighted: dict[str, WeightedKeyword] = {}
    for keyword in keywords:
        lowered = keyword.lower().strip()
        if not lowered or lowered in weighted:
            continue
        frequency = len(re.findall(re.escape(lowered), text))
        position = keyword_position(lowered, job.title, text)
        kw_type = classify_type(lowered)
        rarity = classify_rarity(lowered)
        weighted[lowered] = WeightedKeyword(
            keyword=keyword.strip(),
            frequency=frequency,
            position=position,  # type: ignore[arg-type]
            type=kw_type,  # type: ignore[arg-type]
            rarity=rarity,  # type: ignore[arg-type]
            weight=keyword_weight(frequency, position, kw_type, rarity),
        )

    return sorted(weighted.values(), key=lambda kw: kw.weight, reverse=True)
