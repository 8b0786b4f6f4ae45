"""Deterministic angle expansion for Mama responses.

An *angle* is a response archetype (clarify, walk through steps, reframe,
...). Candidates are derived from message features only, ranked by a
length-derived priority and optionally shifted by the aggregate seed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .classifiers import extract_message_features
from .logging import get_logger
from .utils import utf16_length

LOGGER = get_logger(__name__)


class AngleType(str, Enum):
    CLARIFICATION = "clarification"
    STEP_BY_STEP = "step-by-step"
    REFRAME = "reframe"
    PROS_CONS = "pros-cons"
    EXAMPLE = "example"
    SUMMARY = "summary"
    NEXT_STEPS = "next-steps"
    EMPATHETIC = "empathetic"
    DIAGNOSTIC = "diagnostic"


ANGLE_KEYS = {
    AngleType.CLARIFICATION: "angle-clarification",
    AngleType.STEP_BY_STEP: "angle-steps",
    AngleType.REFRAME: "angle-reframe",
    AngleType.PROS_CONS: "angle-pros-cons",
    AngleType.EXAMPLE: "angle-example",
    AngleType.SUMMARY: "angle-summary",
    AngleType.NEXT_STEPS: "angle-next-steps",
    AngleType.EMPATHETIC: "angle-empathetic",
    AngleType.DIAGNOSTIC: "angle-diagnostic",
}


@dataclass(frozen=True)
class AngleCandidate:
    type: AngleType
    key: str
    priority: float

    @classmethod
    def of(cls, angle: AngleType, priority: float) -> AngleCandidate:
        return cls(type=angle, key=ANGLE_KEYS[angle], priority=priority)


@dataclass(frozen=True)
class AngleSelection:
    angle: AngleCandidate
    anti_repetition_triggered: bool


def base_priority(message: str, aggregate_seed: Optional[int] = None) -> int:
    priority = utf16_length(message) % 10
    if aggregate_seed is not None:
        priority = (priority + aggregate_seed) % 10
    return priority


def derive_angle_candidates(
    normalized_message: str,
    aggregate_seed: Optional[int] = None,
) -> List[AngleCandidate]:
    """Return ranked angle candidates for ``normalized_message``.

    The list is sorted by descending priority, holds at most one candidate
    per angle type and always contains an empathetic candidate.
    """
    features = extract_message_features(normalized_message)
    base = base_priority(normalized_message, aggregate_seed)
    candidates: List[AngleCandidate] = []

    if features.has_question:
        candidates.append(AngleCandidate.of(AngleType.CLARIFICATION, base + 8))
        candidates.append(AngleCandidate.of(AngleType.STEP_BY_STEP, base + 7))
    if features.needs_help:
        candidates.append(AngleCandidate.of(AngleType.STEP_BY_STEP, base + 9))
        candidates.append(AngleCandidate.of(AngleType.NEXT_STEPS, base + 6))
    if features.has_decision:
        candidates.append(AngleCandidate.of(AngleType.PROS_CONS, base + 8))
        candidates.append(AngleCandidate.of(AngleType.REFRAME, base + 5))
    if features.has_emotion:
        candidates.append(AngleCandidate.of(AngleType.EMPATHETIC, base + 10))
        candidates.append(AngleCandidate.of(AngleType.DIAGNOSTIC, base + 4))
    if features.is_complex:
        candidates.append(AngleCandidate.of(AngleType.SUMMARY, base + 6))
        candidates.append(AngleCandidate.of(AngleType.REFRAME, base + 5))

    if not any(candidate.type is AngleType.EMPATHETIC for candidate in candidates):
        candidates.append(AngleCandidate.of(AngleType.EMPATHETIC, base + 3))
    candidates.append(AngleCandidate.of(AngleType.EXAMPLE, base + 2))

    return dedupe_by_type(sorted(candidates, key=lambda candidate: candidate.priority, reverse=True))


def dedupe_by_type(candidates: Sequence[AngleCandidate]) -> List[AngleCandidate]:
    """Keep the first candidate of each angle type, preserving order."""
    seen = set()
    unique: List[AngleCandidate] = []
    for candidate in candidates:
        if candidate.type in seen:
            continue
        seen.add(candidate.type)
        unique.append(candidate)
    return unique


def select_primary_angle(
    candidates: Sequence[AngleCandidate],
    last_template_key: Optional[str] = None,
    aggregate_seed: Optional[int] = None,
) -> AngleSelection:
    """Pick the leading candidate, skipping it when it repeats the last turn."""
    if not candidates:
        return AngleSelection(
            angle=AngleCandidate.of(AngleType.EMPATHETIC, 0),
            anti_repetition_triggered=False,
        )

    index = 0
    anti_repetition = False
    if last_template_key and candidates[0].key == last_template_key and len(candidates) > 1:
        index = 1
        anti_repetition = True

    if aggregate_seed is not None and len(candidates) > 2:
        index = (index + aggregate_seed % len(candidates)) % len(candidates)

    LOGGER.debug("Selected angle %s (anti-repetition=%s)", candidates[index].key, anti_repetition)
    return AngleSelection(angle=candidates[index], anti_repetition_triggered=anti_repetition)


def get_all_angle_keys() -> Tuple[str, ...]:
    """Return the stable keys of every angle taking part in anti-repetition."""
    return tuple(ANGLE_KEYS.values())
