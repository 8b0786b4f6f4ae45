"""Selection biasing from aggregate, anonymised usage statistics.

Categories that are rarely seen across the user population get a higher
weight so that their angles surface more often. Only category labels and
counts are consumed; no message text is involved.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar

import numpy as np

from .logging import get_logger
from .utils.hashing import SEED_MODULUS

LOGGER = get_logger(__name__)

AggregateStat = Tuple[str, float, int]

CATEGORY_TO_ANGLE: Mapping[str, str] = MappingProxyType(
    {
        "سوال": "angle-clarification",
        "کمک": "angle-steps",
        "احساسی": "angle-empathetic",
        "مدنی": "civic",
        "اجتماعی": "angle-reframe",
    }
)

# (upper proportion bound, weight); anything above the last bound gets the floor.
WEIGHT_THRESHOLDS: Tuple[Tuple[float, float], ...] = ((0.1, 2.0), (0.2, 1.5), (0.3, 1.0))
WEIGHT_FLOOR = 0.5
SEED_BOOST = 1.3


@dataclass
class BiasSignal:
    angle_key: str
    bias_weight: float


def _weight_for(proportion: float) -> float:
    for bound, weight in WEIGHT_THRESHOLDS:
        if proportion < bound:
            return weight
    return WEIGHT_FLOOR


def calculate_angle_bias(
    aggregate_stats: Iterable[AggregateStat],
    aggregate_seed: Optional[int] = None,
) -> List[BiasSignal]:
    """Turn ``(category, average_score, count)`` rows into per-angle weights."""
    stats = list(aggregate_stats)
    if not stats:
        return []
    counts = np.asarray([int(count) for _, _, count in stats], dtype=float)
    total = float(counts.sum())
    if total == 0:
        return []

    proportions = counts / total
    signals = [
        BiasSignal(angle_key=CATEGORY_TO_ANGLE[category], bias_weight=_weight_for(float(proportion)))
        for (category, _, _), proportion in zip(stats, proportions)
        if category in CATEGORY_TO_ANGLE
    ]

    if aggregate_seed is not None and signals:
        boosted = signals[aggregate_seed % len(signals)]
        boosted.bias_weight *= SEED_BOOST
    LOGGER.debug("Calculated %d bias signals from %d categories", len(signals), len(stats))
    return signals


CandidateT = TypeVar("CandidateT")


def apply_bias_to_angles(candidates: Sequence[CandidateT], bias_signals: Sequence[BiasSignal]) -> List[CandidateT]:
    """Scale each candidate's ``priority`` by the first matching bias weight.

    Candidates are frozen dataclasses with ``key`` and ``priority`` fields;
    new instances are returned and the inputs are left untouched.
    """
    if not bias_signals:
        return list(candidates)
    biased: List[CandidateT] = []
    for candidate in candidates:
        signal = next((s for s in bias_signals if s.angle_key == candidate.key), None)  # type: ignore[attr-defined]
        if signal is None:
            biased.append(candidate)
        else:
            biased.append(replace(candidate, priority=candidate.priority * signal.bias_weight))  # type: ignore[attr-defined, type-var]
    return biased


def derive_aggregate_seed(aggregate_stats: Iterable[AggregateStat]) -> Optional[int]:
    """Fold the population-wide counts into a seed, or ``None`` without stats."""
    stats = list(aggregate_stats)
    if not stats:
        return None
    return int(sum(int(count) for _, _, count in stats)) % SEED_MODULUS
