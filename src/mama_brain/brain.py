"""Single-shot responders built on top of the selection primitives."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .angles import AngleCandidate, derive_angle_candidates, select_primary_angle
from .bias import AggregateStat, BiasSignal, apply_bias_to_angles, calculate_angle_bias
from .knowledge import FaqLookup, lookup_faq
from .logging import get_logger
from .pipeline import ResponseSource
from .selector import select_empathetic_response
from .templates import generate_deep_response, get_depth_template
from .utils import normalize_persian_text, refine_response

LOGGER = get_logger(__name__)


@dataclass
class MamaResponseFeedback:
    response_source: ResponseSource
    processing_note: str
    empathetic_index: Optional[int] = None


@dataclass
class MamaResponse:
    content: str
    source: ResponseSource
    feedback: MamaResponseFeedback
    template_key: Optional[str] = None


async def get_mama_response(
    user_query: str,
    faq_lookup: FaqLookup,
    last_template_key: Optional[str] = None,
    aggregate_seed: Optional[int] = None,
) -> MamaResponse:
    """Answer from the knowledge base when possible, empathetically otherwise."""
    lookup_failed = False
    try:
        faq_match = await lookup_faq(faq_lookup, user_query)
    except Exception as exc:
        LOGGER.warning("FAQ lookup failed: %s", type(exc).__name__)
        faq_match = None
        lookup_failed = True

    if faq_match is not None:
        return MamaResponse(
            content=refine_response(faq_match.answer),
            source=ResponseSource.FAQ,
            feedback=MamaResponseFeedback(ResponseSource.FAQ, "پاسخ از بانک دانش ماما"),
        )

    selection = select_empathetic_response(user_query, last_template_key, aggregate_seed)
    note = f"پاسخ همدلانه شماره {selection.index + 1}"
    if lookup_failed:
        note = f"خطا در جستجوی دانش، پاسخ همدلانه انتخاب شد ({note})"
    return MamaResponse(
        content=selection.content,
        source=ResponseSource.EMPATHETIC,
        feedback=MamaResponseFeedback(ResponseSource.EMPATHETIC, note, empathetic_index=selection.index),
        template_key=selection.key,
    )


@dataclass
class DepthResponse:
    content: str
    angle: AngleCandidate
    depth_key: Optional[str]
    anti_repetition_triggered: bool
    candidates: List[AngleCandidate] = field(default_factory=list)
    bias_signals: List[BiasSignal] = field(default_factory=list)

    @property
    def template_key(self) -> str:
        """Key to carry into the next turn for anti-repetition."""
        return self.angle.key


def compose_depth_response(
    user_message: str,
    last_template_key: Optional[str] = None,
    aggregate_seed: Optional[int] = None,
    aggregate_stats: Optional[Iterable[AggregateStat]] = None,
) -> DepthResponse:
    """Build a structured response from the best angle for ``user_message``.

    Aggregate statistics, when given, rescale candidate priorities before the
    primary angle is chosen.
    """
    normalized = normalize_persian_text(user_message)
    candidates = derive_angle_candidates(normalized, aggregate_seed)
    signals = calculate_angle_bias(aggregate_stats or (), aggregate_seed)
    if signals:
        biased = apply_bias_to_angles(candidates, signals)
        candidates = sorted(biased, key=lambda candidate: candidate.priority, reverse=True)
    selection = select_primary_angle(candidates, last_template_key, aggregate_seed)
    template = get_depth_template(selection.angle.type)
    return DepthResponse(
        content=generate_deep_response(selection.angle.type, normalized, aggregate_seed),
        angle=selection.angle,
        depth_key=template.key if template else None,
        anti_repetition_triggered=selection.anti_repetition_triggered,
        candidates=candidates,
        bias_signals=signals,
    )
