"""Keyword classifiers over normalised message text.

Every classifier is a pure function of the lower-cased message and works by
substring containment against fixed word lists. Nothing here keeps or emits
the message itself.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Tuple

from .logging import get_logger

LOGGER = get_logger(__name__)


class EmotionalTone(str, Enum):
    CIVIC = "مدنی"
    SAD = "غمگین"
    HAPPY = "شاد"
    ANXIOUS = "نگران"
    NEUTRAL = "خنثی"


CIVIC_KEYWORDS: Tuple[str, ...] = (
    "آزادی",
    "حقوق",
    "عدالت",
    "اعتراض",
    "کنشگری",
    "دموکراسی",
    "برابری",
    "مدنی",
    "تبعیض",
    "سرکوب",
    "freedom",
    "rights",
    "justice",
    "protest",
    "activism",
    "democracy",
    "equality",
)

SAD_WORDS: Tuple[str, ...] = ("غمگین", "ناراحت", "سخت", "دلم", "گریه", "تنها")
HAPPY_WORDS: Tuple[str, ...] = ("خوشحال", "شاد", "عالی", "خوب", "ممنون")
ANXIOUS_WORDS: Tuple[str, ...] = ("نگران", "استرس", "ترس", "اضطراب")

QUESTION_WORDS: Tuple[str, ...] = ("چی", "چه", "کی", "کجا", "چطور", "چرا")
HELP_WORDS: Tuple[str, ...] = ("کمک", "راهنما", "نیاز", "چطور")
DECISION_WORDS: Tuple[str, ...] = ("انتخاب", "تصمیم", "باید", "یا")
EMOTION_WORDS: Tuple[str, ...] = ("احساس", "دل", "قلب", "غم", "شاد", "ناراحت")
COMPLEX_MESSAGE_LENGTH = 100

SIGNAL_CATEGORIES: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        # intent
        "سوال": ("چی", "چه", "کی", "کجا", "چطور", "چرا", "؟"),
        "کمک": ("کمک", "راهنما", "نیاز", "لطف", "ممنون", "می‌تونی"),
        "تصمیم": ("انتخاب", "تصمیم", "باید", "یا", "کدوم"),
        # emotional tone
        "احساسی": ("احساس", "دل", "قلب", "عشق", "غم", "شاد", "ناراحت", "خوشحال"),
        "نگرانی": ("نگران", "استرس", "ترس", "اضطراب", "مشکل"),
        "امیدوار": ("امید", "خوب", "بهتر", "می‌تونم", "موفق"),
        # social and civic
        "اجتماعی": ("جامعه", "مردم", "اجتماع", "گروه", "دوست", "خانواده"),
        "مدنی": ("آزادی", "حقوق", "عدالت", "اعتراض", "کنشگری", "مدنی"),
        # structure
        "پیچیده": ("اما", "ولی", "چون", "پس", "بنابراین"),
        "مستقیم": ("فقط", "ساده", "مستقیم", "خلاصه"),
    }
)

LENGTH_BUCKETS: Tuple[Tuple[int, str], ...] = ((20, "کوتاه"), (100, "متوسط"))
LONG_BUCKET = "بلند"
LENGTH_SCORE_SCALE = 200
QUESTION_DENSITY_CATEGORY = "تراکم_سوال"
QUESTION_DENSITY_SCALE = 3

_QUESTION_MARK_RE = re.compile(r"[؟?]")


@dataclass(frozen=True)
class AnonymizedSignal:
    category: str
    normalized_score: float


@dataclass(frozen=True)
class MessageFeatures:
    has_question: bool
    needs_help: bool
    has_decision: bool
    has_emotion: bool
    is_complex: bool


def _contains_any(text: str, words: Tuple[str, ...]) -> bool:
    return any(word in text for word in words)


def detect_civic_empowerment(message: str) -> bool:
    """Return ``True`` when ``message`` touches civic or social-justice themes."""
    return _contains_any(message.lower(), CIVIC_KEYWORDS)


def analyze_emotional_tone(message: str) -> EmotionalTone:
    """Return the first matching tone in the order civic, sad, happy, anxious."""
    lowered = message.lower()
    if _contains_any(lowered, CIVIC_KEYWORDS):
        return EmotionalTone.CIVIC
    if _contains_any(lowered, SAD_WORDS):
        return EmotionalTone.SAD
    if _contains_any(lowered, HAPPY_WORDS):
        return EmotionalTone.HAPPY
    if _contains_any(lowered, ANXIOUS_WORDS):
        return EmotionalTone.ANXIOUS
    return EmotionalTone.NEUTRAL


def extract_message_features(message: str) -> MessageFeatures:
    lowered = message.lower()
    return MessageFeatures(
        has_question=bool(_QUESTION_MARK_RE.search(message)) or _contains_any(lowered, QUESTION_WORDS),
        needs_help=_contains_any(lowered, HELP_WORDS),
        has_decision=_contains_any(lowered, DECISION_WORDS),
        has_emotion=_contains_any(lowered, EMOTION_WORDS),
        is_complex=len(message) > COMPLEX_MESSAGE_LENGTH,
    )


def _length_bucket(length: int) -> str:
    for limit, label in LENGTH_BUCKETS:
        if length < limit:
            return label
    return LONG_BUCKET


def derive_anonymized_signals(message: str) -> List[AnonymizedSignal]:
    """Convert ``message`` into category/score pairs with no trace of the text.

    Each keyword bucket scores the fraction of its keywords present; empty
    buckets are skipped. A coarse length bucket is always emitted and a
    question-density signal is added when the message asks something.
    """
    lowered = message.lower()
    signals: List[AnonymizedSignal] = []
    for category, keywords in SIGNAL_CATEGORIES.items():
        matched = sum(1 for keyword in keywords if keyword in lowered)
        score = min(matched / len(keywords), 1.0)
        if score > 0:
            signals.append(AnonymizedSignal(category=category, normalized_score=score))

    length = len(message)
    signals.append(
        AnonymizedSignal(
            category=f"طول_{_length_bucket(length)}",
            normalized_score=min(length / LENGTH_SCORE_SCALE, 1.0),
        )
    )

    question_marks = len(_QUESTION_MARK_RE.findall(message))
    if question_marks > 0:
        signals.append(
            AnonymizedSignal(
                category=QUESTION_DENSITY_CATEGORY,
                normalized_score=min(question_marks / QUESTION_DENSITY_SCALE, 1.0),
            )
        )
    LOGGER.debug("Derived %d anonymized signals", len(signals))
    return signals


def signal_categories() -> Tuple[str, ...]:
    """Return every category label :func:`derive_anonymized_signals` can emit."""
    lengths = tuple(f"طول_{label}" for _, label in LENGTH_BUCKETS) + (f"طول_{LONG_BUCKET}",)
    return tuple(SIGNAL_CATEGORIES) + lengths + (QUESTION_DENSITY_CATEGORY,)
