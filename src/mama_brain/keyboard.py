"""Persian keyboard layout auto-correction.

Messages typed on an English QWERTY layout while the user meant to write
Persian are detected heuristically and remapped key by key.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from .logging import get_logger

LOGGER = get_logger(__name__)

_LOWER_KEYS = {
    "q": "ض", "w": "ص", "e": "ث", "r": "ق", "t": "ف", "y": "غ", "u": "ع", "i": "ه", "o": "خ", "p": "ح",
    "a": "ش", "s": "س", "d": "ی", "f": "ب", "g": "ل", "h": "ا", "j": "ت", "k": "ن", "l": "م", ";": "ک",
    "z": "ظ", "x": "ط", "c": "ز", "v": "ر", "b": "ذ", "n": "د", "m": "پ", ",": "و", ".": ".",
    "[": "ج", "]": "چ", "\\": "\\", "/": "/", "'": "گ",
}

_SHIFTED_KEYS = {
    ":": ":", "<": ">", ">": "<", "{": "ج", "}": "چ", "|": "|", "?": "؟", '"': '"',
}

EN_TO_FA_KEYS: Mapping[str, str] = MappingProxyType(
    {
        **_LOWER_KEYS,
        **{key.upper(): value for key, value in _LOWER_KEYS.items() if key.isalpha()},
        **_SHIFTED_KEYS,
    }
)

PERSIAN_CHAR_RE = re.compile(r"[\u0600-\u06ff]")
_LATIN_LETTER_RE = re.compile(r"[a-zA-Z]")
_WHITESPACE_RE = re.compile(r"\s")

ENGLISH_STOPWORDS = (
    "the", "is", "are", "was", "were", "have", "has", "had", "do", "does", "did",
    "will", "would", "can", "could", "should", "may", "might", "must",
    "hello", "hi", "yes", "no", "ok", "okay", "thanks", "thank",
    "you", "me", "my", "your", "this", "that",
    "what", "when", "where", "who", "why", "how",
)
_ENGLISH_PATTERN_RE = re.compile(rf"\b(?:{'|'.join(ENGLISH_STOPWORDS)})\b", re.IGNORECASE)

MIN_LATIN_LETTERS = 3
LATIN_RATIO_THRESHOLD = 0.5


@dataclass(frozen=True)
class CorrectionResult:
    corrected: str
    was_changed: bool


def contains_persian(text: str) -> bool:
    return PERSIAN_CHAR_RE.search(text) is not None


def should_correct(text: str) -> bool:
    """Return ``True`` when ``text`` looks like Persian typed on a Latin layout."""
    if not text or not text.strip():
        return False
    if contains_persian(text):
        return False
    latin_letters = len(_LATIN_LETTER_RE.findall(text))
    if latin_letters < MIN_LATIN_LETTERS:
        return False
    if _ENGLISH_PATTERN_RE.search(text):
        return False
    total_chars = len(_WHITESPACE_RE.sub("", text))
    return latin_letters / total_chars > LATIN_RATIO_THRESHOLD


def convert_to_persian(text: str) -> str:
    return "".join(EN_TO_FA_KEYS.get(char, char) for char in text)


def correct_persian_keyboard(text: str) -> CorrectionResult:
    """Remap ``text`` to the Persian layout when it was typed on the wrong one."""
    if not should_correct(text):
        return CorrectionResult(corrected=text, was_changed=False)
    corrected = convert_to_persian(text)
    if not contains_persian(corrected):
        return CorrectionResult(corrected=text, was_changed=False)
    LOGGER.debug("Keyboard layout corrected (%d chars)", len(text))
    return CorrectionResult(corrected=corrected, was_changed=True)
