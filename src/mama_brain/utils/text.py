"""Persian text normalisation helpers used for every outgoing response."""

from __future__ import annotations

import re

MAMA_PREFIX = "[ماما]"
ZWNJ = "\u200c"

_SENTENCE_PUNCTUATION = ".!?،؛"
_PERSIAN_LETTERS = "آابپتثجچحخدذرزژسشصضطظعغفقکگلمنوهی"

_RE_LINE_BREAK = re.compile(r"\r\n?")
_RE_HORIZONTAL_SPACE = re.compile(r"[^\S\n]+")
_RE_SPACE_AROUND_NEWLINE = re.compile(r" ?\n ?")
_RE_NEWLINE_RUN = re.compile(r"\n{3,}")
# A run of punctuation marks is spaced as a single unit.
_RE_SPACE_BEFORE = re.compile(rf"[^\S\n]+(?=[{_SENTENCE_PUNCTUATION}])")
_RE_MISSING_SPACE_AFTER = re.compile(rf"([{_SENTENCE_PUNCTUATION}]+)(?=[^\s{_SENTENCE_PUNCTUATION}])")
# "می" / "نمی" only count as verb prefixes at the start of a word.
_RE_VERB_PREFIX = re.compile(rf"(?<![\u0600-\u06ff{ZWNJ}])(ن?می) ([{_PERSIAN_LETTERS}])")
_RE_MAMA_PREFIX = re.compile(r"^(?:\[(?:mama|ماما)\]\s*)+", re.IGNORECASE)


def normalize_persian_text(text: str) -> str:
    """Normalise spacing, punctuation and half-spaces in Persian text.

    Runs of spaces collapse to one, line breaks are kept but capped at a single
    blank line, sentence punctuation gets exactly one trailing space and no
    leading space, and the verb prefixes ``می``/``نمی`` are joined to the
    following word with a zero-width non-joiner.
    """
    if not text:
        return ""
    normalized = _RE_LINE_BREAK.sub("\n", text)
    normalized = _RE_HORIZONTAL_SPACE.sub(" ", normalized)
    normalized = _RE_SPACE_AROUND_NEWLINE.sub("\n", normalized)
    normalized = _RE_NEWLINE_RUN.sub("\n\n", normalized)
    normalized = _RE_SPACE_BEFORE.sub("", normalized)
    normalized = _RE_MISSING_SPACE_AFTER.sub(r"\1 ", normalized)
    normalized = _RE_VERB_PREFIX.sub(rf"\1{ZWNJ}\2", normalized)
    return normalized.strip()


def enforce_mama_prefix(text: str) -> str:
    """Return ``text`` starting with exactly one canonical ``[ماما]`` prefix."""
    cleaned = _RE_MAMA_PREFIX.sub("", text.lstrip())
    return f"{MAMA_PREFIX} {cleaned}"


def refine_response(text: str) -> str:
    """Normalise ``text`` and enforce the response prefix."""
    return enforce_mama_prefix(normalize_persian_text(text))


def sanitize_user_prompt(prompt: str, max_length: int = 50) -> str:
    """Return a bounded excerpt of ``prompt`` suitable for metadata storage."""
    if len(prompt) > max_length:
        return prompt[:max_length] + "..."
    return prompt
