"""Utility helpers shared across the Mama Brain package."""

from .hashing import fold_seed, message_hash, utf16_length
from .io import load_jsonl, load_yaml_or_json
from .text import (
    MAMA_PREFIX,
    enforce_mama_prefix,
    normalize_persian_text,
    refine_response,
    sanitize_user_prompt,
)
from .timing import PerfTimer, measure_async, measure_sync

__all__ = [
    "MAMA_PREFIX",
    "PerfTimer",
    "enforce_mama_prefix",
    "fold_seed",
    "load_jsonl",
    "load_yaml_or_json",
    "measure_async",
    "measure_sync",
    "message_hash",
    "normalize_persian_text",
    "refine_response",
    "sanitize_user_prompt",
    "utf16_length",
]
