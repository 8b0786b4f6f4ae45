"""Deterministic hashing helpers shared by the template selectors."""

from __future__ import annotations

from typing import Optional

SEED_MODULUS = 10000


def utf16_units(value: str) -> bytes:
    """Return ``value`` encoded as little-endian UTF-16 code units."""
    return value.encode("utf-16-le")


def utf16_length(value: str) -> int:
    """Return the length of ``value`` measured in UTF-16 code units."""
    return len(utf16_units(value)) // 2


def _code_unit(encoded: bytes, position: int) -> int:
    return int.from_bytes(encoded[position : position + 2], byteorder="little")


def message_hash(message: str, *, include_last: bool = True) -> int:
    """Return ``length + first code unit (+ last code unit)`` for ``message``.

    Code units are UTF-16 so that emoji and other astral characters hash the
    same way the chat clients count them. The empty message hashes to 0.
    """
    encoded = utf16_units(message)
    if not encoded:
        return 0
    value = len(encoded) // 2 + _code_unit(encoded, 0)
    if include_last:
        value += _code_unit(encoded, len(encoded) - 2)
    return value


def fold_seed(value: int, aggregate_seed: Optional[int]) -> int:
    """Mix an optional aggregate seed into ``value``."""
    if aggregate_seed is None:
        return value
    return (value + aggregate_seed) % SEED_MODULUS
