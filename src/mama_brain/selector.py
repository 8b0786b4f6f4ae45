"""Hash-based template selection with anti-repetition.

The same message, aggregate seed and previous template key always produce the
same template. The only state involved is the ``last_template_key`` that the
caller carries from one turn of a conversation to the next.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .logging import get_logger
from .templates import (
    ANTI_REPETITION_NOTICE,
    CIVIC_BANK_NAME,
    CIVIC_RESPONSES,
    EMPATHETIC_BANK_NAME,
    EMPATHETIC_RESPONSES,
)
from .utils import fold_seed, measure_sync, message_hash, refine_response

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class SelectionResult:
    content: str
    index: int
    key: str
    anti_repetition_triggered: bool


def template_key(bank_name: str, index: int) -> str:
    return f"{bank_name}-{index}"


def compute_bank_index(message: str, bank_size: int, aggregate_seed: Optional[int] = None) -> int:
    """Return the natural bank index for ``message`` before anti-repetition."""
    if bank_size <= 0:
        raise ValueError("Template bank must not be empty")
    return fold_seed(message_hash(message), aggregate_seed) % bank_size


def select_from_bank(
    bank_name: str,
    bank: Sequence[str],
    message: str,
    last_template_key: Optional[str] = None,
    aggregate_seed: Optional[int] = None,
) -> SelectionResult:
    """Choose one template from ``bank`` for ``message``.

    When the natural choice equals ``last_template_key`` the next template
    (wrapping around) is used instead and a "new angle" notice is appended.
    """
    index = compute_bank_index(message, len(bank), aggregate_seed)
    anti_repetition = False
    if last_template_key is not None and template_key(bank_name, index) == last_template_key:
        index = (index + 1) % len(bank)
        anti_repetition = True

    content = refine_response(bank[index])
    if anti_repetition:
        content = f"{content}\n\n{ANTI_REPETITION_NOTICE}"

    key = template_key(bank_name, index)
    LOGGER.debug("Selected %s (anti-repetition=%s)", key, anti_repetition)
    return SelectionResult(content=content, index=index, key=key, anti_repetition_triggered=anti_repetition)


def select_empathetic_response(
    message: str,
    last_template_key: Optional[str] = None,
    aggregate_seed: Optional[int] = None,
) -> SelectionResult:
    return measure_sync(
        "Empathetic response selection",
        lambda: select_from_bank(
            EMPATHETIC_BANK_NAME, EMPATHETIC_RESPONSES, message, last_template_key, aggregate_seed
        ),
    )


def select_civic_response(
    message: str,
    last_template_key: Optional[str] = None,
    aggregate_seed: Optional[int] = None,
) -> SelectionResult:
    return measure_sync(
        "Civic response selection",
        lambda: select_from_bank(CIVIC_BANK_NAME, CIVIC_RESPONSES, message, last_template_key, aggregate_seed),
    )
