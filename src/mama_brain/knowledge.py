"""Knowledge-base (FAQ) seam.

The pipeline only needs a callable ``faq_lookup(question)`` returning an
:class:`FaqEntry` or ``None``. :class:`InMemoryFaqStore` is a reference
implementation used by the command line and the tests; production callers
plug in their own backend.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .errors import FaqImportError, log_sanitized_error
from .logging import get_logger
from .utils import load_jsonl, normalize_persian_text

LOGGER = get_logger(__name__)

_TRAILING_QUESTION_RE = re.compile(r"[؟?!.\s]+$")


@dataclass(frozen=True)
class FaqEntry:
    question: str
    answer: str

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> FaqEntry:
        question = str(record.get("question") or "").strip()
        answer = str(record.get("answer") or "").strip()
        if not question or not answer:
            raise FaqImportError("FAQ records need a non-empty question and answer")
        return cls(question=question, answer=answer)


FaqLookupResult = Union[Optional[FaqEntry], Awaitable[Optional[FaqEntry]]]
FaqLookup = Callable[[str], FaqLookupResult]


async def lookup_faq(faq_lookup: FaqLookup, question: str) -> Optional[FaqEntry]:
    """Call ``faq_lookup``, awaiting the result when it is a coroutine."""
    result = faq_lookup(question)
    if inspect.isawaitable(result):
        result = await result
    return result


def question_key(question: str) -> str:
    """Return the lookup key for ``question``: normalised, lower-cased, no trailing marks."""
    return _TRAILING_QUESTION_RE.sub("", normalize_persian_text(question).lower())


class InMemoryFaqStore:
    """Exact-match FAQ store keyed by normalised question text."""

    def __init__(self, entries: Iterable[FaqEntry] = ()) -> None:
        self._entries: Dict[str, FaqEntry] = {}
        for entry in entries:
            self.add(entry)

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, entry: FaqEntry) -> None:
        key = question_key(entry.question)
        if not key:
            raise FaqImportError("FAQ question is empty after normalisation")
        self._entries[key] = entry

    async def add_entry(self, question: str, answer: str) -> None:
        self.add(FaqEntry(question=question, answer=answer))

    def get(self, question: str) -> Optional[FaqEntry]:
        return self._entries.get(question_key(question))

    async def find_match(self, question: str) -> Optional[FaqEntry]:
        return self.get(question)


def load_faq_file(path: Path) -> List[FaqEntry]:
    """Read FAQ entries from a JSON list, ``{"entries": [...]}`` or JSONL file."""
    path = Path(path)
    if path.suffix.lower() == ".jsonl":
        records: Sequence[Any] = list(load_jsonl(path))
    else:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        if isinstance(data, dict):
            data = data.get("entries", [])
        if not isinstance(data, list):
            raise FaqImportError("Expected a list of FAQ records")
        records = data
    entries = []
    for record in records:
        if not isinstance(record, Mapping):
            raise FaqImportError("Each FAQ record must be a mapping")
        entries.append(FaqEntry.from_record(record))
    return entries


@dataclass
class ImportReport:
    success: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.success + self.failed


AddEntry = Callable[[str, str], Any]
ProgressCallback = Callable[[int, int], None]


async def _call_add(add_entry: AddEntry, entry: FaqEntry) -> None:
    result = add_entry(entry.question, entry.answer)
    if inspect.isawaitable(result):
        await result


async def import_faq_entries(
    entries: Sequence[FaqEntry],
    add_entry: AddEntry,
    *,
    batch_size: int = 5,
    batch_delay: float = 0.05,
    on_progress: Optional[ProgressCallback] = None,
) -> ImportReport:
    """Push ``entries`` to a backend in concurrent batches.

    Each batch runs concurrently; batches are separated by ``batch_delay``
    seconds so the backend is never flooded. Failures are counted and logged,
    never raised.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")
    report = ImportReport()
    for start in range(0, len(entries), batch_size):
        batch = entries[start : start + batch_size]
        outcomes = await asyncio.gather(*(_call_add(add_entry, entry) for entry in batch), return_exceptions=True)
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                report.failed += 1
                log_sanitized_error("FAQ import", outcome)
            else:
                report.success += 1
        processed = min(start + batch_size, len(entries))
        if on_progress is not None:
            on_progress(processed, len(entries))
        if processed < len(entries) and batch_delay > 0:
            await asyncio.sleep(batch_delay)
    LOGGER.info("Imported %d FAQ entries (%d failed)", report.success, report.failed)
    return report
