from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from mama_brain.config import MamaBrainConfig
from mama_brain.knowledge import FaqEntry, InMemoryFaqStore


@pytest.fixture
def config() -> MamaBrainConfig:
    return MamaBrainConfig()


@pytest.fixture
def faq_store() -> InMemoryFaqStore:
    return InMemoryFaqStore(
        [
            FaqEntry(question="ساعت کاری چیه؟", answer="ما هر روز از ۹ صبح تا ۵ عصر پاسخگو هستیم."),
            FaqEntry(question="آزادی بیان چیه؟", answer="آزادی بیان یعنی حق گفتن نظرت بدون ترس."),
        ]
    )


async def no_match(question: str) -> Optional[FaqEntry]:
    return None


@pytest.fixture
def empty_lookup():
    return no_match
