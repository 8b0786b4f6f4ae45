import asyncio
import json
from pathlib import Path

import pytest

from mama_brain.errors import FaqImportError
from mama_brain.knowledge import (
    FaqEntry,
    InMemoryFaqStore,
    import_faq_entries,
    load_faq_file,
    question_key,
)


def test_question_key_normalises() -> None:
    assert question_key("  ساعت   کاری چیه ؟ ") == "ساعت کاری چیه"
    assert question_key("What?") == "what"


def test_store_lookup_ignores_spacing_and_marks(faq_store: InMemoryFaqStore) -> None:
    assert faq_store.get("ساعت  کاری چیه") is not None
    assert asyncio.run(faq_store.find_match("ساعت کاری چیه؟!")) is not None
    assert faq_store.get("سوال دیگه") is None
    assert len(faq_store) == 2


def test_records_need_question_and_answer() -> None:
    with pytest.raises(FaqImportError):
        FaqEntry.from_record({"question": "سوال", "answer": "  "})
    entry = FaqEntry.from_record({"question": " سوال ", "answer": " جواب "})
    assert entry == FaqEntry("سوال", "جواب")


def test_store_rejects_blank_question() -> None:
    with pytest.raises(FaqImportError):
        InMemoryFaqStore([FaqEntry("؟", "جواب")])


@pytest.mark.parametrize("layout", ["list", "mapping", "jsonl"])
def test_load_faq_file(tmp_path: Path, layout: str) -> None:
    records = [{"question": "سوال ۱", "answer": "جواب ۱"}, {"question": "سوال ۲", "answer": "جواب ۲"}]
    if layout == "jsonl":
        path = tmp_path / "faq.jsonl"
        path.write_text("\n".join(json.dumps(r, ensure_ascii=False) for r in records) + "\n", encoding="utf-8")
    else:
        path = tmp_path / "faq.json"
        payload = records if layout == "list" else {"entries": records}
        path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    entries = load_faq_file(path)
    assert [entry.answer for entry in entries] == ["جواب ۱", "جواب ۲"]


def test_load_faq_file_rejects_scalars(tmp_path: Path) -> None:
    path = tmp_path / "faq.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(FaqImportError):
        load_faq_file(path)


def _entries(count: int):
    return [FaqEntry(f"سوال {i}", f"جواب {i}") for i in range(count)]


def test_import_runs_in_batches() -> None:
    store = InMemoryFaqStore()
    progress = []
    report = asyncio.run(
        import_faq_entries(
            _entries(12),
            store.add_entry,
            batch_size=5,
            batch_delay=0,
            on_progress=lambda done, total: progress.append((done, total)),
        )
    )
    assert (report.success, report.failed, report.total) == (12, 0, 12)
    assert progress == [(5, 12), (10, 12), (12, 12)]
    assert len(store) == 12
    assert store.get("سوال 11").answer == "جواب 11"


def test_import_batches_run_concurrently() -> None:
    state = {"active": 0, "peak": 0}

    async def add(question: str, answer: str) -> None:
        state["active"] += 1
        state["peak"] = max(state["peak"], state["active"])
        await asyncio.sleep(0)
        state["active"] -= 1

    asyncio.run(import_faq_entries(_entries(7), add, batch_size=5, batch_delay=0.001))
    assert state["peak"] == 5


def test_import_counts_failures() -> None:
    added = []

    def add(question: str, answer: str) -> None:
        if question.endswith("3"):
            raise RuntimeError("rejected")
        added.append(question)

    report = asyncio.run(import_faq_entries(_entries(6), add, batch_delay=0))
    assert report.success == 5
    assert report.failed == 1
    assert "سوال 3" not in added


def test_import_rejects_bad_batch_size() -> None:
    with pytest.raises(ValueError):
        asyncio.run(import_faq_entries(_entries(1), lambda q, a: None, batch_size=0))
