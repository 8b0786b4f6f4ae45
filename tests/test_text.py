import itertools
import random

import pytest

from mama_brain.utils import enforce_mama_prefix, normalize_persian_text, sanitize_user_prompt
from mama_brain.utils.text import ZWNJ, refine_response

SAMPLES = [
    "",
    "   ",
    "سلام   عزیزم ،خوبی ؟",
    "من می رم خونه.بعدش نمی دونم",
    "خط اول\n\n\n\nخط دوم  \n  خط سوم",
    "...!!؟؟",
    "a .b ! c",
    "[ماما] سلام",
    "\r\nمتن\r\n",
    "سلامی بده",
    "دیگه نمی‌خوام ، واقعا !",
]


def test_collapses_spaces_and_trims() -> None:
    assert normalize_persian_text("  سلام    دنیا  ") == "سلام دنیا"


def test_caps_blank_lines_at_one() -> None:
    assert normalize_persian_text("الف\n\n\n\nب") == "الف\n\nب"


def test_strips_spaces_around_line_breaks() -> None:
    assert normalize_persian_text("الف  \n  ب") == "الف\nب"


def test_punctuation_spacing() -> None:
    assert normalize_persian_text("سلام ،خوبی ؟") == "سلام، خوبی ؟"
    assert normalize_persian_text("تموم شد.بریم") == "تموم شد. بریم"


def test_joins_verb_prefixes_with_zwnj() -> None:
    assert normalize_persian_text("من می رم") == f"من می{ZWNJ}رم"
    assert normalize_persian_text("نمی دونم") == f"نمی{ZWNJ}دونم"


def test_verb_prefix_requires_word_start() -> None:
    assert normalize_persian_text("سلامی بده") == "سلامی بده"


@pytest.mark.parametrize("sample", SAMPLES)
def test_normalization_is_idempotent(sample: str) -> None:
    once = normalize_persian_text(sample)
    assert normalize_persian_text(once) == once


TOKENS = [".", "!", "?", "،", "؛", "؟", " ", "\n", "\r", "a", "م", "ی", "ن", "می", "نمی", ZWNJ]


def _generated_samples():
    for length in range(1, 4):
        for combo in itertools.product(TOKENS, repeat=length):
            yield "".join(combo)
    rng = random.Random(0)
    for _ in range(3000):
        yield "".join(rng.choice(TOKENS) for _ in range(rng.randint(4, 14)))


@pytest.mark.parametrize("sample", [". ..a", ". !؛؟aیسم", "سلام . . .خوبی", "نه !! می رم"])
def test_punctuation_runs_are_spaced_once(sample: str) -> None:
    once = normalize_persian_text(sample)
    assert normalize_persian_text(once) == once


def test_normalization_is_idempotent_over_generated_text() -> None:
    for sample in _generated_samples():
        once = normalize_persian_text(sample)
        assert normalize_persian_text(once) == once, repr(sample)


def test_punctuation_run_gets_one_trailing_space() -> None:
    assert normalize_persian_text(". ..a") == "... a"
    assert normalize_persian_text("واقعا ! ؟") == "واقعا! ؟"


@pytest.mark.parametrize(
    "sample",
    SAMPLES + ["[Mama] hello", "[MAMA][ماما]  تکرار", "  [mama] فاصله", "[ماما]", "[ماما] [Mama] x"],
)
def test_prefix_is_idempotent(sample: str) -> None:
    once = enforce_mama_prefix(sample)
    assert enforce_mama_prefix(once) == once
    assert once.startswith("[ماما] ")


def test_prefix_replaces_english_prefix() -> None:
    assert enforce_mama_prefix("[Mama] سلام") == "[ماما] سلام"
    assert enforce_mama_prefix("سلام") == "[ماما] سلام"


def test_refine_response_normalizes_then_prefixes() -> None:
    assert refine_response("  [mama]   سلام   عزیزم ") == "[ماما] سلام عزیزم"


def test_sanitize_user_prompt_truncates() -> None:
    long_prompt = "الف" * 60
    excerpt = sanitize_user_prompt(long_prompt)
    assert excerpt == long_prompt[:50] + "..."
    assert sanitize_user_prompt("کوتاه") == "کوتاه"
