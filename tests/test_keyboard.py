import pytest

from mama_brain.keyboard import EN_TO_FA_KEYS, convert_to_persian, correct_persian_keyboard, should_correct


def test_mistyped_persian_is_corrected() -> None:
    result = correct_persian_keyboard("sghl")
    assert result.was_changed
    assert result.corrected == "سلام"


@pytest.mark.parametrize(
    "text",
    ["", "   ", "سلام", "hello there", "How are you", "ab", "12345 abc", "سلام abc"],
)
def test_text_that_should_stay_untouched(text: str) -> None:
    result = correct_persian_keyboard(text)
    assert not result.was_changed
    assert result.corrected == text


def test_english_stopwords_block_correction() -> None:
    assert not should_correct("thanks sghl")
    assert should_correct("sghl ofdd")


def test_uppercase_maps_like_lowercase() -> None:
    assert convert_to_persian("SGHL") == convert_to_persian("sghl")
    assert EN_TO_FA_KEYS["?"] == "؟"


def test_unmapped_characters_pass_through() -> None:
    assert convert_to_persian("sghl 123!") == "سلام 123!"
