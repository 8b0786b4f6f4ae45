import pytest

from mama_brain.classifiers import (
    EmotionalTone,
    analyze_emotional_tone,
    derive_anonymized_signals,
    detect_civic_empowerment,
    extract_message_features,
    signal_categories,
)


@pytest.mark.parametrize(
    "message",
    ["من برای آزادی می‌جنگم", "درباره‌ی حقوق بشر بگو", "I believe in FREEDOM", "democracy matters"],
)
def test_civic_keywords_are_detected(message: str) -> None:
    assert detect_civic_empowerment(message)


def test_plain_messages_are_not_civic() -> None:
    assert not detect_civic_empowerment("امروز هوا خوبه")


@pytest.mark.parametrize(
    ("message", "tone"),
    [
        ("از آزادی غمگینم", EmotionalTone.CIVIC),
        ("خیلی ناراحتم", EmotionalTone.SAD),
        ("امروز خوشحالم", EmotionalTone.HAPPY),
        ("استرس دارم", EmotionalTone.ANXIOUS),
        ("سلام", EmotionalTone.NEUTRAL),
    ],
)
def test_tone_follows_priority_order(message: str, tone: EmotionalTone) -> None:
    assert analyze_emotional_tone(message) is tone


def test_message_features() -> None:
    features = extract_message_features("چطور باید انتخاب کنم؟")
    assert features.has_question
    assert features.needs_help
    assert features.has_decision
    assert not features.is_complex
    assert extract_message_features("الف" * 101).is_complex


def test_signals_never_carry_message_text() -> None:
    message = "دلم برای خانواده‌ام تنگ شده، چی کار کنم؟"
    signals = derive_anonymized_signals(message)
    allowed = set(signal_categories())
    assert signals
    for signal in signals:
        assert signal.category in allowed
        assert 0.0 <= signal.normalized_score <= 1.0
        assert message not in signal.category


def test_short_message_gets_length_bucket_only() -> None:
    signals = derive_anonymized_signals("سلام")
    assert [signal.category for signal in signals] == ["طول_کوتاه"]
    assert signals[0].normalized_score == pytest.approx(4 / 200)


def test_question_density_signal() -> None:
    signals = {signal.category: signal.normalized_score for signal in derive_anonymized_signals("چرا؟")}
    assert signals["سوال"] == pytest.approx(2 / 7)
    assert signals["تراکم_سوال"] == pytest.approx(1 / 3)


def test_long_message_bucket() -> None:
    categories = [signal.category for signal in derive_anonymized_signals("ب" * 250)]
    assert "طول_بلند" in categories
