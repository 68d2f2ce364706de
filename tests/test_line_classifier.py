import pytest

from mcqkarten.line_classifier import classify_line, classify_lines, extract_inline_answer
from mcqkarten.pipeline_models import LineKind


@pytest.mark.parametrize("text", ["", "   ", "I", "II", "III", "IV", "---", "_____", "=-_="])
def test_noise_lines(text):
    assert classify_line(text).kind is LineKind.NOISE


@pytest.mark.parametrize("text", ["V", "==", "Ich", "1."])
def test_plain_lines(text):
    assert classify_line(text).kind is LineKind.PLAIN


@pytest.mark.parametrize(
    "text, payload",
    [
        ("정답: B", "B"),
        ("답: A,B", "A, B"),
        ("Answer: B/D", "B, D"),
        ("ANSWER：C", "C"),
        ("정답 C", "C"),
    ],
)
def test_inline_answer_payload(text, payload):
    line = classify_line(text)
    assert line.kind is LineKind.INLINE_ANSWER
    assert line.payload == payload


def test_inline_answer_requires_whole_line():
    assert extract_inline_answer("정답: B. 4") is None
    assert classify_line("정답: B입니다").kind is LineKind.PLAIN


@pytest.mark.parametrize("text", ["A. 3", "B) 4", "C． 5", "D.  mehrere Leerzeichen"])
def test_option_or_answer(text):
    line = classify_line(text)
    assert line.kind is LineKind.OPTION_OR_ANSWER
    assert line.letter == text[0]


@pytest.mark.parametrize("text", ["D.5", "E. x", "A.", "a. klein"])
def test_not_option(text):
    assert classify_line(text).kind is LineKind.PLAIN


def test_trailing_whitespace_is_trimmed():
    line = classify_line("A. 3   ")
    assert line.text == "A. 3"
    assert line.letter == "A"


def test_plain_line_has_no_letter():
    assert classify_line("Frage").letter is None


def test_classify_lines_splits_and_cleans():
    lines = classify_lines("Q\r\n\nA.\u00a0x")
    assert [ln.text for ln in lines] == ["Q", "", "A. x"]
    assert [ln.kind for ln in lines] == [
        LineKind.PLAIN,
        LineKind.NOISE,
        LineKind.OPTION_OR_ANSWER,
    ]
