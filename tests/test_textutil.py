import pytest

from coolcgen.textutil import escape_string, pad


@pytest.mark.parametrize("n", [0, -1, -50])
def test_pad_non_positive_is_empty(n):
    assert pad(n) == ""


def test_pad_gives_requested_spaces():
    assert pad(7) == " " * 7


def test_pad_is_capped_at_eighty():
    assert pad(200) == " " * 80
    assert pad(80) == pad(81)


def test_plain_text_unchanged():
    assert escape_string("class Main") == "class Main"


def test_quote_and_backslash_escaped():
    assert escape_string('a"b\\c') == 'a\\"b\\\\c'


def test_control_escapes():
    assert escape_string("\n\t\b\f") == "\\n\\t\\b\\f"


def test_unprintable_uses_three_digit_octal():
    assert escape_string("\x01") == "\\001"


def test_bytes_input_high_byte():
    result = escape_string(b"\xff")
    assert result.startswith("\\")
    assert int(result[1:], 8) == 0xFF