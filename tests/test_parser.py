"""Tests for payload decoding."""

from decimal import Decimal

import pytest

from scale_tcp_mcp.errors import DecodeFieldMissing
from scale_tcp_mcp.protocol.framing import Frame
from scale_tcp_mcp.protocol.parser import (
    PayloadDecoder,
    decode_frame,
    extract_payload,
    parse_field,
    tokenize,
)


def test_decode_scaling():
    """1500 2500 3750 -> 1.500 kg, 25.00 per unit, 37.50 total."""
    reading = PayloadDecoder().decode_reading(b"\x021500 2500 3750\x03")
    assert reading.weight == Decimal("1.500")
    assert reading.price_per_unit == Decimal("25.00")
    assert reading.total == Decimal("37.50")


def test_decode_renders_fixed_precision():
    line = decode_frame(b"\x02 1500 2500 3750 \x03")
    assert line == "Weight: 1.500 kg | Price/Unit: 25.00 | Total: 37.50"


def test_decode_with_currency():
    line = PayloadDecoder(currency="R$").decode(b"\x021500 2500 3750\x03")
    assert line == "Weight: 1.500 kg | Price/Unit: R$25.00 | Total: R$37.50"


def test_decode_accepts_frame_object():
    line = PayloadDecoder().decode(Frame(b"\x02100 200 300\x03"))
    assert line == "Weight: 0.100 kg | Price/Unit: 2.00 | Total: 3.00"


def test_missing_field_is_an_error():
    """Two tokens must not be silently decoded."""
    with pytest.raises(DecodeFieldMissing) as excinfo:
        PayloadDecoder().decode(b"\x021500 2500\x03")
    assert excinfo.value.tokens == ["1500", "2500"]


def test_empty_payload_is_an_error():
    with pytest.raises(DecodeFieldMissing):
        PayloadDecoder().decode(b"\x02\x03")


def test_non_numeric_field_defaults_to_zero():
    line = decode_frame(b"\x02abc 2500 3750\x03")
    assert line == "Weight: 0.000 kg | Price/Unit: 25.00 | Total: 37.50"


def test_tabs_and_space_runs_are_separators():
    line = decode_frame(b"\x02\t1500 \t  2500\t\t3750\x03")
    assert line == "Weight: 1.500 kg | Price/Unit: 25.00 | Total: 37.50"


def test_extra_fields_ignored():
    reading = PayloadDecoder().decode_reading(b"\x021 2 3 4 5\x03")
    assert (reading.weight_raw, reading.price_raw, reading.total_raw) == (1, 2, 3)


def test_no_delimiters_uses_whole_input():
    """Partial data without markers is decoded as the payload."""
    line = decode_frame(b"1500 2500 3750")
    assert line == "Weight: 1.500 kg | Price/Unit: 25.00 | Total: 37.50"


def test_start_without_end_uses_whole_input():
    """The start marker is not stripped without a matching end marker."""
    reading = PayloadDecoder().decode_reading(b"\x021500 2500 3750")
    assert reading.weight_raw == 0
    assert reading.total_raw == 3750


def test_negative_values():
    line = decode_frame(b"\x02-250 100 -25\x03")
    assert line == "Weight: -0.250 kg | Price/Unit: 1.00 | Total: -0.25"


def test_custom_markers():
    decoder = PayloadDecoder(start=ord("["), end=ord("]"))
    assert decoder.decode(b"[2000 150 300]") == (
        "Weight: 2.000 kg | Price/Unit: 1.50 | Total: 3.00"
    )


def test_extract_payload():
    assert extract_payload(b"ab\x02xyz\x03cd") == b"xyz"
    assert extract_payload(b"\x03\x02xyz\x03") == b"xyz"
    assert extract_payload(b"plain") == b"plain"


def test_tokenize_discards_empty_tokens():
    assert tokenize(b"  1 \t 2  3 ") == ["1", "2", "3"]


@pytest.mark.parametrize(
    "token, expected",
    [
        ("1500", 1500),
        ("+42", 42),
        ("-7", -7),
        ("3750\r\n", 3750),
        ("\x0b1500\x0c", 1500),
        ("\x1c1500", 0),
        ("1500\x1f", 0),
        ("abc", 0),
        ("12a", 0),
        ("1.5", 0),
        ("1_000", 0),
        ("", 0),
        ("2147483647", 2147483647),
        ("2147483648", 0),
        ("-2147483648", -2147483648),
    ],
)
def test_parse_field(token, expected):
    assert parse_field(token) == expected
