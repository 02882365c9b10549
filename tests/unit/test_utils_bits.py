import pytest
from iridium_asm.utils import (
    u16, sign_extend, is_unsigned_nbit, is_signed_nbit, to_bin16, to_hex16,
    split_bits, parse_int, is_int_literal, high10, low6,
)

def test_split_bits():
    x = 0b1101_0010
    # fields: [7:5]=110, [3:1]=001
    assert split_bits(x, ((7,5),(3,1))) == (6, 1)

def test_u16_and_formats():
    assert u16(-1) == 0xFFFF
    assert to_bin16(1) == "0"*15 + "1"
    assert to_hex16(0xABC, prefix=True) == "0x0abc"
    assert to_hex16(0xFFFF, prefix=False) == "ffff"

def test_sign_extend():
    assert sign_extend(0x40, 7) == -64
    assert sign_extend(0x3F, 7) == 63
    assert sign_extend(0x7F, 7) == -1

def test_nbit_checks():
    assert is_unsigned_nbit(1023, 10)
    assert not is_unsigned_nbit(1024, 10)
    assert not is_unsigned_nbit(-1, 6)
    assert is_signed_nbit(63, 7)
    assert is_signed_nbit(-64, 7)
    assert not is_signed_nbit(64, 7)
    assert not is_signed_nbit(-65, 7)

@pytest.mark.parametrize("tok, value", [
    ("42", 42),
    ("007", 7),
    ("-10", -10),
    ("+5", 5),
    ("0x1E4", 0x1E4),
    ("0X0abc", 0xABC),
    ("-0x10", -16),
    ("0b00110100111", 0b00110100111),
    ("-0b1", -1),
])
def test_parse_int(tok, value):
    assert is_int_literal(tok)
    assert parse_int(tok) == value

@pytest.mark.parametrize("tok", ["", "0x", "0b2", "1.5", "abc", "--1", "12a", "٣"])
def test_parse_int_invalid(tok):
    assert not is_int_literal(tok)
    with pytest.raises(ValueError):
        parse_int(tok)

def test_high10_low6_rebuild():
    for v in (0, 1, 63, 64, 0x0ABC, 0xFF03, 0xFFFF, -1, -32768):
        assert (high10(v) << 6) | low6(v) == u16(v)
