import pytest
from iridium_asm.regs import normalize_reg, reg_num, reg_name, is_reg, is_zero

def test_names_and_numbers():
    assert normalize_reg("$R3") == "r3"
    assert normalize_reg("zero") == "zero"
    assert reg_num("$zero") == 0
    assert reg_num("$r0") == 1
    assert reg_num("$r6") == 7
    assert reg_name(7) == "$r6"
    assert is_reg("$r5")
    assert is_zero("$ZERO") and not is_zero("$r0")

def test_invalid():
    with pytest.raises(ValueError):
        normalize_reg("$r7")
    with pytest.raises(ValueError):
        normalize_reg("$sp")
    with pytest.raises(ValueError):
        reg_name(8)
    assert not is_zero("$foo")
