import pytest
from iridium_asm.parser import parse
from iridium_asm.validator import validate, imm_range

def _check(src: str):
    lines, diags = parse(src)
    assert not diags
    return validate(lines, filename="v.asm")

def _kinds(src: str):
    return [d.kind for d in _check(src)]

VALID = """
.fill 8
.fill -10 # comment
.fill 0x1E4
binary: .fill 0b00110100111
.fill 'a'
.fill '~'
.fill @binary
text: .text "hello world!" # some text
array: .space 20 [100, 'a', 'b', 0xFF, 0b11101] # an array
zeros: .space 4
ADD  $r0, $zero, $r1
NAND $r5, $r4,   $r3
branch: BEQ $r0, $r1, $r2
loop_start: ADDI $r0, $r1, 20
SW $r0, $r5, 0b001101
SW $zero, $r5, -64
LW $r0, $r5, 0x0F
LW $r0, $zero, @binary
jump: JAL $r6, $r5
JAL $r6, $r5, 3
LUI $r4, 0x1de
LUI $r4, @array
.syscall 7
syscall print_hex
NOP
LLI $r0, 20
MOVI $r1, 0x10e
MOVI $r1, -32768
MOVI $r2, @text
"""

def test_valid_program_has_no_errors():
    assert _check(VALID) == []

@pytest.mark.parametrize("width, lo, hi", [
    ("imm7", -64, 63),
    ("imm10", 0, 1023),
    ("imm6", 0, 63),
    ("imm16", -32768, 32767),
])
def test_imm_ranges(width, lo, hi):
    assert imm_range(width) == (lo, hi)

@pytest.mark.parametrize("src, got, lo, hi", [
    ("ADDI $r0, $zero, 64", 64, -64, 63),
    ("ADDI $r0, $zero, -65", -65, -64, 63),
    ("SW $r0, $r1, 0x40", 64, -64, 63),
    ("LUI $r0, 1024", 1024, 0, 1023),
    ("LUI $r0, -1", -1, 0, 1023),
    ("LLI $r0, 64", 64, 0, 63),
    ("MOVI $r0, 32768", 32768, -32768, 32767),
    ("MOVI $r0, 0xFFFF", 0xFFFF, -32768, 32767),
    (".fill -32769", -32769, -32768, 32767),
    (".space 3 [1, 70000]", 70000, -32768, 32767),
])
def test_immediate_out_of_range(src, got, lo, hi):
    diags = _check(src)
    assert [d.kind for d in diags] == ["ImmediateOutOfRange"]
    assert diags[0].detail == {"got": got, "min": lo, "max": hi}
    assert diags[0].line == 1 and diags[0].file == "v.asm"

@pytest.mark.parametrize("src", ["LUI $r0, 1023", "LUI $r0, 0", "LLI $r6, 63", "ADDI $r0, $zero, -64"])
def test_boundaries_accepted(src):
    assert _check(src) == []

@pytest.mark.parametrize("src, got, expected", [
    ("ADD $r0, $r1", 2, [3]),
    ("NOP $r0", 1, [0]),
    ("JAL $r0", 1, [2, 3]),
    ("MOVI $r0", 1, [2]),
    (".fill 1 2", 2, [1]),
    (".space", 0, [1, 2]),
    ("syscall", 0, [1]),
])
def test_wrong_operand_count(src, got, expected):
    diags = _check(src)
    assert [d.kind for d in diags] == ["WrongOperandCount"]
    assert diags[0].detail == {"got": got, "expected": expected}

@pytest.mark.parametrize("src", [
    "ADD $r0, $r1, 5",
    "BEQ $r0, $r1, 5",
    "BEQ $r0, $r1, @loop",
    "ADDI $r0, 5, 5",
    "ADDI $r0, $r1, 'a'",
    "LLI $r0, @label",
    "LUI 5, 5",
    ".fill $r0",
    ".fill \"ab\"",
    ".text 'a'",
    ".space $r0",
    ".space 3 4",
    ".space 3 [@x]",
    "syscall $r0",
])
def test_operand_kind_mismatch(src):
    assert _kinds(src) == ["OperandKindMismatch"]

@pytest.mark.parametrize("src", [
    "ADD $zero, $r1, $r2",
    "ADDI $zero, $r1, 1",
    "NAND $zero, $r1, $r2",
    "LUI $zero, 1",
    "LLI $zero, 1",
    "MOVI $zero, 1",
    "LW $zero, $r1, 0",
    "JAL $zero, $r1",
])
def test_read_only_register_write(src):
    assert _kinds(src) == ["ReadOnlyRegisterWrite"]

@pytest.mark.parametrize("src", ["SW $zero, $r1, 0", "BEQ $zero, $zero, $r1", "ADD $r0, $zero, $zero"])
def test_zero_as_source_is_fine(src):
    assert _check(src) == []

def test_invalid_register():
    diags = _check("ADD $r7, $r1, $sp")
    assert [d.kind for d in diags] == ["InvalidRegister", "InvalidRegister"]
    assert diags[0].detail == {"register": "r7"}

def test_unknown_mnemonic():
    diags = _check("SUB $r0, $r1, $r2\n.word 5")
    assert [d.kind for d in diags] == ["UnknownMnemonic", "UnknownMnemonic"]
    assert diags[1].detail == {"mnemonic": ".word"}

@pytest.mark.parametrize("src", ["syscall 8", "syscall -1", ".syscall 100", "syscall reboot"])
def test_unknown_syscall(src):
    assert _kinds(src) == ["UnknownSyscall"]

@pytest.mark.parametrize("src", [
    ".space 2 [1, 2, 3]",
    ".space 1 [0, 0]",
    ".space 4 ['a', 'b', 'c', 'd', 'e']",
    ".space 2 [-32768, 32767, 0]",
])
def test_space_size_too_small(src):
    diags = _check(src)
    assert "SpaceSizeTooSmall" in [d.kind for d in diags]

def test_space_size_equal_to_count_is_ok():
    assert _check(".space 3 [1, 2, 3]") == []
    assert _check(".space 3 []") == []

def test_space_size_must_be_positive():
    assert _kinds(".space 0") == ["ImmediateOutOfRange"]

def test_errors_are_collected_for_whole_program():
    src = "ADDI $r0, $zero, 64\nNOP\nLUI $r0, 1024\nFOO\nADD $zero, $r1, $r2\n"
    diags = _check(src)
    assert [(d.line, d.kind) for d in diags] == [
        (1, "ImmediateOutOfRange"),
        (3, "ImmediateOutOfRange"),
        (4, "UnknownMnemonic"),
        (5, "ReadOnlyRegisterWrite"),
    ]
    assert all(d.stage == "validation" for d in diags)
