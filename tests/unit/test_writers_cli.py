from iridium_asm import assemble_text
from iridium_asm.assembler import main
from iridium_asm.writers import to_bytes, to_hex_lines, to_bin_lines, to_listing_lines

SRC = "start: ADDI $r0, $zero, 5\nNAND $r1, $r0, $r0\ndata: .fill 0x1234\n"

def _words():
    result = assemble_text(SRC)
    assert result.ok
    return result.words

def test_bytes_big_and_little():
    words = _words()
    assert [w.word for w in words] == [0x2405, 0x4890, 0x1234]
    assert to_bytes(words) == bytes([0x24, 0x05, 0x48, 0x90, 0x12, 0x34])
    assert to_bytes(words, "little") == bytes([0x05, 0x24, 0x90, 0x48, 0x34, 0x12])

def test_text_lines():
    words = _words()
    assert to_hex_lines(words) == ["0x2405", "0x4890", "0x1234"]
    assert to_bin_lines(words)[0] == "0010010000000101"

def test_listing_lines():
    lines = to_listing_lines(_words())
    assert lines[0] == "0000: 0x2405  ADDI $r0, $zero, 5  # línea 1"
    assert lines[1].startswith("0001: 0x4890  NAND $r1, $r0, $r0")
    assert lines[2] == "0002: 0x1234  .fill 0x1234  # línea 3"

def test_cli_writes_image(tmp_path, capsys):
    src = tmp_path / "prog.asm"
    src.write_text(SRC, encoding="utf-8")
    out = tmp_path / "prog.bin"
    listing = tmp_path / "prog.lst"
    assert main([str(src), str(out), "--listing", str(listing)]) == 0
    assert out.read_bytes() == bytes([0x24, 0x05, 0x48, 0x90, 0x12, 0x34])
    assert len(listing.read_text(encoding="utf-8").splitlines()) == 3
    assert "OK: 3 palabras" in capsys.readouterr().out

def test_cli_hex_format(tmp_path):
    src = tmp_path / "prog.asm"
    src.write_text(SRC, encoding="utf-8")
    out = tmp_path / "prog.hex"
    assert main([str(src), str(out), "--format", "hex"]) == 0
    assert out.read_text(encoding="utf-8").splitlines() == ["0x2405", "0x4890", "0x1234"]

def test_cli_reports_errors(tmp_path, capsys):
    src = tmp_path / "bad.asm"
    src.write_text("ADDI $r0, $zero, 64\nFOO $r1\n", encoding="utf-8")
    out = tmp_path / "bad.bin"
    assert main([str(src), str(out)]) == 1
    err = capsys.readouterr().err
    assert "ImmediateOutOfRange" in err and "UnknownMnemonic" in err
    assert not out.exists()

def test_cli_missing_source(tmp_path):
    assert main([str(tmp_path / "nope.asm"), str(tmp_path / "out.bin")]) == 2

def test_cli_bad_os_base(tmp_path):
    src = tmp_path / "prog.asm"
    src.write_text("syscall halt\n", encoding="utf-8")
    assert main([str(src), str(tmp_path / "o.bin"), "--os-base", "0xFFFF"]) == 2
