import pytest
from iridium_asm.diagnostics import error, warning, AssemblyError, has_errors

def test_error_str():
    d = error("ImmediateOutOfRange", "inmediato fuera de rango", line=12, col=8, file="prog.asm",
              hint="use 7 bits con signo", got=64, min=-64, max=63)
    s = str(d)
    assert "prog.asm:12:8:" in s
    assert "ERROR [ImmediateOutOfRange]: inmediato fuera de rango" in s
    assert "(pista: use 7 bits con signo)" in s
    assert d.detail == {"got": 64, "min": -64, "max": 63}

@pytest.mark.parametrize("kind, stage", [
    ("MalformedLine", "parse"),
    ("WrongOperandCount", "validation"),
    ("DuplicateLabel", "validation"),
    ("UndefinedLabel", "resolution"),
    ("AddressOutOfRange", "resolution"),
    ("Desconocido", None),
])
def test_stage_from_kind(kind, stage):
    assert error(kind, "x").stage == stage

def test_has_errors_ignores_warnings():
    assert not has_errors([warning("UnknownSyscall", "x")])
    assert has_errors([warning("UnknownSyscall", "x"), error("UndefinedLabel", "y")])

def test_assembly_error_message():
    ex = AssemblyError([error("UndefinedLabel", "Etiqueta no definida: foo", line=3),
                        error("UndefinedLabel", "Etiqueta no definida: bar", line=4)])
    assert "foo" in str(ex) and "y 1 más" in str(ex)
    assert len(ex.diagnostics) == 2
