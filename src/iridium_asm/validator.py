# src/iridium_asm/validator.py
from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .ast import Line, Reg, Imm, LabelRef, Str, ImmList, Sym, Operand
from .isa import IMM_WIDTHS, SYSCALLS, known_mnemonic
from .regs import ZERO
from .utils import signed_range, unsigned_range
from .diagnostics import error, Diagnostic

log = logging.getLogger("iridium_asm.validator")

# Formas de operandos por mnemónico. Cada ranura:
#   'reg'    registro fuente
#   'dst'    registro destino ($zero prohibido)
#   'immN'   inmediato de la clase N; '|label' admite @etiqueta, '|char' admite 'c'
#   'size'   tamaño de .space
#   'list'   lista [..] de .space
#   'str'    cadena de .text
#   'code'   código de syscall
Shape = Tuple[str, ...]

SHAPES: Dict[str, List[Shape]] = {
    "ADD":    [("dst", "reg", "reg")],
    "NAND":   [("dst", "reg", "reg")],
    "BEQ":    [("reg", "reg", "reg")],
    "ADDI":   [("dst", "reg", "imm7|label")],
    "SW":     [("reg", "reg", "imm7|label")],
    "LW":     [("dst", "reg", "imm7|label")],
    "JAL":    [("dst", "reg"), ("dst", "reg", "imm7|label")],
    "LUI":    [("dst", "imm10|label")],
    "NOP":    [()],
    "LLI":    [("dst", "imm6")],
    "MOVI":   [("dst", "imm16|label")],
    "SYSCALL": [("code",)],
    ".fill":  [("imm16|label|char",)],
    ".space": [("size",), ("size", "list")],
    ".text":  [("str",)],
}

SPACE_SIZE_RANGE = (1, 0xFFFF)

_KIND_NAMES = {
    Reg: "registro",
    Imm: "inmediato",
    LabelRef: "etiqueta",
    Str: "cadena",
    ImmList: "lista",
    Sym: "identificador",
}

def _kind(op: Operand) -> str:
    if isinstance(op, Imm) and op.origin == "char":
        return "carácter"
    return _KIND_NAMES.get(type(op), type(op).__name__)

def imm_range(width: str) -> Tuple[int, int]:
    """Rango admitido para una clase de inmediato ('imm7', 'imm10', ...)."""
    bits, signed = IMM_WIDTHS[width]
    return signed_range(bits) if signed else unsigned_range(bits)

class _LineChecker:
    """Acumula los errores de una línea con su ubicación."""

    def __init__(self, ln: Line, filename: Optional[str]):
        self.ln = ln
        self.filename = filename
        self.diags: List[Diagnostic] = []

    def err(self, kind: str, message: str, *, hint: Optional[str] = None, **detail) -> None:
        self.diags.append(error(kind, f"{self.ln.mnemonic}: {message}", line=self.ln.line,
                                file=self.filename, hint=hint, **detail))

    def mismatch(self, pos: int, expected: str, op: Operand) -> None:
        self.err("OperandKindMismatch", f"operando {pos} debe ser {expected}, se obtuvo {_kind(op)} '{op}'",
                 position=pos, expected=expected, got=_kind(op))

    def check_range(self, value: int, lo: int, hi: int, what: str = "Inmediato") -> bool:
        if lo <= value <= hi:
            return True
        self.err("ImmediateOutOfRange", f"{what} fuera de rango: {value} (rango {lo}..{hi})",
                 got=value, min=lo, max=hi)
        return False

    # ---- ranuras ----

    def reg(self, pos: int, op: Operand, *, dst: bool) -> None:
        if not isinstance(op, Reg):
            self.mismatch(pos, "registro", op)
            return
        if op.num is None:
            self.err("InvalidRegister", f"registro inválido '{op}'", hint="usa $zero o $r0..$r6",
                     register=op.name)
            return
        if dst and op.name == ZERO:
            self.err("ReadOnlyRegisterWrite", "$zero es de solo lectura y no puede ser destino",
                     register=op.name)

    def imm(self, pos: int, op: Operand, slot: str) -> None:
        width, *extras = slot.split("|")
        allow_label = "label" in extras
        allow_char = "char" in extras
        if isinstance(op, LabelRef) and allow_label:
            return  # el rango se comprueba al resolver
        if isinstance(op, Imm) and (op.origin == "numeric" or (op.origin == "char" and allow_char)):
            lo, hi = imm_range(width)
            self.check_range(op.value, lo, hi)
            return
        expected = "inmediato" + (" o etiqueta" if allow_label else "") + (" o carácter" if allow_char else "")
        self.mismatch(pos, expected, op)

    def size(self, pos: int, op: Operand) -> Optional[int]:
        if not isinstance(op, Imm) or op.origin != "numeric":
            self.mismatch(pos, "tamaño numérico", op)
            return None
        lo, hi = SPACE_SIZE_RANGE
        self.check_range(op.value, lo, hi, "Tamaño")
        return op.value

    def items(self, pos: int, op: Operand) -> Optional[int]:
        if not isinstance(op, ImmList):
            self.mismatch(pos, "lista [..]", op)
            return None
        lo, hi = imm_range("imm16")
        for item in op.items:
            if isinstance(item, Imm):
                self.check_range(item.value, lo, hi, "Elemento")
            else:
                self.mismatch(pos, "lista de inmediatos o caracteres", item)
        return len(op.items)

    def string(self, pos: int, op: Operand) -> None:
        if not isinstance(op, Str):
            self.mismatch(pos, "cadena entre comillas", op)

    def code(self, pos: int, op: Operand) -> None:
        if isinstance(op, Imm) and op.origin == "numeric":
            if op.value not in SYSCALLS.values():
                self.err("UnknownSyscall", f"código de syscall desconocido: {op.value}",
                         hint="códigos válidos 0..7", code=op.value)
        elif isinstance(op, Sym):
            if op.name.lower() not in SYSCALLS:
                self.err("UnknownSyscall", f"syscall desconocida: '{op.name}'",
                         hint=", ".join(SYSCALLS), code=op.name)
        else:
            self.mismatch(pos, "código o nombre de syscall", op)

def validate_line(ln: Line, *, filename: Optional[str] = None) -> List[Diagnostic]:
    """Comprueba mnemónico, número y tipo de operandos y rangos de una línea."""
    chk = _LineChecker(ln, filename)
    if not known_mnemonic(ln.mnemonic):
        chk.diags.append(error("UnknownMnemonic", f"Mnemónico desconocido: {ln.mnemonic}",
                               line=ln.line, file=filename, mnemonic=ln.mnemonic))
        return chk.diags

    shapes = SHAPES[ln.mnemonic]
    shape = next((s for s in shapes if len(s) == len(ln.operands)), None)
    if shape is None:
        expected = sorted({len(s) for s in shapes})
        chk.err("WrongOperandCount",
                f"se esperaban {' o '.join(map(str, expected))} operandos, se obtuvieron {len(ln.operands)}",
                got=len(ln.operands), expected=expected)
        return chk.diags

    size = count = None
    for pos, (slot, op) in enumerate(zip(shape, ln.operands), start=1):
        if slot in ("reg", "dst"):
            chk.reg(pos, op, dst=(slot == "dst"))
        elif slot.startswith("imm"):
            chk.imm(pos, op, slot)
        elif slot == "size":
            size = chk.size(pos, op)
        elif slot == "list":
            count = chk.items(pos, op)
        elif slot == "str":
            chk.string(pos, op)
        elif slot == "code":
            chk.code(pos, op)
        else:
            raise AssertionError(f"ranura desconocida: {slot}")

    if size is not None and count is not None and size < count:
        chk.err("SpaceSizeTooSmall", f"tamaño {size} menor que el número de elementos ({count})",
                size=size, count=count)
    return chk.diags

def validate(lines: Iterable[Line], *, filename: Optional[str] = None) -> List[Diagnostic]:
    """Valida todo el programa; no se detiene en el primer error."""
    diags: List[Diagnostic] = []
    n = 0
    for ln in lines:
        diags.extend(validate_line(ln, filename=filename))
        n += 1
    log.debug("validate: %d líneas, %d errores", n, len(diags))
    return diags
