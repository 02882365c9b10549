# src/iridium_asm/encoding.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .ast import Line, Reg, Imm, Operand
from .isa import OPCODE_TO_MNEMONIC, spec as isa_spec
from .regs import reg_name
from .utils import u16, is_signed_nbit, is_unsigned_nbit, sign_extend, split_bits

log = logging.getLogger("iridium_asm.encoding")

# ---------------- Resultados de codificación ----------------

@dataclass(frozen=True)
class Encoded:
    word: int       # u16
    address: int    # dirección de esta palabra
    line: int
    mnemonic: str

@dataclass(frozen=True)
class EncodeResult:
    words: List[Encoded]

# ---------------- Helpers de empaquetado de bits ----------------

def pack_rrr(opc: int, ra: int, rb: int, rc: int) -> int:
    return u16((opc & 0x7) << 13 |
               (ra & 0x7)  << 10 |
               (rb & 0x7)  << 7  |
               (rc & 0x7)  << 4)

def pack_rri(opc: int, ra: int, rb: int, imm7: int) -> int:
    assert is_signed_nbit(imm7, 7), f"imm7 fuera de rango: {imm7}"
    return u16((opc & 0x7) << 13 |
               (ra & 0x7)  << 10 |
               (rb & 0x7)  << 7  |
               (imm7 & 0x7F))

def pack_ri(opc: int, ra: int, imm10: int) -> int:
    assert is_unsigned_nbit(imm10, 10), f"imm10 fuera de rango: {imm10}"
    return u16((opc & 0x7) << 13 |
               (ra & 0x7)  << 10 |
               (imm10 & 0x3FF))

# ---------------- Helpers semánticos ----------------

def _reg(op: Operand) -> int:
    assert isinstance(op, Reg) and op.num is not None, f"Se esperaba registro válido, obtuve {op!r}"
    return op.num

def _imm(op: Operand) -> int:
    assert isinstance(op, Imm), f"Se esperaba inmediato resuelto, obtuve {op!r}"
    return op.value

def encode_line(ln: Line) -> int:
    """Empaqueta una línea resuelta en una palabra de 16 bits.

    Cualquier fallo aquí es un error interno: las pasadas anteriores ya
    validaron operandos y rangos.
    """
    ops = ln.operands
    if ln.mnemonic == ".fill":
        value = _imm(ops[0])
        assert -0x8000 <= value <= 0xFFFF, f".fill fuera de 16 bits: {value}"
        return u16(value)

    sp = isa_spec(ln.mnemonic)
    if sp.fmt == "RRR":
        assert len(ops) == 3, f"{ln.mnemonic} espera 3 registros"
        return pack_rrr(sp.opcode, _reg(ops[0]), _reg(ops[1]), _reg(ops[2]))
    if sp.fmt == "RRI":
        assert len(ops) == 3, f"{ln.mnemonic} espera rA, rB, imm"
        return pack_rri(sp.opcode, _reg(ops[0]), _reg(ops[1]), _imm(ops[2]))
    if sp.fmt == "RI":
        assert len(ops) == 2, f"{ln.mnemonic} espera rA, imm"
        return pack_ri(sp.opcode, _reg(ops[0]), _imm(ops[1]))
    raise AssertionError(f"Formato no soportado: {sp.fmt}")

# ---------------- Codificador principal ----------------

def encode(lines: Iterable[Line]) -> EncodeResult:
    words: List[Encoded] = []
    for ln in lines:
        assert ln.address is not None, f"línea {ln.line} sin dirección asignada"
        words.append(Encoded(word=encode_line(ln), address=ln.address, line=ln.line, mnemonic=ln.mnemonic))
    log.debug("encode: %d palabras", len(words))
    return EncodeResult(words=words)

# ---------------- Decodificación (listados y pruebas) ----------------

@dataclass(frozen=True)
class Decoded:
    mnemonic: str
    fmt: str
    ra: int
    rb: Optional[int] = None
    rc: Optional[int] = None
    imm: Optional[int] = None

    def __str__(self) -> str:
        if self.fmt == "RRR":
            return f"{self.mnemonic} {reg_name(self.ra)}, {reg_name(self.rb)}, {reg_name(self.rc)}"
        if self.fmt == "RRI":
            return f"{self.mnemonic} {reg_name(self.ra)}, {reg_name(self.rb)}, {self.imm}"
        return f"{self.mnemonic} {reg_name(self.ra)}, {self.imm}"

def decode(word: int) -> Decoded:
    """Interpreta una palabra como instrucción (las palabras .fill no se distinguen)."""
    opc, ra, rb, rc, imm7, imm10 = split_bits(u16(word), ((15, 13), (12, 10), (9, 7), (6, 4), (6, 0), (9, 0)))
    mnemonic = OPCODE_TO_MNEMONIC[opc]
    fmt = isa_spec(mnemonic).fmt
    if fmt == "RRR":
        return Decoded(mnemonic, fmt, ra, rb=rb, rc=rc)
    if fmt == "RRI":
        return Decoded(mnemonic, fmt, ra, rb=rb, imm=sign_extend(imm7, 7))
    return Decoded(mnemonic, fmt, ra, imm=imm10)
