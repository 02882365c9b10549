from __future__ import annotations
import logging
from dataclasses import replace
from typing import Iterable, List

from .ast import Line, Reg, Imm, LabelRef, Str, ImmList, Sym, Operand
from .isa import OS_BASE, SAVE_BASE, SAVED_REGS, SYSCALL_LINK_REG, SYSCALLS, MEMORY_WORDS, syscall_entry
from .regs import REG_TO_NUM
from .utils import high10, low6

log = logging.getLogger("iridium_asm.pseudo")

def _r(name: str) -> Reg: return Reg(name=name, num=REG_TO_NUM[name])
ZERO = _r("zero")

def _copy(ln: Line, mnemonic: str, ops: list[Operand]) -> Line:
    return Line(mnemonic=mnemonic, operands=tuple(ops), line=ln.line, expanded_from=ln.mnemonic)

def _fill(ln: Line, value: Operand) -> Line:
    return _copy(ln, ".fill", [value])

def _as_reg(op: Operand) -> Reg:
    assert isinstance(op, Reg), f"Se esperaba registro, obtuve {op!r}"
    return op
def _as_imm(op: Operand) -> Imm:
    assert isinstance(op, Imm), f"Se esperaba inmediato, obtuve {op!r}"
    return op

def _movi_expand(ln: Line) -> list[Line]:
    rd = _as_reg(ln.operands[0])
    op = ln.operands[1]
    if isinstance(op, LabelRef):
        # el troceado de la dirección se hace al resolver
        return [_copy(ln, "LUI", [rd, LabelRef(op.name, "high10")]),
                _copy(ln, "ADDI", [rd, rd, LabelRef(op.name, "low6")])]
    v = _as_imm(op).value
    return [_copy(ln, "LUI", [rd, Imm(high10(v))]), _copy(ln, "ADDI", [rd, rd, Imm(low6(v))])]

def _space_expand(ln: Line) -> list[Line]:
    size = _as_imm(ln.operands[0]).value
    items: tuple = ()
    if len(ln.operands) > 1:
        lst = ln.operands[1]
        assert isinstance(lst, ImmList), f"Se esperaba lista, obtuve {lst!r}"
        items = lst.items
    assert size >= len(items), ".space con más elementos que tamaño"
    return [_fill(ln, items[i] if i < len(items) else Imm(0)) for i in range(size)]

def _text_expand(ln: Line) -> list[Line]:
    s = ln.operands[0]
    assert isinstance(s, Str), f"Se esperaba cadena, obtuve {s!r}"
    chars = [Imm(ord(c), origin="char") for c in s.value] + [Imm(0)]
    return _space_expand(replace(ln, operands=(Imm(len(chars)), ImmList(tuple(chars)))))

def _syscall_code(op: Operand) -> int:
    if isinstance(op, Sym):
        return SYSCALLS[op.name.lower()]
    return _as_imm(op).value

def _syscall_expand(ln: Line, *, os_base: int, save_base: int) -> list[Line]:
    """Guarda $r0..$r5, salta con enlace al manejador de 'code' y restaura.

    $r6 es el registro de argumento/retorno y no se toca; $r5 lleva la
    dirección de entrada y recibe el enlace de JAL.
    """
    entry = syscall_entry(_syscall_code(ln.operands[0]), os_base=os_base)
    link = _r(SYSCALL_LINK_REG)
    out = [_copy(ln, "SW", [_r(r), ZERO, Imm(save_base + i)]) for i, r in enumerate(SAVED_REGS)]
    out += [_copy(ln, "LUI", [link, Imm(high10(entry))]),
            _copy(ln, "ADDI", [link, link, Imm(low6(entry))]),
            _copy(ln, "JAL", [link, link, Imm(0)])]
    out += [_copy(ln, "LW", [_r(r), ZERO, Imm(save_base + i)]) for i, r in enumerate(SAVED_REGS)]
    return out

def _real(ln: Line) -> list[Line]:
    ops = ln.operands
    if ln.mnemonic == "LUI" and isinstance(ops[1], LabelRef):
        ops = (ops[0], LabelRef(ops[1].name, "high10"))
    elif ln.mnemonic == "JAL" and len(ops) == 2:
        ops = ops + (Imm(0),)
    return [replace(ln, operands=ops, label=None, comment=None)]

def check_syscall_abi(*, os_base: int, save_base: int) -> None:
    """Lanza ValueError si la dirección del manejador o las ranuras de guardado no son codificables."""
    if not 0 <= os_base <= MEMORY_WORDS - len(SYSCALLS):
        raise ValueError(f"os_base fuera de la memoria: {os_base:#x}")
    if not (-64 <= save_base and save_base + len(SAVED_REGS) - 1 <= 63):
        raise ValueError(f"save_base no cabe en un inmediato de 7 bits: {save_base}")

def expand(lines: Iterable[Line], *, os_base: int = OS_BASE, save_base: int = SAVE_BASE) -> list[Line]:
    """Reescribe pseudo-instrucciones y directivas en líneas de una palabra.

    Supone líneas ya validadas. La etiqueta de cada línea pasa a la primera
    línea que genera; los comentarios se descartan.
    """
    check_syscall_abi(os_base=os_base, save_base=save_base)
    out: List[Line] = []
    n_in = 0
    for ln in lines:
        n_in += 1
        m = ln.mnemonic
        if m == "NOP":         new = [_copy(ln, "ADD", [ZERO, ZERO, ZERO])]
        elif m == "LLI":       rd = _as_reg(ln.operands[0]); new = [_copy(ln, "ADDI", [rd, rd, ln.operands[1]])]
        elif m == "MOVI":      new = _movi_expand(ln)
        elif m == ".fill":     new = [_fill(ln, ln.operands[0])]
        elif m == ".space":    new = _space_expand(ln)
        elif m == ".text":     new = _text_expand(ln)
        elif m == "SYSCALL":   new = _syscall_expand(ln, os_base=os_base, save_base=save_base)
        else:                  new = _real(ln)

        assert new, f"{m} no generó ninguna palabra"
        if ln.label:
            new[0] = replace(new[0], label=ln.label)
        out.extend(new)
    log.debug("expand: %d líneas -> %d palabras", n_in, len(out))
    return out
