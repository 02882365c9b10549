# src/iridium_asm/resolver.py
from __future__ import annotations
import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Mapping, Optional, Tuple

from .ast import Line, Imm, LabelRef, Operand
from .isa import MEMORY_WORDS, spec as isa_spec
from .utils import high10, low6, signed_range
from .diagnostics import Diagnostic, error

log = logging.getLogger("iridium_asm.resolver")

@dataclass(frozen=True)
class ResolveResult:
    lines: List[Line]
    diagnostics: List[Diagnostic]

class _Unresolvable(Exception):
    def __init__(self, diag: Diagnostic):
        super().__init__(diag.message)
        self.diag = diag

def field_range(mnemonic: str) -> Tuple[int, int]:
    """Rango admitido para una dirección completa en el campo inmediato de 'mnemonic'."""
    if mnemonic == ".fill":
        return 0, MEMORY_WORDS - 1
    sp = isa_spec(mnemonic)
    assert sp.fmt == "RRI", f"{mnemonic} no admite direcciones completas"
    return signed_range(7)

def slice_address(address: int, slice_: str) -> int:
    """Selecciona los bits de 'address' que consume el campo."""
    if slice_ == "low6":
        return low6(address)
    if slice_ == "high10":
        return high10(address)
    return address

def _resolve_operand(op: Operand, ln: Line, symtab: Mapping[str, int], filename: Optional[str]) -> Operand:
    if not isinstance(op, LabelRef):
        return op
    address = symtab.get(op.name)
    if address is None:
        raise _Unresolvable(error("UndefinedLabel", f"Etiqueta no definida: {op.name}", line=ln.line,
                                  file=filename, name=op.name))
    if op.slice == "full":
        lo, hi = field_range(ln.mnemonic)
        if not lo <= address <= hi:
            raise _Unresolvable(error(
                "AddressOutOfRange",
                f"{ln.mnemonic}: la dirección de '{op.name}' ({address}) no cabe en el campo ({lo}..{hi})",
                line=ln.line, file=filename, hint="carga la dirección con MOVI y usa un registro",
                name=op.name, address=address, min=lo, max=hi))
    return Imm(slice_address(address, op.slice), origin="label")

def resolve(lines: Iterable[Line], symtab: Mapping[str, int], *, filename: Optional[str] = None) -> ResolveResult:
    """Sustituye cada @etiqueta por su dirección (o la parte que consume el campo).

    La tabla ya está completa, así que el orden no importa; se aborta en el
    primer error.
    """
    out: List[Line] = []
    n_refs = 0
    for ln in lines:
        if not any(isinstance(op, LabelRef) for op in ln.operands):
            out.append(ln)
            continue
        try:
            ops = tuple(_resolve_operand(op, ln, symtab, filename) for op in ln.operands)
        except _Unresolvable as ex:
            return ResolveResult(lines=out, diagnostics=[ex.diag])
        n_refs += 1
        out.append(replace(ln, operands=ops))
    log.debug("resolve: %d líneas con referencias a etiquetas", n_refs)
    return ResolveResult(lines=out, diagnostics=[])
