# src/iridium_asm/linker.py
from __future__ import annotations
import logging
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional

from .ast import Line
from .isa import MEMORY_WORDS
from .diagnostics import Diagnostic, error

log = logging.getLogger("iridium_asm.linker")

# ---------- Resultado de la pasada 1 ----------

@dataclass(frozen=True)
class LinkResult:
    symtab: Dict[str, int]
    lines: List[Line]        # líneas con address asignada
    size: int                # palabras totales del programa
    diagnostics: List[Diagnostic]

# ---------- Pasada 1 (direcciones y tabla de símbolos) ----------

def first_pass(
    lines: Iterable[Line],
    *,
    base: int = 0,
    memory_words: int = MEMORY_WORDS,
    filename: Optional[str] = None,
) -> LinkResult:
    """Asigna a cada línea expandida su dirección (contador de palabras) y
    registra 'etiqueta -> dirección'.

    Toda línea expandida ocupa exactamente una palabra. Se detiene en la
    primera etiqueta duplicada: las direcciones posteriores no tendrían sentido.
    """
    symtab: Dict[str, int] = {}
    out: List[Line] = []
    lc = base

    for ln in lines:
        if ln.label is not None:
            if ln.label in symtab:
                d = error("DuplicateLabel", f"Etiqueta redefinida: {ln.label}", line=ln.line, file=filename,
                          hint=f"ya definida en la dirección {symtab[ln.label]:#06x}", name=ln.label)
                return LinkResult(symtab=symtab, lines=out, size=lc - base, diagnostics=[d])
            symtab[ln.label] = lc
        out.append(replace(ln, address=lc))
        lc += 1

    size = lc - base
    if lc > memory_words:
        d = error("ProgramTooLarge", f"El programa ocupa {size} palabras y la memoria solo tiene {memory_words}",
                  file=filename, size=size, max=memory_words - base)
        return LinkResult(symtab=symtab, lines=out, size=size, diagnostics=[d])

    log.debug("first_pass: %d palabras, %d etiquetas", size, len(symtab))
    return LinkResult(symtab=symtab, lines=out, size=size, diagnostics=[])
