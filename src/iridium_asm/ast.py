'''
dataclases de AST (Line y operandos: Reg, Imm, Str, ImmList, LabelRef, Sym)
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple, Union, Optional, Literal

# ---- Operandos ----

@dataclass(frozen=True)
class Reg:
    """Registro con nombre canónico ('r3', 'zero') y su índice 0..7.

    num es None si el token no corresponde a ningún registro ('$r9'); el
    validador lo reporta como InvalidRegister.
    """
    name: str
    num: Optional[int]

    def __str__(self) -> str:
        return f"${self.name}"

@dataclass(frozen=True)
class Imm:
    """Inmediato con origen: literal numérico, carácter entre comillas o etiqueta ya resuelta."""
    value: int
    origin: Literal["numeric", "char", "label"] = "numeric"

    def __str__(self) -> str:
        return str(self.value)

Slice = Literal["full", "low6", "high10"]

@dataclass(frozen=True)
class LabelRef:
    """Referencia '@nombre' a una etiqueta; slice indica qué bits consume el campo."""
    name: str
    slice: Slice = "full"

    def __str__(self) -> str:
        return f"@{self.name}" if self.slice == "full" else f"@{self.name}[{self.slice}]"

@dataclass(frozen=True)
class Str:
    """Cadena entre comillas dobles, ya sin escapes."""
    value: str

    def __str__(self) -> str:
        return '"' + self.value.encode("unicode_escape").decode("ascii") + '"'

@dataclass(frozen=True)
class ImmList:
    """Lista entre corchetes de .space: [1, 'a', 0xFF]; el validador comprueba los elementos."""
    items: Tuple["Operand", ...]

    def __str__(self) -> str:
        return "[" + ", ".join(str(i) for i in self.items) + "]"

@dataclass(frozen=True)
class Sym:
    """Identificador suelto (nombre simbólico de syscall)."""
    name: str

    def __str__(self) -> str:
        return self.name

Operand = Union[Reg, Imm, LabelRef, Str, ImmList, Sym]

# ---- Línea (unidad que recorre todas las pasadas) ----

@dataclass(frozen=True)
class Line:
    """Una línea de programa.

    Cada pasada devuelve nuevas Line (dataclasses.replace) en lugar de mutar
    las anteriores:
      - parser: label, mnemonic, operands, comment
      - pseudo: una o varias Line de una palabra; comment se descarta
      - linker: address
      - resolver: LabelRef -> Imm(origin="label")
    """
    mnemonic: str
    operands: Tuple[Operand, ...]
    line: int
    label: Optional[str] = None
    comment: Optional[str] = None
    address: Optional[int] = None
    expanded_from: Optional[str] = None   # pseudo que la generó ('MOVI', '.text', ...)

    def __str__(self) -> str:
        ops = ", ".join(str(o) for o in self.operands)
        head = f"{self.label}: " if self.label else ""
        return f"{head}{self.mnemonic} {ops}".rstrip()
