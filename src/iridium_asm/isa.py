'''
tabla formal Iridium (opcodes, formatos, pseudo-instrucciones, syscalls)
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

@dataclass(frozen=True)
class ISpec:
    """Especificación de una instrucción real.

    - fmt: 'RRR', 'RRI' o 'RI'
    - opcode: campo de 3 bits (bits 15..13)
    - writes_ra: True si rA es registro destino ($zero prohibido)
    - forms: formas de operandos aceptadas (solo forma, no rango)
    """
    fmt: str
    opcode: int
    writes_ra: bool = True
    forms: Optional[List[str]] = None

# Constantes de opcode
OP_ADD  = 0b000
OP_ADDI = 0b001
OP_NAND = 0b010
OP_LUI  = 0b011
OP_SW   = 0b100
OP_LW   = 0b101
OP_BEQ  = 0b110
OP_JAL  = 0b111

# Anchuras de inmediato: nombre -> (bits, con signo)
IMM_WIDTHS: Dict[str, Tuple[int, bool]] = {
    "imm7":  (7, True),
    "imm10": (10, False),
    "imm6":  (6, False),
    "imm16": (16, True),
}

MEMORY_WORDS = 1 << 16

# Contrato con el manejador de interrupciones (externo)
OS_BASE = 0xFF00     # entrada del manejador para el código 0; código c -> OS_BASE + c
SAVE_BASE = -6       # desplazamiento (con $zero) de la ranura de $r0; $r5 en SAVE_BASE+5
SYSCALL_LINK_REG = "r5"
SAVED_REGS = ("r0", "r1", "r2", "r3", "r4", "r5")  # $r6 es argumento/retorno, no se guarda

SYSCALLS: Dict[str, int] = {
    "print_char": 0,
    "print_str":  1,
    "print_int":  2,
    "print_hex":  3,
    "input_int":  4,
    "input_char": 5,
    "halt":       6,
    "error":      7,
}

SPEC: Dict[str, ISpec] = {}

def _add(name: str, spec: ISpec, forms: List[str]):
    SPEC[name] = ISpec(**{**spec.__dict__, "forms": forms})

# Tipo RRR
_add("ADD",  ISpec("RRR", OP_ADD),  ["rA,rB,rC"])
_add("NAND", ISpec("RRR", OP_NAND), ["rA,rB,rC"])
_add("BEQ",  ISpec("RRR", OP_BEQ, writes_ra=False), ["rA,rB,rC"])  # salta a la dirección en rC

# Tipo RRI
_add("ADDI", ISpec("RRI", OP_ADDI), ["rA,rB,imm7"])
_add("SW",   ISpec("RRI", OP_SW, writes_ra=False), ["rA,rB,imm7"])
_add("LW",   ISpec("RRI", OP_LW), ["rA,rB,imm7"])
_add("JAL",  ISpec("RRI", OP_JAL), ["rA,rB", "rA,rB,imm7"])

# Tipo RI
_add("LUI",  ISpec("RI", OP_LUI), ["rA,imm10"])

OPCODE_TO_MNEMONIC: Dict[int, str] = {s.opcode: name for name, s in SPEC.items()}

# Pseudo-instrucciones y directivas
PSEUDOS = {"NOP", "LLI", "MOVI", "SYSCALL"}
DIRECTIVES = {".fill", ".space", ".text"}
ALIASES = {".syscall": "SYSCALL"}

def spec(mnemonic: str) -> ISpec:
    """Devuelve la especificación de una instrucción real por mnemónico."""
    m = mnemonic.upper()
    if m not in SPEC:
        raise KeyError(f"Instrucción desconocida: {mnemonic}")
    return SPEC[m]

def is_real(mnemonic: str) -> bool:
    return mnemonic.upper() in SPEC

def canonical_mnemonic(token: str) -> str:
    """'add' -> 'ADD', '.FILL' -> '.fill', '.syscall' -> 'SYSCALL'."""
    t = token.strip()
    t = t.lower() if t.startswith(".") else t.upper()
    return ALIASES.get(t, t)

def known_mnemonic(mnemonic: str) -> bool:
    m = canonical_mnemonic(mnemonic)
    return m in SPEC or m in PSEUDOS or m in DIRECTIVES

def syscall_code(token: str) -> int:
    """Código numérico de una syscall a partir de su nombre; KeyError si no existe."""
    return SYSCALLS[token.strip().lower()]

def syscall_entry(code: int, *, os_base: int = OS_BASE) -> int:
    """Dirección de entrada del manejador para 'code'."""
    return (os_base + code) & (MEMORY_WORDS - 1)
