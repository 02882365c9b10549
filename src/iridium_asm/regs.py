'''
mapeo de nombres de registro ↔ índice de campo, validaciones
'''

from __future__ import annotations
from typing import Dict

# '$zero' ocupa el índice 0 del campo de 3 bits; $r0..$r6 van de 1 a 7
REG_TO_NUM: Dict[str, int] = {
    "zero": 0,
    "r0": 1, "r1": 2, "r2": 3, "r3": 4, "r4": 5, "r5": 6, "r6": 7,
}

NUM_TO_REG: Dict[int, str] = {v: k for k, v in REG_TO_NUM.items()}

ZERO = "zero"

def is_reg(token: str) -> bool:
    """Indica si el token representa un registro válido ('$r3', 'r3', '$zero')."""
    try:
        normalize_reg(token)
        return True
    except ValueError:
        return False

def normalize_reg(token: str) -> str:
    """Devuelve el nombre canónico sin '$' ('r3', 'zero') o lanza ValueError."""
    t = token.strip().lower()
    if t.startswith("$"):
        t = t[1:]
    if t in REG_TO_NUM:
        return t
    raise ValueError(f"Registro inválido: {token}")

def reg_num(token: str) -> int:
    """Devuelve el índice 0..7 del registro en los campos rA/rB/rC."""
    return REG_TO_NUM[normalize_reg(token)]

def reg_name(num: int) -> str:
    """Nombre en ensamblador ('$r3') de un índice de campo."""
    if num not in NUM_TO_REG:
        raise ValueError(f"Índice de registro fuera de rango: {num}")
    return "$" + NUM_TO_REG[num]

def is_zero(token: str) -> bool:
    try:
        return normalize_reg(token) == ZERO
    except ValueError:
        return False
