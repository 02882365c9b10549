'''
bit-twiddling (u16, sign_extend, rangos de N bits, literales numéricos)
'''

from __future__ import annotations
import re
from typing import Tuple

# Máscara para 16 bits sin signo
U16_MASK = 0xFFFF

INT_LITERAL_RE = re.compile(r"^(?P<sign>[+-]?)(?:(?P<hex>0[xX][0-9a-fA-F]+)|(?P<bin>0[bB][01]+)|(?P<dec>[0-9]+))$")

def u16(x: int) -> int:
    """Fuerza el valor al rango de 16 bits sin signo."""
    return x & U16_MASK

def sign_extend(x: int, bits: int) -> int:
    """Extiende el signo de x, asumiendo que cabe en 'bits' bits (complemento a dos)."""
    if bits <= 0:
        raise ValueError("bits debe ser positivo")
    mask = (1 << bits) - 1
    x &= mask
    sign_bit = 1 << (bits - 1)
    return (x ^ sign_bit) - sign_bit

def signed_range(n: int) -> Tuple[int, int]:
    """Rango [min, max] de un entero con signo de n bits."""
    if n <= 0:
        raise ValueError("n debe ser positivo")
    return -(1 << (n - 1)), (1 << (n - 1)) - 1

def unsigned_range(n: int) -> Tuple[int, int]:
    """Rango [min, max] de un entero sin signo de n bits."""
    if n <= 0:
        raise ValueError("n debe ser positivo")
    return 0, (1 << n) - 1

def is_unsigned_nbit(x: int, n: int) -> bool:
    """Devuelve True si x está en [0, 2^n) (sin signo de n bits)."""
    lo, hi = unsigned_range(n)
    return lo <= x <= hi

def is_signed_nbit(x: int, n: int) -> bool:
    """Devuelve True si x está en [-(2^(n-1)), 2^(n-1)-1] (con signo de n bits)."""
    lo, hi = signed_range(n)
    return lo <= x <= hi

def parse_int(token: str) -> int:
    """Convierte un literal decimal, 0b binario o 0x hexadecimal (con signo opcional).

    A diferencia de int(x, 0) acepta ceros a la izquierda en decimal ('007').
    Lanza ValueError si el token no es un literal válido.
    """
    m = INT_LITERAL_RE.match(token.strip())
    if not m:
        raise ValueError(f"Literal numérico inválido: {token}")
    if m.group("hex"):
        value = int(m.group("hex")[2:], 16)
    elif m.group("bin"):
        value = int(m.group("bin")[2:], 2)
    else:
        value = int(m.group("dec"), 10)
    return -value if m.group("sign") == "-" else value

def is_int_literal(token: str) -> bool:
    return INT_LITERAL_RE.match(token.strip()) is not None

def to_bin16(x: int) -> str:
    """Representación binaria de 16 bits (cadena)."""
    return format(u16(x), "016b")

def to_hex16(x: int, *, prefix: bool = True) -> str:
    """Representación hexadecimal de 16 bits (cadena), con o sin prefijo 0x."""
    s = format(u16(x), "04x")
    return ("0x" + s) if prefix else s

def split_bits(value: int, positions: Tuple[Tuple[int, int], ...]) -> tuple[int, ...]:
    """Extrae campos de bits dados como rangos (hi, lo) inclusivos (base 0)."""
    out = []
    for hi, lo in positions:
        if hi < lo or hi < 0 or lo < 0:
            raise ValueError("rango de bits inválido")
        width = hi - lo + 1
        field = (value >> lo) & ((1 << width) - 1)
        out.append(field)
    return tuple(out)

def high10(value: int) -> int:
    """Los 10 bits altos de una palabra de 16 bits (campo de LUI)."""
    return (u16(value) >> 6) & 0x3FF

def low6(value: int) -> int:
    """Los 6 bits bajos de una palabra (campo de LLI)."""
    return value & 0x3F
