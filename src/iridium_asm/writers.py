from __future__ import annotations
from typing import Iterable, List, Literal
from .utils import to_hex16, to_bin16
from .encoding import Encoded, decode

ByteOrder = Literal["big", "little"]

def to_hex_lines(words: Iterable[Encoded]) -> List[str]:
    return [to_hex16(w.word) for w in words]

def to_bin_lines(words: Iterable[Encoded]) -> List[str]:
    return [to_bin16(w.word) for w in words]

def to_listing_lines(words: Iterable[Encoded]) -> List[str]:
    """'dirección: palabra  instrucción' por palabra, para depurar."""
    out = []
    for w in words:
        text = f".fill {w.word:#06x}" if w.mnemonic == ".fill" else str(decode(w.word))
        out.append(f"{w.address:04x}: {to_hex16(w.word)}  {text}  # línea {w.line}")
    return out

def to_bytes(words: Iterable[Encoded], byteorder: ByteOrder = "big") -> bytes:
    """Imagen binaria: dos bytes por palabra, empezando en la dirección 0."""
    return b"".join(w.word.to_bytes(2, byteorder) for w in words)

def _write_lines(lines: List[str], path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")

def write_hex(words: Iterable[Encoded], path: str) -> None:
    _write_lines(to_hex_lines(words), path)

def write_bin(words: Iterable[Encoded], path: str) -> None:
    _write_lines(to_bin_lines(words), path)

def write_listing(words: Iterable[Encoded], path: str) -> None:
    _write_lines(to_listing_lines(words), path)

def write_image(words: Iterable[Encoded], path: str, *, byteorder: ByteOrder = "big") -> None:
    with open(path, "wb") as f:
        f.write(to_bytes(words, byteorder))
