# src/iridium_asm/parser.py
from __future__ import annotations
import logging
import re
from typing import Iterable, List, Tuple, Optional, Union

from .lexer import (
    split_comment,
    split_label,
    split_mnemonic_operands,
    split_operands,
    split_list,
)
from .ast import Line, Reg, Imm, LabelRef, Str, ImmList, Sym, Operand
from .isa import canonical_mnemonic
from .regs import REG_TO_NUM
from .utils import is_int_literal, parse_int
from .diagnostics import error, Diagnostic

log = logging.getLogger("iridium_asm.parser")

SYMBOL_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_ESCAPES = {"n": "\n", "t": "\t", "0": "\0", "\\": "\\", "'": "'", '"': '"'}

def _unescape(body: str) -> str:
    out = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\":
            if i + 1 >= len(body) or body[i + 1] not in _ESCAPES:
                raise ValueError(f"Secuencia de escape inválida en '{body}'")
            out.append(_ESCAPES[body[i + 1]])
            i += 2
            continue
        if not (0x20 <= ord(ch) <= 0x7E):
            raise ValueError(f"Carácter no ASCII imprimible: {ch!r}")
        out.append(ch)
        i += 1
    return "".join(out)

def _parse_char(token: str) -> Imm:
    if len(token) < 3 or not token.endswith("'"):
        raise ValueError(f"Carácter inválido: {token}")
    s = _unescape(token[1:-1])
    if len(s) != 1:
        raise ValueError(f"Se esperaba un único carácter entre comillas: {token}")
    return Imm(ord(s), origin="char")

def _parse_str(token: str) -> Str:
    if len(token) < 2 or not token.endswith('"'):
        raise ValueError(f"Cadena inválida: {token}")
    return Str(_unescape(token[1:-1]))

def _parse_reg(token: str) -> Reg:
    # nombres desconocidos se conservan con num=None para el validador
    name = token[1:].strip().lower()
    return Reg(name=name, num=REG_TO_NUM.get(name))

def _parse_label_ref(token: str) -> LabelRef:
    name = token[1:]
    if not SYMBOL_RE.match(name):
        raise ValueError(f"Referencia a etiqueta inválida: {token}")
    return LabelRef(name)

def _parse_list(token: str) -> ImmList:
    return ImmList(tuple(parse_operand(t) for t in split_list(token)))

def parse_operand(token: str) -> Operand:
    """Convierte un token en operando o lanza ValueError."""
    t = token.strip()
    if t.startswith("$"):
        return _parse_reg(t)
    if t.startswith("@"):
        return _parse_label_ref(t)
    if t.startswith("'"):
        return _parse_char(t)
    if t.startswith('"'):
        return _parse_str(t)
    if t.startswith("["):
        return _parse_list(t)
    if is_int_literal(t):
        return Imm(parse_int(t))
    if SYMBOL_RE.match(t):
        return Sym(t)
    raise ValueError(f"Operando inválido: '{t}'")

def parse_line(raw: str, lineno: int, *, filename: Optional[str] = None) -> Tuple[Optional[Line], List[Diagnostic]]:
    """Parsea una línea cruda.

    Devuelve (None, []) para líneas vacías o de solo comentario, (Line, []) si la
    línea es sintácticamente correcta y (None, [errores]) en otro caso.
    """
    core, comment = split_comment(raw)
    if not core:
        return None, []

    label, rest = split_label(core)
    if label is not None and not rest:
        return None, [error("MalformedLine", f"La etiqueta '{label}' no precede a ninguna instrucción",
                            line=lineno, file=filename, hint="escribe la etiqueta en la misma línea que la instrucción",
                            name=label)]

    mnemonic, op_str = split_mnemonic_operands(rest)
    if mnemonic.endswith(":"):
        if label is not None:
            msg = "Más de una etiqueta en la misma línea"
        else:
            msg = f"Nombre de etiqueta inválido: '{mnemonic[:-1]}'"
        return None, [error("MalformedLine", msg, line=lineno, file=filename)]

    try:
        tokens = split_operands(op_str)
    except ValueError as ex:
        return None, [error("MalformedLine", str(ex), line=lineno, file=filename)]

    operands: List[Operand] = []
    diags: List[Diagnostic] = []
    for tok in tokens:
        try:
            operands.append(parse_operand(tok))
        except ValueError as ex:
            diags.append(error("MalformedOperand", str(ex), line=lineno, file=filename, token=tok))
    if diags:
        return None, diags

    return Line(mnemonic=canonical_mnemonic(mnemonic), operands=tuple(operands), line=lineno,
                label=label, comment=comment), []

def parse(source: Union[str, Iterable[str]], *, filename: Optional[str] = None) -> Tuple[List[Line], List[Diagnostic]]:
    """
    Devuelve (lines, diagnostics) para todo el programa.

    Reglas:
      - Comentarios: '#' hasta fin de línea (salvo dentro de comillas).
      - Etiquetas: 'name:' al inicio de línea, seguida de la instrucción.
      - Operandos separados por comas y/o espacios.
      - Líneas vacías o solo con comentario no generan Line.
    Se parsean todas las líneas aunque alguna falle, para reportar todos los errores.
    """
    raw_lines = source.splitlines() if isinstance(source, str) else list(source)
    lines: List[Line] = []
    diags: List[Diagnostic] = []
    for lineno, raw in enumerate(raw_lines, start=1):
        ln, errs = parse_line(raw, lineno, filename=filename)
        diags.extend(errs)
        if ln is not None:
            lines.append(ln)
    log.debug("parse: %d líneas de fuente -> %d líneas, %d errores", len(raw_lines), len(lines), len(diags))
    return lines, diags
