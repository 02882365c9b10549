from __future__ import annotations
import re
from typing import List, Optional, Tuple

COMMENT_CHAR = "#"
QUOTES = ("'", '"')

def split_comment(line: str) -> Tuple[str, Optional[str]]:
    """Split 'code # comment' into (code, comment). '#' inside quotes is not a comment."""
    quote = None
    escaped = False
    for i, ch in enumerate(line):
        if quote:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = None
            continue
        if ch in QUOTES:
            quote = ch
        elif ch == COMMENT_CHAR:
            return line[:i].strip(), line[i + 1:].strip()
    return line.strip(), None

def strip_comment(line: str) -> str:
    """Remove a trailing '#' comment"""
    return split_comment(line)[0]

LABEL_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*):\s*(.*)$")

def split_label(line: str):
    """Return (label, rest) if line has 'label:', else (None, line)."""
    m = LABEL_RE.match(line)
    if not m:
        return None, line
    return m.group(1), m.group(2).strip()

def is_directive(line: str) -> bool:
    return line.strip().startswith('.')

def split_mnemonic_operands(line: str):
    s = line.strip()
    if not s:
        return "", ""
    parts = s.split(None, 1)
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1].strip()

def split_operands(op_str: str) -> List[str]:
    """Split operands on commas and/or whitespace.

    Quoted strings/chars and bracketed lists stay whole: '.space 3 [1, 2]'
    gives ['3', '[1, 2]']. Raises ValueError on an unclosed quote or bracket.
    """
    out: List[str] = []
    cur: List[str] = []
    quote = None
    escaped = False
    depth = 0

    def flush():
        s = ''.join(cur).strip()
        if s:
            out.append(s)
        cur.clear()

    for ch in op_str:
        if quote:
            cur.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = None
            continue
        if ch in QUOTES:
            quote = ch
            cur.append(ch)
        elif ch == '[':
            depth += 1
            cur.append(ch)
        elif ch == ']':
            if depth == 0:
                raise ValueError("']' sin '[' de apertura")
            depth -= 1
            cur.append(ch)
        elif (ch == ',' or ch.isspace()) and depth == 0:
            flush()
        else:
            cur.append(ch)
    if quote:
        raise ValueError(f"comilla {quote} sin cerrar")
    if depth:
        raise ValueError("'[' sin ']' de cierre")
    flush()
    return out

def split_list(token: str) -> List[str]:
    """Items of a bracketed list token: '[1, 'a', 0x2]' -> ['1', "'a'", '0x2']."""
    t = token.strip()
    if not (t.startswith('[') and t.endswith(']')):
        raise ValueError(f"lista inválida: {token}")
    return split_operands(t[1:-1])
