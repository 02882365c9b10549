'''
Ensamblador Iridium: fuente -> palabras de 16 bits.
'''

from .assembler import AssembleResult, assemble, assemble_text, assemble_or_raise
from .diagnostics import AssemblyError, Diagnostic

__all__ = [
    "AssembleResult",
    "AssemblyError",
    "Diagnostic",
    "assemble",
    "assemble_or_raise",
    "assemble_text",
]
