'''
clase Diagnostic y helpers (línea/columna, tipos de error, AssemblyError)
'''

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional

# Severidad de los diagnósticos (en español)
Severity = Literal["error", "advertencia", "nota"]

Stage = Literal["parse", "validation", "resolution"]

_SEV_TO_LABEL = {
    "error": "ERROR",
    "advertencia": "ADVERTENCIA",
    "nota": "NOTA",
}

# Clase de error -> etapa que lo produce
KIND_STAGE: Dict[str, Stage] = {
    "MalformedLine": "parse",
    "MalformedOperand": "parse",
    "WrongOperandCount": "validation",
    "OperandKindMismatch": "validation",
    "ImmediateOutOfRange": "validation",
    "UnknownMnemonic": "validation",
    "InvalidRegister": "validation",
    "ReadOnlyRegisterWrite": "validation",
    "UnknownSyscall": "validation",
    "SpaceSizeTooSmall": "validation",
    "DuplicateLabel": "validation",
    "UndefinedLabel": "resolution",
    "AddressOutOfRange": "resolution",
    "ProgramTooLarge": "resolution",
}

@dataclass(frozen=True)
class Diagnostic:
    """Estructura de un diagnóstico para reportar problemas.

    Abarca errores, advertencias y notas, con ubicación opcional (archivo, línea y columna),
    una clase (kind) estable para uso programático, los datos estructurados del error
    (detail, p.ej. {'got': 64, 'min': -64, 'max': 63}) y un mensaje de ayuda (pista).
    """
    severity: Severity
    kind: str
    message: str
    line: Optional[int] = None
    col: Optional[int] = None
    hint: Optional[str] = None
    file: Optional[str] = None
    detail: Mapping[str, Any] = field(default_factory=dict, hash=False)

    @property
    def stage(self) -> Optional[Stage]:
        return KIND_STAGE.get(self.kind)

    def __str__(self) -> str:
        loc = ""
        if self.file is not None:
            loc += f"{self.file}:"
        if self.line is not None:
            loc += f"{self.line}"
            if self.col is not None:
                loc += f":{self.col}"
        if loc:
            loc += ": "
        sev = _SEV_TO_LABEL.get(self.severity, str(self.severity).upper())
        core = f"{sev} [{self.kind}]: {self.message}"
        if self.hint:
            core += f"  (pista: {self.hint})"
        return loc + core

def error(kind: str, message: str, *, line: int | None = None, col: int | None = None,
          file: str | None = None, hint: str | None = None, **detail: Any) -> Diagnostic:
    """Crea un diagnóstico de tipo error."""
    return Diagnostic("error", kind, message, line, col, hint, file, detail)

def warning(kind: str, message: str, *, line: int | None = None, col: int | None = None,
            file: str | None = None, hint: str | None = None, **detail: Any) -> Diagnostic:
    """Crea un diagnóstico de tipo advertencia."""
    return Diagnostic("advertencia", kind, message, line, col, hint, file, detail)

def note(kind: str, message: str, *, line: int | None = None, col: int | None = None,
         file: str | None = None, hint: str | None = None, **detail: Any) -> Diagnostic:
    """Crea un diagnóstico de tipo nota."""
    return Diagnostic("nota", kind, message, line, col, hint, file, detail)

def has_errors(diags: Iterable[Diagnostic]) -> bool:
    return any(d.severity == "error" for d in diags)

class AssemblyError(Exception):
    """El programa no pudo ensamblarse; diagnostics contiene todos los errores."""

    def __init__(self, diagnostics: Iterable[Diagnostic]):
        self.diagnostics: List[Diagnostic] = list(diagnostics)
        first = self.diagnostics[0] if self.diagnostics else None
        msg = str(first) if first else "ensamblado fallido"
        if len(self.diagnostics) > 1:
            msg += f" (y {len(self.diagnostics) - 1} más)"
        super().__init__(msg)
