from __future__ import annotations
import argparse, logging, os, sys
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Union

from .ast import Line
from .diagnostics import AssemblyError, Diagnostic, has_errors
from .encoding import Encoded, encode
from .isa import OS_BASE, SAVE_BASE
from .linker import first_pass
from .parser import parse
from .pseudo import expand
from .resolver import resolve
from .validator import validate
from .writers import write_bin, write_hex, write_image, write_listing

log = logging.getLogger("iridium_asm.assembler")

@dataclass(frozen=True)
class AssembleResult:
    """Resultado completo: o todas las palabras, o ninguna y los diagnósticos."""
    words: List[Encoded] = field(default_factory=list)
    lines: List[Line] = field(default_factory=list)
    symtab: Dict[str, int] = field(default_factory=dict)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not has_errors(self.diagnostics)

    @property
    def values(self) -> List[int]:
        return [w.word for w in self.words]

def assemble(
    source: Union[str, Iterable[str]],
    *,
    filename: Optional[str] = None,
    os_base: int = OS_BASE,
    save_base: int = SAVE_BASE,
) -> AssembleResult:
    """Parsea y valida (reportando todos los errores), expande pseudos, hace
    PASADA 1 (direcciones), resuelve etiquetas y codifica.

    Cada etapa recorre el programa entero antes de la siguiente; si una etapa
    produce errores no se ejecutan las siguientes y no se devuelven palabras.
    """
    lines, diags = parse(source, filename=filename)
    diags += validate(lines, filename=filename)
    if has_errors(diags):
        log.info("%s: %d errores de parseo/validación", filename or "<fuente>", len(diags))
        return AssembleResult(lines=lines, diagnostics=diags)

    expanded = expand(lines, os_base=os_base, save_base=save_base)

    link = first_pass(expanded, filename=filename)
    if has_errors(link.diagnostics):
        return AssembleResult(lines=link.lines, symtab=link.symtab, diagnostics=diags + link.diagnostics)

    res = resolve(link.lines, link.symtab, filename=filename)
    if has_errors(res.diagnostics):
        return AssembleResult(lines=res.lines, symtab=link.symtab, diagnostics=diags + res.diagnostics)

    enc = encode(res.lines)
    log.info("%s: %d palabras, %d etiquetas", filename or "<fuente>", len(enc.words), len(link.symtab))
    return AssembleResult(words=enc.words, lines=res.lines, symtab=link.symtab, diagnostics=diags)

def assemble_text(text: str, **kwargs) -> AssembleResult:
    """Ensambla un fuente completo dado como una sola cadena."""
    return assemble(text.splitlines(), **kwargs)

def assemble_or_raise(source: Union[str, Iterable[str]], **kwargs) -> List[int]:
    """Devuelve las palabras del programa o lanza AssemblyError."""
    result = assemble(source, **kwargs)
    if not result.ok:
        raise AssemblyError([d for d in result.diagnostics if d.severity == "error"])
    return result.values

# ---------------- CLI ----------------

def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )

def _int_arg(text: str) -> int:
    return int(text, 0)

def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Ensamblador Iridium (16 bits, 8 instrucciones)")
    ap.add_argument("source", help="archivo .asm de entrada")
    ap.add_argument("output", help="archivo de salida")
    ap.add_argument("--format", choices=("image", "hex", "bin"), default="image",
                    help="image: 2 bytes por palabra; hex/bin: una palabra por línea en texto")
    ap.add_argument("--endian", choices=("big", "little"), default="big", help="orden de bytes de --format image")
    ap.add_argument("--listing", help="escribe además un listado dirección/palabra/instrucción")
    ap.add_argument("--os-base", type=_int_arg, default=OS_BASE, help="dirección del manejador de syscalls")
    ap.add_argument("--save-base", type=_int_arg, default=SAVE_BASE,
                    help="desplazamiento de la ranura de guardado de $r0 respecto a $zero")
    ap.add_argument("--log-level", default=os.environ.get("IRIDIUM_ASM_LOG", "WARNING"),
                    help="nivel de logging (por defecto WARNING)")
    return ap

def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    _configure_logging(args.log_level)

    try:
        with open(args.source, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as ex:
        print(f"ERROR: no pude leer {args.source}: {ex}", file=sys.stderr)
        return 2

    try:
        result = assemble_text(text, filename=args.source, os_base=args.os_base, save_base=args.save_base)
    except ValueError as ex:
        print(f"ERROR: {ex}", file=sys.stderr)
        return 2

    for d in result.diagnostics:
        print(d, file=sys.stderr)
    if not result.ok:
        return 1

    try:
        if args.format == "hex":
            write_hex(result.words, args.output)
        elif args.format == "bin":
            write_bin(result.words, args.output)
        else:
            write_image(result.words, args.output, byteorder=args.endian)
        if args.listing:
            write_listing(result.words, args.listing)
    except OSError as ex:
        print(f"ERROR al escribir salidas: {ex}", file=sys.stderr)
        return 3

    print(f"OK: {len(result.words)} palabras → {args.output}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
