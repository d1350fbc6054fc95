"""
Executa um arquivo Lox ou inicia o modo interativo.

    python -m lox script.lox
    python -m lox --ast script.lox      # escreve script.lox.ast.lox
    python -m lox
"""

import argparse
import logging
import sys
from pathlib import Path

from .lox import Lox
from .report import report
from .shell import Shell

# Códigos de saída no padrão sysexits.h
EX_OK = 0
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70


def run_file(path: str, show_ast: bool = False) -> int:
    try:
        source = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"lox: cannot read '{path}': {exc}", file=sys.stderr)
        return EX_NOINPUT

    lox = Lox(sys.stdout)
    if show_ast:
        stmts, diagnostics = lox.parse(source)
        if diagnostics:
            report(diagnostics, source, path, file=sys.stderr)
            return EX_DATAERR
        ast_path = Path(path + ".ast.lox")
        ast_path.write_text("".join(stmt.pretty() + "\n" for stmt in stmts), encoding="utf-8")
        return EX_OK

    result = lox.run(source)
    report(result.diagnostics, source, path, file=sys.stderr)
    if result.had_static_error:
        return EX_DATAERR
    if result.had_runtime_error:
        return EX_SOFTWARE
    return EX_OK


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="lox", description="Lox tree-walking interpreter.")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to interactive mode)", nargs="?")
    parser.add_argument("--debug", action="store_true", help="log each phase of the interpreter")
    parser.add_argument("--ast", action="store_true", help="write the parsed program to <file>.ast.lox instead of running it")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.file is not None:
        return run_file(args.file, show_ast=args.ast)

    Shell().cmdloop()
    return EX_OK


if __name__ == "__main__":
    sys.exit(main())
