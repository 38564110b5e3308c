"""lox interpreter: runs .lox files, or starts command-line mode. Also uses the error handling context manager. Called
from the lox console script.

Basic program flow:
    1. Scanner: turns source text into tokens (see lox/lang/lexical.py)
    2. Parser: builds a syntax tree of statements from the tokens by recursive descent (see lox/lang/parser.py)
        - if either step found an error, nothing is executed
    3. Evaluator: walks the syntax tree and executes it directly, no bytecode (see lox/lang/evaluator.py)

Exit statuses for file runs: 64 for bad usage, 65 for lexical/syntax errors, 66 for unreadable files, 70 for runtime
errors.
"""

import argparse
import os
import sys

from lox.lang.error import ErrorHandler
from lox.lang.printer import AstPrinter
from lox.lang.session import Session
from lox.lang.shell import Shell

VERSION = "0.1.0"
USAGE_EXIT = 64


class ArgumentParser(argparse.ArgumentParser):
    """argparse.ArgumentParser that exits with USAGE_EXIT instead of 2 on bad usage."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(USAGE_EXIT, f"{self.prog}: error: {message}\n")


def dump(session, source, what):
    """Prints the tokens or the syntax tree of source instead of running it. Returns an exit status."""
    if what == "tokens":
        tokens, errors = session.scan(source)
        for token in tokens:
            print(token)
    else:
        statements, errors = session.parse(source)
        if not errors:
            printer = AstPrinter()
            for stmt in statements:
                print(printer.print(stmt))

    return 65 if errors else 0


def main(argv=None):
    """Runs lox interpreter. Called from lox console script."""
    parser = ArgumentParser(prog="lox", description="Tree-walking interpreter for the lox scripting language.")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--dump", choices=["tokens", "ast"], help="print the tokens or syntax tree of file, don't run it")
    parser.add_argument("--no-color", action="store_true", help="disable colored error messages")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    args = parser.parse_args(argv)

    if args.no_color:
        os.environ["NO_COLOR"] = "1"  # honored by termcolor

    with ErrorHandler(fatal=args.file is not None) as error_handler:
        sess = Session(error_handler)

        if args.file is None:
            if args.dump:
                parser.error("--dump requires a file")
            Shell(sess).cmdloop()
            return

        if args.dump:
            sys.exit(dump(sess, Session.read(args.file), args.dump))

        sys.exit(sess.run_file(args.file))


if __name__ == "__main__":
    main()
