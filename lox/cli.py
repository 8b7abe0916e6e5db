"""
Lox Command Line Interface
Provides REPL and file execution capabilities.
"""

import sys
import argparse

import lox
from .errors import ErrorReporter
from .session import Session, LEX, PARSE

EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70


def report(result, color=None):
    """Print the diagnostics of a RunResult to stderr."""
    reporter = ErrorReporter(color)
    reporter.errors.extend(result.errors)
    reporter.warnings.extend(result.warnings)
    reporter.print_warnings()
    reporter.print_errors()


def exit_code(result):
    """Map a RunResult to the process exit status."""
    if result.ok:
        return EX_OK
    if result.stage in (LEX, PARSE):
        return EX_DATAERR
    return EX_SOFTWARE


def repl(color=None):
    """Run the Lox REPL (Read-Eval-Print Loop)."""
    print(f"Lox {lox.__version__}")
    print("Type 'exit' or 'quit' to leave, 'help' for help.\n")

    # Variables persist across lines
    session = Session(filename="<repl>")

    while True:
        try:
            line = input("> ")
        except KeyboardInterrupt:
            print("\nKeyboardInterrupt")
            break
        except EOFError:
            print()
            break

        command = line.strip().lower()
        if command in ('exit', 'quit'):
            break
        if command == 'help':
            print_help()
            continue
        if command == '':
            continue

        report(session.run(line), color)


def print_help():
    """Print REPL help."""
    print("""
Lox REPL Help:
- Type any Lox statement to run it; statements end with ';'
- Use 'exit' or 'quit' to leave the REPL
- Press Ctrl+C or Ctrl+D to exit
- Variables persist across lines

Example usage:
  > var x = 5;
  > var y = 10;
  > print x + y;
  15
""")


def run_file(filename, color=None):
    """Run a Lox source file and return the exit status."""
    try:
        result = lox.run_file(filename)
    except OSError as e:
        print(f"Error reading file '{filename}': {e}", file=sys.stderr)
        return EX_NOINPUT

    report(result, color)
    return exit_code(result)


def main(argv=None):
    """Main entry point for the Lox CLI."""
    parser = argparse.ArgumentParser(
        prog="pylox",
        description="Lox Programming Language",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                      # Start REPL
  %(prog)s script.lox           # Run a Lox file
  %(prog)s -c "print 1 + 2;"    # Execute code directly
        """
    )

    parser.add_argument(
        'file',
        nargs='?',
        help='Lox source file to execute'
    )

    parser.add_argument(
        '-c', '--command',
        help='Execute a single command'
    )

    parser.add_argument(
        '--no-color',
        dest='color',
        action='store_const',
        const=False,
        default=None,
        help='Disable coloured diagnostics'
    )

    parser.add_argument(
        '-v', '--version',
        action='version',
        version=f'Lox {lox.__version__}'
    )

    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return EX_USAGE if e.code else EX_OK

    if args.command is not None and args.file is not None:
        print("pylox: give either a file or -c, not both", file=sys.stderr)
        return EX_USAGE

    if args.command is not None:
        result = lox.run_source(args.command, "<command>")
        report(result, args.color)
        return exit_code(result)

    if args.file is not None:
        return run_file(args.file, args.color)

    repl(args.color)
    return EX_OK


if __name__ == '__main__':
    sys.exit(main())
