"""
Lox scripting language: lexer, parser and tree-walking interpreter.
"""

__version__ = "0.1.0"

from .lexer import Lexer, scan
from .parser import Parser, parse
from .interpreter import Interpreter, stringify
from .environment import Environment
from .session import Session, RunResult
from .errors import LoxError, LexError, ParseError, LoxRuntimeError, ErrorReporter
from .token_types import TokenType
from .token import Token

__all__ = [
    "Lexer",
    "Parser",
    "Interpreter",
    "Environment",
    "Session",
    "RunResult",
    "LoxError",
    "LexError",
    "ParseError",
    "LoxRuntimeError",
    "ErrorReporter",
    "TokenType",
    "Token",
    "scan",
    "parse",
    "stringify",
    "run_source",
    "run_file",
]


def run_source(source_code, filename="<stdin>", output=None):
    """
    Run Lox source code in a fresh session.

    Args:
        source_code: The Lox source code to execute
        filename: Name used in diagnostics
        output: Stream `print` writes to, stdout by default

    Returns:
        The RunResult of the run
    """
    return Session(output, filename).run(source_code)


def run_file(filename, output=None):
    """
    Run a Lox source file.

    Raises OSError if the file cannot be read.
    """
    with open(filename, 'r', encoding='utf-8') as file:
        source_code = file.read()
    return run_source(source_code, filename, output)
