"""
Run transactions: source text in, output and diagnostics out.
"""

from dataclasses import dataclass, field
from typing import List, Optional, TextIO

from .lexer import Lexer
from .parser import Parser
from .interpreter import Interpreter
from .errors import LoxError

LEX = "lex"
PARSE = "parse"
RUNTIME = "runtime"


@dataclass
class RunResult:
    """Outcome of one `Session.run` call. `stage` names where it failed."""

    stage: Optional[str] = None
    errors: List[LoxError] = field(default_factory=list)
    warnings: List[LoxError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.stage is None


class Session:
    """
    Governs a Lox session.

    The interpreter, and with it the global scope, lives as long as the
    session, so successive `run` calls see each other's variables. A failed
    run leaves earlier bindings untouched.
    """

    def __init__(self, output: Optional[TextIO] = None, filename: str = "<stdin>"):
        self.filename = filename
        self.interpreter = Interpreter(output, filename)

    @property
    def environment(self):
        return self.interpreter.environment

    def run(self, source: str) -> RunResult:
        """Lex, parse and execute `source`. Later stages are skipped once one fails."""
        lexer = Lexer(source, self.filename)
        tokens = lexer.tokenize()
        warnings = list(lexer.error_reporter.warnings)

        if lexer.error_reporter.has_errors():
            return RunResult(LEX, list(lexer.error_reporter.errors), warnings)

        parser = Parser(tokens, self.filename)
        statements = parser.parse()

        if parser.error_reporter.has_errors():
            return RunResult(PARSE, list(parser.error_reporter.errors), warnings)

        reporter = self.interpreter.error_reporter
        reporter.clear()
        if not self.interpreter.interpret(statements):
            return RunResult(RUNTIME, list(reporter.errors), warnings)

        return RunResult(warnings=warnings)
