"""
Error handling for the Lox interpreter.

Every failure raised by the lexer, parser or interpreter is a LoxError. The
pipeline stages collect them in an ErrorReporter and leave it to the caller
to decide how to print them and which exit status to use.
"""

import os
import sys

from termcolor import colored


class LoxError(Exception):
    """Base class for all Lox language errors."""

    label = "Error"

    def __init__(self, message, line=None, column=None, filename=None, lexeme=None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.filename = filename
        self.lexeme = lexeme

    @property
    def location(self):
        """Where the error happened, e.g. " at 'foo'" or " at end"."""
        if self.lexeme is None:
            return ""
        if self.lexeme == "":
            return " at end"
        return f" at '{self.lexeme}'"

    def __str__(self):
        prefix = f"[line {self.line}] " if self.line is not None else ""
        return f"{prefix}{self.label}{self.location}: {self.message}"


class LoxWarning(LoxError):
    """Non-fatal diagnostic."""

    label = "Warning"


class LexError(LoxError):
    """Error during lexical analysis."""


class UnexpectedCharacter(LexError):
    pass


class UnterminatedString(LexError):
    pass


class UnterminatedComment(LexError):
    pass


class ParseError(LoxError):
    """Error during parsing. Carries the offending token."""

    def __init__(self, token, message, filename=None):
        super().__init__(message, token.line, token.column, filename, token.lexeme)
        self.token = token


class UnexpectedToken(ParseError):
    pass


class MissingClosingParen(ParseError):
    pass


class InvalidAssignmentTarget(ParseError):
    pass


class LoxRuntimeError(LoxError):
    """Error during evaluation. Carries the operator or name token involved, if any."""

    def __init__(self, token, message, filename=None):
        line = token.line if token is not None else None
        column = token.column if token is not None else None
        super().__init__(message, line, column, filename)
        self.token = token


class TypeMismatch(LoxRuntimeError):
    pass


class UndefinedVariable(LoxRuntimeError):
    def __init__(self, token, filename=None):
        super().__init__(token, f"Undefined variable '{token.lexeme}'.", filename)
        self.name = token.lexeme


class DivisionByZero(LoxRuntimeError):
    pass


class StackOverflow(LoxRuntimeError):
    pass


def color_enabled(stream=None):
    """Colour diagnostics only for terminals, and never when NO_COLOR is set."""
    if "NO_COLOR" in os.environ:
        return False
    stream = stream if stream is not None else sys.stderr
    return hasattr(stream, "isatty") and stream.isatty()


class ErrorReporter:
    """Centralized error collection shared by the pipeline stages."""

    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, color=None):
        self.errors = []
        self.warnings = []
        self.color = color

    def error(self, error):
        """Record an error and hand it back, so callers can `raise reporter.error(...)`."""
        self.errors.append(error)
        return error

    def warning(self, message, line=None, column=None, filename=None):
        """Record a warning."""
        warning = LoxWarning(message, line, column, filename)
        self.warnings.append(warning)
        return warning

    def has_errors(self):
        return len(self.errors) > 0

    def has_warnings(self):
        return len(self.warnings) > 0

    def clear(self):
        """Clear all errors and warnings."""
        self.errors.clear()
        self.warnings.clear()

    def format(self, error, warning=False):
        """Render a diagnostic, coloured when the reporter allows it."""
        text = str(error)
        if self._use_color():
            return colored(text, self.WARNING if warning else self.ERROR, attrs=["bold"], force_color=True)
        return text

    def print_errors(self, file=None):
        """Print all errors to stderr."""
        for error in self.errors:
            print(self.format(error), file=file or sys.stderr)

    def print_warnings(self, file=None):
        """Print all warnings to stderr."""
        for warning in self.warnings:
            print(self.format(warning, warning=True), file=file or sys.stderr)

    def _use_color(self):
        if self.color is None:
            return color_enabled()
        return self.color
