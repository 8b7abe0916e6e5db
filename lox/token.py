"""
Token class for representing lexical tokens.
"""

from dataclasses import dataclass
from typing import Any

from .token_types import TokenType, KEYWORDS


@dataclass(frozen=True)
class Token:
    """A single lexical token with its source position."""

    type: TokenType
    lexeme: str
    literal: Any = None
    line: int = 1
    column: int = 1

    def __str__(self):
        return f"Token({self.type.name}, {self.lexeme!r}, {self.line}:{self.column})"

    def is_type(self, token_type):
        """Check if token is of specified type."""
        return self.type == token_type

    def is_literal(self):
        """Check if token is a literal value."""
        return self.type in {
            TokenType.NUMBER,
            TokenType.STRING,
            TokenType.TRUE,
            TokenType.FALSE,
            TokenType.NIL,
        }

    def is_keyword(self):
        """Check if token is a keyword."""
        return self.type in KEYWORDS.values()
