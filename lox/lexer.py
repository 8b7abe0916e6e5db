"""
Lexical analyzer for the Lox language.

Turns source text into a list of tokens, skipping whitespace and comments.
Errors are recorded on the lexer's ErrorReporter and scanning carries on,
so one pass reports every bad character in the source.
"""

from typing import List, Optional, Tuple

from .token import Token
from .token_types import TokenType, KEYWORDS, SINGLE_CHAR_TOKENS, EQUAL_SUFFIXED_TOKENS
from .errors import (
    ErrorReporter,
    LexError,
    UnexpectedCharacter,
    UnterminatedComment,
    UnterminatedString,
)

ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '\\': '\\',
    '"': '"',
    '0': '\0',
}


def is_digit(char: Optional[str]) -> bool:
    return char is not None and "0" <= char <= "9"


class Lexer:
    """
    Single pass scanner over the source text.

    `start` marks the first character of the lexeme being scanned and
    `current` the character under consideration.
    """

    def __init__(self, source_code: str, filename: Optional[str] = None):
        self.source = source_code
        self.filename = filename
        self.start = 0
        self.current = 0
        self.line = 1
        self.line_start = 0
        self.start_line = 1
        self.start_column = 1
        self.tokens: List[Token] = []
        self.error_reporter = ErrorReporter()

    def is_at_end(self) -> bool:
        return self.current >= len(self.source)

    def current_char(self) -> Optional[str]:
        """Get current character or None if at end."""
        if self.is_at_end():
            return None
        return self.source[self.current]

    def peek_char(self, offset: int = 1) -> Optional[str]:
        """Peek at character at current position + offset."""
        pos = self.current + offset
        if pos >= len(self.source):
            return None
        return self.source[pos]

    def advance(self) -> Optional[str]:
        """Consume the current character and return it."""
        if self.is_at_end():
            return None

        char = self.source[self.current]
        self.current += 1

        if char == '\n':
            self.line += 1
            self.line_start = self.current

        return char

    def match(self, expected: str) -> bool:
        """Consume the current character only if it is `expected`."""
        if self.current_char() != expected:
            return False
        self.advance()
        return True

    def add_token(self, token_type: TokenType, literal=None):
        lexeme = self.source[self.start:self.current]
        self.tokens.append(Token(token_type, lexeme, literal, self.start_line, self.start_column))

    def error(self, error_class, message: str) -> LexError:
        return self.error_reporter.error(
            error_class(message, self.start_line, self.start_column, self.filename)
        )

    def skip_line_comment(self):
        """Skip a // comment up to, but not including, the newline."""
        while self.current_char() is not None and self.current_char() != '\n':
            self.advance()

    def skip_block_comment(self):
        """Skip a /* ... */ comment. Block comments nest."""
        depth = 1
        while depth > 0 and not self.is_at_end():
            if self.current_char() == '/' and self.peek_char() == '*':
                self.advance()
                self.advance()
                depth += 1
            elif self.current_char() == '*' and self.peek_char() == '/':
                self.advance()
                self.advance()
                depth -= 1
            else:
                self.advance()

        if depth > 0:
            self.error(UnterminatedComment, "Unterminated block comment.")

    def read_string(self):
        """Read a string literal. The opening quote is already consumed."""
        value = ""

        while self.current_char() is not None and self.current_char() != '"':
            char = self.advance()

            if char == '\\' and not self.is_at_end():
                escape_line = self.line
                escape_column = self.current - self.line_start
                next_char = self.advance()
                if next_char in ESCAPES:
                    value += ESCAPES[next_char]
                else:
                    # Unknown escape, keep both characters
                    value += char + next_char
                    self.error_reporter.warning(
                        f"Unknown escape sequence '\\{next_char}'.",
                        escape_line, escape_column, self.filename
                    )
            else:
                value += char

        if self.is_at_end():
            self.error(UnterminatedString, "Unterminated string.")
            return

        self.advance()  # Closing quote
        self.add_token(TokenType.STRING, value)

    def read_number(self):
        """Read a number literal. A trailing '.' needs a digit after it to belong to the number."""
        while is_digit(self.current_char()):
            self.advance()

        if self.current_char() == '.' and is_digit(self.peek_char()):
            self.advance()
            while is_digit(self.current_char()):
                self.advance()

        self.add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def read_identifier(self):
        """Read identifier or keyword."""
        while self.current_char() is not None and (self.current_char().isalnum() or self.current_char() == '_'):
            self.advance()

        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def scan_token(self):
        char = self.advance()

        if char in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[char])

        elif char in EQUAL_SUFFIXED_TOKENS:
            single, double = EQUAL_SUFFIXED_TOKENS[char]
            self.add_token(double if self.match('=') else single)

        elif char == '/':
            if self.match('/'):
                self.skip_line_comment()
            elif self.match('*'):
                self.skip_block_comment()
            else:
                self.add_token(TokenType.SLASH)

        elif char in ' \r\t\n':
            pass

        elif char == '"':
            self.read_string()

        elif is_digit(char):
            self.read_number()

        elif char.isalpha() or char == '_':
            self.read_identifier()

        else:
            self.error(UnexpectedCharacter, f"Unexpected character '{char}'.")

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code.
        The returned list always ends with an EOF token.
        """
        self.start = self.current = self.line_start = 0
        self.line = 1
        self.tokens = []
        self.error_reporter.clear()

        while not self.is_at_end():
            self.start = self.current
            self.start_line = self.line
            self.start_column = self.current - self.line_start + 1
            self.scan_token()

        self.tokens.append(
            Token(TokenType.EOF, "", None, self.line, self.current - self.line_start + 1)
        )
        return self.tokens


def scan(source: str, filename: Optional[str] = None) -> Tuple[List[Token], List[LexError]]:
    """Scan `source` and return its tokens together with any lex errors."""
    lexer = Lexer(source, filename)
    tokens = lexer.tokenize()
    return tokens, list(lexer.error_reporter.errors)
