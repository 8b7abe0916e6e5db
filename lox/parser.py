"""
Parser for the Lox language.

Recursive descent with one method per precedence level, lowest first:
assignment, logical or, logical and, equality, comparison, term, factor,
unary, primary. After a syntax error the parser skips to the next statement
boundary and carries on, so a single run reports every malformed statement.
"""

from typing import Callable, List, Optional, Tuple

from .token import Token
from .token_types import TokenType
from .ast_nodes import (
    Assign,
    Binary,
    Block,
    Expr,
    ExpressionStatement,
    Grouping,
    IfStatement,
    Literal,
    Logical,
    PrintStatement,
    Stmt,
    Unary,
    Variable,
    VariableDeclaration,
    WhileStatement,
)
from .errors import (
    ErrorReporter,
    InvalidAssignmentTarget,
    MissingClosingParen,
    ParseError,
    UnexpectedToken,
)

# Tokens that can start a statement; used to resynchronize after an error.
STATEMENT_KEYWORDS = {
    TokenType.CLASS,
    TokenType.FUNC,
    TokenType.VAR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
}

# Deepest nesting of expressions and statements the parser accepts.
# Every parenthesised level costs about eighteen Python frames, so this
# keeps parsing well inside the default recursion limit.
MAX_NESTING = 32


class Parser:
    """Recursive descent parser turning a token list into statements."""

    def __init__(self, tokens: List[Token], filename: Optional[str] = None):
        self.tokens = tokens
        self.filename = filename
        self.current = 0
        self.error_reporter = ErrorReporter()
        self.nesting = 0

    def is_at_end(self) -> bool:
        """Check if we're at the end of tokens."""
        return self.peek().type == TokenType.EOF

    def peek(self) -> Token:
        """Get current token without advancing."""
        return self.tokens[self.current]

    def previous(self) -> Token:
        """Get previous token."""
        return self.tokens[self.current - 1]

    def advance(self) -> Token:
        """Consume current token and return it."""
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def check(self, token_type: TokenType) -> bool:
        """Check if current token is of given type."""
        if self.is_at_end():
            return False
        return self.peek().type == token_type

    def match(self, *types: TokenType) -> bool:
        """Consume the current token if it matches any of the given types."""
        for token_type in types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def consume(self, token_type: TokenType, message: str, error_class=UnexpectedToken) -> Token:
        """Consume token of expected type or raise a parse error."""
        if self.check(token_type):
            return self.advance()

        raise self.error(error_class, self.peek(), message)

    def error(self, error_class, token: Token, message: str) -> ParseError:
        return self.error_reporter.error(error_class(token, message, self.filename))

    def synchronize(self):
        """Discard tokens until the start of the next statement."""
        self.advance()

        while not self.is_at_end():
            if self.previous().type == TokenType.SEMICOLON:
                return

            if self.peek().type in STATEMENT_KEYWORDS:
                return

            self.advance()

    def nested(self, parse_fn: Callable, message: str = "Expression nested too deeply."):
        """Call `parse_fn` one nesting level deeper, refusing past MAX_NESTING."""
        if self.nesting >= MAX_NESTING:
            raise self.error(UnexpectedToken, self.peek(), message)

        self.nesting += 1
        try:
            return parse_fn()
        finally:
            self.nesting -= 1

    def parse(self) -> List[Stmt]:
        """Parse tokens into a list of statements."""
        statements = []

        while not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        return statements

    def declaration(self) -> Optional[Stmt]:
        """Parse declaration, recovering at the next statement on error."""
        try:
            if self.match(TokenType.VAR):
                return self.variable_declaration()

            return self.statement()
        except ParseError:
            self.synchronize()
            return None

    def variable_declaration(self) -> VariableDeclaration:
        name = self.consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = Literal(None)
        if self.match(TokenType.EQUAL):
            initializer = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return VariableDeclaration(name, initializer)

    def statement(self) -> Stmt:
        """Parse statement."""
        if self.match(TokenType.PRINT):
            return self.print_statement()
        if self.match(TokenType.IF):
            return self.if_statement()
        if self.match(TokenType.WHILE):
            return self.while_statement()
        if self.match(TokenType.LEFT_BRACE):
            return Block(self.nested(self.block, "Statement nested too deeply."))

        return self.expression_statement()

    def print_statement(self) -> PrintStatement:
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return PrintStatement(value)

    def if_statement(self) -> IfStatement:
        """Parse if statement. An `else` belongs to the closest `if`."""
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.", MissingClosingParen)

        then_branch = self.nested(self.statement, "Statement nested too deeply.")
        else_branch = None
        if self.match(TokenType.ELSE):
            else_branch = self.nested(self.statement, "Statement nested too deeply.")

        return IfStatement(condition, then_branch, else_branch)

    def while_statement(self) -> WhileStatement:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.", MissingClosingParen)
        body = self.nested(self.statement, "Statement nested too deeply.")

        return WhileStatement(condition, body)

    def block(self) -> List[Stmt]:
        """Parse the statements of a block. The '{' is already consumed."""
        statements = []

        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def expression_statement(self) -> ExpressionStatement:
        expr = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ExpressionStatement(expr)

    def expression(self) -> Expr:
        return self.nested(self.assignment)

    def assignment(self) -> Expr:
        """Parse assignment expression. Right associative: a = b = c is a = (b = c)."""
        expr = self.logical_or()

        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.nested(self.assignment)

            if isinstance(expr, Variable):
                return Assign(expr.name, value)

            # Reported without unwinding; the statement is still well formed.
            self.error(InvalidAssignmentTarget, equals, "Invalid assignment target.")

        return expr

    def binary_chain(self, operand: Callable[[], Expr], node_class, *types: TokenType) -> Expr:
        """
        Parse a left associative chain `operand (op operand)*` for one
        precedence level, folding it into nested `node_class` nodes so that
        1 - 2 - 3 becomes (1 - 2) - 3.
        """
        expr = operand()

        while self.match(*types):
            operator = self.previous()
            right = operand()
            expr = node_class(expr, operator, right)

        return expr

    def logical_or(self) -> Expr:
        return self.binary_chain(self.logical_and, Logical, TokenType.OR)

    def logical_and(self) -> Expr:
        return self.binary_chain(self.equality, Logical, TokenType.AND)

    def equality(self) -> Expr:
        return self.binary_chain(self.comparison, Binary,
                                 TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def comparison(self) -> Expr:
        return self.binary_chain(self.term, Binary,
                                 TokenType.GREATER, TokenType.GREATER_EQUAL,
                                 TokenType.LESS, TokenType.LESS_EQUAL)

    def term(self) -> Expr:
        return self.binary_chain(self.factor, Binary, TokenType.MINUS, TokenType.PLUS)

    def factor(self) -> Expr:
        return self.binary_chain(self.unary, Binary, TokenType.SLASH, TokenType.STAR)

    def unary(self) -> Expr:
        """Parse unary expression. Prefix operators nest: !!x, --x."""
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            right = self.nested(self.unary)
            return Unary(operator, right)

        return self.primary()

    def primary(self) -> Expr:
        """Parse primary expression."""
        if self.match(TokenType.FALSE):
            return Literal(False)

        if self.match(TokenType.TRUE):
            return Literal(True)

        if self.match(TokenType.NIL):
            return Literal(None)

        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)

        if self.match(TokenType.IDENTIFIER):
            return Variable(self.previous())

        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.", MissingClosingParen)
            return Grouping(expr)

        raise self.error(UnexpectedToken, self.peek(), "Expect expression.")


def parse(tokens: List[Token], filename: Optional[str] = None) -> Tuple[List[Stmt], List[ParseError]]:
    """Parse `tokens` and return the statements together with any parse errors."""
    parser = Parser(tokens, filename)
    statements = parser.parse()
    return statements, list(parser.error_reporter.errors)
