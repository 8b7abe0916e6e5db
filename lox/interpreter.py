"""
Tree-walking interpreter for Lox.

Runtime values are plain Python objects: float for numbers, str, bool and
None for nil.
"""

from typing import Any, List, Optional, TextIO

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
from .environment import Environment
from .errors import DivisionByZero, ErrorReporter, LoxRuntimeError, StackOverflow, TypeMismatch

ARITHMETIC = {
    TokenType.MINUS: lambda a, b: a - b,
    TokenType.STAR: lambda a, b: a * b,
    TokenType.SLASH: lambda a, b: a / b,
}

COMPARISON = {
    TokenType.GREATER: lambda a, b: a > b,
    TokenType.GREATER_EQUAL: lambda a, b: a >= b,
    TokenType.LESS: lambda a, b: a < b,
    TokenType.LESS_EQUAL: lambda a, b: a <= b,
}


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_truthy(value: Any) -> bool:
    """nil and false are falsy, everything else is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left: Any, right: Any) -> bool:
    """Values of different kinds are never equal, so true != 1."""
    if is_number(left) and is_number(right):
        return left == right
    if type(left) is not type(right):
        return False
    return left == right


def stringify(value: Any) -> str:
    """Render a runtime value the way `print` shows it."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        # Past 1e16 floats stop being exact integers; use exponent notation.
        if float(value).is_integer() and abs(value) < 1e16:
            return str(int(value))
        return repr(float(value))
    return str(value)


class Interpreter:
    """
    Executes statements against a persistent Environment.

    The same interpreter can run several programs in a row; bindings made by
    one `interpret` call are visible to the next, which is what the REPL
    relies on.
    """

    def __init__(self, output: Optional[TextIO] = None, filename: Optional[str] = None):
        self.environment = Environment()
        self.output = output
        self.filename = filename
        self.error_reporter = ErrorReporter()

    def interpret(self, statements: List[Stmt]) -> bool:
        """Run statements in order. Stops at the first runtime error and records it."""
        try:
            for statement in statements:
                self.execute(statement)
        except LoxRuntimeError as e:
            if e.filename is None:
                e.filename = self.filename
            self.error_reporter.error(e)
            return False
        except RecursionError:
            # Blocks have already popped their scopes on the way out.
            self.error_reporter.error(
                StackOverflow(None, "Expression nested too deeply to evaluate.", self.filename)
            )
            return False
        return True

    def execute(self, stmt: Stmt):
        if isinstance(stmt, ExpressionStatement):
            self.evaluate(stmt.expression)
        elif isinstance(stmt, PrintStatement):
            value = self.evaluate(stmt.expression)
            print(stringify(value), file=self.output)
        elif isinstance(stmt, VariableDeclaration):
            value = self.evaluate(stmt.initializer)
            self.environment.define(stmt.name.lexeme, value)
        elif isinstance(stmt, Block):
            self.execute_block(stmt.statements)
        elif isinstance(stmt, IfStatement):
            if is_truthy(self.evaluate(stmt.condition)):
                self.execute(stmt.then_branch)
            elif stmt.else_branch is not None:
                self.execute(stmt.else_branch)
        elif isinstance(stmt, WhileStatement):
            while is_truthy(self.evaluate(stmt.condition)):
                self.execute(stmt.body)
        else:
            raise TypeError(f"Unknown statement type: {type(stmt).__name__}")

    def execute_block(self, statements: List[Stmt]):
        """Execute statements in a new child scope."""
        self.environment.push_scope()
        try:
            for statement in statements:
                self.execute(statement)
        finally:
            self.environment.pop_scope()

    def evaluate(self, expr: Expr) -> Any:
        if isinstance(expr, Literal):
            return expr.value
        if isinstance(expr, Grouping):
            return self.evaluate(expr.expression)
        if isinstance(expr, Unary):
            return self.evaluate_unary(expr)
        if isinstance(expr, Binary):
            return self.evaluate_binary(expr)
        if isinstance(expr, Logical):
            left = self.evaluate(expr.left)
            if expr.operator.type == TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(expr.right)
        if isinstance(expr, Variable):
            return self.environment.get(expr.name)
        if isinstance(expr, Assign):
            value = self.evaluate(expr.value)
            self.environment.assign(expr.name, value)
            return value
        raise TypeError(f"Unknown expression type: {type(expr).__name__}")

    def evaluate_unary(self, expr: Unary) -> Any:
        right = self.evaluate(expr.right)

        if expr.operator.type == TokenType.MINUS:
            check_number_operand(expr.operator, right)
            return -right
        if expr.operator.type == TokenType.BANG:
            return not is_truthy(right)

        raise TypeError(f"Unknown unary operator: {expr.operator.lexeme}")

    def evaluate_binary(self, expr: Binary) -> Any:
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        operator = expr.operator
        op = operator.type

        if op == TokenType.PLUS:
            if is_number(left) and is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise TypeMismatch(operator, "Operands of '+' must be two numbers or two strings.")

        if op in ARITHMETIC:
            check_number_operands(operator, left, right)
            if op == TokenType.SLASH and right == 0:
                raise DivisionByZero(operator, "Division by zero.")
            return ARITHMETIC[op](left, right)

        if op in COMPARISON:
            check_number_operands(operator, left, right)
            return COMPARISON[op](left, right)

        if op == TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if op == TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        raise TypeError(f"Unknown binary operator: {operator.lexeme}")


def check_number_operand(operator: Token, operand: Any):
    if not is_number(operand):
        raise TypeMismatch(operator, f"Operand of '{operator.lexeme}' must be a number.")


def check_number_operands(operator: Token, left: Any, right: Any):
    if not (is_number(left) and is_number(right)):
        raise TypeMismatch(operator, f"Operands of '{operator.lexeme}' must be numbers.")
