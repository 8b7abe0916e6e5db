"""
Abstract Syntax Tree (AST) definitions for Lox.

Nodes are immutable and each one owns its children; the parser only ever
builds them bottom-up, so a tree never shares a subtree or forms a cycle.
"""

from dataclasses import dataclass
from typing import Any, List, Optional

from .token import Token


class Expr:
    """Base class for all expressions."""


@dataclass(frozen=True)
class Literal(Expr):
    value: Any


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Logical(Expr):
    """Short-circuiting `and` / `or`."""
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True)
class Variable(Expr):
    name: Token


class Stmt:
    """Base class for all statements."""


@dataclass(frozen=True)
class ExpressionStatement(Stmt):
    """Expression evaluated for its side effects."""
    expression: Expr


@dataclass(frozen=True)
class PrintStatement(Stmt):
    expression: Expr


@dataclass(frozen=True)
class VariableDeclaration(Stmt):
    name: Token
    initializer: Expr


@dataclass(frozen=True)
class Block(Stmt):
    statements: List[Stmt]


@dataclass(frozen=True)
class IfStatement(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@dataclass(frozen=True)
class WhileStatement(Stmt):
    condition: Expr
    body: Stmt
