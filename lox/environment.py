"""
Variable storage with lexical scope management.
"""

from typing import Any, Dict, List, Optional

from .token import Token
from .errors import UndefinedVariable


class Scope:
    """One scope record. `parent` is the index of the enclosing scope."""

    __slots__ = ("values", "parent")

    def __init__(self, parent: Optional[int] = None):
        self.values: Dict[str, Any] = {}
        self.parent = parent


class Environment:
    """
    Chain of scopes kept in a flat list and addressed by index.

    Index 0 is the global scope. Every block pushes a child of the current
    scope and pops it when it ends; lookups walk the parent indices outwards.
    Without closures nothing can outlive its block, so scopes are released
    in LIFO order.
    """

    GLOBAL = 0

    def __init__(self):
        self.scopes: List[Scope] = [Scope()]
        self.current = self.GLOBAL

    @property
    def depth(self) -> int:
        """Number of live scopes, globals included."""
        return len(self.scopes)

    def push_scope(self) -> int:
        """Open a child scope of the current one and make it current."""
        self.scopes.append(Scope(parent=self.current))
        self.current = len(self.scopes) - 1
        return self.current

    def pop_scope(self):
        """Close the current scope and return to its parent."""
        if self.current == self.GLOBAL:
            raise IndexError("cannot pop the global scope")
        scope = self.scopes.pop()
        self.current = scope.parent

    def define(self, name: str, value: Any):
        """Define a variable in the current scope, replacing any previous binding."""
        self.scopes[self.current].values[name] = value

    def resolve(self, name: Token) -> Scope:
        """Find the innermost scope binding `name`."""
        index = self.current
        while index is not None:
            scope = self.scopes[index]
            if name.lexeme in scope.values:
                return scope
            index = scope.parent

        raise UndefinedVariable(name)

    def get(self, name: Token) -> Any:
        """Get variable value."""
        return self.resolve(name).values[name.lexeme]

    def assign(self, name: Token, value: Any):
        """Assign value to an existing variable. Never creates a binding."""
        self.resolve(name).values[name.lexeme] = value
