#!/usr/bin/env python3
"""
Parser tests for the Lox interpreter.
"""

import sys
import unittest
from pathlib import Path

# Make the package importable when running from a source checkout
sys.path.insert(0, str(Path(__file__).parent.parent))

from lox.lexer import scan
from lox.parser import Parser, parse
from lox.token_types import TokenType
from lox.ast_nodes import *
from lox.errors import InvalidAssignmentTarget, MissingClosingParen, UnexpectedToken


class TestParser(unittest.TestCase):
    """Test cases for the parser."""

    def parse_source(self, source: str):
        """Helper to parse source code that is expected to be valid."""
        tokens, lex_errors = scan(source)
        self.assertEqual(lex_errors, [])
        statements, errors = parse(tokens)
        self.assertEqual(errors, [])
        return statements

    def parse_expression(self, source: str) -> Expr:
        statements = self.parse_source(source + ";")
        self.assertEqual(len(statements), 1)
        self.assertIsInstance(statements[0], ExpressionStatement)
        return statements[0].expression

    def test_subtraction_is_left_associative(self):
        expr = self.parse_expression("1 - 2 - 3")

        self.assertIsInstance(expr, Binary)
        self.assertEqual(expr.operator.type, TokenType.MINUS)
        self.assertEqual(expr.right, Literal(3.0))

        inner = expr.left
        self.assertIsInstance(inner, Binary)
        self.assertEqual(inner.left, Literal(1.0))
        self.assertEqual(inner.right, Literal(2.0))

    def test_binary_precedence(self):
        """1 + 2 * 3 groups as 1 + (2 * 3)."""
        expr = self.parse_expression("1 + 2 * 3")

        self.assertEqual(expr.operator.type, TokenType.PLUS)
        self.assertEqual(expr.left, Literal(1.0))
        self.assertIsInstance(expr.right, Binary)
        self.assertEqual(expr.right.operator.type, TokenType.STAR)

    def test_grouping_overrides_precedence(self):
        expr = self.parse_expression("(1 + 2) * 3")

        self.assertEqual(expr.operator.type, TokenType.STAR)
        self.assertIsInstance(expr.left, Grouping)
        self.assertEqual(expr.left.expression.operator.type, TokenType.PLUS)

    def test_comparison_binds_tighter_than_equality(self):
        expr = self.parse_expression("1 < 2 == true")

        self.assertEqual(expr.operator.type, TokenType.EQUAL_EQUAL)
        self.assertEqual(expr.left.operator.type, TokenType.LESS)
        self.assertEqual(expr.right, Literal(True))

    def test_unary(self):
        expr = self.parse_expression("!!true")

        self.assertIsInstance(expr, Unary)
        self.assertIsInstance(expr.right, Unary)
        self.assertEqual(expr.right.right, Literal(True))

    def test_unary_binds_tighter_than_binary(self):
        expr = self.parse_expression("-1 - 2")

        self.assertIsInstance(expr, Binary)
        self.assertIsInstance(expr.left, Unary)
        self.assertEqual(expr.left.operator.type, TokenType.MINUS)

    def test_logical_operators(self):
        """`and` binds tighter than `or`; both produce Logical nodes."""
        expr = self.parse_expression("a or b and c")

        self.assertIsInstance(expr, Logical)
        self.assertEqual(expr.operator.type, TokenType.OR)
        self.assertIsInstance(expr.right, Logical)
        self.assertEqual(expr.right.operator.type, TokenType.AND)

    def test_assignment_is_right_associative(self):
        expr = self.parse_expression("a = b = 1")

        self.assertIsInstance(expr, Assign)
        self.assertEqual(expr.name.lexeme, "a")
        self.assertIsInstance(expr.value, Assign)
        self.assertEqual(expr.value.name.lexeme, "b")
        self.assertEqual(expr.value.value, Literal(1.0))

    def test_literals(self):
        statements = self.parse_source('true; false; nil; 1.5; "s";')

        values = [stmt.expression for stmt in statements]
        self.assertEqual(values, [
            Literal(True), Literal(False), Literal(None), Literal(1.5), Literal("s"),
        ])

    def test_variable_reference(self):
        expr = self.parse_expression("answer")

        self.assertIsInstance(expr, Variable)
        self.assertEqual(expr.name.lexeme, "answer")

    def test_variable_declaration(self):
        """Test variable declaration parsing."""
        stmt = self.parse_source("var x = 42;")[0]

        self.assertIsInstance(stmt, VariableDeclaration)
        self.assertEqual(stmt.name.lexeme, "x")
        self.assertEqual(stmt.initializer, Literal(42.0))

    def test_variable_declaration_defaults_to_nil(self):
        stmt = self.parse_source("var x;")[0]
        self.assertEqual(stmt.initializer, Literal(None))

    def test_print_statement(self):
        stmt = self.parse_source("print 1;")[0]

        self.assertIsInstance(stmt, PrintStatement)
        self.assertEqual(stmt.expression, Literal(1.0))

    def test_block(self):
        stmt = self.parse_source("{ var a = 1; print a; }")[0]

        self.assertIsInstance(stmt, Block)
        self.assertEqual(len(stmt.statements), 2)
        self.assertIsInstance(stmt.statements[0], VariableDeclaration)
        self.assertIsInstance(stmt.statements[1], PrintStatement)

    def test_if_statement(self):
        """Test if statement parsing."""
        stmt = self.parse_source("if (x > 0) print 1; else { print 2; }")[0]

        self.assertIsInstance(stmt, IfStatement)
        self.assertIsInstance(stmt.condition, Binary)
        self.assertIsInstance(stmt.then_branch, PrintStatement)
        self.assertIsInstance(stmt.else_branch, Block)

    def test_dangling_else_binds_to_inner_if(self):
        outer = self.parse_source("if (a) if (b) print 1; else print 2;")[0]

        self.assertIsInstance(outer, IfStatement)
        self.assertIsNone(outer.else_branch)

        inner = outer.then_branch
        self.assertIsInstance(inner, IfStatement)
        self.assertEqual(inner.then_branch, PrintStatement(Literal(1.0)))
        self.assertEqual(inner.else_branch, PrintStatement(Literal(2.0)))

    def test_while_statement(self):
        stmt = self.parse_source("while (i < 3) { i = i + 1; }")[0]

        self.assertIsInstance(stmt, WhileStatement)
        self.assertEqual(stmt.condition.operator.type, TokenType.LESS)
        self.assertIsInstance(stmt.body, Block)

    def test_empty_program(self):
        self.assertEqual(self.parse_source(""), [])
        self.assertEqual(self.parse_source("// only a comment"), [])


class TestParserErrors(unittest.TestCase):
    """Malformed input gives error values, never an aborted parse."""

    def parse_errors(self, source: str):
        tokens, _ = scan(source)
        return parse(tokens)

    def test_missing_closing_paren(self):
        _, errors = self.parse_errors("print (1 + 2;")

        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], MissingClosingParen)
        self.assertEqual(errors[0].token.lexeme, ";")

    def test_unexpected_token(self):
        _, errors = self.parse_errors("1 + ;")

        self.assertIsInstance(errors[0], UnexpectedToken)
        self.assertEqual(errors[0].token.type, TokenType.SEMICOLON)
        self.assertEqual(str(errors[0]), "[line 1] Error at ';': Expect expression.")

    def test_lone_closing_paren(self):
        statements, errors = self.parse_errors(")")

        self.assertEqual(statements, [])
        self.assertIsInstance(errors[0], UnexpectedToken)

    def test_invalid_assignment_target(self):
        statements, errors = self.parse_errors("1 = 2;")

        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], InvalidAssignmentTarget)
        self.assertEqual(errors[0].token.lexeme, "=")
        # The statement itself is still well formed
        self.assertEqual(len(statements), 1)

    def test_missing_closing_brace(self):
        _, errors = self.parse_errors("{ print 1;")

        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], UnexpectedToken)
        self.assertEqual(errors[0].token.type, TokenType.EOF)
        self.assertIn("at end", str(errors[0]))

    def test_missing_semicolon(self):
        _, errors = self.parse_errors("print 1")

        self.assertIsInstance(errors[0], UnexpectedToken)
        self.assertEqual(errors[0].message, "Expect ';' after value.")

    def test_unsupported_keyword(self):
        _, errors = self.parse_errors("class Foo {}")

        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0].token.type, TokenType.CLASS)

    def test_error_line(self):
        _, errors = self.parse_errors("print 1;\nprint (2;")
        self.assertEqual(errors[0].line, 2)

    def test_recovers_at_next_statement(self):
        statements, errors = self.parse_errors("print ; print 2; var = 3; print 4;")

        self.assertEqual(len(errors), 2)
        self.assertEqual(statements, [
            PrintStatement(Literal(2.0)),
            PrintStatement(Literal(4.0)),
        ])

    def test_errors_are_collected_on_reporter(self):
        tokens, _ = scan("print ;")
        parser = Parser(tokens, "script.lox")
        parser.parse()

        self.assertTrue(parser.error_reporter.has_errors())
        self.assertEqual(parser.error_reporter.errors[0].filename, "script.lox")

    def test_deep_nesting_is_rejected(self):
        statements, errors = self.parse_errors("print " + "(" * 80 + "1" + ")" * 80 + "; print 2;")

        self.assertIsInstance(errors[0], UnexpectedToken)
        self.assertEqual(errors[0].message, "Expression nested too deeply.")
        # The parser recovers and the nesting count starts over
        self.assertEqual(statements[-1], PrintStatement(Literal(2.0)))

    def test_nesting_within_limit(self):
        statements, errors = self.parse_errors("print " + "(" * 30 + "1" + ")" * 30 + ";")

        self.assertEqual(errors, [])
        self.assertEqual(len(statements), 1)

    def test_deep_blocks_are_rejected(self):
        _, errors = self.parse_errors("{" * 80 + "}" * 80)
        self.assertEqual(errors[0].message, "Statement nested too deeply.")


if __name__ == '__main__':
    unittest.main()
