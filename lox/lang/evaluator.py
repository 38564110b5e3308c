"""Tree-walking evaluator for lox. Statements are executed and expressions evaluated directly from the syntax tree,
against an Environment (see lox.lang.environment).

Runtime values are Python objects: nil is None, booleans are bool, numbers are float and strings are str.
"""

import math

from lox.lang.error import LoxRuntimeError
from lox.lang.lexical import TokenType


def is_truthy(value):
    """nil and false are falsy. Everything else, including 0 and "", is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left, right):
    """Value equality without coercion: values of different types are never equal (so true != 1)."""
    return type(left) is type(right) and left == right


def is_number(value):
    return isinstance(value, float)


def stringify(value):
    """Renders value the way print shows it. Integral numbers below 1e21 are written out in full digits, without a
    fractional part or exponent.
    """
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        if value.is_integer() and abs(value) < 1e21:
            return f"{value:.0f}"
        return repr(value)
    return str(value)


class Evaluator:
    """Executes lox statements. Each rendered print goes to output, a callable taking a single str."""

    # operator: implementation, for operators that only accept numbers
    ARITHMETIC = {
        TokenType.MINUS: lambda left, right: left - right,
        TokenType.STAR: lambda left, right: left * right,
        TokenType.GREATER: lambda left, right: left > right,
        TokenType.GREATER_EQUAL: lambda left, right: left >= right,
        TokenType.LESS: lambda left, right: left < right,
        TokenType.LESS_EQUAL: lambda left, right: left <= right,
    }

    def __init__(self, output=print):
        self.output = output

    def execute(self, statements, environment):
        """Executes statements in order. Returns None if all of them ran, or the LoxRuntimeError that stopped them.
        Bindings made before an error stay in environment.
        """
        try:
            for stmt in statements:
                stmt.accept(self, environment)
        except LoxRuntimeError as error:
            return error
        return None

    def evaluate(self, expr, environment):
        """Returns the value of expr. Raises LoxRuntimeError on type mismatches and undefined variables."""
        return expr.accept(self, environment)

    # --------------------------------------------------------------------------------------------------------------
    # statements

    def visit_expression_stmt(self, stmt, environment):
        self.evaluate(stmt.expression, environment)

    def visit_print_stmt(self, stmt, environment):
        value = self.evaluate(stmt.expression, environment)
        self.output(stringify(value))

    def visit_var_stmt(self, stmt, environment):
        value = None
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer, environment)
        environment.define(stmt.name.lexeme, value)

    def visit_block_stmt(self, stmt, environment):
        with environment.scope():
            for child in stmt.statements:
                child.accept(self, environment)

    def visit_if_stmt(self, stmt, environment):
        if is_truthy(self.evaluate(stmt.condition, environment)):
            stmt.then_branch.accept(self, environment)
        elif stmt.else_branch is not None:
            stmt.else_branch.accept(self, environment)

    def visit_while_stmt(self, stmt, environment):
        while is_truthy(self.evaluate(stmt.condition, environment)):
            stmt.body.accept(self, environment)

    # --------------------------------------------------------------------------------------------------------------
    # expressions

    def visit_literal_expr(self, expr, environment):
        return expr.value

    def visit_grouping_expr(self, expr, environment):
        return self.evaluate(expr.expression, environment)

    def visit_unary_expr(self, expr, environment):
        right = self.evaluate(expr.right, environment)

        if expr.operator.type is TokenType.BANG:
            return not is_truthy(right)

        # TokenType.MINUS
        if not is_number(right):
            raise LoxRuntimeError(expr.operator, "Operand must be a number.")
        return -right

    def visit_binary_expr(self, expr, environment):
        left = self.evaluate(expr.left, environment)
        right = self.evaluate(expr.right, environment)
        operator = expr.operator

        if operator.type is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if operator.type is TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        if operator.type is TokenType.PLUS:
            if is_number(left) and is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(operator, "Operands must be two numbers or two strings.")

        if not (is_number(left) and is_number(right)):
            raise LoxRuntimeError(operator, "Operands must be numbers.")

        if operator.type is TokenType.SLASH:
            return Evaluator._divide(left, right)
        return Evaluator.ARITHMETIC[operator.type](left, right)

    @staticmethod
    def _divide(left, right):
        """IEEE-754 division: dividing by zero gives an infinity (or nan for 0 / 0) instead of raising."""
        if right == 0:
            if left == 0 or math.isnan(left):
                return math.nan
            return math.copysign(math.inf, left) * math.copysign(1.0, right)
        return left / right

    def visit_logical_expr(self, expr, environment):
        left = self.evaluate(expr.left, environment)

        if expr.operator.type is TokenType.OR:
            if is_truthy(left):
                return left
        elif not is_truthy(left):
            return left

        return self.evaluate(expr.right, environment)

    def visit_variable_expr(self, expr, environment):
        return environment.get(expr.name)

    def visit_assign_expr(self, expr, environment):
        value = self.evaluate(expr.value, environment)
        environment.assign(expr.name, value)
        return value
