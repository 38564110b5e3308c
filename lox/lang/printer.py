"""Renders lox syntax trees as parenthesized prefix expressions, ex: `1 + 2 * 3` -> `(+ 1 (* 2 3))`. Used for the
`--dump ast` command-line option, the shell's `ast` command and parser tests.
"""

from lox.lang.evaluator import stringify


class AstPrinter:
    """Visitor that turns a node (and everything under it) into a string."""

    def print(self, node):
        return node.accept(self)

    @staticmethod
    def render(value):
        """Renders a runtime value as source text: like print, but strings keep their quotes."""
        if isinstance(value, str):
            return f"\"{value}\""
        return stringify(value)

    def _parenthesize(self, name, *nodes):
        parts = [name] + [node.accept(self) for node in nodes]
        return "(" + " ".join(parts) + ")"

    def visit_literal_expr(self, expr):
        return AstPrinter.render(expr.value)

    def visit_grouping_expr(self, expr):
        return self._parenthesize("group", expr.expression)

    def visit_unary_expr(self, expr):
        return self._parenthesize(expr.operator.lexeme, expr.right)

    def visit_binary_expr(self, expr):
        return self._parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_logical_expr(self, expr):
        return self._parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_variable_expr(self, expr):
        return expr.name.lexeme

    def visit_assign_expr(self, expr):
        return self._parenthesize(f"= {expr.name.lexeme}", expr.value)

    def visit_expression_stmt(self, stmt):
        return self._parenthesize(";", stmt.expression)

    def visit_print_stmt(self, stmt):
        return self._parenthesize("print", stmt.expression)

    def visit_var_stmt(self, stmt):
        if stmt.initializer is None:
            return f"(var {stmt.name.lexeme})"
        return self._parenthesize(f"var {stmt.name.lexeme}", stmt.initializer)

    def visit_block_stmt(self, stmt):
        return self._parenthesize("block", *stmt.statements)

    def visit_if_stmt(self, stmt):
        if stmt.else_branch is None:
            return self._parenthesize("if", stmt.condition, stmt.then_branch)
        return self._parenthesize("if-else", stmt.condition, stmt.then_branch, stmt.else_branch)

    def visit_while_stmt(self, stmt):
        return self._parenthesize("while", stmt.condition, stmt.body)
