"""Abstract syntax tree for lox. There are two disjoint node families: expressions (Expr) and statements (Stmt). Nodes
are immutable and form a tree: every node is owned by exactly one parent.

Consumers (Evaluator, AstPrinter) dispatch on node type through accept: a node of class Foo in family Expr calls
visitor.visit_foo_expr(node, *args), and a node of class Foo in family Stmt calls visitor.visit_foo_stmt(node, *args).
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from lox.lang.lexical import Token


class Node:
    """Superclass of every AST node. Subclasses get their visitor method name computed once, at class creation."""
    family = "node"
    visit_method = "visit_node"

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.visit_method = f"visit_{cls.__name__.lower()}_{cls.family}"

    def accept(self, visitor, *args):
        return getattr(visitor, self.visit_method)(self, *args)


class Expr(Node):
    family = "expr"


class Stmt(Node):
    family = "stmt"


# ------------------------------------------------------------------------------------------------------------------
# expressions

@dataclass(frozen=True)
class Literal(Expr):
    value: object  # None, bool, float or str


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
    """'and'/'or'. Kept apart from Binary because the right operand is only evaluated on demand."""
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Variable(Expr):
    name: Token


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr


# ------------------------------------------------------------------------------------------------------------------
# statements

@dataclass(frozen=True)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr] = None


@dataclass(frozen=True)
class Block(Stmt):
    statements: Tuple[Stmt, ...]


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt
