"""Recursive descent parser for lox. Builds a list of statements (see lox.lang.syntax) from the Scanner's tokens.

Grammar, from lowest to highest precedence:

```
program     ::= declaration* EOF
declaration ::= varDecl | statement
varDecl     ::= "var" IDENTIFIER ( "=" expression )? ";"
statement   ::= exprStmt | forStmt | ifStmt | printStmt | whileStmt | block
exprStmt    ::= expression ";"
forStmt     ::= "for" "(" ( varDecl | exprStmt | ";" ) expression? ";" expression? ")" statement
ifStmt      ::= "if" "(" expression ")" statement ( "else" statement )?   ; else binds to the nearest if
printStmt   ::= "print" expression ";"
whileStmt   ::= "while" "(" expression ")" statement
block       ::= "{" declaration* "}"

expression  ::= assignment
assignment  ::= IDENTIFIER "=" assignment | logic_or                     ; right-associative
logic_or    ::= logic_and ( "or" logic_and )*
logic_and   ::= equality ( "and" equality )*
equality    ::= comparison ( ( "!=" | "==" ) comparison )*
comparison  ::= term ( ( ">" | ">=" | "<" | "<=" ) term )*
term        ::= factor ( ( "-" | "+" ) factor )*
factor      ::= unary ( ( "/" | "*" ) unary )*
unary       ::= ( "!" | "-" ) unary | primary
primary     ::= "true" | "false" | "nil" | NUMBER | STRING | IDENTIFIER | "(" expression ")"
```

`for` loops have no node of their own: they are desugared into Blocks and a While.

On a syntax error the parser records (and reports) it, then skips tokens up to the next statement boundary and goes on
parsing, so that one malformed statement doesn't hide the errors in the rest of the program. A declaration that fails
to parse is left out of the result.
"""

from lox.lang.error import ParseError
from lox.lang.lexical import TokenType
from lox.lang.syntax import (Assign, Binary, Block, Expression, Grouping, If, Literal, Logical, Print, Unary, Var,
                             Variable, While)


class Parser:
    """Parses one token list. Syntax errors are collected in self.errors (and reported to error_handler, if given)."""
    # tokens that start a statement: after an error, parsing resumes at one of these
    SYNC_POINTS = {
        TokenType.CLASS, TokenType.FUN, TokenType.VAR, TokenType.FOR, TokenType.IF, TokenType.WHILE, TokenType.PRINT,
        TokenType.RETURN,
    }

    def __init__(self, tokens, error_handler=None):
        self.tokens = tokens
        self.error_handler = error_handler

        self.errors = []
        self.current = 0

    def parse(self):
        """Returns the list of parsed statements. Check self.errors before executing them."""
        statements = []
        while not self._is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    # --------------------------------------------------------------------------------------------------------------
    # statements

    def declaration(self):
        """Parses a declaration. If it is malformed, synchronizes and returns None."""
        try:
            if self._match(TokenType.VAR):
                return self._var_declaration()
            return self._statement()
        except ParseError:
            self.synchronize()
            return None

    def _var_declaration(self):
        name = self._consume(TokenType.IDENTIFIER, "variable name")

        initializer = None
        if self._match(TokenType.EQUAL):
            initializer = self._expression()

        self._consume(TokenType.SEMICOLON, "';' after variable declaration")
        return Var(name, initializer)

    def _statement(self):
        if self._match(TokenType.FOR):
            return self._for_statement()
        if self._match(TokenType.IF):
            return self._if_statement()
        if self._match(TokenType.PRINT):
            return self._print_statement()
        if self._match(TokenType.WHILE):
            return self._while_statement()
        if self._match(TokenType.LEFT_BRACE):
            return Block(self._block())
        return self._expression_statement()

    def _block(self):
        statements = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        self._consume(TokenType.RIGHT_BRACE, "'}' after block")
        return tuple(statements)

    def _print_statement(self):
        value = self._expression()
        self._consume(TokenType.SEMICOLON, "';' after value")
        return Print(value)

    def _expression_statement(self):
        expr = self._expression()
        self._consume(TokenType.SEMICOLON, "';' after expression")
        return Expression(expr)

    def _if_statement(self):
        self._consume(TokenType.LEFT_PAREN, "'(' after 'if'")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "')' after if condition")

        then_branch = self._statement()
        else_branch = None
        if self._match(TokenType.ELSE):
            else_branch = self._statement()

        return If(condition, then_branch, else_branch)

    def _while_statement(self):
        self._consume(TokenType.LEFT_PAREN, "'(' after 'while'")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "')' after condition")

        return While(condition, self._statement())

    def _for_statement(self):
        """Desugars `for (init; cond; incr) body` into `{ init; while (cond) { body; incr; } }`."""
        self._consume(TokenType.LEFT_PAREN, "'(' after 'for'")

        if self._match(TokenType.SEMICOLON):
            initializer = None
        elif self._match(TokenType.VAR):
            initializer = self._var_declaration()
        else:
            initializer = self._expression_statement()

        condition = None
        if not self._check(TokenType.SEMICOLON):
            condition = self._expression()
        self._consume(TokenType.SEMICOLON, "';' after loop condition")

        increment = None
        if not self._check(TokenType.RIGHT_PAREN):
            increment = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "')' after for clauses")

        body = self._statement()

        if increment is not None:
            body = Block((body, Expression(increment)))
        if condition is None:
            condition = Literal(True)
        body = While(condition, body)
        if initializer is not None:
            body = Block((initializer, body))

        return body

    # --------------------------------------------------------------------------------------------------------------
    # expressions

    def _expression(self):
        return self._assignment()

    def _assignment(self):
        expr = self._or()

        if self._match(TokenType.EQUAL):
            equals = self._previous()
            value = self._assignment()

            if isinstance(expr, Variable):
                return Assign(expr.name, value)

            self._error(equals, "Invalid assignment target.")  # reported, but no need to synchronize

        return expr

    def _or(self):
        expr = self._and()
        while self._match(TokenType.OR):
            operator = self._previous()
            expr = Logical(expr, operator, self._and())
        return expr

    def _and(self):
        expr = self._equality()
        while self._match(TokenType.AND):
            operator = self._previous()
            expr = Logical(expr, operator, self._equality())
        return expr

    def _binary(self, operand, *operators):
        """Parses a left-associative chain of operand separated by any of operators."""
        expr = operand()
        while self._match(*operators):
            operator = self._previous()
            expr = Binary(expr, operator, operand())
        return expr

    def _equality(self):
        return self._binary(self._comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def _comparison(self):
        return self._binary(self._term, TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS,
                            TokenType.LESS_EQUAL)

    def _term(self):
        return self._binary(self._factor, TokenType.MINUS, TokenType.PLUS)

    def _factor(self):
        return self._binary(self._unary, TokenType.SLASH, TokenType.STAR)

    def _unary(self):
        if self._match(TokenType.BANG, TokenType.MINUS):
            operator = self._previous()
            return Unary(operator, self._unary())
        return self._primary()

    def _primary(self):
        if self._match(TokenType.FALSE):
            return Literal(False)
        if self._match(TokenType.TRUE):
            return Literal(True)
        if self._match(TokenType.NIL):
            return Literal(None)

        if self._match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self._previous().literal)

        if self._match(TokenType.IDENTIFIER):
            return Variable(self._previous())

        if self._match(TokenType.LEFT_PAREN):
            expr = self._expression()
            self._consume(TokenType.RIGHT_PAREN, "')' after expression")
            return Grouping(expr)

        raise self._error(self._peek(), self._expected("expression"))

    # --------------------------------------------------------------------------------------------------------------
    # token stream helpers

    def _match(self, *token_types):
        """Consumes the next token if it is any of token_types."""
        if any(self._check(token_type) for token_type in token_types):
            self._advance()
            return True
        return False

    def _check(self, token_type):
        if self._is_at_end():
            return False
        return self._peek().type is token_type

    def _advance(self):
        if not self._is_at_end():
            self.current += 1
        return self._previous()

    def _is_at_end(self):
        return self._peek().type is TokenType.EOF

    def _peek(self):
        return self.tokens[self.current]

    def _previous(self):
        return self.tokens[self.current - 1]

    def _expected(self, what):
        """Builds an "expect X, got Y" diagnostic against the next token."""
        token = self._peek()
        got = "end" if token.type is TokenType.EOF else f"'{token.lexeme}'"
        return f"Expect {what}, got {got}."

    def _consume(self, token_type, what):
        if self._check(token_type):
            return self._advance()
        raise self._error(self._peek(), self._expected(what))

    def _error(self, token, message):
        """Records and reports a syntax error. Returns it so that callers can raise it to unwind to declaration."""
        error = ParseError(token, message)
        self.errors.append(error)
        if self.error_handler is not None:
            self.error_handler.error(error)
        return error

    def synchronize(self):
        """Discards tokens until just after a ';' or just before a token that starts a statement."""
        self._advance()

        while not self._is_at_end():
            if self._previous().type is TokenType.SEMICOLON:
                return
            if self._peek().type in Parser.SYNC_POINTS:
                return
            self._advance()


def parse(tokens, error_handler=None):
    """Shortcut that returns (statements, errors) for tokens."""
    parser = Parser(tokens, error_handler)
    statements = parser.parse()
    return statements, parser.errors
