"""Lexical analysis for lox. Turns source text into a list of Tokens in a single left-to-right pass, using one character
of lookahead (plus a conditional second character for two-character operators).

Lexical grammar:

```
<token>      ::= "(" | ")" | "{" | "}" | "," | "." | "-" | "+" | ";" | "/" | "*"
               | "!" | "!=" | "=" | "==" | "<" | "<=" | ">" | ">="
               | <string> | <number> | <identifier>
<string>     ::= '"' <char>* '"'              ; may span lines, no escape sequences
<number>     ::= <digit>+ ( "." <digit>+ )?   ; no leading or trailing ".", no exponent
<identifier> ::= <alpha> ( <alpha> | <digit> )*
<comment>    ::= "//" <char>* <newline>        ; skipped, like whitespace
```

Identifiers whose uppercased lexeme names a reserved word become keyword tokens.
"""

from dataclasses import dataclass, field
from enum import Enum, auto

from lox.lang.error import ScanError


class TokenType(Enum):
    # single-character tokens
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    SLASH = auto()
    STAR = auto()

    # one or two character tokens
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # keywords
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    EOF = auto()


KEYWORDS = {token_type.name: token_type for token_type in [
    TokenType.AND, TokenType.CLASS, TokenType.ELSE, TokenType.FALSE, TokenType.FUN, TokenType.FOR, TokenType.IF,
    TokenType.NIL, TokenType.OR, TokenType.PRINT, TokenType.RETURN, TokenType.SUPER, TokenType.THIS, TokenType.TRUE,
    TokenType.VAR, TokenType.WHILE,
]}

SINGLE_CHARS = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    ";": TokenType.SEMICOLON,
    "*": TokenType.STAR,
}

# char: (token type if followed by "=", token type otherwise)
COMPOUND_CHARS = {
    "!": (TokenType.BANG_EQUAL, TokenType.BANG),
    "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    "<": (TokenType.LESS_EQUAL, TokenType.LESS),
    ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
}


@dataclass(frozen=True)
class Token:
    """A lexeme scanned from source. literal is only set for NUMBER (float) and STRING (str) tokens. column is the
    0-based offset of the lexeme in its line (None if unknown, or if the lexeme spans lines).
    """
    type: TokenType
    lexeme: str
    literal: object
    line: int
    column: int = field(default=None, compare=False)

    @property
    def location(self):
        """Location context for diagnostics."""
        if self.type is TokenType.EOF:
            return " at end"
        return f" at '{self.lexeme}'"

    def __str__(self):
        return f"{self.type.name} {self.lexeme} {self.literal}"


def is_digit(char):
    return char.isdecimal()


def is_alpha(char):
    return char.isalpha()


class Scanner:
    """Scans a single source string. Lexical errors are collected in self.errors (and reported to error_handler as soon
    as they are found, if given) without stopping the scan.
    """

    def __init__(self, source, error_handler=None):
        self.source = source
        self.error_handler = error_handler

        self.tokens = []
        self.errors = []

        self.start = 0    # start of the current lexeme
        self.current = 0  # next unconsumed char
        self.line = 1
        self.line_start = 0  # offset of the first char of the current line

    def scan(self):
        """Returns (tokens, errors). tokens always ends with an EOF token."""
        while not self._is_at_end():
            self.start = self.current
            self._scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line, self.current - self.line_start))
        return self.tokens, self.errors

    def _scan_token(self):
        char = self._advance()

        if char in SINGLE_CHARS:
            self._add_token(SINGLE_CHARS[char])

        elif char in COMPOUND_CHARS:
            with_equal, alone = COMPOUND_CHARS[char]
            self._add_token(with_equal if self._match("=") else alone)

        elif char == "/":
            if self._match("/"):
                while self._peek() != "\n" and not self._is_at_end():
                    self._advance()
            else:
                self._add_token(TokenType.SLASH)

        elif char in " \r\t":
            pass

        elif char == "\n":
            self.line += 1
            self.line_start = self.current

        elif char == "\"":
            self._string()

        elif is_digit(char):
            self._number()

        elif is_alpha(char):
            self._identifier()

        else:
            self._error(f"Invalid input '{char}'.")

    def _is_at_end(self):
        return self.current >= len(self.source)

    def _advance(self):
        char = self.source[self.current]
        self.current += 1
        return char

    def _match(self, expected):
        """Consumes the next char only if it is expected."""
        if self._is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def _peek(self):
        return "\0" if self._is_at_end() else self.source[self.current]

    def _peek_next(self):
        if self.current + 1 >= len(self.source):
            return "\0"
        return self.source[self.current + 1]

    def _add_token(self, token_type, literal=None):
        column = self.start - self.line_start if self.start >= self.line_start else None
        self.tokens.append(Token(token_type, self.source[self.start:self.current], literal, self.line, column))

    def _error(self, message):
        error = ScanError(self.line, message)
        self.errors.append(error)
        if self.error_handler is not None:
            self.error_handler.error(error)

    def _string(self):
        while self._peek() != "\"" and not self._is_at_end():
            if self._peek() == "\n":
                self.line += 1
                self.line_start = self.current + 1
            self._advance()

        if self._is_at_end():
            self._error("Unterminated string.")
            return

        self._advance()  # closing "
        self._add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def _number(self):
        while is_digit(self._peek()):
            self._advance()

        # fractional part needs at least one digit after the "."
        if self._peek() == "." and is_digit(self._peek_next()):
            self._advance()
            while is_digit(self._peek()):
                self._advance()

        self._add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def _identifier(self):
        while is_alpha(self._peek()) or is_digit(self._peek()):
            self._advance()

        lexeme = self.source[self.start:self.current]
        self._add_token(KEYWORDS.get(lexeme.upper(), TokenType.IDENTIFIER))


def scan(source, error_handler=None):
    """Shortcut for Scanner(source, error_handler).scan()."""
    return Scanner(source, error_handler).scan()
