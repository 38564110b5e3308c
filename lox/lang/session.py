"""Session control for lox. A Session runs source text (a whole file, or one line at a time in command-line mode)
through the scanner, parser and evaluator, and keeps the state that must survive between runs: the global scope and
whether an error occurred.
"""

from enum import IntEnum

from lox.lang.environment import Environment
from lox.lang.error import ErrorHandler, SourceError
from lox.lang.evaluator import Evaluator
from lox.lang.lexical import Scanner, TokenType
from lox.lang.parser import Parser


class RunResult(IntEnum):
    """Outcome of Session.run. Values double as process exit statuses for file runs."""
    OK = 0
    STATIC_ERROR = 65   # lexical or syntax error: nothing was executed
    RUNTIME_ERROR = 70  # execution started but was aborted


class Session:
    """Governs a lox session. Sessions share nothing, so any number of them can coexist."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler=None, output=print):
        self.error_handler = error_handler if error_handler is not None else ErrorHandler()

        self.environment = Environment()  # global scope lives as long as the session
        self.evaluator = Evaluator(output)

        self.had_error = False          # lexical or syntax error in the last run
        self.had_runtime_error = False  # runtime error in the last run

    @staticmethod
    def preprocess_line(line):
        """Returns whether line (a command-line entry, possibly already holding previous lines) is incomplete, i.e. has
        unclosed braces or parentheses, and more lines should be appended to it before running it.
        """
        tokens, __ = Scanner(line).scan()

        depth = 0
        for token in tokens:
            if token.type in (TokenType.LEFT_BRACE, TokenType.LEFT_PAREN):
                depth += 1
            elif token.type in (TokenType.RIGHT_BRACE, TokenType.RIGHT_PAREN):
                depth -= 1
        return depth > 0

    def scan(self, source):
        """Returns (tokens, errors) for source, reporting errors as they are found."""
        return Scanner(source, self.error_handler).scan()

    def parse(self, source):
        """Returns (statements, errors) for source. errors holds both lexical and syntax errors."""
        tokens, errors = self.scan(source)

        parser = Parser(tokens, self.error_handler)
        statements = parser.parse()
        return statements, errors + parser.errors

    def run(self, source, path=SH_FILE):
        """Scans, parses and, if there were no lexical or syntax errors, executes source in the global scope. Errors are
        reported to the error handler. Returns a RunResult.
        """
        self.error_handler.register_source(path, source)
        try:
            try:
                statements, errors = self.parse(source)
            except RecursionError:
                self.had_error = True
                self.error_handler.fail(ErrorHandler.TOO_DEEP)
                return RunResult.STATIC_ERROR
            if errors:
                self.had_error = True
                return RunResult.STATIC_ERROR

            try:
                error = self.evaluator.execute(statements, self.environment)
            except RecursionError:
                self.had_runtime_error = True
                self.error_handler.fail(ErrorHandler.TOO_DEEP)
                return RunResult.RUNTIME_ERROR
            if error is not None:
                self.had_runtime_error = True
                self.error_handler.runtime_error(error)
                return RunResult.RUNTIME_ERROR

            return RunResult.OK
        finally:
            self.error_handler.remove_source()

    @staticmethod
    def read(path):
        """Returns the contents of the file at path. Raises SourceError if it can't be read."""
        try:
            with open(path, "r", encoding="utf-8") as file:
                return file.read()
        except OSError as error:
            raise SourceError(f"'{path}' could not be opened ({error.strerror})")
        except UnicodeDecodeError:
            raise SourceError(f"'{path}' is not valid utf-8 text")

    def run_file(self, path):
        """Runs the contents of the file at path. Raises SourceError if it can't be read."""
        return self.run(Session.read(path), path)

    def reset(self):
        """Clears the error flags, keeping the global scope. Called after each command-line entry."""
        self.had_error = False
        self.had_runtime_error = False
