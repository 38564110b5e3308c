"""Error handling for lox. Every error a lox program can cause is a LoxError: lexical errors (ScanError), syntax errors
(ParseError) and runtime errors (LoxRuntimeError). ErrorHandler is the reporting collaborator that displays them. If
another type of error makes it all the way to ErrorHandler, it is assumed to be an internal issue.
"""

import sys

from termcolor import colored


class LoxError(Exception):
    """Base class for lox errors. line is the 1-based source line the error was detected on (None if unknown)."""
    exit_code = 65

    def __init__(self, line, message):
        super().__init__(message)
        self.line = line
        self.message = message

    @property
    def where(self):
        """Location context of the error, shown after the word 'error' in diagnostics."""
        return ""

    @property
    def lexeme(self):
        """Offending source text, if known. Used to highlight the error in the source line."""
        return None

    @property
    def column(self):
        """0-based offset of lexeme in the source line, if known."""
        return None


class ScanError(LoxError):
    """Unterminated string or unrecognized character. Scanning continues after one of these is found."""


class ParseError(LoxError):
    """Unexpected token, missing token or invalid assignment target."""

    def __init__(self, token, message):
        super().__init__(token.line, message)
        self.token = token

    @property
    def where(self):
        return self.token.location

    @property
    def lexeme(self):
        return self.token.lexeme

    @property
    def column(self):
        return self.token.column


class SourceError(LoxError):
    """Source file that can't be read."""
    exit_code = 66

    def __init__(self, message):
        super().__init__(None, message)


class LoxRuntimeError(LoxError):
    """Type mismatch in an operator, or an undefined variable. Aborts the statements left in the current run."""
    exit_code = 70

    def __init__(self, token, message):
        super().__init__(token.line, message)
        self.token = token

    @property
    def lexeme(self):
        return self.token.lexeme

    @property
    def column(self):
        return self.token.column


class ErrorHandler:
    """Reports lox errors to stderr (or stream). Also a context manager that turns KeyboardInterrupts, stray LoxErrors
    and RecursionErrors into error messages instead of tracebacks.
    """
    ERROR = "red"
    WARNING = "magenta"
    INTERNAL_EXIT = 70
    TOO_DEEP = "maximum recursion depth exceeded (expression or block nested too deeply)"

    def __init__(self, fatal=False, stream=None):
        self.fatal = fatal    # whether errors caught on __exit__ end the process
        self.stream = stream  # defaults to sys.stderr at report time

        self.path = None
        self.lines = []

    def register_source(self, path, source):
        """Registers the source being run so that diagnostics can show the offending line. Should be called prior to
        scanning.
        """
        self.path = path
        self.lines = source.splitlines()

    def remove_source(self):
        """Forgets the registered source. Should be called after a run is over."""
        self.path = None
        self.lines = []

    @staticmethod
    def diagnose(line, lexeme, warning=False, column=None):
        """Returns line with lexeme highlighted and underlined, or None if lexeme is not in line. The occurence at column
        is highlighted if lexeme is found there, the first one otherwise.
        """
        if not lexeme:
            return None

        if column is not None and line[column:column + len(lexeme)] == lexeme:
            start = column
        else:
            start = line.find(lexeme)
        if start == -1:
            return None

        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR
        end = start + len(lexeme)

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def _print(self, msg):
        print(msg, file=self.stream if self.stream is not None else sys.stderr)

    def _header(self, line):
        if line is None:
            return ""
        if self.path:
            return colored(f"{self.path}:{line}: ", attrs=["bold"])
        return colored(f"[line {line}] ", attrs=["bold"])

    def _source_line(self, line):
        if line is not None and 0 < line <= len(self.lines):
            return self.lines[line - 1]
        return None

    def report(self, line, where, message, lexeme=None, column=None):
        """Reports a lexical or syntax error at line. where is the location context (ex: " at 'foo'")."""
        error_msg = self._header(line)
        error_msg += colored(f"error{where}: ", ErrorHandler.ERROR, attrs=["bold"]) + message
        self._print(error_msg)

        source_line = self._source_line(line)
        if source_line is not None and lexeme:
            diagnosis = ErrorHandler.diagnose(source_line, lexeme, column=column)
            if diagnosis:
                self._print(diagnosis)

    def error(self, error):
        """Reports a ScanError or ParseError."""
        self.report(error.line, error.where, error.message, error.lexeme, error.column)

    def runtime_error(self, error):
        """Reports a LoxRuntimeError raised during evaluation."""
        error_msg = self._header(error.line)
        error_msg += colored("runtime error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.message
        self._print(error_msg)

        source_line = self._source_line(error.line)
        if source_line is not None:
            diagnosis = ErrorHandler.diagnose(source_line, error.lexeme, column=error.column)
            if diagnosis:
                self._print(diagnosis)

    def warn(self, message):
        """Prints a warning that does not affect the outcome of a run."""
        self._print(colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + message)

    def fail(self, message, internal=False):
        """Prints an error that isn't tied to a source line (unreadable file, interrupt, internal error)."""
        error_msg = ""
        if internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + message
        self._print(error_msg)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None or exc_type is SystemExit:
            return False

        exit_code = 1
        if exc_type is KeyboardInterrupt:
            self.fail("keyboard interrupt")
            exit_code = 130
        elif exc_type is RecursionError:
            self.fail(ErrorHandler.TOO_DEEP)
            exit_code = ErrorHandler.INTERNAL_EXIT
        elif issubclass(exc_type, LoxRuntimeError):
            self.runtime_error(exc_val)
            exit_code = exc_val.exit_code
        elif issubclass(exc_type, LoxError):
            self.error(exc_val)
            exit_code = exc_val.exit_code
        else:
            self.fail(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True)
            if self.fatal:
                sys.exit(ErrorHandler.INTERNAL_EXIT)
            return False  # internal errors are never suppressed

        self.remove_source()
        if self.fatal:
            sys.exit(exit_code)
        return True
