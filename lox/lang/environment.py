"""Variable scoping for lox. An Environment is the chain of scopes visible at some point of a program, stored as a
stack of frames indexed by scope depth: frames[0] holds the globals and frames[-1] the innermost block's variables.
"""

from contextlib import contextmanager

from lox.lang.error import LoxRuntimeError


class Environment:
    """Chain of name: value scopes, innermost last. Lookups and assignments search from the innermost scope outwards.
    """

    def __init__(self):
        self.frames = [{}]

    @property
    def depth(self):
        """Number of block scopes currently open (0 when only globals are visible)."""
        return len(self.frames) - 1

    @property
    def globals(self):
        return self.frames[0]

    def push(self):
        """Opens a new, empty innermost scope."""
        self.frames.append({})

    def pop(self):
        """Discards the innermost scope and every binding in it. The global scope can't be popped."""
        if not self.depth:
            raise ValueError("cannot pop the global scope")
        self.frames.pop()

    @contextmanager
    def scope(self):
        """Opens a scope for the duration of a with block. The scope is discarded however the block is left."""
        self.push()
        try:
            yield self
        finally:
            self.pop()

    def define(self, name, value):
        """Binds name (a str) to value in the innermost scope, shadowing any outer binding of the same name."""
        self.frames[-1][name] = value

    def _frame_of(self, name):
        """Returns the innermost frame binding name.lexeme, where name is an identifier Token."""
        for frame in reversed(self.frames):
            if name.lexeme in frame:
                return frame
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def get(self, name):
        return self._frame_of(name)[name.lexeme]

    def assign(self, name, value):
        """Overwrites the nearest existing binding of name. Never creates a new binding."""
        self._frame_of(name)[name.lexeme] = value

    def __contains__(self, name):
        return any(name in frame for frame in self.frames)
