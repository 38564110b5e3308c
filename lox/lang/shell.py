"""Handles interactive/command-line mode for the lox interpreter. Uses cmd as backend."""

import cmd

from lox.lang.lexical import Scanner, TokenType
from lox.lang.printer import AstPrinter
from lox.lang.session import Session

# a command name followed by one of these can only be lox source (ex: 'vars = 2;', 'tokens + 1;')
SOURCE_CONTINUATIONS = {
    TokenType.EQUAL, TokenType.EQUAL_EQUAL, TokenType.BANG_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL,
    TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.PLUS, TokenType.STAR, TokenType.SLASH, TokenType.SEMICOLON,
    TokenType.DOT, TokenType.COMMA, TokenType.RIGHT_PAREN, TokenType.AND, TokenType.OR,
}


class Shell(cmd.Cmd):
    """lox interpreter shell. Every line that isn't a shell command is run as lox source in the same Session, so globals
    defined on one line are visible on the next.
    """
    intro = "lox interpreter :: Python backend\nType 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    @staticmethod
    def is_source(arg):
        """Returns whether a command line with argument arg is really lox source using the command name as a variable."""
        tokens, __ = Scanner(arg).scan()
        return tokens[0].type in SOURCE_CONTINUATIONS

    def onecmd(self, line):
        """Routes line to a command, or to default if it is lox source. Lines continuing an unclosed brace/parenthesis
        are always source, except for EOF (Ctrl-D), which still leaves the interpreter.
        """
        if self._tmp_line and line != "EOF":
            return self.default(line)

        cmd_name, arg, line = self.parseline(line)
        if cmd_name and arg is not None and Shell.is_source(arg):
            return self.default(line)
        return super().onecmd(line)

    def default(self, line):
        """Executes arbitrary lox source. Lines with unclosed braces/parentheses are held until they are closed."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line = self._tmp_line + line

            if Session.preprocess_line(line):
                self._tmp_line = line + "\n"
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            try:
                self.sess.run(line)
            finally:
                self.sess.reset()  # an error on one line doesn't end the session

    def do_tokens(self, arg):
        """tokens SOURCE: prints the tokens SOURCE scans to."""
        if not arg:
            self.sess.error_handler.warn("nothing to scan")
            return

        tokens, __ = self.sess.scan(arg)
        for token in tokens:
            print(token)

    def do_ast(self, arg):
        """ast SOURCE: prints the syntax tree SOURCE parses to."""
        if not arg:
            self.sess.error_handler.warn("nothing to parse")
            return

        statements, errors = self.sess.parse(arg)
        if not errors:
            printer = AstPrinter()
            for stmt in statements:
                print(printer.print(stmt))

    def do_vars(self, arg):
        """vars: lists the global variables defined so far."""
        if arg:
            return self.default(f"vars {arg}")

        for name, value in self.sess.environment.globals.items():
            print(f"{name} = {AstPrinter.render(value)}")

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        if arg:
            return self.default(f"help {arg}")

        print("Welcome to the lox interpreter!\n\n"
              "Type lox statements to run them, ex: 'var a = 1;' then 'print a + 2;'. Variables \n"
              "defined at the top level stay defined for the rest of the session. A line with \n"
              "an unclosed '{' or '(' continues on the next line.\n\n"
              "Commands: 'tokens SOURCE' and 'ast SOURCE' show how SOURCE is scanned and parsed, \n"
              "'vars' lists global variables, 'exit' (or Ctrl-D) leaves the interpreter. A command \n"
              "name followed by an operator, ex: 'vars = 2;', is run as lox source instead.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter. With an argument, the line is lox source instead (ex: 'EOF = 1;')."""
        if arg:
            return self.default(f"EOF {arg}")

        print()
        return True

    def do_exit(self, arg):
        """Exits interpreter. With an argument, the line is lox source instead (ex: 'exit = 1;')."""
        if arg:
            return self.default(f"exit {arg}")
        return True
