import io
import unittest
from contextlib import redirect_stdout

from lox.lang.error import ErrorHandler
from lox.lang.session import Session
from lox.lang.shell import Shell


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.output = []
        self.stream = io.StringIO()
        self.shell = Shell(Session(ErrorHandler(stream=self.stream), output=self.output.append))

    def feed(self, *lines):
        """Runs lines through the shell, returning whether it asked to stop and what it printed."""
        stdout = io.StringIO()
        stop = False
        with redirect_stdout(stdout):
            for line in lines:
                stop = self.shell.onecmd(line)
        return stop, stdout.getvalue()

    def test_lines_share_globals(self):
        self.feed("var a = 1;", "a = a + 1;", "print a;")
        self.assertEqual(["2"], self.output)

    def test_error_does_not_end_session(self):
        stop, __ = self.feed("var ;", "print undefinedName;", "print 1;")
        self.assertFalse(stop)
        self.assertEqual(["1"], self.output)
        self.assertFalse(self.shell.sess.had_error)
        self.assertFalse(self.shell.sess.had_runtime_error)
        self.assertIn("Expect variable name", self.stream.getvalue())
        self.assertIn("Undefined variable 'undefinedName'.", self.stream.getvalue())

    def test_line_continuation(self):
        self.feed("var i = 0;", "while (i < 2) {")
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)
        self.assertEqual([], self.output)

        self.feed("print i;", "i = i + 1;", "}")
        self.assertEqual(Shell._tmp_prompt, self.shell.prompt)
        self.assertEqual(["0", "1"], self.output)

    def test_exit(self):
        stop, __ = self.feed("exit")
        self.assertTrue(stop)

        stop, __ = self.feed("EOF")
        self.assertTrue(stop)

    def test_command_names_as_source(self):
        stop, __ = self.feed("var exit = 1;", "exit = 2;", "print exit;")
        self.assertFalse(stop)
        self.assertEqual(["2"], self.output)

    def test_command_names_as_variables(self):
        cases = {
            "tokens": ["2"],
            "ast": ["2"],
            "vars": ["2"],
            "EOF": ["2"],
        }
        for case, expected in cases.items():
            self.output.clear()
            stop, printed = self.feed(f"var {case} = 1;", f"{case} = 2;", f"print {case};")
            self.assertFalse(stop, case)
            self.assertEqual("", printed, case)
            self.assertEqual(expected, self.output, case)

        self.output.clear()
        self.feed("vars = vars + tokens;", "vars;", "print vars == 4;")
        self.assertEqual(["true"], self.output)

    def test_command_names_in_continuation(self):
        stop, printed = self.feed("var vars = 1;", "var tokens = 2;", "print (", "vars", "+", "tokens", ");")
        self.assertFalse(stop)
        self.assertEqual("", printed)
        self.assertEqual(["3"], self.output)

        stop, __ = self.feed("{", "EOF")
        self.assertTrue(stop)

    def test_commands_still_run(self):
        self.feed("var tokens = 1;")

        cases = {
            "vars": ["tokens = 1"],
            "tokens print 1;": ["PRINT print None", "NUMBER 1 1.0", "SEMICOLON ; None", "EOF  None"],
            "ast -1;": ["(; (- 1))"],
            "ast (1);": ["(; (group 1))"],
        }
        for case, expected in cases.items():
            __, printed = self.feed(case)
            self.assertEqual(expected, printed.splitlines(), case)
        self.assertEqual([], self.output)

    def test_emptyline(self):
        self.feed("print 1;")
        self.feed("")
        self.assertEqual(["1"], self.output)

    def test_tokens(self):
        __, printed = self.feed("tokens var a;")
        self.assertEqual(["VAR var None", "IDENTIFIER a None", "SEMICOLON ; None", "EOF  None"],
                         printed.splitlines())

        self.feed("tokens")
        self.assertIn("nothing to scan", self.stream.getvalue())

    def test_ast(self):
        __, printed = self.feed("ast for (;;) print 1 + 2;")
        self.assertEqual(["(while true (print (+ 1 2)))"], printed.splitlines())

        __, printed = self.feed("ast print;")
        self.assertEqual("", printed)
        self.assertIn("Expect expression", self.stream.getvalue())

    def test_vars(self):
        __, printed = self.feed("var a = 1;", "var b = \"two\";", "var c;", "vars")
        self.assertEqual(["a = 1", "b = \"two\"", "c = nil"], printed.splitlines())

    def test_help(self):
        __, printed = self.feed("help")
        self.assertIn("Welcome to the lox interpreter!", printed)


if __name__ == '__main__':
    unittest.main()
