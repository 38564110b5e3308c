import io
import os
import tempfile
import unittest

from lox.lang.error import ErrorHandler, SourceError
from lox.lang.session import RunResult, Session


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.output = []
        self.stream = io.StringIO()
        self.sess = Session(ErrorHandler(stream=self.stream), output=self.output.append)

    def test_run(self):
        self.assertEqual(RunResult.OK, self.sess.run("print \"hello\";"))
        self.assertEqual(["hello"], self.output)
        self.assertFalse(self.sess.had_error)
        self.assertFalse(self.sess.had_runtime_error)
        self.assertEqual("", self.stream.getvalue())

    def test_static_errors_suppress_execution(self):
        should_fail = ["var ; print 1;", "print 1; @", "print 1; print \"open", "print 1; print 2"]
        for case in should_fail:
            self.output.clear()
            self.assertEqual(RunResult.STATIC_ERROR, self.sess.run(case), case)
            self.assertEqual([], self.output, case)
            self.assertTrue(self.sess.had_error, case)
            self.sess.reset()

    def test_one_error_reported_per_malformed_statement(self):
        self.sess.run("var ; print 1;")
        self.assertEqual(1, self.stream.getvalue().count("error"))
        self.assertIn("Expect variable name, got ';'.", self.stream.getvalue())

    def test_runtime_error(self):
        self.assertEqual(RunResult.RUNTIME_ERROR, self.sess.run("print undefinedName;"))
        self.assertTrue(self.sess.had_runtime_error)
        self.assertFalse(self.sess.had_error)
        self.assertIn("Undefined variable 'undefinedName'.", self.stream.getvalue())

    def test_nesting_too_deep(self):
        sums = " + ".join(["1"] * 5000)
        cases = {
            "print " + "(" * 1000 + "1" + ")" * 1000 + ";": RunResult.STATIC_ERROR,
            "{ print " + sums + "; }": RunResult.RUNTIME_ERROR,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, self.sess.run(case), case[:20])
            self.assertEqual(0, self.sess.environment.depth, case[:20])
            self.sess.reset()
        self.assertEqual(2, self.stream.getvalue().count("maximum recursion depth exceeded"))

        self.assertEqual(RunResult.OK, self.sess.run("print (((1)));"))
        self.assertEqual(["1"], self.output)

    def test_runtime_error_points_at_operator(self):
        self.assertEqual(RunResult.RUNTIME_ERROR, self.sess.run("print 1 - 2 - \"x\";"))
        caret = self.stream.getvalue().splitlines()[-1]
        self.assertTrue(caret.startswith(" " * (2 + 12)))
        self.assertNotEqual(" ", caret[2 + 12])

    def test_globals_persist_between_runs(self):
        lines = ["var a = 1;", "{ var a = 5; }", "a = a + 1;", "print a;"]
        for line in lines:
            self.assertEqual(RunResult.OK, self.sess.run(line), line)
        self.assertEqual(["2"], self.output)

    def test_command_line_recovery(self):
        self.assertEqual(RunResult.STATIC_ERROR, self.sess.run("var ;"))
        self.sess.reset()
        self.assertFalse(self.sess.had_error)

        self.assertEqual(RunResult.OK, self.sess.run("print 1;"))
        self.assertEqual(["1"], self.output)

        self.assertEqual(RunResult.RUNTIME_ERROR, self.sess.run("var a = 1; print nope; var b = 2;"))
        self.sess.reset()

        self.assertEqual(RunResult.OK, self.sess.run("print a;"))  # made before the error, so it stays
        self.assertEqual(RunResult.RUNTIME_ERROR, self.sess.run("print b;"))
        self.assertEqual(["1", "1"], self.output)

    def test_sessions_are_independent(self):
        other_output = []
        other = Session(ErrorHandler(stream=io.StringIO()), output=other_output.append)

        self.sess.run("var shared = 1;")
        self.assertEqual(RunResult.RUNTIME_ERROR, other.run("print shared;"))
        self.assertTrue(other.had_runtime_error)
        self.assertFalse(self.sess.had_runtime_error)

    def test_parse(self):
        statements, errors = self.sess.parse("print 1; @ var ;")
        self.assertEqual(2, len(errors))
        self.assertEqual(1, len(statements))

    def test_preprocess_line(self):
        should_continue = ["{", "if (a) {", "while (true) { {", "print (1 +", "{ print \"}\";"]
        for case in should_continue:
            self.assertTrue(Session.preprocess_line(case), case)

        should_run = ["", "print 1;", "{ }", "}", "print \"{\";", "// {"]
        for case in should_run:
            self.assertFalse(Session.preprocess_line(case), case)

    def test_run_file(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "script.lox")
            with open(path, "w", encoding="utf-8") as file:
                file.write("for (var i = 0; i < 3; i = i + 1) print i;\n")

            self.assertEqual(RunResult.OK, self.sess.run_file(path))
            self.assertEqual(["0", "1", "2"], self.output)

    def test_run_file_diagnostics(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "bad.lox")
            with open(path, "w", encoding="utf-8") as file:
                file.write("print 1;\nprint oops;\n")

            self.assertEqual(RunResult.RUNTIME_ERROR, self.sess.run_file(path))
            self.assertIn(f"{path}:2: ", self.stream.getvalue())
            self.assertIn("print ", self.stream.getvalue())  # offending line is shown

    def test_missing_file(self):
        with self.assertRaises(SourceError) as cm:
            self.sess.run_file(os.path.join(tempfile.gettempdir(), "does", "not", "exist.lox"))
        self.assertEqual(66, cm.exception.exit_code)


if __name__ == '__main__':
    unittest.main()
