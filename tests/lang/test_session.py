import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from props.lang.error import ErrorHandler, GenericException, UnboundIdentifier
from props.lang.session import Session
from props.lang.shell import Shell

PROGRAM = """\
;; arithmetic helpers
add := $1 plus $2
sub := $1 minus $2   ;; trailing comment
inc := add 1

six := sub 3 2
add 5 six
inc 41
5 eq 5
max := if $1 eq $2 then $1 \\
       else $2
max 3 3
add 1
"""


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.error_handler = ErrorHandler(fatal=False)

    def _write(self, text):
        fd, path = tempfile.mkstemp(suffix=".props")
        with os.fdopen(fd, "w") as file:
            file.write(text)
        self.addCleanup(os.remove, path)
        return path

    def test_preprocess_line(self):
        cases = {
            "5 eq 5 ;; yes": ("5 eq 5", False),
            "let x 1 \\": ("let x 1 ", True),
            "   ": ("", False),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Session.preprocess_line(case, 1, False), case)

        exprs = []
        for line_num, line in enumerate(["let x 1 \\", "  in x", "", "x := 2"]):
            Session.preprocess_line(line, line_num + 1, line_num == 1, exprs)
        self.assertEqual([("let x 1 in x", 1), ("x := 2", 4)], exprs)

    def test_file(self):
        path = self._write(PROGRAM)
        sess = Session(self.error_handler, path, cmd_line=False)
        sess.run()

        self.assertEqual(["6", "42", "true", "3", "<add: 1/2 arguments>"], sess.results)
        self.assertEqual({}, sess.to_exec)

    def test_missing_file(self):
        self.assertRaises(GenericException, Session, self.error_handler, "/nonexistent/file.props", False)

    def test_reserved_filename(self):
        self.assertRaises(GenericException, Session, self.error_handler, Session.SH_FILE, False)

    def test_command_line(self):
        sess = Session(self.error_handler, Session.SH_FILE, cmd_line=True)
        self.assertFalse(self.error_handler.fatal)

        sess.add("double := $1 plus $1", 1)
        sess.add("double 21", 2)
        sess.run()
        self.assertEqual("42", sess.pop())
        self.assertEqual([], sess.results)

        self.assertRaises(ValueError, sess.add, "   ", 3)

    def test_runtime_error_is_raised(self):
        sess = Session(self.error_handler, Session.SH_FILE, cmd_line=True)
        sess.add("x plus 1", 1)
        self.assertRaises(UnboundIdentifier, sess.run)
        self.assertEqual({}, sess.to_exec)

    def test_program_with_arguments_warns(self):
        sess = Session(self.error_handler, Session.SH_FILE, cmd_line=True)
        sess.add("$1 plus 1", 1)

        out = io.StringIO()
        with redirect_stdout(out):
            sess.run()

        self.assertIn("warning", out.getvalue())
        self.assertEqual([], sess.results)


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.shell = Shell(Session(ErrorHandler(fatal=False), Session.SH_FILE, cmd_line=True))

    def _run(self, *lines):
        out = io.StringIO()
        with redirect_stdout(out):
            for line in lines:
                self.shell.onecmd(line)
        return out.getvalue()

    def test_statements(self):
        out = self._run("add := $1 plus $2", "add 1 2", "inc := add 1", "inc 41", "1 neq 2")
        self.assertEqual("3\n42\ntrue\n", out)

    def test_continuation(self):
        out = self._run("if 1 eq 1 \\", "then 2 else 3")
        self.assertEqual("2\n", out)
        self.assertEqual(self.shell._tmp_prompt, self.shell.prompt)

    def test_errors_do_not_exit(self):
        out = self._run("let x in x", "2 plus 2")
        self.assertIn("error", out)
        self.assertTrue(out.endswith("4\n"))

    def test_tree(self):
        out = self._run("tree $1 plus 2")
        self.assertIn("BinaryOp(kind=Add, nodes=[", out)
        self.assertIn("ArgumentRef(index=1)", out)
        self.assertIn("arity: 1", out)

    def test_tokens(self):
        out = self._run("tokens let x $1 in x")
        self.assertEqual("Keyword('let') Identifier('x') ArgumentPlaceholder(1) Keyword('in') Identifier('x')\n", out)

    def test_exit(self):
        self.assertTrue(self.shell.onecmd("exit"))


if __name__ == '__main__':
    unittest.main()
