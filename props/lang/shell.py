"""Handles interactive/command-line mode for the props interpreter. Uses cmd as backend."""

import cmd

from props.lang.lexical import tokenize
from props.pure.invoker import Program


class Shell(cmd.Cmd):
    """props interpreter shell."""
    intro = "props expression interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continutations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary props statement."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(line, self.line_num, False)
            line = (self._tmp_line + " " + line).strip()

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            try:
                self.sess.add(line, self.line_num)
            except ValueError:
                return  # if line is empty, terminate

            self.sess.run()

            while self.sess.results:
                print(self.sess.pop())

    def do_tree(self, arg):
        """Displays the syntax tree of a program: tree <program>"""
        with self.sess.error_handler:
            program = Program.compile(tokenize(arg))
            print(program.tree.display())
            print(f"arity: {program.arity}")

    def do_tokens(self, arg):
        """Displays the classified tokens of a program: tokens <program>"""
        with self.sess.error_handler:
            print(" ".join(repr(token) for token in tokenize(arg)))

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the props interpreter!\n\n"
              "props is a tiny expression language with numbers, 'plus', 'minus', 'eq', 'neq',\n"
              "'let NAME EXPR in EXPR' and 'if EXPR then EXPR else EXPR'. Programs take positional\n"
              "arguments $1, $2, ... and are curried automatically.\n\n"
              "Try it out by typing 'add := $1 plus $2'. This will bind a program to the name\n"
              "'add'. Next, try typing 'add 1 2', which gives 3, or 'inc := add 1' followed by\n"
              "'inc 41'. Use 'tree EXPR' to look at a program's syntax tree.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
