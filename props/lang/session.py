"""Session control for the props language. Runs props statements, either from a file or from the command line, and
keeps track of the programs and values bound by them.
"""

from props.lang.error import GenericException
from props.lang.lexical import COMMENT, ExecStmt, Grammar


class Session:
    """Governs a props session, with control over the names bound by define statements."""
    SH_FILE = "<in>"     # command-line interpreter filename
    CONTINUATION = "\\"  # trailing character that joins a line with the next one

    def __init__(self, error_handler, path, cmd_line):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.namespace = {}  # dict of name: Invoker or value bound in the current session
        self.to_exec = {}    # dict of line num: statements to execute
        self.results = []    # printable results of executed statements, in order

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            exprs = []
            add_to_prev = False

            try:
                with open(path, "r") as file:
                    for line_num, line in enumerate(file):
                        __, add_to_prev = self.preprocess_line(line, line_num + 1, add_to_prev, exprs)
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            for expr, line_num in exprs:
                self.add(expr, line_num)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line, line_num, add_to_prev, exprs=None):
        """Preprocesses a line from a file or command-line. In command-line mode, exprs can be ignored (used to keep
        track of file's exprs), but add_to_prev will indicate whether a line continuation is necessary. Returns
        updated value of line and add_to_prev.
        """
        if COMMENT in line:
            line = line[:line.index(COMMENT)]  # get rid of comments

        line = line.rstrip()
        continued = line.endswith(Session.CONTINUATION)
        if continued:
            line = line[:-len(Session.CONTINUATION)]

        if exprs is not None:
            if add_to_prev and exprs:
                prev, prev_num = exprs.pop()
                exprs.append((prev + " " + line.strip(), prev_num))
            elif line.strip():
                exprs.append((line.strip(), line_num))

        return line, continued

    def add(self, expr, line_num=None):
        """Adds a statement to the current session. Statements are not run until run is called."""
        if line_num is None:
            line_num = max(self.to_exec, default=0) + 1

        self.error_handler.register_line(self.path, expr, line_num)  # in case error is raised

        if not Grammar.preprocess(expr):
            raise ValueError("empty statement")
        self.to_exec[line_num] = expr

        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """Runs this session's statements in order, binding names and collecting results. Will raise any errors that
        are encountered. Statements are classified when they run, since whether a line applies a named program depends
        on the names bound by earlier lines.
        """
        for line_num, expr in sorted(self.to_exec.items()):
            self.error_handler.register_line(self.path, expr, line_num)

            try:
                stmt = Grammar.infer(expr, self.namespace)

                if isinstance(stmt, ExecStmt) and stmt.program.arity:
                    msg = "'{}' takes arguments and was not run (bind it with ':=' and apply it)"
                    self.error_handler.warn(msg, expr, diagnosis=False)

                result = stmt.execute(self.namespace)
                if result is not None:
                    self.results.append(result)
            finally:
                del self.to_exec[line_num]

            self.error_handler.remove_line(self.path)

    def pop(self):
        """Removes and returns the oldest unread result."""
        return self.results.pop(0)
