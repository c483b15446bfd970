"""Error handling for the props language. Only GenericExceptions should be encountered while compiling or running a
program: if another type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal
issue.

The core (props.pure) only ever raises the exceptions below and never prints them. Formatting is left to ErrorHandler,
which is used by the session, shell and command-line front-ends.
"""

import sys

from termcolor import colored


def _escape(text):
    """Escapes braces in text so that it can be embedded in a str.format template."""
    return str(text).replace("{", "{{").replace("}", "}}")


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a props error/warning. exprs are formatted
    into msg (bolded), and exprs[0] is taken to be the offending expression. start and end delimit the offending part
    of exprs[0], and are used for the caret diagnosis.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for GenericException or warning."""
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.msg = msg.format(*(colored(str(expr), attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = str(exprs[0])  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)


class MalformedArgumentToken(GenericException):
    """Raised by the classifier when a '$'-prefixed name is not followed by a positive integer."""

    def __init__(self, lexeme, source=None, start=0):
        self.lexeme = lexeme

        if source is None:
            source, start = lexeme, 0
        msg = "'{}' contains malformed argument placeholder '" + _escape(lexeme) + "' (expected '$' and an index >= 1)"
        super().__init__(msg, source, start=start, end=start + len(lexeme))


class ParseError(GenericException):
    """Raised by the parser. expected names the missing construct, found is the offending Token (None at end of
    input), and position is the index of found in the token sequence.
    """

    def __init__(self, expected, found, position, source="", start=0, end=-1):
        self.expected = expected
        self.found = found
        self.position = position

        found_desc = "end of input" if found is None else f"'{_escape(found.lexeme or found.value)}'"
        msg = "'{}' expected " + _escape(expected) + f", found {found_desc} (token {position})"
        super().__init__(msg, source or "<tokens>", start=start, end=end, diagnosis=bool(source))


class UnboundIdentifier(GenericException):
    """Raised by the evaluator when an identifier is not bound by any enclosing let."""

    def __init__(self, name):
        self.name = name
        super().__init__("identifier '{}' is not bound", name, diagnosis=False)


class ArgumentIndexOutOfRange(GenericException):
    """Raised by the evaluator when an argument placeholder addresses a slot outside of the argument vector."""

    def __init__(self, index, available):
        self.index = index
        self.available = available
        msg = "argument '{}' is out of range (" + f"{available} argument{'' if available == 1 else 's'} available)"
        super().__init__(msg, f"${index}", diagnosis=False)


class NonBooleanCondition(GenericException):
    """Raised by the evaluator when an if condition does not evaluate to a boolean."""

    def __init__(self, value):
        self.value = value
        super().__init__("if condition must be a boolean, got '{}'", repr(value), diagnosis=False)


class NonNumericOperand(GenericException):
    """Raised by the evaluator when plus/minus is applied to a boolean or any other non-number."""

    def __init__(self, op, value):
        self.op = op
        self.value = value
        super().__init__("'" + op + "' expects numbers, got '{}'", repr(value), diagnosis=False)


class TooManyArguments(GenericException):
    """Raised by an invoker when a call supplies more arguments than the program still expects."""

    def __init__(self, arity, supplied):
        self.arity = arity
        self.supplied = supplied
        super().__init__(f"program takes {arity} argument{'' if arity == 1 else 's'} but {{}} were supplied",
                         str(supplied), diagnosis=False)


class NonContiguousArguments(GenericException):
    """Raised at compile time when the argument indices of a program are not exactly 1..n."""

    def __init__(self, indices, source=""):
        self.indices = tuple(sorted(indices))
        referenced = ", ".join(f"${index}" for index in self.indices)
        msg = "'{}' references arguments " + referenced + f" but must reference $1 to ${len(self.indices)}"
        super().__init__(msg, source or "<tokens>", diagnosis=False)


class NestingTooDeep(GenericException):
    """Raised when a program nests let, if or eq/neq expressions deeper than the interpreter can recurse."""

    def __init__(self, stage, source=""):
        self.stage = stage
        msg = "'{}' is nested too deeply to " + stage + " (maximum recursion depth exceeded)"
        super().__init__(msg, source or "<tokens>", diagnosis=False)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom props errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded, with a caret line underneath."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR
        end = max(error.end, error.start + 1)

        diagnosis = "  " + error.expr[:error.start]
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    @staticmethod
    def notes(error):
        """Returns extra lines explaining error, for the errors that carry more than their message."""
        if isinstance(error, ParseError):
            found = "end of input" if error.found is None else f"{error.found!r}"
            return [f"the parser wanted {error.expected}", f"it stopped at token {error.position}: {found}"]
        if isinstance(error, TooManyArguments):
            return [f"{error.supplied - error.arity} argument(s) too many; the program is unchanged and can be "
                    f"called again"]
        if isinstance(error, NestingTooDeep):
            return ["bind inner parts to names with ':=' and apply them instead"]
        return []

    def location(self, error):
        """Returns 'file:line:col: ' for the innermost registered line, or '' if no line is registered."""
        innermost = None
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line:
                innermost = file, line, line_num

        if innermost is None:
            return ""
        file, line, line_num = innermost
        col = max(line.find(error.expr), 0) + error.start + 1
        return colored(f"{file}:{line_num}:{col}: ", attrs=["bold"])

    def report(self, error, label, color):
        """Prints error as a labelled message, followed by its notes and caret diagnosis."""
        print(self.location(error) + colored(f"{label}: ", color, attrs=["bold"]) + error.msg)

        for note in ErrorHandler.notes(error):
            print(colored("  note: ", attrs=["bold"]) + note)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=color == ErrorHandler.WARNING))

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        self.report(GenericException(*args, **kwargs), "warning", ErrorHandler.WARNING)

    def throw(self, error):
        """Prints error, preceded by the chain of statements that led to it when more than one file is involved.
        Exits if fatal, else forgets the registered lines.
        """
        frames = [(file, line, line_num) for file, (line, line_num) in self.traceback.items() if line]
        if len(frames) > 1:
            print("Statements (innermost last):")
            for file, line, line_num in frames:
                print(f"  {file}, line {line_num}: {line}")

        label = "internal error" if error.internal else "error"
        self.report(error, label, ErrorHandler.ERROR)

        if self.fatal:
            sys.exit(1)
        self.traceback = {}

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None or exc_type is SystemExit:
            return False

        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt", diagnosis=False))
        elif exc_type is RecursionError:
            self.throw(NestingTooDeep("run", "program"))
        elif issubclass(exc_type, GenericException):
            self.throw(exc_val)
        else:
            self.throw(GenericException(f"unknown error: '{exc_type.__name__}: {_escape(exc_val)}'", internal=True))
            return False  # re-raised so that the Python traceback is not lost

        return True
