"""Runs props programs from a file, from the command line, or in an interactive shell. Also uses the error handling
context manager. Called from the props console script.
"""

import argparse

from props.lang.error import ErrorHandler, GenericException
from props.lang.lexical import parse_value, show, tokenize
from props.lang.session import Session
from props.lang.shell import Shell
from props.pure.invoker import Invoker, parse_and_compile


def run_command(program, args):
    """Compiles program and applies it to args (strings, parsed as values). Returns the printable result."""
    invoker = parse_and_compile(tokenize(program))
    result = invoker(*(parse_value(arg) for arg in args))

    if isinstance(result, Invoker):
        remaining = result.remaining
        msg = "'{}' needs " + f"{remaining} more argument{'' if remaining == 1 else 's'}"
        raise GenericException(msg, program, diagnosis=False)

    return show(result)


def main(argv=None):
    """Runs props interpreter. Called from props console script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="props", description="props expression interpreter")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("-c", "--command", help="program to run instead of a file, applied to ARGS")
        parser.add_argument("args", help="arguments for the --command program", nargs="*", metavar="ARGS")
        args = parser.parse_args(argv)

        if args.command is not None:
            error_handler.register_file(Session.SH_FILE)
            error_handler.register_line(Session.SH_FILE, args.command, 1)

            # with --command, every positional is an argument of the program
            values = ([args.file] if args.file is not None else []) + args.args
            print(run_command(args.command, values))

        elif args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False)
            sess.run()

            for result in sess.results:
                print(result)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()


if __name__ == "__main__":
    main()
