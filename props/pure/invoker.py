"""Compilation and curried invocation of props programs.

A program is parsed once into a Program (tree + arity). Invokers share that Program and only differ in the arguments
they have accumulated so far: calling an Invoker with fewer arguments than the program still needs returns a new
Invoker, calling it with exactly the remaining arguments evaluates the program.
"""

from dataclasses import dataclass

from props.lang.error import NestingTooDeep, NonContiguousArguments, TooManyArguments
from props.pure.evaluator import Environment, evaluate
from props.pure.nodes import Expr, argument_indices
from props.pure.parser import parse
from props.pure.tokens import source_of


@dataclass(frozen=True)
class Program:
    """Parsed program. arity is the number of distinct argument indices referenced by tree."""
    tree: Expr
    arity: int
    source: str = ""

    @classmethod
    def compile(cls, tokens):
        """Parses tokens and checks that the referenced argument indices are exactly 1..arity."""
        tokens = list(tokens)
        try:
            tree = parse(tokens)
        except RecursionError:
            raise NestingTooDeep("parse", source_of(tokens)) from None

        indices = argument_indices(tree)
        if indices != set(range(1, len(indices) + 1)):
            raise NonContiguousArguments(indices, source_of(tokens))

        return cls(tree, len(indices), source_of(tokens))

    def run(self, arguments):
        """Evaluates the program with a complete argument vector, starting from an empty scope."""
        try:
            return evaluate(self.tree, Environment.EMPTY, tuple(arguments))
        except RecursionError:
            raise NestingTooDeep("evaluate", self.source) from None


class Invoker:
    """Callable wrapper around a Program that implements left-to-right currying."""

    def __init__(self, program, arguments=()):
        self.program = program
        self.arguments = tuple(arguments)

    @property
    def remaining(self):
        """Number of arguments still needed before the program is evaluated."""
        return self.program.arity - len(self.arguments)

    def __call__(self, *args):
        if len(args) > self.remaining:
            raise TooManyArguments(self.remaining, len(args))

        arguments = self.arguments + args
        if len(arguments) == self.program.arity:
            return self.program.run(arguments)
        return Invoker(self.program, arguments)

    call = __call__

    def __repr__(self):
        return f"<Invoker '{self.program.source}': {len(self.arguments)}/{self.program.arity} arguments>"


def parse_and_compile(tokens):
    """Compiles tokens into an Invoker with no arguments applied."""
    return Invoker(Program.compile(tokens))
