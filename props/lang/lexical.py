"""Lexical analysis for props source text. Provides tokenization of program strings (a front-end for
props.pure.tokens) and the statements understood by sessions.

All grammar can be loosely defined as follows:

```
<define_stmt> ::= <name> ":=" <program>       ; compiles program once and binds it to name
                | <name> ":=" <apply_stmt>    ; binds the (possibly partial) result of an application
<apply_stmt>  ::= <name> <value>*             ; <name> must be bound to a program in the session
<exec_stmt>   ::= <program>                   ; program taking no arguments, evaluated immediately

<value>       ::= <number> | "true" | "false" | <name>  ; <name> must be bound to a value in the session
<comment>     ::= ";;" <char>*
```

Comments are handled in session.py: there is no dedicated Grammar class for comments.
"""

import re
from abc import abstractmethod, ABC

from props.lang.error import GenericException
from props.pure.invoker import Invoker, Program
from props.pure.tokens import Identifier, classify, is_number


COMMENT = ";;"
DECLARE = ":="
BOOLEANS = {"true": True, "false": False}

WORD = re.compile(r"\S+")


def tokenize(source):
    """Splits source on whitespace and classifies every word. Comments are dropped."""
    if COMMENT in source:
        source = source[:source.index(COMMENT)]
    return [classify(match.group(), source, match.start()) for match in WORD.finditer(source)]


def parse_value(word, namespace=None):
    """Returns the argument value that word represents: a number, a boolean, or a name bound to a value."""
    if namespace is None:
        namespace = {}

    if is_number(word):
        return float(word)
    elif word in BOOLEANS:
        return BOOLEANS[word]
    elif word in namespace and not isinstance(namespace[word], Invoker):
        return namespace[word]

    raise GenericException("'{}' is not a number, a boolean or a name bound to a value", word)


def show(value, name=None):
    """Returns value formatted the way it is written in props source."""
    if isinstance(value, Invoker):
        label = name if name else value.program.source
        return f"<{label}: {len(value.arguments)}/{value.program.arity} arguments>"
    elif isinstance(value, bool):
        return "true" if value else "false"
    elif isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class Grammar(ABC):
    """Superclass representing any statement in a props session."""

    def __init__(self, expr, original_expr=None):
        """Assumes check_grammar has been run."""
        if original_expr is None:
            original_expr = Grammar.preprocess(expr)

        self.expr = Grammar.preprocess(expr)
        self.original_expr = original_expr  # used for errors messages
        self._cls = type(self).__name__

    @staticmethod
    @abstractmethod
    def check_grammar(expr, original_expr, namespace):
        """This method should check expr's top-level grammar and return whether or not it is valid. It should also
        raise a GenericException if expr's top-level grammar is similar to the accepted grammar but syntactically
        invalid. original_expr is used for error messages.
        """

    @abstractmethod
    def execute(self, namespace):
        """Runs the statement against namespace (dict of name: Invoker or value). Returns the printable result, or
        None if there is nothing to print.
        """

    @staticmethod
    def preprocess(expr):
        """Removes surrounding whitespace."""
        return expr.strip()

    @classmethod
    def infer(cls, expr, namespace, original_expr=None):
        """Infers the type of expr and returns an object of the correct grammar subclass. Subclasses are tried in
        definition order, so ExecStmt (which accepts anything) must be defined last.
        """
        if original_expr is None:
            original_expr = expr

        for subclass in cls.__subclasses__():
            if subclass.check_grammar(expr, original_expr, namespace):
                return subclass(expr, original_expr)

        raise GenericException("'{}' is not valid props grammar", original_expr)

    def __repr__(self):
        return f"{self._cls}('{self.expr}')"

    def __str__(self):
        return self.expr

    def __eq__(self, other):
        return isinstance(other, type(self)) and other.expr == self.expr

    def __hash__(self):
        return hash(self.expr)


class DefineStmt(Grammar):
    """Binding statement in props: <NAME> := <program or application>."""

    def __init__(self, expr, original_expr=None):
        super().__init__(expr, original_expr)

        name, rval = self.expr.split(DECLARE)
        self.name = name.strip()
        self.rval = rval.strip()

    @staticmethod
    def check_grammar(expr, original_expr, namespace):
        expr = Grammar.preprocess(expr)

        # check 1: is ":=" in expr?
        decl = expr.find(DECLARE)
        if decl == -1:
            return False
        elif decl != expr.rfind(DECLARE):
            start = original_expr.rfind(DECLARE)
            raise GenericException("'{}' contains more than one ':='", original_expr, start=start, end=start + 2)

        lval, rval = expr.split(DECLARE)

        # check 2: is l-value a single identifier?
        words = lval.split()
        if len(words) != 1 or words[0] in BOOLEANS or not isinstance(classify(words[0]), Identifier):
            msg = "l-value of '{}' is not a valid name"
            raise GenericException(msg, original_expr, end=max(original_expr.find(DECLARE), 1))

        # check 3: is there an r-value at all?
        if not rval.strip():
            start = original_expr.find(DECLARE) + 2
            raise GenericException("'{}' is missing an r-value", original_expr, start=start, end=start + 1)

        return True

    def execute(self, namespace):
        if ApplyStmt.check_grammar(self.rval, self.original_expr, namespace):
            value = ApplyStmt(self.rval, self.original_expr).execute_raw(namespace)
        else:
            invoker = Invoker(Program.compile(tokenize(self.rval)))
            value = invoker() if invoker.remaining == 0 else invoker

        namespace[self.name] = value
        return None

    def __repr__(self):
        return f"{self._cls}(name='{self.name}', rval='{self.rval}')"


class ApplyStmt(Grammar):
    """Application of a named program to values: <NAME> <value>*."""

    def __init__(self, expr, original_expr=None):
        super().__init__(expr, original_expr)

        self.name, *self.args = self.expr.split()

    @staticmethod
    def check_grammar(expr, original_expr, namespace):
        words = Grammar.preprocess(expr).split()
        return bool(words) and isinstance(namespace.get(words[0]), Invoker)

    def execute_raw(self, namespace):
        """Applies the named program and returns the resulting value or Invoker."""
        args = [parse_value(arg, namespace) for arg in self.args]
        return namespace[self.name](*args)

    def execute(self, namespace):
        return show(self.execute_raw(namespace), self.name)


class ExecStmt(Grammar):
    """Program statement: compiled and evaluated at once. Programs that take arguments must be bound with ':=' and
    applied instead.
    """

    def __init__(self, expr, original_expr=None):
        super().__init__(expr, original_expr)

        self.program = Program.compile(tokenize(self.expr))

    @staticmethod
    def check_grammar(expr, original_expr, namespace):
        return bool(Grammar.preprocess(expr))

    def execute(self, namespace):
        if self.program.arity:
            return None
        return show(self.program.run(()))
