"""Tree-walking evaluator for props expression trees.

Evaluation is a pure function of (tree, environment, arguments): environments are never mutated, a let expression
extends a copy instead, so a cached tree can be evaluated concurrently with different arguments.
"""

from collections.abc import Mapping

from props.lang.error import (ArgumentIndexOutOfRange, GenericException, NonBooleanCondition, NonNumericOperand,
                              UnboundIdentifier)
from props.pure.nodes import ADD, EQ, NOT_EQ, SUB, ArgumentRef, BinaryOp, IdentifierRef, If, Let, NumberLiteral


class Environment(Mapping):
    """Immutable mapping of let-bound names to values."""

    def __init__(self, bindings=None):
        self._bindings = dict(bindings) if bindings else {}

    def extend(self, name, value):
        """Returns a new Environment with name bound to value. self is left untouched."""
        return Environment({**self._bindings, name: value})

    def lookup(self, name):
        """Returns the value bound to name, or raises UnboundIdentifier."""
        try:
            return self._bindings[name]
        except KeyError:
            raise UnboundIdentifier(name) from None

    def __getitem__(self, name):
        return self._bindings[name]

    def __iter__(self):
        return iter(self._bindings)

    def __len__(self):
        return len(self._bindings)

    def __repr__(self):
        return f"Environment({self._bindings!r})"


Environment.EMPTY = Environment()


def equals(left, right):
    """Value equality without coercion: booleans are never equal to numbers."""
    return isinstance(left, bool) == isinstance(right, bool) and left == right


def numeric(value, op):
    """Returns value as a float, or raises NonNumericOperand if value is not a number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise NonNumericOperand(op, value)
    return float(value)


def evaluate(node, environment, arguments):
    """Reduces node to a number or boolean. arguments is the argument vector addressed by ArgumentRefs (1-based)."""
    if isinstance(node, NumberLiteral):
        return node.value

    elif isinstance(node, ArgumentRef):
        if not 1 <= node.index <= len(arguments):
            raise ArgumentIndexOutOfRange(node.index, len(arguments))
        return arguments[node.index - 1]

    elif isinstance(node, IdentifierRef):
        return environment.lookup(node.name)

    elif isinstance(node, BinaryOp) and node.kind in (ADD, SUB):
        # plus/minus chains lean left: fold the left spine iteratively
        chain = []
        while isinstance(node, BinaryOp) and node.kind in (ADD, SUB):
            chain.append(node)
            node = node.left

        total = evaluate(node, environment, arguments)
        for link in reversed(chain):
            right = evaluate(link.right, environment, arguments)
            if link.kind == ADD:
                total = numeric(total, "plus") + numeric(right, "plus")
            else:
                total = numeric(total, "minus") - numeric(right, "minus")
        return total

    elif isinstance(node, BinaryOp):
        left = evaluate(node.left, environment, arguments)
        right = evaluate(node.right, environment, arguments)

        if node.kind == EQ:
            return equals(left, right)
        elif node.kind == NOT_EQ:
            return not equals(left, right)

        raise GenericException("unknown binary operator '{}'", node.kind, internal=True)

    elif isinstance(node, Let):
        value = evaluate(node.bound, environment, arguments)
        return evaluate(node.body, environment.extend(node.name, value), arguments)

    elif isinstance(node, If):
        cond = evaluate(node.cond, environment, arguments)
        if not isinstance(cond, bool):
            raise NonBooleanCondition(cond)
        return evaluate(node.then if cond else node.orelse, environment, arguments)

    raise GenericException("cannot evaluate '{}'", repr(node), internal=True)
