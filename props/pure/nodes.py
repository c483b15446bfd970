"""Abstract syntax tree of a props program. Nodes are frozen, so a parsed tree can be cached and shared by every
invocation of its program.
"""

from dataclasses import dataclass


ADD = "Add"
SUB = "Sub"
EQ = "Eq"
NOT_EQ = "NotEq"

BINARY_KINDS = {"plus": ADD, "minus": SUB, "eq": EQ, "neq": NOT_EQ}


class Expr:
    """Superclass for every AST node."""

    @property
    def nodes(self):
        """Child nodes, in source order."""
        return ()

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Expr>(<fields>, nodes=[
            <Expr>(<fields>, nodes=[
                ...
                <Expr>(<fields>)  # <-- if nodes is empty
            ])
        ])
        """
        result = f"{'    ' * indents}{type(self).__name__}({self._fields()}"
        if self.nodes:
            result += ", nodes=[" if self._fields() else "nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"

    def _fields(self):
        return ""

    def walk(self):
        """Yields self and every descendant node, depth-first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.nodes))


@dataclass(frozen=True)
class NumberLiteral(Expr):
    value: float

    def _fields(self):
        return f"value={self.value!r}"


@dataclass(frozen=True)
class ArgumentRef(Expr):
    index: int

    def _fields(self):
        return f"index={self.index}"


@dataclass(frozen=True)
class IdentifierRef(Expr):
    name: str

    def _fields(self):
        return f"name='{self.name}'"


@dataclass(frozen=True)
class BinaryOp(Expr):
    kind: str
    left: Expr
    right: Expr

    @property
    def nodes(self):
        return self.left, self.right

    def _fields(self):
        return f"kind={self.kind}"


@dataclass(frozen=True)
class Let(Expr):
    """let name bound in body: body sees name, bound does not."""
    name: str
    bound: Expr
    body: Expr

    @property
    def nodes(self):
        return self.bound, self.body

    def _fields(self):
        return f"name='{self.name}'"


@dataclass(frozen=True)
class If(Expr):
    cond: Expr
    then: Expr
    orelse: Expr

    @property
    def nodes(self):
        return self.cond, self.then, self.orelse


def argument_indices(tree):
    """Returns the set of argument indices referenced anywhere in tree."""
    return {node.index for node in tree.walk() if isinstance(node, ArgumentRef)}
