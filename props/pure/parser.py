"""Recursive-descent parser for the props language. Consumes a sequence of classified Tokens (see props.pure.tokens)
and produces a single expression tree (see props.pure.nodes).

Formally, the props grammar can be defined as

```
<program>  ::= <let>                                      ; must consume every token
<let>      ::= "let" <identifier> <let> "in" <let>        ; bound expr is evaluated in the enclosing scope
             | <if>
<if>       ::= "if" <if> "then" <if> "else" <if>          ; only the selected branch is evaluated
             | <eq>
<eq>       ::= <add> [ ("eq" | "neq") <eq> ]              ; right-chaining
<add>      ::= <operand> { ("plus" | "minus") <operand> }  ; associating by left: a - b - c = ((a - b) - c)
<operand>  ::= <number> | <argument> | <identifier>
```

"multiply" and "divide" are reserved keywords without semantics: encountering one is a parse error.

The parser is fail-fast: the first grammar violation raises a ParseError naming the expected construct and the
offending token, and no partial tree is returned.
"""

from props.lang.error import ParseError
from props.pure.nodes import BINARY_KINDS, ArgumentRef, BinaryOp, IdentifierRef, If, Let, NumberLiteral
from props.pure.tokens import ArgumentPlaceholder, Identifier, Number, is_keyword, source_of


UNSUPPORTED = ("multiply", "divide")


class Parser:
    """Parses one program. A Parser is single-use: call parse once."""

    def __init__(self, tokens):
        self.tokens = list(tokens)
        self.pos = 0

        self.source = source_of(self.tokens)
        self._offsets = []
        offset = 0
        for token in self.tokens:
            self._offsets.append(offset)
            offset += len(token.lexeme or str(token.value)) + 1

    def parse(self):
        """Returns the tree of the whole token sequence."""
        tree = self.let_expr()
        if self.peek() is not None:
            raise self.error("end of input")
        return tree

    def let_expr(self):
        if not is_keyword(self.peek(), "let"):
            return self.if_expr()
        self.advance()

        name = self.peek()
        if not isinstance(name, Identifier):
            raise self.error("identifier after 'let'")
        self.advance()

        bound = self.let_expr()
        self.expect("in", "'in' after let-bound expression")
        body = self.let_expr()

        return Let(name.value, bound, body)

    def if_expr(self):
        if not is_keyword(self.peek(), "if"):
            return self.eq_expr()
        self.advance()

        cond = self.if_expr()
        self.expect("then", "'then' after if condition")
        then = self.if_expr()
        self.expect("else", "'else' after then-branch")
        orelse = self.if_expr()

        return If(cond, then, orelse)

    def eq_expr(self):
        left = self.add_expr()

        if is_keyword(self.peek(), "eq", "neq"):
            op = self.advance()
            self._unsupported()
            if not self._at_operand():
                raise self.error(f"operand after '{op.value}'")
            return BinaryOp(BINARY_KINDS[op.value], left, self.eq_expr())

        return left

    def add_expr(self):
        tree = self.operand("expression")

        while is_keyword(self.peek(), "plus", "minus"):
            op = self.advance()
            tree = BinaryOp(BINARY_KINDS[op.value], tree, self.operand(f"operand after '{op.value}'"))

        self._unsupported()
        return tree

    def operand(self, expected):
        token = self.peek()

        if isinstance(token, Number):
            node = NumberLiteral(token.value)
        elif isinstance(token, ArgumentPlaceholder):
            node = ArgumentRef(token.value)
        elif isinstance(token, Identifier):
            node = IdentifierRef(token.value)
        else:
            self._unsupported()
            raise self.error(expected)

        self.advance()
        return node

    def peek(self):
        """Returns the current token, or None at end of input."""
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def advance(self):
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def expect(self, keyword, expected):
        """Consumes keyword, or raises a ParseError naming expected."""
        if not is_keyword(self.peek(), keyword):
            raise self.error(expected)
        return self.advance()

    def error(self, expected):
        """Returns a ParseError for the current token."""
        found = self.peek()
        if found is None:
            start = len(self.source) + 1 if self.source else 0
            end = start + 1
        else:
            start = self._offsets[self.pos]
            end = start + len(found.lexeme or str(found.value))

        return ParseError(expected, found, self.pos, self.source, start=start, end=end)

    def _at_operand(self):
        return isinstance(self.peek(), (Number, ArgumentPlaceholder, Identifier))

    def _unsupported(self):
        """Raises a ParseError if the current token is a reserved keyword without semantics."""
        token = self.peek()
        if is_keyword(token, *UNSUPPORTED):
            raise self.error(f"a supported operator ('{token.value}' is reserved but not supported)")


def parse(tokens):
    """Parses tokens into a single expression tree."""
    return Parser(tokens).parse()
