"""Token classification for the props language.

A program is a flat sequence of symbolic names. Each name is classified, in order, as:

```
<number>      ::= ["+" | "-"] <digits> ["." <digits>] [<exponent>]  ; decimal literals only ("inf"/"nan" are names)
<keyword>     ::= "plus" | "minus" | "multiply" | "divide" | "let" | "in" | "eq" | "neq" | "if" | "then" | "else"
<argument>    ::= "$" <digits>                                        ; 1-based positional argument
<identifier>  ::= <anything else>
```
"""

import re
from dataclasses import dataclass, field

from props.lang.error import MalformedArgumentToken


KEYWORDS = ("plus", "minus", "multiply", "divide", "let", "in", "eq", "neq", "if", "then", "else")
SIGIL = "$"

NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class Token:
    """Superclass for classified names. value is what the parser consumes, lexeme is the name the token was classified
    from (only used for error messages).
    """
    value: object
    lexeme: str = field(default="", compare=False)

    def __repr__(self):
        return f"{type(self).__name__}({self.value!r})"


class Number(Token):
    """Numeric literal. value is a float."""


class Keyword(Token):
    """Reserved operator/keyword. value is the keyword itself."""


class Identifier(Token):
    """Name bound by a let expression."""


class ArgumentPlaceholder(Token):
    """Positional argument. value is its 1-based index."""


def is_number(name):
    """Whether or not name is a decimal numeric literal."""
    return NUMBER_PATTERN.fullmatch(name) is not None


def classify(name, source=None, offset=0):
    """Returns the Token that name represents. source and offset locate name in a larger program text and are used
    for diagnostics only. Python numbers (not bools) are accepted too, so that builders can index with them.
    """
    if isinstance(name, (int, float)) and not isinstance(name, bool):
        return Number(float(name), str(name))

    name = str(name)

    if is_number(name):
        return Number(float(name), name)

    elif name in KEYWORDS:
        return Keyword(name, name)

    elif name.startswith(SIGIL):
        digits = name[len(SIGIL):]
        if not (digits.isascii() and digits.isdigit()) or int(digits) < 1:
            raise MalformedArgumentToken(name, source, offset)
        return ArgumentPlaceholder(int(digits), name)

    return Identifier(name, name)


def is_keyword(token, *keywords):
    """Whether or not token is a Keyword in keywords."""
    return isinstance(token, Keyword) and token.value in keywords


def source_of(tokens):
    """Reconstructs the program text of tokens, one space between lexemes."""
    return " ".join(token.lexeme or str(token.value) for token in tokens)
