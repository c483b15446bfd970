"""Symbolic front-end for props: programs are written by chaining attribute accesses and indexing on a Props object.

```
>>> add = Props().let.x['$1'].in_.x.plus['$2']
>>> add(1, 2)
3.0
>>> add(1)(9)
10.0
```

Attribute names and index keys are classified exactly like words of program text (see props.pure.tokens). Since
`in`, `if` and `else` are Python keywords, they are written with a trailing underscore (`.in_`, `.if_`, `.else_`) or
as an index (`['in']`). Numbers and argument placeholders are written as indices (`[5]`, `['$1']`), and a tuple index
appends several tokens at once (`[1, 'plus', 2]`).
"""

from props.pure.invoker import parse_and_compile
from props.pure.tokens import KEYWORDS, classify, source_of


class Props:
    """Immutable chain of tokens. Every attribute access or index returns a new Props with one more token; calling
    a Props compiles its tokens (once) and invokes the program with the given arguments.

    Names starting with an underscore that belong to this class (`_tokens`, `_invoker`, `_extend`) cannot be used as
    identifiers, and dunder names are never tokens.
    """

    def __init__(self, tokens=()):
        self._tokens = tuple(tokens)
        self._invoker = None

    def _extend(self, *names):
        return Props(self._tokens + tuple(classify(name) for name in names))

    def __getattr__(self, name):
        if name.startswith("__") and name.endswith("__") or name in ("_tokens", "_invoker"):
            raise AttributeError(name)
        if name.endswith("_") and name[:-1] in KEYWORDS:
            name = name[:-1]
        return self._extend(name)

    def __getitem__(self, key):
        if isinstance(key, tuple):
            return self._extend(*key)
        return self._extend(key)

    def __call__(self, *args):
        if self._invoker is None:
            self._invoker = parse_and_compile(self._tokens)
        return self._invoker(*args)

    def __iter__(self):
        return iter(self._tokens)

    def __repr__(self):
        return f"Props('{source_of(self._tokens)}')"
