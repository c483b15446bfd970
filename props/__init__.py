"""props: a tiny embedded expression language.

Basic program flow:
    1. Classifier: every symbolic name becomes a Token (see props/pure/tokens.py). Names come from program text
       (props/lang/lexical.py) or from chained attribute accesses on a Props builder (props/lang/builder.py)
    2. Parser: a recursive-descent parser builds one expression tree per program (see props/pure/parser.py)
    3. Compilation: the tree and its arity (number of distinct $N arguments) are cached in a Program
    4. Invocation: an Invoker collects arguments across calls (currying) and evaluates the tree once it has them all
       (see props/pure/evaluator.py)
"""

from props.lang.builder import Props
from props.lang.error import (ArgumentIndexOutOfRange, GenericException, MalformedArgumentToken, NestingTooDeep,
                              NonBooleanCondition, NonContiguousArguments, NonNumericOperand, ParseError,
                              TooManyArguments, UnboundIdentifier)
from props.lang.lexical import tokenize
from props.pure.invoker import Invoker, Program, parse_and_compile

__all__ = [
    "Props", "tokenize", "parse_and_compile", "Invoker", "Program",
    "GenericException", "MalformedArgumentToken", "ParseError", "UnboundIdentifier", "ArgumentIndexOutOfRange",
    "NonBooleanCondition", "NonNumericOperand", "TooManyArguments", "NonContiguousArguments",
    "NestingTooDeep",
]
