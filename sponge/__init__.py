"""Sponge: lexer, parser and tree-walking interpreter for a small imperative language."""
import logging

from .errors import (CompileError, DivideByZeroError, EvalError, LexError,
                     ParseError, SemaError, SpongeError, SpongeNameError,
                     SpongeTypeError, StackOverflowError)
from .interpreter import Interpreter
from .parser import Parser, parse

logging.getLogger(__name__).addHandler(logging.NullHandler())


def run(source: str, out=None) -> None:
    """Parse ``source`` and run its ``main`` function."""
    Interpreter(parse(source), out=out).run()
