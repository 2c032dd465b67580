from typing import Optional


class SpongeError(Exception):
    """Base class for every error raised while compiling or running Sponge code."""

    def __init__(self, message: str, line: Optional[int] = None, col: Optional[int] = None):
        self.message = message
        self.line = line
        self.col = col
        super().__init__(self._format())

    def _format(self) -> str:
        if self.line is None:
            return self.message
        return f"{self.message} at {self.line}:{self.col}"


# compile phase
class CompileError(SpongeError):
    pass

class LexError(CompileError):
    def __init__(self, message: str, char: str, line: int, col: int):
        self.char = char
        super().__init__(message, line, col)

class ParseError(CompileError):
    def __init__(self, message: str, line: int, col: int, expected: Optional[str] = None, found=None):
        self.expected = expected
        self.found = found
        super().__init__(message, line, col)

class SemaError(CompileError):
    pass


# evaluation phase
class EvalError(SpongeError):
    pass

class SpongeNameError(EvalError):
    pass

class SpongeTypeError(EvalError):
    pass

class DivideByZeroError(EvalError):
    pass

class StackOverflowError(EvalError):
    pass
