"""Runtime values of the Sponge language.

Three kinds exist: ``Integer`` (signed 64-bit), ``Text`` and the single
``UNIT`` value produced by calls that return nothing. Arithmetic wraps the
way a 64-bit register does.
"""
from dataclasses import dataclass
from typing import Union

INT_BITS = 64
INT_MIN = -(1 << (INT_BITS - 1))
INT_MAX = (1 << (INT_BITS - 1)) - 1


@dataclass(frozen=True)
class Integer:
    value: int

    def __post_init__(self):
        object.__setattr__(self, 'value', wrap(self.value))


@dataclass(frozen=True)
class Text:
    value: str


class UnitType:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return 'UNIT'


UNIT = UnitType()

Value = Union[Integer, Text, UnitType]


def wrap(n: int) -> int:
    """Reduce ``n`` to the signed 64-bit range (two's complement)."""
    n &= (1 << INT_BITS) - 1
    if n > INT_MAX:
        n -= 1 << INT_BITS
    return n


def truncdiv(a: int, b: int) -> int:
    # Python's // floors; Sponge truncates toward zero
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


TRUE = Integer(1)
FALSE = Integer(0)


def type_name(v: Value) -> str:
    if isinstance(v, Integer):
        return 'Integer'
    if isinstance(v, Text):
        return 'Text'
    if v is UNIT:
        return 'Unit'
    raise AssertionError(f"not a Sponge value: {v!r}")


def from_literal(raw: Union[int, str]) -> Value:
    if isinstance(raw, int):
        return Integer(raw)
    return Text(raw)


def render(v: Value) -> str:
    """Text written by ``print``: decimal integers, strings without quotes."""
    if isinstance(v, Integer):
        return str(v.value)
    if isinstance(v, Text):
        return v.value
    raise AssertionError(f"cannot render {type_name(v)}")
