"""Shared fixtures and helpers for the Sponge test suite."""

import io
from pathlib import Path

import pytest

from sponge.interpreter import Interpreter
from sponge.parser import parse

TESTS_DIR = Path(__file__).parent
FIXTURE = TESTS_DIR / "fixtures" / "input.sp"


def run_source(source: str) -> str:
    """Run ``main`` of ``source`` and return everything it printed."""
    out = io.StringIO()
    Interpreter(parse(source), out=out).run()
    return out.getvalue()


def interpreter_for(source: str) -> tuple[Interpreter, io.StringIO]:
    out = io.StringIO()
    return Interpreter(parse(source), out=out), out


def wrap_main(body: str) -> str:
    """Wrap statements in a ``main`` function."""
    return "func main() {\n" + body + "\n}\n"


@pytest.fixture
def fixture_source() -> str:
    return FIXTURE.read_text(encoding="utf-8")


@pytest.fixture
def fixture_path() -> Path:
    return FIXTURE
