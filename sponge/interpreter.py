import logging
import sys
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from .astnodes import *
from .errors import (DivideByZeroError, SpongeError, SpongeNameError,
                     SpongeTypeError, StackOverflowError)
from .values import (FALSE, TRUE, UNIT, Integer, Text, Value, from_literal,
                     render, truncdiv, type_name)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Returned:
    """Outcome of a statement that hit ``return``; ``None`` means carry on."""
    value: Value


class Frame:
    def __init__(self, parent: Optional['Frame'] = None):
        self.parent = parent
        self.vars: Dict[str, Value] = {}

    def define(self, name, val):
        self.vars[name] = val

    def lookup(self, name) -> Value:
        frame = self
        while frame is not None:
            if name in frame.vars:
                return frame.vars[name]
            frame = frame.parent
        raise KeyError(name)

    def visible(self) -> Dict[str, Value]:
        """Every binding reachable from this frame, inner names shadowing outer."""
        chain = []
        frame = self
        while frame is not None:
            chain.append(frame)
            frame = frame.parent
        out: Dict[str, Value] = {}
        for f in reversed(chain):
            out.update(f.vars)
        return out


ARITH = {
    '+': lambda a,b: a+b,
    '-': lambda a,b: a-b,
    '*': lambda a,b: a*b,
    '/': truncdiv,
}
ORDER = {
    '<': lambda a,b: a<b,
    '>': lambda a,b: a>b,
}


def _show(v: Value) -> str:
    if isinstance(v, Text):
        return repr(v.value)
    if isinstance(v, Integer):
        return str(v.value)
    return 'unit'


class Interpreter:
    def __init__(self, prog:Program, out=None, tracer: Optional[Callable[[dict], None]] = None):
        self.prog = prog
        self.funcs = prog.functions
        self.out = out if out is not None else sys.stdout
        self.tracer = tracer
        # one (function name, function frame) pair per active call
        self.stack: List[Tuple[str, Frame]] = []

    # ---------- entry points ----------
    def run(self) -> None:
        """Invoke ``main()`` and discard its result."""
        if 'main' not in self.funcs:
            raise SpongeNameError("No entry point: func main() { ... } is not declared")
        self.call('main')

    def call(self, name:str) -> Value:
        fn = self.funcs.get(name)
        if fn is None:
            raise SpongeNameError(f"Undefined function '{name}'")
        try:
            return self._call(fn)
        except RecursionError:
            raise StackOverflowError(f"Call stack exhausted while running '{name}'", fn.line, fn.col) from None

    def run_debug(self):
        """Run ``main`` once, then yield the recorded step events one by one."""
        events: List[dict] = []
        self.tracer = events.append
        try:
            self.run()
        except SpongeError as e:
            events.append({"event": "error", "kind": type(e).__name__, "message": str(e),
                           "line": e.line, "col": e.col})
        finally:
            self.tracer = None
        yield from events

    # ---------- calls ----------
    def _call(self, fn:FunctionDecl) -> Value:
        frame = Frame()
        self.stack.append((fn.name, frame))
        logger.debug("enter %s (depth %d)", fn.name, len(self.stack))
        self._trace('call', fn, frame)
        try:
            outcome = self.exec_block(fn.body, frame)
        finally:
            self.stack.pop()
        result = outcome.value if outcome is not None else UNIT
        logger.debug("leave %s -> %r", fn.name, result)
        if self.tracer is not None:
            self.tracer({"event": "return", "func": fn.name, "depth": len(self.stack),
                         "value": _show(result)})
        return result

    # ---------- statements ----------
    def exec_block(self, b:Block, frame:Frame) -> Optional[Returned]:
        for st in b.statements:
            outcome = self.exec_stmt(st, frame)
            if outcome is not None:
                return outcome
        return None

    def exec_stmt(self, st:Node, frame:Frame) -> Optional[Returned]:
        self._trace('stmt', st, frame)
        if isinstance(st, LetStmt):
            frame.define(st.name, self.eval(st.value, frame))
            return None
        if isinstance(st, IfStmt):
            c = self.eval(st.cond, frame)
            if not isinstance(c, Integer):
                raise SpongeTypeError(f"if condition must be Integer, got {type_name(c)}",
                                      st.cond.line, st.cond.col)
            chosen = st.then_block if c.value != 0 else st.else_block
            if chosen is None:
                return None
            return self.exec_block(chosen, Frame(frame))
        if isinstance(st, ReturnStmt):
            v = self.eval(st.value, frame) if st.value is not None else UNIT
            return Returned(v)
        if isinstance(st, ExprStmt):
            self.eval(st.expr, frame)
            return None
        raise AssertionError(f"unknown statement {type(st).__name__}")

    # ---------- expressions ----------
    def eval(self, e:Expr, frame:Frame) -> Value:
        if isinstance(e, Literal):
            return from_literal(e.value)
        if isinstance(e, VarRef):
            try:
                return frame.lookup(e.name)
            except KeyError:
                raise SpongeNameError(f"Undefined variable '{e.name}'", e.line, e.col) from None
        if isinstance(e, BinaryExpr):
            l = self.eval(e.left, frame)
            r = self.eval(e.right, frame)
            return self.binop(e, l, r)
        if isinstance(e, PrintCall):
            return self.print_(e, frame)
        if isinstance(e, Call):
            fn = self.funcs.get(e.name)
            if fn is None:
                raise SpongeNameError(f"Undefined function '{e.name}'", e.line, e.col)
            if e.args:
                raise SpongeTypeError(f"Function '{e.name}' takes no arguments, got {len(e.args)}",
                                      e.line, e.col)
            return self._call(fn)
        raise AssertionError(f"unknown expression {type(e).__name__}")

    def binop(self, e:BinaryExpr, l:Value, r:Value) -> Value:
        op = e.op
        if op in ARITH or op in ORDER:
            if not (isinstance(l, Integer) and isinstance(r, Integer)):
                raise SpongeTypeError(
                    f"Operator '{op}' expects Integer operands, got {type_name(l)} and {type_name(r)}",
                    e.line, e.col)
            if op in ORDER:
                return TRUE if ORDER[op](l.value, r.value) else FALSE
            if op == '/' and r.value == 0:
                raise DivideByZeroError("Division by zero", e.line, e.col)
            return Integer(ARITH[op](l.value, r.value))
        if op in ('==', '!='):
            if not (isinstance(l, (Integer, Text)) and type(l) is type(r)):
                raise SpongeTypeError(
                    f"Cannot compare {type_name(l)} with {type_name(r)} using '{op}'",
                    e.line, e.col)
            equal = l.value == r.value
            return TRUE if equal == (op == '==') else FALSE
        raise AssertionError(f"unknown operator {op}")

    def print_(self, e:PrintCall, frame:Frame) -> Value:
        if len(e.args) != 1:
            raise SpongeTypeError(f"print expects exactly 1 argument, got {len(e.args)}",
                                  e.line, e.col)
        v = self.eval(e.args[0], frame)
        if not isinstance(v, (Integer, Text)):
            raise SpongeTypeError(f"print cannot render {type_name(v)}", e.line, e.col)
        text = render(v)
        self.out.write(text + "\n")
        if self.tracer is not None:
            self.tracer({"event": "print", "line": e.line, "col": e.col, "text": text})
        return UNIT

    def _trace(self, event:str, node:Node, frame:Frame):
        if self.tracer is None:
            return
        self.tracer({
            "event": event,
            "func": self.stack[-1][0] if self.stack else None,
            "depth": len(self.stack),
            "line": node.line,
            "col": node.col,
            "kind": type(node).__name__,
            "locals": {k: _show(v) for k, v in frame.visible().items()},
        })
