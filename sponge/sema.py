import logging
from .astnodes import *
from .errors import SemaError

logger = logging.getLogger(__name__)

BUILTINS = {'print'}

class Scopes:
    def __init__(self):
        self.scopes = [ set() ]  # one set of bound names per block
    def push(self):
        self.scopes.append(set())
    def pop(self):
        self.scopes.pop()
    def declare(self, name:str):
        self.scopes[-1].add(name)
    def bound(self, name:str) -> bool:
        return any(name in s for s in self.scopes)

class Sema:
    """Static checks run before a program is executed.

    Typing stays dynamic; only structural faults that would make a run fail
    regardless of values are reported here.
    """

    def __init__(self, prog:Program):
        self.prog = prog
        self.funcs = prog.functions
        self.current = None

    def analyze(self):
        if 'main' not in self.funcs:
            raise SemaError("No entry point: func main() { ... } is not declared")
        for d in self.prog.decls:
            if d.name in BUILTINS:
                raise SemaError(f"Cannot redefine builtin '{d.name}'", d.line, d.col)
            try:
                self._check_func(d)
            except RecursionError:
                raise SemaError(f"Expression nesting too deep in function '{d.name}'", d.line, d.col) from None
        logger.debug("checked %d functions", len(self.prog.decls))
        return True

    def _check_func(self, f:FunctionDecl):
        self.current = f.name
        scopes = Scopes()
        # the body runs directly in the function frame
        for s in f.body.statements:
            self._check_stmt(s, scopes)

    def _check_block(self, b:Block, scopes:Scopes):
        scopes.push()
        for s in b.statements:
            self._check_stmt(s, scopes)
        scopes.pop()

    def _check_stmt(self, s:Node, scopes:Scopes):
        if isinstance(s, LetStmt):
            self._check_expr(s.value, scopes)
            scopes.declare(s.name)
        elif isinstance(s, IfStmt):
            self._check_expr(s.cond, scopes)
            self._check_block(s.then_block, scopes)
            if s.else_block:
                self._check_block(s.else_block, scopes)
        elif isinstance(s, ReturnStmt):
            if s.value is not None:
                self._check_expr(s.value, scopes)
        elif isinstance(s, ExprStmt):
            self._check_expr(s.expr, scopes)

    def _check_expr(self, e:Expr, scopes:Scopes):
        if isinstance(e, VarRef):
            if not scopes.bound(e.name):
                raise SemaError(f"Undefined variable '{e.name}' in function '{self.current}'", e.line, e.col)
        elif isinstance(e, BinaryExpr):
            self._check_expr(e.left, scopes)
            self._check_expr(e.right, scopes)
        elif isinstance(e, PrintCall):
            if len(e.args) != 1:
                raise SemaError(f"print expects exactly 1 argument, got {len(e.args)}", e.line, e.col)
            self._check_expr(e.args[0], scopes)
        elif isinstance(e, Call):
            if e.name not in self.funcs:
                raise SemaError(f"Unknown function '{e.name}'", e.line, e.col)
            if e.args:
                raise SemaError(f"Function '{e.name}' takes no arguments, got {len(e.args)}", e.line, e.col)
