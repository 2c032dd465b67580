from typing import Dict, List, Tuple
from .astnodes import *
from .ir import TACInstr

OPMAP = {"+":"add","-":"sub","*":"mul","/":"div",
         "<":"lt",">":"gt","==":"eq","!=":"ne"}

class TACBuilder:
    def __init__(self):
        self.temp_i = 0
        self.label_i = 0
        self.code: List[TACInstr] = []
        # source name -> TAC name, one dict per open block
        self.env_stack: List[Dict[str, str]] = [{}]
        self.versions: Dict[str, int] = {}

    def new_t(self) -> str:
        self.temp_i += 1
        return f"t{self.temp_i}"

    def new_l(self, base="L") -> str:
        self.label_i += 1
        return f"{base}{self.label_i}"

    def emit(self, op, dst=None, *args, label=None):
        self.code.append(TACInstr(op=op, dst=dst, args=list(args), label=label))
        return dst

    def bind(self, name: str) -> str:
        scope = self.env_stack[-1]
        if name in scope:
            return scope[name]
        if any(name in s for s in self.env_stack[:-1]):
            # shadows an outer binding: give it its own name
            self.versions[name] = self.versions.get(name, 0) + 1
            tac_name = f"{name}.{self.versions[name]}"
        else:
            tac_name = name
        scope[name] = tac_name
        return tac_name

    def resolve(self, name: str) -> str:
        for s in reversed(self.env_stack):
            if name in s:
                return s[name]
        return name

    def lower_prog(self, prog: Program) -> List[Tuple[str, List[TACInstr]]]:
        out = []
        for d in prog.decls:
            self.temp_i = 0
            self.label_i = 0
            self.code = []
            self.env_stack = [{}]
            self.versions = {}
            self.emit("label", None, label="entry")
            for s in d.body.statements:
                self.lower_stmt(s)
            if not self.code or self.code[-1].op != "ret":
                self.emit("ret", None)
            out.append((d.name, list(self.code)))
        return out

    def lower_block(self, b: Block):
        self.env_stack.append({})
        for s in b.statements:
            self.lower_stmt(s)
        self.env_stack.pop()

    def lower_stmt(self, s: Node):
        if isinstance(s, LetStmt):
            v = self.lower_expr(s.value)
            self.emit("mov", self.bind(s.name), v)
        elif isinstance(s, IfStmt):
            cond = self.lower_expr(s.cond)
            l_then = self.new_l("then")
            l_else = self.new_l("else")
            l_end  = self.new_l("endif")
            self.emit("cbr", None, cond, l_then, l_else)
            self.emit("label", None, label=l_then)
            self.lower_block(s.then_block)
            self.emit("br", None, l_end)
            self.emit("label", None, label=l_else)
            if s.else_block:
                self.lower_block(s.else_block)
            self.emit("br", None, l_end)
            self.emit("label", None, label=l_end)
        elif isinstance(s, ReturnStmt):
            if s.value is not None:
                v = self.lower_expr(s.value)
                self.emit("ret", None, v)
            else:
                self.emit("ret", None)
        elif isinstance(s, ExprStmt):
            self.lower_expr(s.expr)

    def lower_expr(self, e: Expr) -> str:
        if isinstance(e, Literal):
            t = self.new_t()
            self.emit("const", t, f'"{e.value}"' if isinstance(e.value, str) else str(e.value))
            return t
        if isinstance(e, VarRef):
            t = self.new_t()
            self.emit("mov", t, self.resolve(e.name))
            return t
        if isinstance(e, BinaryExpr):
            l = self.lower_expr(e.left)
            r = self.lower_expr(e.right)
            t = self.new_t()
            self.emit(OPMAP[e.op], t, l, r)
            return t
        if isinstance(e, PrintCall):
            args = [self.lower_expr(a) for a in e.args]
            self.emit("print", None, *args)
            return "unit"
        if isinstance(e, Call):
            # Lower args then emit call
            args = [self.lower_expr(a) for a in e.args]
            t = self.new_t()
            self.emit("call", t, e.name, *args)
            return t
        raise RuntimeError("unknown expr")
