"""Turn tokens or an AST back into Sponge source text."""
from typing import Iterable, List
from .astnodes import *
from .lexer import Token
from .parser import Parser

INDENT = "    "


def render_tokens(tokens: Iterable[Token]) -> str:
    return " ".join(t.lexeme for t in tokens if t.kind != 'EOF')


def to_source(prog: Program) -> str:
    out: List[str] = []
    for i, fn in enumerate(prog.decls):
        if i:
            out.append("")
        out.append(f"func {fn.name}() {{")
        _block_body(fn.body, 1, out)
        out.append("}")
    return "\n".join(out) + "\n" if out else ""


def _block_body(b: Block, depth: int, out: List[str]):
    for s in b.statements:
        _stmt(s, depth, out)


def _stmt(s, depth: int, out: List[str]):
    pad = INDENT * depth
    if isinstance(s, LetStmt):
        out.append(f"{pad}let {s.name} = {expr_source(s.value)};")
    elif isinstance(s, ReturnStmt):
        out.append(f"{pad}return;" if s.value is None else f"{pad}return {expr_source(s.value)};")
    elif isinstance(s, ExprStmt):
        out.append(f"{pad}{expr_source(s.expr)};")
    elif isinstance(s, IfStmt):
        out.append(f"{pad}if {expr_source(s.cond)} {{")
        _block_body(s.then_block, depth + 1, out)
        if s.else_block is not None:
            out.append(f"{pad}}} else {{")
            _block_body(s.else_block, depth + 1, out)
        out.append(f"{pad}}}")
    else:
        raise TypeError(f"cannot render {type(s).__name__}")


def expr_source(e: Expr, min_bp: int = 0) -> str:
    if isinstance(e, Literal):
        return f'"{e.value}"' if isinstance(e.value, str) else str(e.value)
    if isinstance(e, VarRef):
        return e.name
    if isinstance(e, PrintCall):
        return f"print({', '.join(expr_source(a) for a in e.args)})"
    if isinstance(e, Call):
        return f"{e.name}({', '.join(expr_source(a) for a in e.args)})"
    if isinstance(e, BinaryExpr):
        bp = Parser.PRECEDENCE[e.op]
        # left-associative: the right operand needs parens at equal precedence
        text = f"{expr_source(e.left, bp)} {e.op} {expr_source(e.right, bp + 1)}"
        if bp < min_bp or (bp == Parser.COMPARISON and min_bp == bp):
            return f"({text})"
        return text
    raise TypeError(f"cannot render {type(e).__name__}")
