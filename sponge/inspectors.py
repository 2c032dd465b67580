from __future__ import annotations
from typing import Any, Dict, List, Tuple
from .lexer import Lexer
from .astnodes import *
from graphviz import Digraph

# fields that are bookkeeping, not tree structure
SKIP = ("line", "col", "functions")

# --------- LEXER ----------
def tokenize(text: str) -> List[Dict[str, Any]]:
    return [ { "kind": t.kind, "lexeme": t.lexeme, "line": t.line, "col": t.col }
             for t in Lexer(text).tokens() ]

# --------- AST helpers ----------
def ast_to_dict(node: Node) -> Dict[str, Any]:
    # turn dataclass AST into a plain dict for JSON display
    if isinstance(node, list):
        return [ast_to_dict(n) for n in node]
    if not hasattr(node, "__dataclass_fields__"):
        return node
    d = {"_type": node.__class__.__name__, "line": node.line, "col": node.col}
    for f in node.__dataclass_fields__.keys():
        if f in SKIP: continue
        v = getattr(node, f)
        if isinstance(v, Node):
            d[f] = ast_to_dict(v)
        elif isinstance(v, list):
            d[f] = [ast_to_dict(x) if isinstance(x, Node) else x for x in v]
        else:
            d[f] = v
    return d

def _label(node: Node) -> str:
    name = node.__class__.__name__
    if isinstance(node, (FunctionDecl, LetStmt, VarRef, Call)):
        return f"{name} {node.name}"
    if isinstance(node, BinaryExpr):
        return f"{name} {node.op}"
    if isinstance(node, Literal):
        return f"{name} {node.value!r}"
    return name

def _children(node: Node) -> List[Tuple[str, Node]]:
    children: List[Tuple[str, Node]] = []
    for f in getattr(node, "__dataclass_fields__", {}):
        if f in SKIP: continue
        v = getattr(node, f)
        if isinstance(v, Node):
            children.append((f, v))
        elif isinstance(v, list):
            for i, x in enumerate(v):
                if isinstance(x, Node):
                    children.append((f"{f}[{i}]", x))
    return children

def _tree_lines(node: Node, prefix: str = "", is_last: bool = True) -> List[str]:
    head = f"{prefix}{'└─' if is_last else '├─'}{_label(node)}"
    lines = [head]
    new_prefix = f"{prefix}{'  ' if is_last else '│ '}"
    children = _children(node)
    for i, (fname, child) in enumerate(children):
        # insert label on child line
        sub = _tree_lines(child, new_prefix, i == len(children) - 1)
        sub[0] = sub[0] + f" ({fname})"
        lines.extend(sub)
    return lines

def ast_ascii_tree(root: Node) -> str:
    return "\n".join(_tree_lines(root, "", True))


def ast_graphviz(root: Node) -> Digraph:
    g = Digraph("AST", node_attr={"shape": "box", "fontname": "Inter"})
    counter = 0
    def add(n):
        nonlocal counter
        counter += 1
        nid = f"n{counter}"
        g.node(nid, _label(n))
        for fname, child in _children(n):
            cid = add(child)
            g.edge(nid, cid, label=fname)
        return nid
    add(root)
    return g
