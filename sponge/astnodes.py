from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

@dataclass
class Node:
    line: int
    col: int

@dataclass
class Program(Node):
    decls: List['FunctionDecl']
    # name -> decl, filled in by the parser
    functions: Dict[str, 'FunctionDecl'] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self):
        if not self.functions:
            self.functions = {d.name: d for d in self.decls}

@dataclass
class FunctionDecl(Node):
    name: str
    body: 'Block'

@dataclass
class Block(Node):
    statements: List['Stmt']

@dataclass
class LetStmt(Node):
    name: str
    value: 'Expr'

@dataclass
class IfStmt(Node):
    cond: 'Expr'
    then_block: Block
    else_block: Optional[Block]

@dataclass
class ReturnStmt(Node):
    value: Optional['Expr']

@dataclass
class ExprStmt(Node):
    expr: 'Expr'

# Expressions
@dataclass
class Expr(Node):
    pass

@dataclass
class Literal(Expr):
    value: Union[int, str]

@dataclass
class VarRef(Expr):
    name: str

@dataclass
class BinaryExpr(Expr):
    op: str
    left: Expr
    right: Expr

@dataclass
class Call(Expr):
    name: str
    args: List[Expr]

@dataclass
class PrintCall(Expr):
    args: List[Expr]

Stmt = Union[LetStmt, IfStmt, ReturnStmt, ExprStmt]
