import logging
from typing import Dict, Iterable, List
from .lexer import Lexer, Token
from .astnodes import *
from .errors import ParseError

logger = logging.getLogger(__name__)

__all__ = ['Parser', 'ParseError', 'parse']

# human-readable names for ParseError messages
KIND_NAMES = {
    'ID': 'identifier', 'INT': 'integer', 'STRING': 'string',
    'LPAREN': "'('", 'RPAREN': "')'", 'LBRACE': "'{'", 'RBRACE': "'}'",
    'COMMA': "','", 'SEMICOL': "';'", 'EQ': "'='", 'EOF': 'end of input',
    'FUNC': "'func'", 'LET': "'let'", 'IF': "'if'", 'ELSE': "'else'", 'RETURN': "'return'",
}

def describe(t: Token) -> str:
    if t.kind == 'EOF':
        return 'end of input'
    return f"{t.kind} {t.lexeme!r}"

class Parser:
        def __init__(self, text:str):
            self.tokens = list(Lexer(text).tokens())
            self.pos = 0

        @classmethod
        def from_tokens(cls, tokens: Iterable[Token]) -> 'Parser':
            p = cls.__new__(cls)
            p.tokens = list(tokens)
            if not p.tokens or p.tokens[-1].kind != 'EOF':
                last = p.tokens[-1] if p.tokens else None
                p.tokens.append(Token('EOF', '', last.line if last else 1, last.col if last else 1))
            p.pos = 0
            return p

        def peek(self, offset:int = 0) -> Token:
            i = min(self.pos + offset, len(self.tokens) - 1)
            return self.tokens[i]

        def match(self, *kinds):
            if self.peek().kind in kinds:
                t = self.peek()
                self.pos += 1
                return t
            return None

        def expect(self, kind:str):
            t = self.peek()
            if t.kind != kind:
                self.fail(KIND_NAMES.get(kind, kind), t)
            self.pos += 1
            return t

        def fail(self, expected:str, t:Token):
            raise ParseError(f"Expected {expected}, got {describe(t)}", t.line, t.col,
                             expected=expected, found=t)

        def parse(self) -> Program:
            decls: List[FunctionDecl] = []
            table: Dict[str, FunctionDecl] = {}
            start = self.peek()
            while self.peek().kind != 'EOF':
                try:
                    fn = self.fn_decl()
                except RecursionError:
                    t = self.peek()
                    raise ParseError(f"Program is nested too deeply, got {describe(t)}", t.line, t.col,
                                     expected='shallower nesting', found=t) from None
                if fn.name in table:
                    raise ParseError(f"Function '{fn.name}' is already declared", fn.line, fn.col,
                                     expected='unique function name', found=fn.name)
                table[fn.name] = fn
                decls.append(fn)
            logger.debug("parsed functions: %s", ", ".join(table) or "(none)")
            return Program(line=start.line, col=start.col, decls=decls, functions=table)

        # func name '(' ')' block
        def fn_decl(self) -> FunctionDecl:
            kw = self.expect('FUNC')
            name = self.expect('ID').lexeme
            self.expect('LPAREN')
            self.expect('RPAREN')
            body = self.block()
            return FunctionDecl(kw.line, kw.col, name=name, body=body)

        def block(self) -> Block:
            lb = self.expect('LBRACE')
            stmts = []
            while self.peek().kind not in ('RBRACE','EOF'):
                stmts.append(self.statement())
            self.expect('RBRACE')
            return Block(lb.line, lb.col, statements=stmts)

        def statement(self):
            t = self.peek()
            if t.kind == 'LET':
                return self.let_stmt()
            if t.kind == 'IF':
                return self.if_stmt()
            if t.kind == 'RETURN':
                return self.return_stmt()
            expr = self.expr()
            self.expect('SEMICOL')
            return ExprStmt(t.line, t.col, expr=expr)

        def let_stmt(self) -> LetStmt:
            kw = self.expect('LET')
            name = self.expect('ID').lexeme
            self.expect('EQ')
            value = self.expr()
            self.expect('SEMICOL')
            return LetStmt(kw.line, kw.col, name=name, value=value)

        def if_stmt(self) -> IfStmt:
            kw = self.expect('IF')
            cond = self.expr()
            thenb = self.block()
            elseb = None
            if self.match('ELSE'):
                elseb = self.block()
            return IfStmt(kw.line, kw.col, cond=cond, then_block=thenb, else_block=elseb)

        def return_stmt(self) -> ReturnStmt:
            kw = self.expect('RETURN')
            val = None
            if self.peek().kind != 'SEMICOL':
                val = self.expr()
            self.expect('SEMICOL')
            return ReturnStmt(kw.line, kw.col, value=val)

        # precedence climbing over binary operators
        def expr(self) -> Expr:
            return self._parse_binop(0)

        COMPARISON = 1
        PRECEDENCE = {
            '==':1,'!=':1,'<':1,'>':1,
            '+':2,'-':2,
            '*':3,'/':3,
        }

        def _parse_primary(self) -> Expr:
            t = self.peek()
            if t.kind == 'INT':
                self.pos += 1
                return Literal(t.line,t.col,int(t.lexeme))
            if t.kind == 'STRING':
                self.pos += 1
                return Literal(t.line,t.col,t.lexeme[1:-1])
            if t.kind == 'ID':
                # call or variable
                if self.peek(1).kind == 'LPAREN':
                    self.pos += 2  # consume ID, LPAREN
                    args: List[Expr] = []
                    if self.peek().kind != 'RPAREN':
                        args.append(self.expr())
                        while self.match('COMMA'):
                            args.append(self.expr())
                    self.expect('RPAREN')
                    if t.lexeme == 'print':
                        return PrintCall(t.line,t.col,args=args)
                    return Call(t.line,t.col,name=t.lexeme,args=args)
                self.pos += 1
                return VarRef(t.line,t.col,name=t.lexeme)
            if t.kind == 'LPAREN':
                self.pos += 1
                e = self.expr()
                self.expect('RPAREN')
                return e
            self.fail('expression', t)

        def _lbp(self, tok:Token):
            if tok.kind == 'OP':
                return self.PRECEDENCE.get(tok.lexeme, -1)
            return -1

        def _parse_binop(self, min_bp:int) -> Expr:
            left = self._parse_primary()
            compared = False
            while True:
                tok = self.peek()
                lbp = self._lbp(tok)
                if lbp < 0 or lbp < min_bp:
                    break
                if lbp == self.COMPARISON:
                    # comparisons do not chain
                    if compared:
                        self.fail("';' (comparisons cannot be chained)", tok)
                    compared = True
                self.pos += 1
                right = self._parse_binop(lbp + 1)
                left = BinaryExpr(tok.line,tok.col,op=tok.lexeme,left=left,right=right)
            return left


def parse(text: str) -> Program:
    return Parser(text).parse()
