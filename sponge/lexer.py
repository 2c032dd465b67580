import logging
import re
from dataclasses import dataclass

from .errors import LexError

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Token:
    kind: str
    lexeme: str
    line: int
    col: int

KEYWORDS = {'func', 'let', 'if', 'else', 'return'}

INT64_MAX = 2**63 - 1

# order matters: '==' must win over '='
TOKEN_SPEC = [
    ("INT",      r"[0-9]+"),
    ("ID",       r"[A-Za-z_][A-Za-z0-9_]*"),
    ("OP",       r"==|!=|[+\-*/<>]"),
    ("EQ",       r"="),
    ("LPAREN",   r"\("),
    ("RPAREN",   r"\)"),
    ("LBRACE",   r"\{"),
    ("RBRACE",   r"\}"),
    ("COMMA",    r","),
    ("SEMICOL",  r";"),
]

MASTER = re.compile("|".join(f"(?P<{k}>{p})" for k,p in TOKEN_SPEC))
WS = re.compile(r"[\t \r\f\n]+")

class Lexer:
    def __init__(self, text:str):
        self.text = text
        self.i = 0
        self.line = 1
        self.col = 1

    def _advance(self, n):
        for _ in range(n):
            if self.text[self.i] == '\n':
                self.line += 1
                self.col = 1
            else:
                self.col += 1
            self.i += 1

    def _string(self) -> Token:
        text = self.text
        end = self.i + 1
        while end < len(text) and text[end] not in '"\n':
            end += 1
        if end >= len(text) or text[end] != '"':
            raise LexError("Unterminated string literal", '"', self.line, self.col)
        tok = Token('STRING', text[self.i:end+1], self.line, self.col)
        self._advance(end + 1 - self.i)
        return tok

    def tokens(self):
        text = self.text
        N = len(text)
        count = 0
        while self.i < N:
            # skip comments
            if text[self.i] == '#':
                while self.i < N and text[self.i] != '\n':
                    self._advance(1)
                continue
            m = WS.match(text, self.i)
            if m:
                self._advance(len(m.group(0)))
                continue
            if text[self.i] == '"':
                count += 1
                yield self._string()
                continue
            m = MASTER.match(text, self.i)
            if not m:
                ch = text[self.i]
                raise LexError(f"Unknown character {ch!r}", ch, self.line, self.col)
            kind = m.lastgroup
            lex = m.group(0)
            if kind == 'ID' and lex in KEYWORDS:
                tok = Token(lex.upper(), lex, self.line, self.col)
            elif kind == 'INT' and int(lex) > INT64_MAX:
                raise LexError(f"Integer literal {lex} does not fit in 64 bits", lex[0], self.line, self.col)
            else:
                tok = Token(kind, lex, self.line, self.col)
            self._advance(len(lex))
            count += 1
            yield tok
        logger.debug("lexed %d tokens", count)
        yield Token('EOF','', self.line, self.col)
