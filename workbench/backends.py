# workbench/backends.py
import io
from dataclasses import dataclass
from typing import Optional, Dict, Any, List

from sponge.errors import SpongeError
from sponge.parser import Parser
from sponge.sema import Sema
from sponge.interpreter import Interpreter
from sponge.inspectors import tokenize, ast_to_dict
from sponge.codegen_tac import TACBuilder
from sponge.ir import pretty_tac

@dataclass
class Result:
    tokens: Optional[List[Dict[str,Any]]] = None
    ast_repr: Optional[Any] = None
    ir_text: Optional[str] = None
    stdout: str = ""
    stderr: str = ""
    ok: bool = True
    stage: Optional[str] = None
    stage_error: Optional[str] = None
    error_line: Optional[int] = None
    error_col: Optional[int] = None

class SpongeBackend:
    name = "Sponge"

    def tokens(self, code:str):
        return tokenize(code)

    def ast(self, code:str):
        return ast_to_dict(Parser(code).parse())

    def ir(self, code:str):
        prog = Parser(code).parse()
        Sema(prog).analyze()
        funcs = TACBuilder().lower_prog(prog)
        return "\n\n".join(pretty_tac(n,c) for n,c in funcs)

    def run(self, code:str, check:bool=True)->Result:
        r = Result()
        buf = io.StringIO()
        try:
            r.stage = "tokens"
            r.tokens = self.tokens(code)
            r.stage = "parse"
            prog = Parser(code).parse()
            r.ast_repr = ast_to_dict(prog)
            if check:
                r.stage = "check"
                Sema(prog).analyze()
            r.stage = "ir"
            r.ir_text = "\n\n".join(pretty_tac(n,c) for n,c in TACBuilder().lower_prog(prog))
            r.stage = "run"
            Interpreter(prog, out=buf).run()
            r.ok = True
        except SpongeError as e:
            r.ok = False
            r.stage_error = f"{type(e).__name__}: {e}"
            r.stderr = r.stage_error + "\n"
            r.error_line, r.error_col = e.line, e.col
        # output written before a runtime error is still reported
        r.stdout = buf.getvalue()
        return r
