from dataclasses import dataclass
from typing import List, Optional

@dataclass
class TACInstr:
    op: str                 # 'const', 'mov', arithmetic/compare ops, 'call', 'print', 'br', 'cbr', 'ret', 'label'
    dst: Optional[str]      # result temp (e.g., t1) or let-bound name
    args: List[str]         # operands (temps, names or immediates)
    label: Optional[str] = None  # set only on 'label' pseudo-instructions

def format_instr(ins: TACInstr) -> str:
    if ins.op == "call":
        # callee first, then its arguments
        text = f"call {ins.args[0]}({', '.join(ins.args[1:])})"
    elif ins.op == "cbr" and len(ins.args) == 3:
        cond, l_true, l_false = ins.args
        text = f"cbr {cond} ? {l_true} : {l_false}"
    else:
        text = f"{ins.op} {', '.join(ins.args)}".rstrip()
    return f"{ins.dst} = {text}" if ins.dst else text

def pretty_tac(func_name: str, code: List[TACInstr]) -> str:
    lines = [f"func {func_name}()"]
    for ins in code:
        if ins.label:
            lines.append(f"{ins.label}:")
        else:
            lines.append(f"  {format_instr(ins)}")
    return "\n".join(lines)
