# sponge/cfg.py
from dataclasses import dataclass, field
from typing import Dict, List
from .ir import TACInstr

TERMINATORS = ("br", "cbr", "ret")

@dataclass
class BasicBlock:
    name: str
    instrs: List[TACInstr] = field(default_factory=list)
    succs: List[str] = field(default_factory=list)

def build_cfg(ir: List[TACInstr]) -> Dict[str, BasicBlock]:
    blocks: Dict[str, BasicBlock] = {}
    order: List[str] = []
    current = None
    dead = 0

    def ensure(name):
        if name not in blocks:
            blocks[name] = BasicBlock(name)
            order.append(name)
        return blocks[name]

    # split into blocks
    for ins in ir:
        if ins.label:
            current = ensure(ins.label)
            continue
        if current is None:
            if blocks:
                # code after a terminator with no label is unreachable
                dead += 1
                current = ensure(f"dead{dead}")
            else:
                current = ensure("entry")
        current.instrs.append(ins)
        # track control-transfer
        if ins.op == "br":
            # unconditional: br L
            if ins.args:
                current.succs.append(ins.args[0])
            current = None
        elif ins.op == "cbr":
            # conditional: cbr t Ltrue Lfalse
            if len(ins.args) >= 3:
                current.succs.extend([ins.args[1], ins.args[2]])
            current = None
        elif ins.op == "ret":
            current = None

    # blocks that do not end in a jump/ret fall through to the next block
    for i, name in enumerate(order):
        b = blocks[name]
        if b.instrs and b.instrs[-1].op in TERMINATORS:
            continue
        if i + 1 < len(order):
            b.succs.append(order[i + 1])
    return blocks
