from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List

from sponge.cfg import build_cfg
from sponge.ir import TACInstr, format_instr

@dataclass
class BasicBlock:
    name: str
    lines: List[str] = field(default_factory=list)   # text rows to show inside the box
    succs: List[str] = field(default_factory=list)

Blocks = Dict[str, BasicBlock]

def cfg_from_sponge(func_ir: List[TACInstr]) -> Blocks:
    blocks_tac = build_cfg(func_ir)       # name -> sponge.cfg.BasicBlock
    # adapt to display BasicBlock
    out: Blocks = {}
    for name, b in blocks_tac.items():
        rows = [format_instr(i) for i in b.instrs]
        out[name] = BasicBlock(name=name, lines=rows, succs=list(dict.fromkeys(b.succs)))
    return out
