# workbench/viz_cfg.py
from graphviz import Digraph
from typing import Dict
from .cfg_generic import BasicBlock

def cfg_graphviz(blocks: Dict[str, BasicBlock], name: str = "CFG") -> Digraph:
    g = Digraph(name, node_attr={"shape":"box","fontname":"Inter"})
    for bname, blk in blocks.items():
        body = "\\l".join(blk.lines)
        g.node(bname, f"{bname}\\n-----\\n{body}\\l" if body else bname)
    for bname, blk in blocks.items():
        for s in blk.succs:
            if s in blocks:
                g.edge(bname, s)
    return g
