"""
Graph inspection helpers.

Print and analyse the structure of a recorded computation graph. Purely a
debugging aid: nothing in the engine depends on these functions.
"""

import numpy as np
from typing import Dict, Optional
from collections import Counter

from . import tape as tape_mod
from .engine import topological_order


def _resolve(tape):
    if tape is None:
        tape = tape_mod.global_tape
    # no active tape: nothing recorded
    return tape_mod.Tape() if tape is None else tape


def get_graph_stats(tape=None) -> Dict:
    """
    Statistics of a tape (the active one by default), without printing.

    Returns:
        dict with nodes, edges, max/avg fan-in, max/avg fan-out, operations
    """
    tape = _resolve(tape)
    if not tape.values:
        return {
            'nodes': 0,
            'edges': 0,
            'max_fan_in': 0,
            'avg_fan_in': 0.0,
            'max_fan_out': 0,
            'avg_fan_out': 0.0,
            'operations': {}
        }

    n_nodes = len(tape.values)
    fan_ins = [len(v.operands) for v in tape.values]
    n_edges = sum(fan_ins)

    # Fan-out only counts consumers of recorded values; leaves are off-tape
    fan_outs = [0] * n_nodes
    for v in tape.values:
        for p in v.operands:
            idx = p._tape_idx
            if idx is not None and idx < n_nodes and tape.values[idx] is p:
                fan_outs[idx] += 1

    op_counter = Counter(v.op_tag for v in tape.values)

    return {
        'nodes': n_nodes,
        'edges': n_edges,
        'max_fan_in': max(fan_ins),
        'avg_fan_in': float(np.mean(fan_ins)),
        'max_fan_out': max(fan_outs),
        'avg_fan_out': float(np.mean(fan_outs)),
        'operations': dict(op_counter)
    }


def print_graph_summary(tape=None) -> Dict:
    """Print the summary of `get_graph_stats` and return the stats."""
    stats = get_graph_stats(tape)
    if stats['nodes'] == 0:
        print("Empty computation graph")
        return stats

    print("\n" + "=" * 70)
    print("COMPUTATION GRAPH SUMMARY")
    print("=" * 70)
    print(f"Total nodes:        {stats['nodes']:,}")
    print(f"Total edges:        {stats['edges']:,}")
    print(f"Max fan-in:         {stats['max_fan_in']}")
    print(f"Avg fan-in:         {stats['avg_fan_in']:.2f}")
    print(f"Max fan-out:        {stats['max_fan_out']}")
    print(f"Avg fan-out:        {stats['avg_fan_out']:.2f}")
    print()
    print("Operation breakdown:")
    for op_type, count in Counter(stats['operations']).most_common(10):
        pct = 100.0 * count / stats['nodes']
        print(f"  {op_type:12s}: {count:6,} ({pct:5.1f}%)")
    print("=" * 70 + "\n")
    return stats


def format_graph(root, max_nodes: Optional[int] = None) -> str:
    """
    Text dump of the subgraph under `root`, one line per value in
    dependency order (leaves first, root last):

        #2 mul       value=   6.0000 grad=   1.0000 <- [#0, #1]
    """
    order = topological_order(root)
    pos = {v: i for i, v in enumerate(order)}
    n_show = len(order) if max_nodes is None else min(len(order), max_nodes)

    lines = []
    for i, v in enumerate(order[:n_show]):
        label = v.op_tag if v.name is None else f"{v.op_tag}:{v.name}"
        line = f"#{i} {label:10s} value={v.value:9.4f} grad={v.grad:9.4f}"
        if v.operands:
            line += " <- [" + ", ".join(f"#{pos[p]}" for p in v.operands) + "]"
        lines.append(line)
    if n_show < len(order):
        lines.append(f"... ({len(order) - n_show} more nodes)")
    return "\n".join(lines)
