"""
Graph inspection helpers.
Print and summarise the structure of a computation graph, either the part
reachable from one root Value or a whole Graph arena.
"""

import numpy as np
from typing import Dict, List, Tuple, Union
from collections import Counter

from .engine import _topo_indices
from .graph import Graph
from .node import Node
from .var import Value


def _select(source: Union[Value, Graph]) -> Tuple[List[Node], List[int]]:
    """Return (arena nodes, indices to inspect in topological order)."""
    if isinstance(source, Value):
        source._check_live()
        nodes = source.graph.nodes
        return nodes, _topo_indices(nodes, source.idx)
    if isinstance(source, Graph):
        return source.nodes, list(range(len(source.nodes)))
    raise TypeError(f"expected a Value or a Graph, got {type(source)}")


def get_graph_stats(source: Union[Value, Graph]) -> Dict:
    """
    Collect graph statistics without printing.

    Fan-in counts operand slots (x + x has fan-in 2); fan-out counts how many
    operand slots of the inspected nodes refer to a node.

    Returns:
        dict with nodes, edges, max/avg fan-in, max/avg fan-out, operations
    """
    nodes, order = _select(source)
    if not order:
        return {
            'nodes': 0,
            'edges': 0,
            'max_fan_in': 0,
            'avg_fan_in': 0.0,
            'max_fan_out': 0,
            'avg_fan_out': 0.0,
            'operations': {}
        }

    n_nodes = len(order)
    fan_ins = [len(nodes[i].operands) for i in order]
    n_edges = sum(fan_ins)

    fan_out_by_idx = Counter()
    for i in order:
        for p in nodes[i].operands:
            fan_out_by_idx[p] += 1
    fan_outs = [fan_out_by_idx[i] for i in order]

    op_counter = Counter(nodes[i].op.value for i in order)

    return {
        'nodes': n_nodes,
        'edges': n_edges,
        'max_fan_in': max(fan_ins),
        'avg_fan_in': float(np.mean(fan_ins)),
        'max_fan_out': max(fan_outs),
        'avg_fan_out': float(np.mean(fan_outs)),
        'operations': dict(op_counter)
    }


def print_graph_summary(source: Union[Value, Graph], detailed: bool = False) -> Dict:
    """
    Print a summary of the computation graph.

    Args:
        source: root Value (reachable subgraph) or a Graph (whole arena)
        detailed: also list every node (only for graphs of <= 100 nodes)

    Returns:
        the same dict as get_graph_stats()
    """
    stats = get_graph_stats(source)
    if stats['nodes'] == 0:
        print("Empty computation graph")
        return stats

    print("\n" + "="*70)
    print("COMPUTATION GRAPH SUMMARY")
    print("="*70)
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

    if detailed and stats['nodes'] <= 100:
        nodes, order = _select(source)
        print()
        print("="*70)
        print("DETAILED NODE LIST")
        print("="*70)
        for i in order:
            parent_info = ", ".join(f"Node{p}" for p in nodes[i].operands)
            print(f"Node {i:3d}: {nodes[i].op.value:12s} <- [{parent_info}]")

    print("="*70 + "\n")
    return stats


def print_computation_graph(source: Union[Value, Graph], max_nodes: int = 20) -> None:
    """
    Print the graph one node per line: index, op, value, grad, operands.

    Args:
        source: root Value (reachable subgraph) or a Graph (whole arena)
        max_nodes: print at most this many nodes
    """
    print("\n" + "="*70)
    print("COMPUTATION GRAPH STRUCTURE")
    print("="*70)

    nodes, order = _select(source)
    if not order:
        print("Empty graph")
        return

    for i in order[:max_nodes]:
        node = nodes[i]
        head = (f"Node {i:4d}: {node.op.value:12s} "
                f"({float(node.value):10.6f}, grad {float(node.grad):10.6f})")
        if node.operands:
            parent_info = ", ".join(f"Node{p}" for p in node.operands)
            print(f"{head} <- [{parent_info}]")
        else:
            print(f"{head} [leaf/input] {node.label}")

    if len(order) > max_nodes:
        print(f"... ({len(order) - max_nodes} more nodes)")

    print("="*70 + "\n")
