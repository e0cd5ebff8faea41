# src/dcsim_core/analysis/results.py
"""
Defines the immutable result contract of the topology analysis.
"""
from dataclasses import dataclass
from typing import FrozenSet, Tuple

import networkx as nx


@dataclass(frozen=True)
class TopologyAnalysisResults:
    """
    The result of a DC topology analysis of one circuit.

    Attributes:
        dc_graph: A multigraph over node names with one edge per component that conducts
                  at DC (resistors, inductors, voltage sources). Edge keys are component ids.
        grounded_nodes: Nodes with a DC conduction path to ground, ground included.
        floating_nodes: Non-ground nodes without such a path; their voltage is undetermined.
        source_loops: Groups of component ids whose voltage sources and inductors alone
                      form a closed loop, in netlist order.
        self_loop_components: Components whose two terminals are the same node.
        ground_connected: Whether any component terminal touches ground.
    """
    dc_graph: nx.MultiGraph
    grounded_nodes: FrozenSet[str]
    floating_nodes: FrozenSet[str]
    source_loops: Tuple[Tuple[str, ...], ...]
    self_loop_components: Tuple[str, ...]
    ground_connected: bool
