# src/dcsim_core/analysis/topology.py
import logging
from typing import List, Tuple

import networkx as nx

from ..components.base_enums import DCBehaviorType
from ..components.capabilities import IDcContributor
from ..data_structures import Circuit
from .exceptions import TopologyAnalysisError
from .results import TopologyAnalysisResults

logger = logging.getLogger(__name__)

_CONDUCTING = (DCBehaviorType.ADMITTANCE, DCBehaviorType.SHORT_CIRCUIT, DCBehaviorType.FIXED_VOLTAGE)
_IDEAL_BRANCHES = (DCBehaviorType.SHORT_CIRCUIT, DCBehaviorType.FIXED_VOLTAGE)


class TopologyAnalyzer:
    """
    Performs a DC topology analysis of a circuit using networkx.

    Components are classified through their `IDcContributor` capability. Capacitors
    and current sources do not conduct at DC and are left out of the graph, so a
    node reached only through them has no defined DC voltage.
    """

    def __init__(self, circuit: Circuit):
        self.circuit = circuit

    def analyze(self) -> TopologyAnalysisResults:
        logger.debug(f"Starting topology analysis for '{self.circuit.name}'...")
        ground_name = self.circuit.ground.name
        behaviors = self._collect_dc_behaviors()

        self_loops = tuple(
            comp.fqn for comp in self.circuit.components.values() if comp.node_pos == comp.node_neg
        )
        dc_graph = self._build_dc_graph(behaviors, _CONDUCTING)
        grounded = frozenset(nx.node_connected_component(dc_graph, ground_name))
        floating = frozenset(name for name in self.circuit.nodes if name not in grounded)

        results = TopologyAnalysisResults(
            dc_graph=dc_graph,
            grounded_nodes=grounded,
            floating_nodes=floating,
            source_loops=self._find_source_loops(behaviors),
            self_loop_components=self_loops,
            ground_connected=any(
                ground_name in (comp.node_pos.name, comp.node_neg.name)
                for comp in self.circuit.components.values()
            ),
        )
        logger.debug(
            f"Topology analysis complete: {len(grounded)} grounded nodes, {len(floating)} floating, "
            f"{len(results.source_loops)} source/inductor loop(s)."
        )
        return results

    def _collect_dc_behaviors(self) -> List[Tuple[str, DCBehaviorType]]:
        behaviors = []
        for comp in self.circuit.components.values():
            contributor = comp.get_capability(IDcContributor)
            if contributor is None:
                raise TopologyAnalysisError(
                    component_fqn=comp.fqn,
                    details=f"Component type '{type(comp).__name__}' does not provide the IDcContributor capability."
                )
            behaviors.append((comp.fqn, contributor.get_dc_behavior(comp)))
        return behaviors

    def _build_dc_graph(self, behaviors, kinds) -> nx.MultiGraph:
        """A multigraph over all node names with one edge per component of the given kinds."""
        graph = nx.MultiGraph()
        graph.add_nodes_from(self.circuit.nodes)
        for comp_id, behavior in behaviors:
            if behavior not in kinds:
                continue
            comp = self.circuit.components[comp_id]
            if comp.node_pos == comp.node_neg:
                continue
            graph.add_edge(comp.node_pos.name, comp.node_neg.name, key=comp_id, behavior=behavior)
        return graph

    def _find_source_loops(self, behaviors) -> Tuple[Tuple[str, ...], ...]:
        """
        Finds groups of voltage sources and inductors that close a loop on their own.
        A connected group of such branches contains a loop iff it has at least as many
        edges as nodes.
        """
        graph = self._build_dc_graph(behaviors, _IDEAL_BRANCHES)
        order = {comp_id: i for i, comp_id in enumerate(self.circuit.components)}
        loops = []
        for nodes in nx.connected_components(graph):
            sub = graph.subgraph(nodes)
            if sub.number_of_edges() < sub.number_of_nodes():
                continue
            loops.append(tuple(sorted((key for _, _, key in sub.edges(keys=True)), key=order.get)))
        loops.sort(key=lambda group: order[group[0]])
        return tuple(loops)
