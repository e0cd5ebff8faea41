# src/dcsim_core/validation/topology_validator.py
import logging
from typing import List, Optional

from ..analysis.results import TopologyAnalysisResults
from ..analysis.topology import TopologyAnalyzer
from ..components.elements import VoltageSource
from ..data_structures import Circuit
from .issue_codes import TopologyIssueCode
from .issues import ValidationIssue

logger = logging.getLogger(__name__)


class TopologyValidator:
    """
    Checks a built circuit for connections that make its DC solution undefined or
    impossible. Runs before the solver; only voltage sources shorted onto a single
    node are errors, everything else is reported as a warning.
    """

    def __init__(self, circuit: Circuit, topology: Optional[TopologyAnalysisResults] = None):
        self.circuit = circuit
        self.topology = topology
        self._issues: List[ValidationIssue] = []

    def validate(self) -> List[ValidationIssue]:
        self._issues = []
        if self.topology is None:
            self.topology = TopologyAnalyzer(self.circuit).analyze()

        self._check_self_loops()
        self._check_ground_connection()
        self._check_floating_nodes()
        self._check_source_loops()

        logger.info(f"Topology validation of '{self.circuit.name}' found {len(self._issues)} issue(s).")
        for issue in self._issues:
            logger.debug(str(issue))
        return list(self._issues)

    def _add_issue(self, code: TopologyIssueCode, component_fqn=None, node_name=None, line_number=None, **kwargs):
        message = code.format_message(component_fqn=component_fqn, node_name=node_name, **kwargs)
        details = {}
        if line_number is not None:
            details['line_number'] = line_number
        if self.circuit.source_file_path is not None:
            details['source_file'] = self.circuit.source_file_path
        self._issues.append(ValidationIssue(
            level=code.level,
            code=code.code,
            message=message,
            component_fqn=component_fqn,
            node_name=node_name,
            details=details,
        ))

    def _line_of(self, component_id: str) -> Optional[int]:
        for comp_ir in self.circuit.raw_ir_root.components:
            if comp_ir.instance_id == component_id:
                return comp_ir.line_number
        return None

    def _check_self_loops(self):
        for comp_id in self.topology.self_loop_components:
            comp = self.circuit.components[comp_id]
            if isinstance(comp, VoltageSource):
                self._add_issue(
                    TopologyIssueCode.COMP_SELF_LOOP_V, component_fqn=comp_id, node_name=comp.node_pos.name,
                    line_number=self._line_of(comp_id), value_str=comp.format_value()
                )
            else:
                self._add_issue(
                    TopologyIssueCode.COMP_SELF_LOOP, component_fqn=comp_id, node_name=comp.node_pos.name,
                    line_number=self._line_of(comp_id)
                )

    def _check_ground_connection(self):
        if self.circuit.components and not self.topology.ground_connected:
            self._add_issue(TopologyIssueCode.GND_CONN_001, node_name=self.circuit.ground.name)

    def _check_floating_nodes(self):
        for name in self.circuit.nodes:
            if name in self.topology.floating_nodes:
                self._add_issue(TopologyIssueCode.NET_FLOATING_DC, node_name=name)

    def _check_source_loops(self):
        for group in self.topology.source_loops:
            self._add_issue(
                TopologyIssueCode.LOOP_V_L, component_fqn=group[0],
                line_number=self._line_of(group[0]), component_ids=list(group)
            )
