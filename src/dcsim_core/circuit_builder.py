# src/dcsim_core/circuit_builder.py

"""
Defines the CircuitBuilder, which turns the parser's Intermediate Representation
(IR) into a simulation-ready `Circuit`.

The builder owns the `VariableAllocator` of the circuit. Index assignment happens
in a fixed order:

1.  **Ground:** the node named "0" always holds index 0.
2.  **Node voltages:** every other node, in order of first appearance in the netlist.
3.  **Branch currents:** voltage sources and inductors, in netlist order, claim their
    extra variable while they are instantiated.

The builder is also the gatekeeper for build-time errors. Any `DiagnosableError`
raised by a subsystem is re-raised as a single, user-friendly `CircuitBuildError`.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from .constants import GROUND_NODE_NAME, GROUND_INDEX
from .data_structures import Circuit, Node
from .indexing import VariableAllocator
from .components.base import COMPONENT_REGISTRY, ComponentBase
from .components.exceptions import ComponentError
from .parser.parser import NetlistParser
from .parser.raw_data import ParsedNetlist
from .errors import CircuitBuildError, DiagnosableError, format_diagnostic_report


logger = logging.getLogger(__name__)


class CircuitBuilder:
    """
    Synthesizes a `Circuit` object from a `ParsedNetlist`.
    """

    def build_circuit(self, parsed: ParsedNetlist) -> Circuit:
        """
        The main build-time entry point, with top-level error handling for the build stage.
        """
        logger.info(f"--- Starting circuit model synthesis for '{parsed.title}' ---")
        try:
            allocator = VariableAllocator()
            nodes = self._allocate_nodes(parsed, allocator)
            components = self._instantiate_components(parsed, nodes, allocator)

            circuit = Circuit(
                name=parsed.title,
                source_file_path=parsed.source_path,
                nodes=nodes,
                components=components,
                variables=allocator.snapshot(),
                raw_ir_root=parsed,
            )
            logger.info(
                f"--- Circuit '{circuit.name}' built: {len(nodes)} nodes, {len(components)} components, "
                f"{circuit.variable_count} MNA variables. ---"
            )
            return circuit

        except DiagnosableError as e:
            diagnostic_report = e.get_diagnostic_report()
            raise CircuitBuildError(diagnostic_report) from e

        except Exception as e:
            logger.error(f"Unexpected error while building circuit '{parsed.title}'.", exc_info=True)
            report = format_diagnostic_report(
                error_type=f"An Unexpected Error Occurred ({type(e).__name__})",
                details=f"The circuit builder encountered an unexpected internal error: {str(e)}",
                suggestion="This may indicate a bug in DCSim Core. Please review the traceback.",
                context={'source_file': parsed.source_path}
            )
            raise CircuitBuildError(report) from e

    def build_from_file(self, netlist_path: Union[str, Path]) -> Circuit:
        """Parses a netlist file and builds it, reporting parse errors as `CircuitBuildError`."""
        try:
            parsed = NetlistParser().parse_file(netlist_path)
        except DiagnosableError as e:
            raise CircuitBuildError(e.get_diagnostic_report()) from e
        return self.build_circuit(parsed)

    def build_from_string(self, netlist_text: str, source_path: Optional[Path] = None) -> Circuit:
        """Parses netlist text and builds it, reporting parse errors as `CircuitBuildError`."""
        try:
            parsed = NetlistParser().parse_string(netlist_text, source_path=source_path)
        except DiagnosableError as e:
            raise CircuitBuildError(e.get_diagnostic_report()) from e
        return self.build_circuit(parsed)

    def _allocate_nodes(self, parsed: ParsedNetlist, allocator: VariableAllocator) -> Dict[str, Node]:
        nodes: Dict[str, Node] = {
            GROUND_NODE_NAME: Node(name=GROUND_NODE_NAME, index=GROUND_INDEX, is_ground=True)
        }
        for name in parsed.node_names:
            if name in nodes:
                continue
            nodes[name] = Node(name=name, index=allocator.allocate_node(name))
        return nodes

    def _instantiate_components(
        self,
        parsed: ParsedNetlist,
        nodes: Dict[str, Node],
        allocator: VariableAllocator
    ) -> Dict[str, ComponentBase]:
        components: Dict[str, ComponentBase] = {}
        for comp_ir in parsed.components:
            ComponentClass = COMPONENT_REGISTRY[comp_ir.component_type]
            try:
                instance = ComponentClass(
                    instance_id=comp_ir.instance_id,
                    node_pos=nodes[comp_ir.node_pos],
                    node_neg=nodes[comp_ir.node_neg],
                    value=comp_ir.value,
                    allocator=allocator,
                )
            except ComponentError as e:
                if e.line_number is None:
                    e.line_number = comp_ir.line_number
                raise
            components[comp_ir.instance_id] = instance
            logger.debug(f"Instantiated {instance!r}")
        return components
