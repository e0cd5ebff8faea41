# src/dcsim_core/data_structures.py
# Required for forward references in type hints (e.g., 'ComponentBase')
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple, TYPE_CHECKING

from .indexing import VariableInfo, VariableKind

logger = logging.getLogger(__name__)

# Use TYPE_CHECKING to avoid circular imports for type hints at runtime.
if TYPE_CHECKING:
    from .components.base import ComponentBase
    from .parser.raw_data import ParsedNetlist


@dataclass(frozen=True)
class Node:
    """
    Represents an electrical node of the circuit.
    The ground node always carries variable index 0.
    """
    name: str
    index: int
    is_ground: bool = False

    def __hash__(self):
        return hash(self.name)

    def __eq__(self, other):
        if not isinstance(other, Node):
            return NotImplemented
        return self.name == other.name


@dataclass(frozen=True)
class Circuit:
    """
    The simulation-ready circuit produced by the CircuitBuilder.

    It is a data container and holds no imperative logic. Node voltages are not
    stored here: they only exist in a `DCOperatingPoint` returned by an analysis.
    """
    name: str
    source_file_path: Optional[Path]

    # All nodes, ground included, in order of variable index.
    nodes: Dict[str, Node]

    # Component instances in netlist order, keyed by instance id.
    components: Dict[str, ComponentBase]

    # The allocated MNA variables, ordered by index.
    variables: Tuple[VariableInfo, ...]

    # Link back to the parser IR this circuit was built from.
    raw_ir_root: ParsedNetlist

    @property
    def ground(self) -> Node:
        return next(node for node in self.nodes.values() if node.is_ground)

    @property
    def variable_count(self) -> int:
        """Length of the MNA solution vector, including the ground slot."""
        return len(self.variables)

    @property
    def node_variable_count(self) -> int:
        return sum(1 for v in self.variables if v.kind == VariableKind.NODE_VOLTAGE)

    @property
    def branch_variable_count(self) -> int:
        return sum(1 for v in self.variables if v.kind == VariableKind.BRANCH_CURRENT)
