# src/dcsim_core/indexing.py
"""
Explicit allocation of MNA variable indices.

Every unknown of the MNA system (a node voltage or the branch current of a voltage
source / inductor) owns one integer index. Indices are handed out by a
`VariableAllocator` that is passed explicitly to whoever needs one, so the
assignment order is visible in the code that builds a circuit and no hidden,
process-wide counter exists.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from .constants import GROUND_INDEX, GROUND_NODE_NAME

logger = logging.getLogger(__name__)


class VariableKind(Enum):
    """What an MNA unknown represents."""
    GROUND = "ground"
    NODE_VOLTAGE = "node_voltage"
    BRANCH_CURRENT = "branch_current"


@dataclass(frozen=True)
class VariableInfo:
    """A single allocated MNA variable and the object that owns it."""
    index: int
    kind: VariableKind
    owner: str  # Node name for voltages, component id for branch currents.


class VariableAllocator:
    """
    Hands out MNA variable indices once, in increasing order, and never reuses them.

    Index 0 is reserved for the ground reference at construction time.
    """

    def __init__(self):
        self._variables: List[VariableInfo] = [
            VariableInfo(index=GROUND_INDEX, kind=VariableKind.GROUND, owner=GROUND_NODE_NAME)
        ]

    def _allocate(self, kind: VariableKind, owner: str) -> int:
        index = len(self._variables)
        self._variables.append(VariableInfo(index=index, kind=kind, owner=owner))
        logger.debug(f"Allocated variable {index} ({kind.value}) for '{owner}'.")
        return index

    def allocate_node(self, node_name: str) -> int:
        """Allocates the voltage variable of a non-ground node."""
        return self._allocate(VariableKind.NODE_VOLTAGE, node_name)

    def allocate_branch(self, component_id: str) -> int:
        """Allocates an extra branch-current variable for a voltage source or inductor."""
        return self._allocate(VariableKind.BRANCH_CURRENT, component_id)

    @property
    def count(self) -> int:
        """Number of allocated variables, ground slot included (= solution length)."""
        return len(self._variables)

    def snapshot(self) -> Tuple[VariableInfo, ...]:
        """An immutable copy of the variable table, ordered by index."""
        return tuple(self._variables)
