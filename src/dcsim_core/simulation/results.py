# src/dcsim_core/simulation/results.py
"""
Immutable result contracts of a DC analysis.

A `SolverResult` is what the Gauss-Seidel solver returns for one solve. A
`DCOperatingPoint` maps that vector back onto the circuit: node voltages, branch
currents and per-component currents. Voltages can only be read from an operating
point, so there is no way to observe a circuit before it has been solved.
"""
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, FrozenSet, List, Optional, Tuple

import numpy as np

from ..validation.issues import ValidationIssue
from .mna import MnaSystem


class SolverStatus(Enum):
    """Terminal states of one Gauss-Seidel solve."""
    CONVERGED = auto()
    MAX_ITER_EXHAUSTED = auto()


@dataclass(frozen=True)
class SolverResult:
    """
    Attributes:
        solution: Dense solution vector, indexed by MNA variable; ``solution[0]`` is 0.0.
        status: How the solve ended. Non-convergence is a status, not an error.
        iterations: Number of completed sweeps.
        targets: Final row-to-variable assignment of the re-pivoting scheme.
        claimed: Variables that were settled on a single row and may not be reassigned.
        max_residual: Largest ``|lhs[i] - b[i]|`` of the last iterate.
        elapsed_s: Wall-clock duration of the solve in seconds.
    """
    solution: np.ndarray
    status: SolverStatus
    iterations: int
    targets: Tuple[int, ...] = ()
    claimed: FrozenSet[int] = frozenset()
    max_residual: float = 0.0
    elapsed_s: float = 0.0

    @property
    def converged(self) -> bool:
        return self.status is SolverStatus.CONVERGED


@dataclass(frozen=True)
class DCOperatingPoint:
    """
    The solved DC state of a circuit.

    Attributes:
        circuit_name: Name of the analyzed circuit.
        node_voltages: Voltage of every node in volts, keyed by node name (ground is 0.0).
        branch_currents: Current of every extra MNA variable in amperes, keyed by the
                         id of the voltage source or inductor that owns it.
        component_currents: DC current through each component, from its positive to
                            its negative terminal.
        component_voltages: Voltage drop ``v+ - v-`` across each component.
        solver_result: The raw result of the solve this point was derived from.
        issues: Non-fatal validation findings about the circuit.
        mna_system: The assembled system that was solved, when the caller kept it.
    """
    circuit_name: str
    node_voltages: Dict[str, float]
    branch_currents: Dict[str, float]
    component_currents: Dict[str, float]
    component_voltages: Dict[str, float]
    solver_result: SolverResult
    issues: List[ValidationIssue] = field(default_factory=list)
    mna_system: Optional[MnaSystem] = None

    @property
    def converged(self) -> bool:
        return self.solver_result.converged

    @property
    def iterations(self) -> int:
        return self.solver_result.iterations

    @property
    def solution(self) -> np.ndarray:
        return self.solver_result.solution

    def voltage(self, node_name: str) -> float:
        """Voltage of a node; raises KeyError for unknown node names."""
        return self.node_voltages[node_name]

    def current(self, component_id: str) -> float:
        """DC current through a component; raises KeyError for unknown ids."""
        return self.component_currents[component_id]

    def voltage_drop(self, component_id: str) -> float:
        return self.component_voltages[component_id]

    def issue_codes(self) -> List[str]:
        return [issue.code for issue in self.issues]

    def find_issue(self, code: str) -> Optional[ValidationIssue]:
        return next((issue for issue in self.issues if issue.code == code), None)
