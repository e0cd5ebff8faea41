# src/dcsim_core/simulation/deploy.py
import logging
from typing import Dict, List, Optional

from ..components.capabilities import IDcCurrentProvider
from ..data_structures import Circuit
from ..indexing import VariableKind
from ..validation.issues import ValidationIssue
from .mna import MnaSystem
from .results import DCOperatingPoint, SolverResult

logger = logging.getLogger(__name__)


def deploy_solution(
    circuit: Circuit,
    solver_result: SolverResult,
    issues: Optional[List[ValidationIssue]] = None,
    system: Optional[MnaSystem] = None,
) -> DCOperatingPoint:
    """
    Maps a solved vector back onto the circuit.

    Each variable index is looked up in the circuit's variable table: node-voltage
    variables become node voltages, branch-current variables become the current of the
    voltage source or inductor that allocated them.
    """
    solution = solver_result.solution
    if len(solution) != circuit.variable_count:
        raise ValueError(
            f"Solution has {len(solution)} entries but circuit '{circuit.name}' "
            f"has {circuit.variable_count} variables."
        )

    node_voltages: Dict[str, float] = {}
    branch_currents: Dict[str, float] = {}
    for var in circuit.variables:
        value = float(solution[var.index])
        if var.kind is VariableKind.BRANCH_CURRENT:
            branch_currents[var.owner] = value
        else:
            node_voltages[var.owner] = value

    component_currents: Dict[str, float] = {}
    component_voltages: Dict[str, float] = {}
    for comp_id, comp in circuit.components.items():
        component_voltages[comp_id] = comp.voltage_drop(solution)
        provider = comp.get_capability(IDcCurrentProvider)
        if provider is None:
            logger.warning(f"Component '{comp_id}' cannot report its DC current.")
            continue
        component_currents[comp_id] = provider.get_dc_current(comp, solution)

    return DCOperatingPoint(
        circuit_name=circuit.name,
        node_voltages=node_voltages,
        branch_currents=branch_currents,
        component_currents=component_currents,
        component_voltages=component_voltages,
        solver_result=solver_result,
        issues=list(issues or []),
        mna_system=system,
    )
