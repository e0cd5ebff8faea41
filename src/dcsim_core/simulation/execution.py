# src/dcsim_core/simulation/execution.py
"""
Provides the public API functions for running a DC analysis.

`run_dc_analysis` is a thin facade over the individual services: topology
validation, MNA assembly, the Gauss-Seidel solve and solution deployment. Any
`Diagnosable` exception raised along the way reaches the caller as a single,
actionable `SimulationRunError`.
"""
import logging
from pathlib import Path
from typing import Optional, Union

from ..circuit_builder import CircuitBuilder
from ..data_structures import Circuit
from ..errors import SimulationRunError, Diagnosable, format_diagnostic_report
from ..validation import TopologyValidator, ValidationIssueLevel
from ..validation.exceptions import SemanticValidationError
from .config import SolverConfig
from .deploy import deploy_solution
from .gauss_seidel import GaussSeidelSolver
from .mna import MnaAssembler
from .results import DCOperatingPoint

logger = logging.getLogger(__name__)


def run_dc_analysis(circuit: Circuit, config: Optional[SolverConfig] = None) -> DCOperatingPoint:
    """
    Computes the DC operating point of a built circuit.

    Args:
        circuit: The simulation-ready Circuit, as produced by the `CircuitBuilder`.
        config: Solver settings; the defaults are used when omitted.

    Returns:
        The `DCOperatingPoint`. It is returned even if the solver did not converge;
        check its `converged` property.

    Raises:
        SimulationRunError: If validation finds an error or any stage fails unexpectedly.
    """
    config = config if config is not None else SolverConfig()
    try:
        logger.info(f"--- Starting DC analysis for '{circuit.name}' ---")
        issues = TopologyValidator(circuit).validate()
        if any(issue.level == ValidationIssueLevel.ERROR for issue in issues):
            raise SemanticValidationError(issues)
        for issue in issues:
            logger.warning(str(issue))

        system = MnaAssembler().assemble_circuit(circuit)
        solver_result = GaussSeidelSolver(config).solve(system)
        op_point = deploy_solution(circuit, solver_result, issues, system)

        logger.info(f"--- DC analysis for '{circuit.name}' finished (converged={op_point.converged}). ---")
        return op_point

    except Exception as e:
        if isinstance(e, Diagnosable):
            diagnostic_report = e.get_diagnostic_report()
        else:
            logger.error(f"Unexpected error during DC analysis of '{circuit.name}'.", exc_info=True)
            diagnostic_report = format_diagnostic_report(
                error_type=f"An Unexpected Simulation Error Occurred ({type(e).__name__})",
                details=f"The DC analysis failed with an unexpected internal error: {str(e)}",
                suggestion="This may indicate a bug in DCSim Core. Please review the traceback.",
                context={'fqn': circuit.name, 'source_file': circuit.source_file_path}
            )
        raise SimulationRunError(diagnostic_report) from e


def analyze_netlist(netlist_path: Union[str, Path], config: Optional[SolverConfig] = None) -> DCOperatingPoint:
    """Parses, builds and analyzes a netlist file in one call."""
    circuit = CircuitBuilder().build_from_file(netlist_path)
    return run_dc_analysis(circuit, config)
