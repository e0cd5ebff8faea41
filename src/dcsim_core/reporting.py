# src/dcsim_core/reporting.py
"""
Plain-text renderers for circuits, MNA systems and DC results.

Every function returns a string; writing it somewhere is up to the caller.
Component values and results are shown with compact SI prefixes through pint.
"""
import logging
from typing import List, Optional

from .data_structures import Circuit
from .simulation.config import SolverConfig
from .simulation.mna import MnaSystem
from .simulation.results import DCOperatingPoint, SolverResult
from .units import format_quantity

logger = logging.getLogger(__name__)

RULE_WIDTH = 56
_HEAVY = "=" * RULE_WIDTH
_LIGHT = "-" * RULE_WIDTH


def _section(title: str) -> List[str]:
    return [title, _LIGHT]


def render_circuit(circuit: Circuit) -> str:
    """Header, node table and component table of a built circuit."""
    lines = [_HEAVY, f"Circuit Name: {circuit.name}", _HEAVY, ""]
    if circuit.source_file_path is not None:
        lines[2:2] = [f"Source: {circuit.source_file_path}"]

    lines += _section("Circuit Nodes:")
    lines.append(f"{'Node':<12}{'Index':>8}")
    lines.append(_LIGHT)
    for node in circuit.nodes.values():
        marker = " (ground)" if node.is_ground else ""
        lines.append(f"{node.name:<12}{node.index:>8}{marker}")
    lines.append("")

    lines += _section("Circuit Components:")
    lines.append(f"{'ID':<10}{'Type':<15}{'(+)':>6}{'(-)':>6}{'Value':>18}")
    lines.append(_LIGHT)
    for comp in circuit.components.values():
        lines.append(
            f"{comp.instance_id:<10}{comp.component_type_str:<15}{comp.node_pos.name:>6}"
            f"{comp.node_neg.name:>6}{comp.format_value():>18}"
        )
    lines.append("")
    return "\n".join(lines)


def render_mna_system(system: MnaSystem, precision: int = 6) -> str:
    """The sparse matrix and vector, one nonzero entry per line."""
    lines = _section(f"MNA System (size {system.size}, {system.nnz} matrix entries):")
    lines.append("Matrix A:")
    for row, entries in system.matrix.items():
        cells = " ".join(f"[{col}]={value:.{precision}g}" for col, value in entries.items())
        lines.append(f"  Row {row}: {cells}")
    lines.append("Vector b:")
    for row, value in system.vector.items():
        lines.append(f"  [{row}] = {value:.{precision}g}")
    lines.append("")
    return "\n".join(lines)


def render_solver_status(config: SolverConfig, result: Optional[SolverResult]) -> str:
    """Solver settings followed by the outcome of the solve, if there was one."""
    lines = _section("Modified Gauss-Seidel Configuration:")
    lines.append(f"  Max Iterations: {config.max_iter}")
    lines.append(f"  Tolerance: {config.tolerance:.6e}")
    lines.append(f"  Damping Factor: {config.damping_factor:.6f}")
    lines.append("")
    lines += _section("Gauss-Seidel Status:")
    if result is None:
        lines.append("  No solution available.")
    else:
        lines.append(f"  Converged: {'Yes' if result.converged else 'No'}")
        lines.append(f"  Iterations Taken: {result.iterations}")
        lines.append(f"  Max Residual: {result.max_residual:.3e}")
        lines.append(f"  Time Taken: {result.elapsed_s * 1e6:.0f} microseconds")
    lines.append("")
    return "\n".join(lines)


def render_operating_point(circuit: Circuit, op_point: DCOperatingPoint, precision: int = 4) -> str:
    """Node voltages, component currents and drops, and any validation warnings."""
    lines = _section("Node Voltages:")
    lines.append(f"{'Node':<12}{'Voltage':>18}")
    lines.append(_LIGHT)
    for name, voltage in op_point.node_voltages.items():
        lines.append(f"{name:<12}{format_quantity(voltage, 'volt', precision):>18}")
    lines.append("")

    lines += _section("Component Currents:")
    lines.append(f"{'ID':<10}{'Current':>18}{'Voltage Drop':>18}")
    lines.append(_LIGHT)
    for comp_id in circuit.components:
        current = op_point.component_currents.get(comp_id)
        current_str = format_quantity(current, 'ampere', precision) if current is not None else "n/a"
        drop_str = format_quantity(op_point.component_voltages[comp_id], 'volt', precision)
        lines.append(f"{comp_id:<10}{current_str:>18}{drop_str:>18}")
    lines.append("")

    if op_point.issues:
        lines += _section("Validation Warnings:")
        lines += [f"  {issue}" for issue in op_point.issues]
        lines.append("")
    return "\n".join(lines)


def render_report(
    circuit: Circuit,
    op_point: DCOperatingPoint,
    config: SolverConfig,
    system: Optional[MnaSystem] = None,
) -> str:
    """The complete analysis report written by the command line tool."""
    parts = [render_circuit(circuit)]
    if system is not None:
        parts.append(render_mna_system(system))
    parts.append(render_solver_status(config, op_point.solver_result))
    parts.append(render_operating_point(circuit, op_point))
    return "\n".join(parts)
