# src/dcsim_core/__init__.py
import logging
from .log_config import setup_logging

__version__ = "0.1.0"

setup_logging()
logger = logging.getLogger(__name__)
logger.info("DCSim Core package initialized.")

from .units import ureg, pint, Quantity, parse_spice_value, format_quantity
from .indexing import VariableAllocator, VariableKind, VariableInfo
from .data_structures import Circuit, Node
from .parser import NetlistParser, ParsedNetlist, ParsedComponentLine
from .circuit_builder import CircuitBuilder
from .simulation import (
    SolverConfig, load_solver_config, MnaAssembler, MnaSystem, GaussSeidelSolver, resolve_pivot,
    SolverResult, SolverStatus, DCOperatingPoint, run_dc_analysis, analyze_netlist,
)
from .errors import DCSimError, CircuitBuildError, SimulationRunError

__all__ = [
    "__version__",
    # Units
    "ureg", "pint", "Quantity", "parse_spice_value", "format_quantity",
    # Data Structures
    "VariableAllocator", "VariableKind", "VariableInfo", "Circuit", "Node",
    # Parser
    "NetlistParser", "ParsedNetlist", "ParsedComponentLine",
    # Builder
    "CircuitBuilder",
    # Simulation
    "SolverConfig", "load_solver_config", "MnaAssembler", "MnaSystem", "GaussSeidelSolver",
    "resolve_pivot", "SolverResult", "SolverStatus", "DCOperatingPoint",
    "run_dc_analysis", "analyze_netlist",
    # Top-Level Errors (Actionable Diagnostics)
    "DCSimError", "CircuitBuildError", "SimulationRunError",
]
