# src/dcsim_core/simulation/__init__.py
import logging
logger = logging.getLogger(__name__)

from .config import SolverConfig, RunConfig, ConfigParsingError, load_solver_config, load_run_config, parse_run_config
from .mna import MnaAssembler, MnaSystem
from .gauss_seidel import GaussSeidelSolver, resolve_pivot
from .results import SolverResult, SolverStatus, DCOperatingPoint
from .deploy import deploy_solution
from .execution import run_dc_analysis, analyze_netlist

__all__ = [
    "SolverConfig",
    "RunConfig",
    "ConfigParsingError",
    "load_solver_config",
    "load_run_config",
    "parse_run_config",
    "MnaAssembler",
    "MnaSystem",
    "GaussSeidelSolver",
    "resolve_pivot",
    "SolverResult",
    "SolverStatus",
    "DCOperatingPoint",
    "deploy_solution",
    "run_dc_analysis",
    "analyze_netlist",
]
