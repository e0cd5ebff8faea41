# src/dcsim_core/constants.py
import logging

logger = logging.getLogger(__name__)

# --- Netlist Conventions ---

#: Name of the reference node in a netlist. It is always at 0 V.
GROUND_NODE_NAME: str = "0"

#: Variable index reserved for the ground reference. It never appears as a
#: row or column of the MNA system.
GROUND_INDEX: int = 0

# --- Gauss-Seidel Defaults ---

DEFAULT_MAX_ITER: int = 1000

#: Absolute residual tolerance, compared per row against |lhs - rhs|.
DEFAULT_TOLERANCE: float = 1.0e-9

#: Under-relaxation factor. Values in (0, 1]; 1.0 is plain Gauss-Seidel.
DEFAULT_DAMPING_FACTOR: float = 0.1

#: The residual check runs after every N-th completed sweep only.
#: The cadence is arbitrary but observable through iteration counts.
CONVERGENCE_CHECK_INTERVAL: int = 5

logger.debug("Defined core constants: GROUND_INDEX, solver defaults, CONVERGENCE_CHECK_INTERVAL")
