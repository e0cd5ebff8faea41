# src/dcsim_core/simulation/gauss_seidel.py
"""
A Gauss-Seidel solver for MNA systems, modified for structurally zero diagonals.

Rows that belong to voltage sources and inductors have no self term, so the textbook
update ``x[row] = (b[row] - sum) / A[row][row]`` cannot be used for them. Instead every
row solves for a *target* variable, initially the row's own index. When the row has
no usable coefficient at its target, `resolve_pivot` moves the target to the largest
remaining entry of the row and hands the old target to whichever row held the new one.
A variable that was the only candidate of its row is *claimed*: no later re-pivot may
take it again.

The update is damped: ``x[t] = w * x_new + (1 - w) * x[t]``. Residuals are checked
every `CONVERGENCE_CHECK_INTERVAL` sweeps; running out of sweeps is reported through
`SolverStatus`, never raised.
"""
import logging
import time
from typing import AbstractSet, FrozenSet, List, Mapping, Sequence, Tuple

import numpy as np

from ..constants import CONVERGENCE_CHECK_INTERVAL
from .config import SolverConfig
from .mna import MnaSystem
from .results import SolverResult, SolverStatus


logger = logging.getLogger(__name__)


def _has_pivot(row_coeffs: Mapping[int, float], target: int) -> bool:
    return row_coeffs.get(target, 0.0) != 0.0


def _max_residual(lhs_values: Sequence[float], vector: Mapping[int, float], size: int) -> float:
    return max((abs(lhs_values[i] - vector.get(i, 0.0)) for i in range(size)), default=0.0)


def resolve_pivot(
    row: int,
    row_coeffs: Mapping[int, float],
    targets: Sequence[int],
    claimed: AbstractSet[int],
) -> Tuple[Tuple[int, ...], FrozenSet[int]]:
    """
    Picks the variable that `row` should solve for.

    Nothing changes if the row has a nonzero coefficient at its current target, or if
    the row has no nonzero, unclaimed entry at all (the row is then skipped by the
    caller). Otherwise the entry with the largest magnitude becomes the new target; on
    equal magnitudes the lowest column wins. The row that targeted that column until now
    takes over this row's old target. If that column was the only candidate scanned, it
    becomes claimed.

    The inputs are not modified; new targets and claims are returned.

    Args:
        row: The row being visited.
        row_coeffs: The row's ``{column: value}`` entries, in ascending column order.
        targets: Current target of every row, indexed by row.
        claimed: Variables already settled on some row.

    Returns:
        A ``(targets, claimed)`` pair.
    """
    new_targets = tuple(targets)
    new_claimed = frozenset(claimed)
    current = new_targets[row]
    if _has_pivot(row_coeffs, current):
        return new_targets, new_claimed

    max_val = 0.0
    max_idx = current
    independent = True
    for col, value in row_coeffs.items():
        if value == 0.0 or col in new_claimed:
            continue
        # A second candidate was seen; the choice is no longer forced.
        if max_idx != current:
            independent = False
        if abs(value) <= max_val:
            continue
        max_val = abs(value)
        max_idx = col

    if max_idx == current:
        return new_targets, new_claimed

    if independent:
        new_claimed = new_claimed | {max_idx}

    swapped = list(new_targets)
    for i, target in enumerate(swapped):
        if target == max_idx:
            swapped[i] = current
            break
    swapped[row] = max_idx
    return tuple(swapped), new_claimed


class GaussSeidelSolver:
    """
    Solves an `MnaSystem` iteratively. All working state is local to one `solve` call,
    so a solver instance can be reused for any number of independent solves.
    """

    def __init__(self, config: SolverConfig = None):
        self.config = config if config is not None else SolverConfig()

    def solve(self, system: MnaSystem) -> SolverResult:
        """
        Runs damped Gauss-Seidel sweeps over the rows of `system` in ascending order
        until the residual check passes or `max_iter` sweeps have been completed.
        """
        cfg = self.config
        size = system.size
        logger.info(
            f"Gauss-Seidel solve started: size={size}, max_iter={cfg.max_iter}, "
            f"tolerance={cfg.tolerance:.3e}, damping={cfg.damping_factor}"
        )
        start = time.perf_counter()

        solution: List[float] = [0.0] * size
        lhs_values: List[float] = [0.0] * size
        targets: Tuple[int, ...] = tuple(range(size))
        claimed: FrozenSet[int] = frozenset()
        status = SolverStatus.MAX_ITER_EXHAUSTED
        iteration = 0

        for iteration in range(1, cfg.max_iter + 1):
            for row, row_coeffs in system.matrix.items():
                old_target = targets[row]
                targets, claimed = resolve_pivot(row, row_coeffs, targets, claimed)
                if targets[row] != old_target:
                    logger.debug(
                        f"Iteration {iteration}: row {row} now solves for x[{targets[row]}] "
                        f"(was x[{old_target}]); targets={list(targets)}"
                    )

                if not _has_pivot(row_coeffs, targets[row]):
                    logger.debug(f"Iteration {iteration}: row {row} skipped, no pivot at x[{targets[row]}].")
                    continue

                lhs_values[row] = self._update_row(row, row_coeffs, system.rhs(row), targets[row], solution)

            if iteration % CONVERGENCE_CHECK_INTERVAL != 0:
                continue
            if _max_residual(lhs_values, system.vector, size) <= cfg.tolerance:
                status = SolverStatus.CONVERGED
                break

        elapsed = time.perf_counter() - start
        if status is SolverStatus.CONVERGED:
            logger.info(f"Gauss-Seidel converged after {iteration} iterations ({elapsed:.4f} s).")
        else:
            logger.warning(
                f"Gauss-Seidel did not converge within {cfg.max_iter} iterations "
                f"(tolerance {cfg.tolerance:.3e}); returning the last iterate."
            )

        return SolverResult(
            solution=np.array(solution, dtype=float),
            status=status,
            iterations=iteration,
            targets=targets,
            claimed=claimed,
            max_residual=_max_residual(lhs_values, system.vector, size),
            elapsed_s=elapsed,
        )

    def _update_row(
        self,
        row: int,
        row_coeffs: Mapping[int, float],
        rhs: float,
        target: int,
        solution: List[float],
    ) -> float:
        """Applies the damped update for `target` in place and returns the realized LHS."""
        total = 0.0
        diag = 0.0
        for col, value in row_coeffs.items():
            if col != target:
                total += value * solution[col]
            else:
                diag = value

        x_new = (rhs - total) / diag
        w = self.config.damping_factor
        solution[target] = w * x_new + (1.0 - w) * solution[target]
        return total + diag * solution[target]
