# tests/test_gauss_seidel.py
import logging

import numpy as np
import numpy.testing as npt
import pytest

from dcsim_core.simulation import GaussSeidelSolver, SolverConfig, SolverStatus, resolve_pivot
from dcsim_core.simulation.mna import MnaAssembler, MnaSystem


class TestResolvePivot:

    def test_usable_target_is_kept(self):
        targets, claimed = resolve_pivot(1, {1: 2.0, 2: 5.0}, (0, 1, 2), set())
        assert targets == (0, 1, 2)
        assert claimed == frozenset()

    def test_single_candidate_is_claimed_and_swapped(self):
        targets, claimed = resolve_pivot(2, {1: 1.0}, (0, 1, 2), set())
        assert targets == (0, 2, 1)
        assert claimed == {1}

    def test_largest_magnitude_wins(self):
        targets, claimed = resolve_pivot(1, {2: -0.5, 3: -2.0}, (0, 1, 2, 3), set())
        assert targets == (0, 3, 2, 1)
        assert claimed == frozenset()

    def test_tie_keeps_lowest_column(self):
        targets, claimed = resolve_pivot(1, {3: 1.0, 4: -1.0}, (0, 1, 2, 3, 4), set())
        assert targets == (0, 3, 2, 1, 4)
        assert claimed == frozenset()

    def test_claimed_columns_are_skipped(self):
        targets, claimed = resolve_pivot(4, {1: 1.0, 2: -1.0}, (0, 3, 2, 1, 4), {1})
        assert targets == (0, 3, 4, 1, 2)
        assert claimed == {1, 2}

    def test_no_candidate_leaves_row_unresolved(self):
        targets, claimed = resolve_pivot(2, {1: 1.0}, (0, 2, 1), {1})
        assert targets == (0, 2, 1)
        assert claimed == {1}

    def test_explicit_zeros_are_not_candidates(self):
        targets, claimed = resolve_pivot(1, {1: 0.0, 2: 0.0}, (0, 1, 2), set())
        assert targets == (0, 1, 2)
        targets, claimed = resolve_pivot(1, {1: 0.0, 2: 3.0}, (0, 1, 2), set())
        assert targets == (0, 2, 1)
        assert claimed == {2}

    def test_inputs_are_not_modified(self):
        targets_in = [0, 1, 2]
        claimed_in = set()
        resolve_pivot(2, {1: 1.0}, targets_in, claimed_in)
        assert targets_in == [0, 1, 2]
        assert claimed_in == set()


def two_equation_system():
    """G*x1 + x2 = 0 and x1 = 5: the second row has no diagonal at all."""
    return MnaSystem(matrix={1: {1: 1e-3, 2: 1.0}, 2: {1: 1.0}}, vector={2: 5.0}, size=3)


class TestGaussSeidelSolver:

    def test_zero_diagonal_row_is_repivoted(self):
        result = GaussSeidelSolver().solve(two_equation_system())
        assert result.status is SolverStatus.CONVERGED
        assert result.targets == (0, 2, 1)
        assert result.claimed == {1}
        npt.assert_allclose(result.solution, [0.0, 5.0, -5e-3], atol=1e-7)
        assert result.max_residual <= SolverConfig().tolerance

    def test_all_zero_row_is_skipped(self):
        system = MnaSystem(matrix={1: {1: 1.0}, 2: {2: 0.0}}, vector={1: 2.0}, size=3)
        result = GaussSeidelSolver(SolverConfig(damping_factor=0.5)).solve(system)
        assert result.converged
        assert np.all(np.isfinite(result.solution))
        assert result.solution[2] == 0.0
        assert result.solution[1] == pytest.approx(2.0, abs=1e-8)

    def test_ground_slot_stays_zero(self):
        result = GaussSeidelSolver().solve(two_equation_system())
        assert result.solution[0] == 0.0
        assert len(result.solution) == 3

    def test_convergence_checked_every_fifth_iteration(self):
        system = MnaSystem(matrix={1: {1: 2.0}}, vector={1: 4.0}, size=2)
        result = GaussSeidelSolver(SolverConfig(damping_factor=1.0)).solve(system)
        assert result.converged
        assert result.iterations == 5
        assert result.solution[1] == 2.0

    def test_iteration_count_is_a_multiple_of_five(self):
        result = GaussSeidelSolver().solve(two_equation_system())
        assert result.iterations % 5 == 0

    def test_exhausted_budget_is_a_status(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = GaussSeidelSolver(SolverConfig(max_iter=7)).solve(two_equation_system())
        assert result.status is SolverStatus.MAX_ITER_EXHAUSTED
        assert not result.converged
        assert result.iterations == 7
        assert result.max_residual > SolverConfig().tolerance
        assert np.all(np.isfinite(result.solution))
        assert "did not converge" in caplog.text

    def test_budget_shorter_than_check_interval(self):
        result = GaussSeidelSolver(SolverConfig(max_iter=3)).solve(two_equation_system())
        assert result.status is SolverStatus.MAX_ITER_EXHAUSTED
        assert result.iterations == 3

    def test_solves_are_independent_and_repeatable(self):
        solver = GaussSeidelSolver()
        system = two_equation_system()
        first = solver.solve(system)
        second = solver.solve(system)
        npt.assert_array_equal(first.solution, second.solution)
        assert first.iterations == second.iterations
        assert first.targets == second.targets

    def test_system_is_not_modified(self):
        system = two_equation_system()
        GaussSeidelSolver().solve(system)
        assert system.matrix == {1: {1: 1e-3, 2: 1.0}, 2: {1: 1.0}}
        assert system.vector == {2: 5.0}

    def test_pivot_changes_are_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="dcsim_core.simulation.gauss_seidel"):
            GaussSeidelSolver().solve(two_equation_system())
        assert "row 2 now solves for x[1]" in caplog.text

    def test_inductor_circuit_settles_on_stable_targets(self, build_circuit):
        circuit = build_circuit("""
            V1 1 0 10
            L1 1 2 0.01
            R1 2 0 1000
        """)
        system = MnaAssembler().assemble_circuit(circuit)
        result = GaussSeidelSolver().solve(system)
        assert result.converged
        assert result.targets == (0, 3, 4, 1, 2)
        assert result.claimed == {1, 2}


class TestDampingConvergence:
    NETLIST = """
        I1 0 1 1m
        R1 1 0 1k
        R2 1 2 2k
        R3 2 0 2k
    """

    @pytest.mark.parametrize("damping", [0.9, 0.5, 0.3, 0.1])
    def test_under_relaxation_still_converges(self, build_circuit, damping):
        system = MnaAssembler().assemble_circuit(build_circuit(self.NETLIST))
        result = GaussSeidelSolver(SolverConfig(max_iter=5000, damping_factor=damping)).solve(system)
        assert result.converged
        assert result.solution[1] == pytest.approx(0.8, abs=1e-5)
        assert result.solution[2] == pytest.approx(0.4, abs=1e-5)

    def test_smaller_damping_only_slows_convergence(self, build_circuit):
        system = MnaAssembler().assemble_circuit(build_circuit(self.NETLIST))
        iterations = {
            w: GaussSeidelSolver(SolverConfig(max_iter=5000, damping_factor=w)).solve(system).iterations
            for w in (0.5, 0.1)
        }
        assert iterations[0.1] >= iterations[0.5]
