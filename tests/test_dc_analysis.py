# tests/test_dc_analysis.py
import numpy as np
import numpy.testing as npt
import pytest

from conftest import VOLTAGE_DIVIDER, CURRENT_INJECTION, CAPACITOR_BLOCKS_DC, INDUCTOR_SHORTS_DC
from dcsim_core import (
    SolverConfig, run_dc_analysis, analyze_netlist, DCOperatingPoint, SimulationRunError,
)
from dcsim_core.simulation import deploy_solution, MnaAssembler, SolverResult, SolverStatus

VOLTAGE_TOL = 1e-5


class TestScenarios:

    def test_voltage_divider(self, build_circuit):
        op = run_dc_analysis(build_circuit(VOLTAGE_DIVIDER))
        assert op.converged
        assert op.voltage("0") == 0.0
        assert op.voltage("1") == pytest.approx(10.0, abs=VOLTAGE_TOL)
        assert op.voltage("2") == pytest.approx(5.0, abs=VOLTAGE_TOL)
        assert op.current("R1") == pytest.approx(5e-3, abs=1e-8)
        assert op.current("R2") == pytest.approx(5e-3, abs=1e-8)
        # The branch variable is the current entering the positive terminal.
        assert op.current("V1") == pytest.approx(-5e-3, abs=1e-8)
        assert op.branch_currents == {"V1": op.current("V1")}
        assert op.issues == []

    def test_current_injection(self, build_circuit):
        op = run_dc_analysis(build_circuit(CURRENT_INJECTION))
        assert op.converged
        assert op.voltage("1") == pytest.approx(1.0, abs=VOLTAGE_TOL)
        assert op.current("I1") == 1e-3
        assert op.voltage_drop("I1") == pytest.approx(-1.0, abs=VOLTAGE_TOL)

    def test_capacitor_blocks_dc(self, build_circuit):
        op = run_dc_analysis(build_circuit(CAPACITOR_BLOCKS_DC))
        assert op.converged
        assert op.voltage("1") == pytest.approx(10.0, abs=VOLTAGE_TOL)
        assert op.voltage("2") == pytest.approx(0.0, abs=VOLTAGE_TOL)
        assert op.current("C1") == 0.0
        assert op.current("V1") == pytest.approx(0.0, abs=1e-8)

    def test_inductor_shorts_dc(self, build_circuit):
        op = run_dc_analysis(build_circuit(INDUCTOR_SHORTS_DC))
        assert op.converged
        assert op.voltage("1") == pytest.approx(10.0, abs=VOLTAGE_TOL)
        assert op.voltage("2") == pytest.approx(10.0, abs=VOLTAGE_TOL)
        assert op.current("L1") == pytest.approx(10e-3, abs=1e-8)
        assert op.current("V1") == pytest.approx(-10e-3, abs=1e-8)

    def test_series_sources_and_loads(self, build_circuit):
        op = run_dc_analysis(build_circuit("""
            * Two sources
            V1 a 0 12
            R1 a b 2k
            R2 b 0 2k
            I1 0 b 1m
        """), SolverConfig(max_iter=5000))
        # Node b: (12 - vb)/2k + 1m = vb/2k  ->  vb = 7 V
        assert op.converged
        assert op.voltage("a") == pytest.approx(12.0, abs=VOLTAGE_TOL)
        assert op.voltage("b") == pytest.approx(7.0, abs=VOLTAGE_TOL)


class TestOperatingPoint:

    def test_solution_length_and_ground_slot(self, build_circuit):
        circuit = build_circuit(INDUCTOR_SHORTS_DC)
        op = run_dc_analysis(circuit)
        assert len(op.solution) == circuit.variable_count == 5
        assert op.solution[0] == 0.0
        assert set(op.node_voltages) == {"0", "1", "2"}
        assert set(op.branch_currents) == {"V1", "L1"}

    def test_unknown_names_raise_key_error(self, build_circuit):
        op = run_dc_analysis(build_circuit(VOLTAGE_DIVIDER))
        with pytest.raises(KeyError):
            op.voltage("missing")
        with pytest.raises(KeyError):
            op.current("R9")

    def test_operating_point_is_immutable(self, build_circuit):
        op = run_dc_analysis(build_circuit(VOLTAGE_DIVIDER))
        with pytest.raises(AttributeError):
            op.circuit_name = "other"

    def test_repeat_analysis_is_identical(self, build_circuit):
        circuit = build_circuit(VOLTAGE_DIVIDER)
        first = run_dc_analysis(circuit)
        second = run_dc_analysis(circuit)
        npt.assert_array_equal(first.solution, second.solution)
        assert first.iterations == second.iterations

    def test_non_convergence_still_returns_a_result(self, build_circuit):
        op = run_dc_analysis(build_circuit(VOLTAGE_DIVIDER), SolverConfig(max_iter=10))
        assert isinstance(op, DCOperatingPoint)
        assert not op.converged
        assert op.iterations == 10
        assert op.solver_result.status is SolverStatus.MAX_ITER_EXHAUSTED

    def test_solved_system_is_kept(self, build_circuit):
        circuit = build_circuit(VOLTAGE_DIVIDER)
        op = run_dc_analysis(circuit)
        assert op.mna_system == MnaAssembler().assemble_circuit(circuit)
        assert op.mna_system.size == len(op.solution)

    def test_deploy_rejects_wrong_length(self, build_circuit):
        circuit = build_circuit(VOLTAGE_DIVIDER)
        bad = SolverResult(solution=np.zeros(2),
                           status=SolverStatus.CONVERGED, iterations=5)
        with pytest.raises(ValueError):
            deploy_solution(circuit, bad)


class TestFacades:

    def test_analyze_netlist_from_file(self, tmp_path):
        netlist = tmp_path / "divider.cir"
        netlist.write_text(VOLTAGE_DIVIDER)
        op = analyze_netlist(netlist)
        assert op.circuit_name == "Voltage divider"
        assert op.voltage("2") == pytest.approx(5.0, abs=VOLTAGE_TOL)

    def test_validation_error_becomes_run_error(self, build_circuit):
        circuit = build_circuit("V1 1 1 5\nR1 1 0 1k\n")
        with pytest.raises(SimulationRunError) as excinfo:
            run_dc_analysis(circuit)
        report = str(excinfo.value)
        assert "COMP_SELF_LOOP_V" in report
        assert "Circuit Semantic Validation Error" in report

    def test_warnings_are_attached(self, build_circuit):
        op = run_dc_analysis(build_circuit("""
            V1 1 0 5
            R1 1 0 1k
            R2 2 2 1k
        """))
        assert op.converged
        assert op.issue_codes() == ["COMP_SELF_LOOP", "NET_FLOATING_DC"]
        assert op.find_issue("COMP_SELF_LOOP").component_fqn == "R2"
