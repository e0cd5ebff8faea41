# tests/test_topology_validator.py
import networkx as nx
import pytest

from dcsim_core.analysis import TopologyAnalyzer
from dcsim_core.validation import (
    TopologyValidator, TopologyIssueCode, ValidationIssueLevel, SemanticValidationError,
)


def codes(issues):
    return [issue.code for issue in issues]


class TestTopologyAnalyzer:

    def test_dc_graph_excludes_open_components(self, build_circuit):
        circuit = build_circuit("""
            V1 1 0 10
            C1 1 2 1u
            R1 2 0 1k
            I1 0 3 1m
            L1 3 2 1m
        """)
        results = TopologyAnalyzer(circuit).analyze()
        assert isinstance(results.dc_graph, nx.MultiGraph)
        assert sorted(key for _, _, key in results.dc_graph.edges(keys=True)) == ["L1", "R1", "V1"]
        assert results.grounded_nodes == {"0", "1", "2", "3"}
        assert results.floating_nodes == frozenset()
        assert results.ground_connected

    def test_floating_node_behind_capacitor(self, build_circuit):
        circuit = build_circuit("""
            V1 1 0 5
            C1 1 2 1u
            C2 2 0 1u
        """)
        results = TopologyAnalyzer(circuit).analyze()
        assert results.floating_nodes == {"2"}

    def test_source_inductor_loop(self, build_circuit):
        circuit = build_circuit("""
            R1 1 0 1k
            V1 1 0 5
            L1 1 0 1m
        """)
        results = TopologyAnalyzer(circuit).analyze()
        assert results.source_loops == (("V1", "L1"),)

    def test_series_sources_are_not_a_loop(self, build_circuit):
        circuit = build_circuit("""
            V1 1 0 5
            L1 1 2 1m
            R1 2 0 1k
        """)
        assert TopologyAnalyzer(circuit).analyze().source_loops == ()


class TestTopologyValidator:

    def test_clean_circuit_has_no_issues(self, build_circuit):
        circuit = build_circuit("V1 1 0 10\nR1 1 2 1k\nR2 2 0 1k\n")
        assert TopologyValidator(circuit).validate() == []

    def test_shorted_voltage_source_is_an_error(self, build_circuit):
        circuit = build_circuit("V1 1 1 5\nR1 1 0 1k\n")
        issues = TopologyValidator(circuit).validate()
        assert codes(issues) == ["COMP_SELF_LOOP_V"]
        issue = issues[0]
        assert issue.level is ValidationIssueLevel.ERROR
        assert issue.component_fqn == "V1"
        assert issue.details["line_number"] == 1
        assert "5.0000 V" in issue.message

    def test_other_self_loops_are_warnings(self, build_circuit):
        circuit = build_circuit("V1 1 0 5\nR1 1 0 1k\nC1 1 1 1u\n")
        issues = TopologyValidator(circuit).validate()
        assert codes(issues) == ["COMP_SELF_LOOP"]
        assert issues[0].level is ValidationIssueLevel.WARNING

    def test_floating_node_warning(self, build_circuit):
        circuit = build_circuit("V1 1 0 5\nC1 1 2 1u\nI1 2 0 1m\n")
        issues = TopologyValidator(circuit).validate()
        assert codes(issues) == ["NET_FLOATING_DC"]
        assert issues[0].node_name == "2"

    def test_source_loop_warning(self, build_circuit):
        circuit = build_circuit("V1 1 0 5\nL1 1 0 1m\n")
        issues = TopologyValidator(circuit).validate()
        assert codes(issues) == ["LOOP_V_L"]
        assert "['V1', 'L1']" in issues[0].message

    def test_missing_ground_connection(self, build_circuit):
        circuit = build_circuit("V1 1 2 5\nR1 1 2 1k\n")
        issues = TopologyValidator(circuit).validate()
        assert codes(issues) == ["GND_CONN_001", "NET_FLOATING_DC", "NET_FLOATING_DC"]
        assert [issue.node_name for issue in issues] == ["0", "1", "2"]

    def test_error_collects_only_error_issues(self, build_circuit):
        circuit = build_circuit("V1 1 1 5\nR1 2 2 1k\nR2 1 0 1\n")
        issues = TopologyValidator(circuit).validate()
        error = SemanticValidationError(issues)
        assert [issue.code for issue in error.issues] == ["COMP_SELF_LOOP_V"]
        report = error.get_diagnostic_report()
        assert "Component:      V1" in report
        assert "Line:           1" in report

    def test_issue_code_registry(self):
        assert TopologyIssueCode.COMP_SELF_LOOP_V.level is ValidationIssueLevel.ERROR
        assert TopologyIssueCode.LOOP_V_L.level is ValidationIssueLevel.WARNING
        message = TopologyIssueCode.NET_FLOATING_DC.format_message(node_name="n7")
        assert "n7" in message
