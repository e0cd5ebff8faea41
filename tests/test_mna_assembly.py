# tests/test_mna_assembly.py
import numpy as np
import numpy.testing as npt
import pytest
import scipy.sparse as sp

from dcsim_core.components.stamps import ComponentContribution
from dcsim_core.simulation.mna import MnaAssembler, MnaSystem


def contribution(matrix=(), vector=()):
    c = ComponentContribution()
    for row, col, value in matrix:
        c.stamp_matrix(row, col, value)
    for row, value in vector:
        c.stamp_vector(row, value)
    return c


class TestAssemble:

    def test_stamps_accumulate(self):
        system = MnaAssembler().assemble([
            contribution(matrix=[(1, 1, 0.5)], vector=[(1, 1.0)]),
            contribution(matrix=[(1, 1, 0.25), (1, 2, -1.0)], vector=[(1, 2.0)]),
        ], size=3)
        assert system.matrix == {1: {1: 0.75, 2: -1.0}}
        assert system.vector == {1: 3.0}
        assert system.rhs(2) == 0.0
        assert system.row(2) == {}

    def test_rows_and_columns_are_ascending(self):
        system = MnaAssembler().assemble([
            contribution(matrix=[(3, 2, 1.0), (1, 3, 1.0), (3, 1, 1.0), (1, 1, 2.0)], vector=[(3, 1.0), (1, 1.0)]),
        ], size=4)
        assert list(system.matrix) == [1, 3]
        assert list(system.matrix[3]) == [1, 2]
        assert list(system.matrix[1]) == [1, 3]
        assert list(system.vector) == [1, 3]

    def test_empty_input(self):
        system = MnaAssembler().assemble([], size=1)
        assert system.matrix == {}
        assert system.vector == {}
        assert system.nnz == 0


class TestCircuitAssembly:

    def test_voltage_divider_system(self, build_circuit):
        circuit = build_circuit("""
            V1 1 0 10
            R1 1 2 1000
            R2 2 0 1000
        """)
        system = MnaAssembler().assemble_circuit(circuit)
        g = 1e-3
        assert system.size == circuit.variable_count == 4
        assert system.matrix[1] == pytest.approx({1: g, 2: -g, 3: 1.0})
        assert system.matrix[2] == pytest.approx({1: -g, 2: 2 * g})
        assert system.matrix[3] == {1: 1.0}
        assert system.vector == {3: 10.0}

    def test_ground_never_appears(self, build_circuit):
        circuit = build_circuit("""
            V1 1 0 10
            I1 0 2 1m
            R1 1 2 1k
            L1 2 0 1m
            C1 1 0 1u
            R2 0 3 2k
            V2 3 0 -2
        """)
        system = MnaAssembler().assemble_circuit(circuit)
        assert 0 not in system.matrix
        assert 0 not in system.vector
        for entries in system.matrix.values():
            assert 0 not in entries

    def test_resistor_network_is_symmetric(self, build_circuit):
        circuit = build_circuit("""
            R1 1 2 100
            R2 2 3 200
            R3 3 1 300
            R4 1 0 50
            R5 3 0 75
        """)
        system = MnaAssembler().assemble_circuit(circuit)
        node_indices = [node.index for node in circuit.nodes.values() if not node.is_ground]
        assert system.is_symmetric(node_indices)
        dense, _ = system.to_dense()
        npt.assert_allclose(dense, dense.T)

    def test_diagonal_is_sum_of_incident_conductances(self, build_circuit):
        circuit = build_circuit("""
            R1 1 2 100
            R2 1 0 200
            R3 1 3 400
            R4 2 3 50
        """)
        system = MnaAssembler().assemble_circuit(circuit)
        n1 = circuit.nodes["1"].index
        assert system.matrix[n1][n1] == pytest.approx(1 / 100 + 1 / 200 + 1 / 400)

    def test_parallel_resistors_accumulate(self, build_circuit):
        circuit = build_circuit("R1 1 0 100\nR2 1 0 100\n")
        system = MnaAssembler().assemble_circuit(circuit)
        assert system.matrix == {1: {1: pytest.approx(0.02)}}

    def test_capacitor_leaves_no_entries(self, build_circuit):
        circuit = build_circuit("C1 1 2 1u\nR1 2 0 1k\n")
        system = MnaAssembler().assemble_circuit(circuit)
        assert list(system.matrix) == [2]

    def test_sparse_and_dense_views(self, build_circuit):
        circuit = build_circuit("V1 1 0 10\nR1 1 2 1000\nR2 2 0 1000\n")
        system = MnaAssembler().assemble_circuit(circuit)
        csr = system.to_csr()
        assert sp.issparse(csr)
        assert csr.shape == (4, 4)
        assert csr.nnz == system.nnz == 6
        dense, b = system.to_dense()
        npt.assert_array_equal(dense, csr.toarray())
        npt.assert_array_equal(b, np.array([0.0, 0.0, 0.0, 10.0]))
        assert not dense[0].any() and not dense[:, 0].any()
