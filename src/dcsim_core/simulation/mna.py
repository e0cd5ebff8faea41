# src/dcsim_core/simulation/mna.py

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Tuple

import numpy as np
import scipy.sparse as sp

from ..components.capabilities import IDcStampContributor
from ..components.stamps import ComponentContribution
from ..data_structures import Circuit


logger = logging.getLogger(__name__)

SparseRow = Dict[int, float]


@dataclass(frozen=True)
class MnaSystem:
    """
    The assembled DC system ``A x = b`` in ordered compressed-row form.

    `matrix` maps a row index to its ``{column: value}`` entries, with rows and columns
    in ascending order. Absent entries are 0.0. `vector` maps a row index to its
    right-hand side. `size` is the length of the solution vector, ground slot included.
    """
    matrix: Dict[int, SparseRow]
    vector: Dict[int, float]
    size: int

    def row(self, index: int) -> SparseRow:
        return self.matrix.get(index, {})

    def rhs(self, index: int) -> float:
        return self.vector.get(index, 0.0)

    @property
    def nnz(self) -> int:
        return sum(len(entries) for entries in self.matrix.values())

    def to_csr(self) -> sp.csr_matrix:
        """A scipy CSR copy of `matrix`, shaped (size, size). Row/column 0 are empty."""
        rows, cols, data = [], [], []
        for r, entries in self.matrix.items():
            for c, value in entries.items():
                rows.append(r)
                cols.append(c)
                data.append(value)
        return sp.csr_matrix((data, (rows, cols)), shape=(self.size, self.size), dtype=float)

    def to_dense(self) -> Tuple[np.ndarray, np.ndarray]:
        """Dense copies of (A, b), mostly for inspection and reporting."""
        b = np.zeros(self.size, dtype=float)
        for r, value in self.vector.items():
            b[r] = value
        return self.to_csr().toarray(), b

    def is_symmetric(self, indices: Iterable[int]) -> bool:
        """Whether ``A[i][j] == A[j][i]`` for every pair drawn from `indices`."""
        idx = list(indices)
        return all(self.row(i).get(j, 0.0) == self.row(j).get(i, 0.0) for i in idx for j in idx)


class MnaAssembler:
    """
    Folds component stamps into an `MnaSystem`.

    Every stamp is accumulated (``A[row][col] += value``, ``b[row] += value``); nothing is
    ever overwritten. The assembler is agnostic to component types and reaches each
    component only through its `IDcStampContributor` capability.
    """

    def assemble(self, contributions: Iterable[ComponentContribution], size: int) -> MnaSystem:
        """
        Accumulates an ordered collection of contributions into a system of the given size.
        Stamps must not reference the ground index.
        """
        matrix: Dict[int, SparseRow] = {}
        vector: Dict[int, float] = {}
        for contribution in contributions:
            for stamp in contribution.matrix_stamps:
                row = matrix.setdefault(stamp.row, {})
                row[stamp.col] = row.get(stamp.col, 0.0) + stamp.value
            for stamp in contribution.vector_stamps:
                vector[stamp.row] = vector.get(stamp.row, 0.0) + stamp.value

        ordered_matrix = {r: dict(sorted(matrix[r].items())) for r in sorted(matrix)}
        ordered_vector = {r: vector[r] for r in sorted(vector)}
        system = MnaSystem(matrix=ordered_matrix, vector=ordered_vector, size=size)
        logger.debug(f"Assembled MNA system: size={size}, rows={len(ordered_matrix)}, nnz={system.nnz}.")
        return system

    def assemble_circuit(self, circuit: Circuit) -> MnaSystem:
        """Collects the DC stamps of every component in netlist order and assembles them."""
        contributions = []
        for comp in circuit.components.values():
            contributor = comp.get_capability(IDcStampContributor)
            if contributor is None:
                logger.warning(f"Component '{comp.fqn}' provides no DC stamps; it is ignored.")
                continue
            contribution = contributor.get_dc_stamps(comp)
            logger.debug(f"Stamps of '{comp.fqn}':\n{contribution}")
            contributions.append(contribution)
        return self.assemble(contributions, circuit.variable_count)
