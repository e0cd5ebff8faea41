# src/dcsim_core/components/stamps.py
"""
The stamp contract between components and the MnaAssembler.

A component describes its DC contribution as a list of matrix stamps
``(row, col, value)`` and vector stamps ``(row, value)``. Rows and columns are MNA
variable indices and are never the ground index: components drop every term that
touches ground before emitting it.
"""
from dataclasses import dataclass, field
from typing import List, NamedTuple


class MatrixStamp(NamedTuple):
    row: int
    col: int
    value: float


class VectorStamp(NamedTuple):
    row: int
    value: float


@dataclass
class ComponentContribution:
    """All stamps emitted by one component."""
    matrix_stamps: List[MatrixStamp] = field(default_factory=list)
    vector_stamps: List[VectorStamp] = field(default_factory=list)

    def stamp_matrix(self, row: int, col: int, value: float) -> None:
        self.matrix_stamps.append(MatrixStamp(row, col, value))

    def stamp_vector(self, row: int, value: float) -> None:
        self.vector_stamps.append(VectorStamp(row, value))

    @property
    def is_empty(self) -> bool:
        return not self.matrix_stamps and not self.vector_stamps

    def __str__(self) -> str:
        lines = ["Matrix Contributions:"]
        lines += [f"[{s.row}][{s.col}] = {s.value:g}" for s in self.matrix_stamps]
        lines.append("Vector Contributions:")
        lines += [f"[{s.row}] = {s.value:g}" for s in self.vector_stamps]
        return "\n".join(lines)
