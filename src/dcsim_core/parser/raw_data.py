# src/dcsim_core/parser/raw_data.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

# The classes in this module define the Intermediate Representation (IR) passed
# from the NetlistParser to the CircuitBuilder. Values are already converted to
# SI floats; node names are still plain strings.

@dataclass(frozen=True)
class ParsedComponentLine:
    """IR for one component line, e.g. 'R1 1 2 4.7k'."""
    instance_id: str
    component_type: str  # Upper-case type letter: R, C, L, V or I.
    node_pos: str
    node_neg: str
    raw_value: str
    value: float
    line_number: int
    source_path: Optional[Path] = None


@dataclass(frozen=True)
class ParsedNetlist:
    """Top-level IR node representing one parsed netlist."""
    title: str
    source_path: Optional[Path]
    components: List[ParsedComponentLine]

    @property
    def node_names(self) -> List[str]:
        """Node names in order of first appearance (ground included if referenced)."""
        seen = {}
        for comp in self.components:
            seen.setdefault(comp.node_pos, None)
            seen.setdefault(comp.node_neg, None)
        return list(seen)
