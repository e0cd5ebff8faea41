# src/dcsim_core/components/base_enums.py
from enum import Enum, auto


class DCBehaviorType(Enum):
    """
    Defines how a component behaves at DC, which is queried by the TopologyAnalyzer.
    """
    ADMITTANCE = auto()     # Finite conductance between its terminals (resistor).
    SHORT_CIRCUIT = auto()  # Ideal wire at DC (inductor).
    OPEN_CIRCUIT = auto()   # No DC conduction (capacitor, ideal current source).
    FIXED_VOLTAGE = auto()  # Forces a voltage difference between its terminals (voltage source).
