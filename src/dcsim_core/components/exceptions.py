# src/dcsim_core/components/exceptions.py
"""
Defines the custom, diagnosable exceptions for the components subsystem.
"""
from dataclasses import dataclass
from typing import Optional

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass(eq=False)
class ComponentError(DiagnosableError):
    """
    The canonical, diagnosable exception for all component-related errors, such as a
    resistor with zero resistance or a non-finite source value.
    """
    component_fqn: str
    details: str
    line_number: Optional[int] = None

    def __str__(self):
        return f"Component '{self.component_fqn}': {self.details}"

    def get_diagnostic_report(self) -> str:
        """Generates the definitive diagnostic report for a component error."""
        return format_diagnostic_report(
            error_type="Component Value Error",
            details=self.details,
            suggestion="Check the component's value: resistances must be positive, capacitances and inductances non-negative, and every value finite.",
            context={'fqn': self.component_fqn, 'line_number': self.line_number}
        )
