# src/dcsim_core/analysis/exceptions.py
"""
Defines custom, diagnosable exceptions for the analysis services.
"""
from dataclasses import dataclass

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass(eq=False)
class TopologyAnalysisError(DiagnosableError):
    """Custom exception for errors during topological analysis."""
    component_fqn: str
    details: str

    def __str__(self):
        return f"Topology analysis of '{self.component_fqn}' failed: {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Topological Analysis Error",
            details=self.details,
            suggestion="This may indicate an internal error: every component type must describe its DC behavior.",
            context={'fqn': self.component_fqn}
        )
