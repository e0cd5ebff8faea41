# src/dcsim_core/validation/exceptions.py
"""
The diagnosable exception raised when topology validation finds errors.
"""
from collections import Counter
from typing import List

from .issues import ValidationIssue, ValidationIssueLevel
from ..errors import DiagnosableError, format_diagnostic_report


class SemanticValidationError(DiagnosableError):
    """
    Error-level findings of the topology validator. Warnings in the list passed in
    are dropped; they never stop an analysis.
    """
    def __init__(self, issues: List[ValidationIssue]):
        self.issues: List[ValidationIssue] = [
            issue for issue in issues if issue.level is ValidationIssueLevel.ERROR
        ]
        counts = Counter(issue.code for issue in self.issues)
        summary = ", ".join(f"{code} x{count}" for code, count in sorted(counts.items()))
        super().__init__(f"Topology validation failed: {summary or 'no error-level issues'}")

    def _issue_lines(self) -> str:
        return "\n".join(f"- {issue}" for issue in self.issues)

    def get_diagnostic_report(self) -> str:
        context = {}
        if self.issues:
            # Located at the first error; netlist order makes it the earliest line.
            first = self.issues[0]
            context = {
                'fqn': first.component_fqn or first.node_name,
                'line_number': first.details.get('line_number'),
                'source_file': first.details.get('source_file'),
            }

        return format_diagnostic_report(
            error_type="Circuit Semantic Validation Error",
            details=f"The circuit cannot be analyzed ({len(self.issues)} error(s)):\n{self._issue_lines()}",
            suggestion="Fix the listed components in the netlist and run the analysis again.",
            context=context,
        )
