# src/dcsim_core/errors.py
import logging
from typing import Any, Dict, Protocol, abstractmethod
from typing import runtime_checkable

logger = logging.getLogger(__name__)

# --- User-Facing Exception Hierarchy ---

class DCSimError(Exception):
    """
    Base class for all user-facing errors in DCSim Core.

    The single argument is a complete diagnostic report; ``str(error)`` returns it
    unchanged so that front ends can print it as is.
    """
    def __init__(self, report: str):
        super().__init__(report)
        self.report = report

    def __str__(self) -> str:
        return self.report

class CircuitBuildError(DCSimError):
    """Reading, parsing or instantiating a netlist failed."""
    pass

class SimulationRunError(DCSimError):
    """
    The DC analysis of an already built circuit failed: validation found an
    error-level issue, or an unexpected internal fault occurred.
    A solver that runs out of iterations does NOT raise this; see `SolverStatus`.
    """
    pass


# --- Diagnostic Protocol & Base Exception ---

@runtime_checkable
class Diagnosable(Protocol):
    """Anything that can render itself as a diagnostic report."""
    def get_diagnostic_report(self) -> str:
        ...

class DiagnosableError(Exception, Diagnosable):
    """
    Base of the internal exceptions raised by the parser, the components and the
    validator. The facades turn them into `CircuitBuildError` or `SimulationRunError`
    by calling `get_diagnostic_report`.
    """
    @abstractmethod
    def get_diagnostic_report(self) -> str:
        raise NotImplementedError


# --- Stateless Formatting Utility ---

# Context keys shown in the report header, in display order.
_CONTEXT_LABELS = (
    ('fqn', "Component"),
    ('source_file', "Source File"),
    ('line_number', "Line"),
    ('user_input', "User Input"),
)
_RULE_WIDTH = 74


def _indented(text: str):
    return [f"  {line}" for line in text.splitlines()]


def format_diagnostic_report(
    error_type: str,
    details: str,
    suggestion: str,
    context: Dict[str, Any]
) -> str:
    """
    Formats a diagnostic report with a header of known context values, followed by
    the details and an optional suggestion.

    Args:
        error_type: Short category, e.g. "Netlist Syntax Error".
        details: Description of the problem; may span several lines.
        suggestion: What the user can do about it. Omitted when empty.
        context: Optional ``fqn``, ``source_file``, ``line_number`` and ``user_input``.
                 Missing or empty values are left out; a line number of 0 is kept.
    """
    lines = ["\n", " DCSim Core: Diagnostic Report ".center(_RULE_WIDTH, "="), f"{'Error Type:':<16}{error_type}"]
    for key, label in _CONTEXT_LABELS:
        value = context.get(key)
        if value is None or value == "":
            continue
        if key == 'user_input':
            value = f"'{value}'"
        lines.append(f"{label + ':':<16}{value}")

    lines.append("\nDetails:")
    lines.extend(_indented(details))
    if suggestion:
        lines.append("\nSuggestion:")
        lines.extend(_indented(suggestion))
    lines.append("=" * _RULE_WIDTH)
    return "\n".join(lines)
