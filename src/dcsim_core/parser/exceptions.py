# src/dcsim_core/parser/exceptions.py
"""
Defines custom, diagnosable exceptions for the netlist parsing stage.

`ParsingError` covers file-level problems and lines that cannot be split into
fields at all; `SchemaValidationError` covers lines whose fields were found but
violate the Cerberus line schema (bad identifiers, unknown type letters,
malformed values, duplicate component ids). Both carry the source file and,
where known, the offending line number.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from ..errors import DiagnosableError, format_diagnostic_report


def _location(file_path: Optional[Path], line_number: Optional[int]) -> str:
    where = f"'{file_path}'" if file_path else "<string>"
    if line_number is not None:
        where += f", line {line_number}"
    return where


class BaseParsingError(DiagnosableError):
    """
    A local, concrete base class for all netlist parsing and schema validation errors.
    """
    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Generic Parsing Error",
            details=str(self),
            suggestion="Please check the format and content of the netlist file.",
            context={}
        )


@dataclass(eq=False)
class ParsingError(BaseParsingError):
    """
    Raised for file-system problems (missing or unreadable file) and for lines that
    are structurally wrong, such as a component line with the wrong number of fields.
    """
    details: str
    file_path: Optional[Path] = None
    line_number: Optional[int] = None
    user_input: Optional[str] = None

    def __str__(self):
        return f"Parsing error in {_location(self.file_path, self.line_number)}: {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Netlist Parsing or File Error",
            details=self.details,
            suggestion=(
                "Ensure the file exists and is readable, and that every component line has the form\n"
                "'<TypeLetter><Id> <node+> <node-> <value>'."
            ),
            context={
                'source_file': self.file_path,
                'line_number': self.line_number,
                'user_input': self.user_input,
            }
        )


@dataclass(eq=False)
class SchemaValidationError(BaseParsingError):
    """
    Raised when a component line has the right shape but its fields fail validation.
    """
    errors: Dict[str, Any]
    file_path: Optional[Path] = None
    line_number: Optional[int] = None
    user_input: Optional[str] = None

    def _error_lines(self) -> str:
        return "\n".join(
            f"  - Field '{field}': {messages[0] if isinstance(messages, list) else messages}"
            for field, messages in sorted(self.errors.items())
        )

    def __str__(self):
        return (
            f"Netlist validation failed in {_location(self.file_path, self.line_number)}:\n"
            + self._error_lines()
        )

    def get_diagnostic_report(self) -> str:
        details = (
            "The netlist does not conform to the required format.\n"
            f"See details for {len(self.errors)} issue(s) below:\n\n{self._error_lines()}"
        )
        return format_diagnostic_report(
            error_type="Netlist Validation Error",
            details=details,
            suggestion=(
                "Component ids start with their type letter (R, C, L, V or I) followed by letters, digits "
                "or underscores; ids must be unique; values are numbers with an optional SPICE suffix "
                "(e.g. 4.7k, 10u, 1meg)."
            ),
            context={
                'source_file': self.file_path,
                'line_number': self.line_number,
                'user_input': self.user_input,
            }
        )
