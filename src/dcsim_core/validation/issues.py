# src/dcsim_core/validation/issues.py
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


class ValidationIssueLevel(Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class ValidationIssue:
    """
    One finding of the topology validator.

    `details` carries the values the message was rendered from, plus the
    ``line_number`` and ``source_file`` of the offending netlist line when known.
    """
    level: ValidationIssueLevel
    code: str
    message: str
    component_fqn: Optional[str] = None
    node_name: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def subject(self) -> str:
        if self.component_fqn:
            return f"component '{self.component_fqn}'"
        if self.node_name is not None:
            return f"node '{self.node_name}'"
        return "circuit"

    def __str__(self) -> str:
        text = f"[{self.level} {self.code}] {self.subject}: {self.message}"
        line_number = self.details.get('line_number')
        if line_number is not None:
            text += f" (line {line_number})"
        return text
