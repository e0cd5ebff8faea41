# src/dcsim_core/validation/issue_codes.py
import logging
from enum import Enum

from .issues import ValidationIssueLevel

logger = logging.getLogger(__name__)


class TopologyIssueCode(Enum):
    """
    Registry of topology issue codes.
    Each enum member's value is a tuple: (code_str, level, message_template_str).
    """

    # --- Component Connection Issues (COMP_...) ---
    COMP_SELF_LOOP_V = ("COMP_SELF_LOOP_V", ValidationIssueLevel.ERROR, "Voltage source '{component_fqn}' has both terminals on node '{node_name}'; its voltage {value_str} can never be satisfied.")
    COMP_SELF_LOOP = ("COMP_SELF_LOOP", ValidationIssueLevel.WARNING, "Component '{component_fqn}' has both terminals on node '{node_name}' and has no effect on the circuit.")

    # --- Net Issues (NET_...) ---
    NET_FLOATING_DC = ("NET_FLOATING_DC", ValidationIssueLevel.WARNING, "Node '{node_name}' has no DC path to ground; its voltage is undetermined and is reported as the solver leaves it.")

    # --- Loop Issues (LOOP_...) ---
    LOOP_V_L = ("LOOP_V_L", ValidationIssueLevel.WARNING, "Components {component_ids} form a loop of voltage sources and inductors only; the system is singular and may not converge.")

    # --- Ground Issues (GND_...) ---
    GND_CONN_001 = ("GND_CONN_001", ValidationIssueLevel.WARNING, "Ground node '{node_name}' has no component connections, although components exist in the circuit.")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def level(self) -> ValidationIssueLevel:
        return self.value[1]

    @property
    def template(self) -> str:
        return self.value[2]

    def format_message(self, **kwargs) -> str:
        """Formats the message template with provided keyword arguments."""
        try:
            return self.template.format(**kwargs)
        except KeyError as e:
            logger.error(f"Missing key {e} for formatting message template of {self.name}: '{self.template}'. Provided args: {kwargs}")
            return f"Error formatting message for {self.code}: Missing key {e}. Template: '{self.template}' Args: {kwargs}"
