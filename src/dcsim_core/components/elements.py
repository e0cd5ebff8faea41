# src/dcsim_core/components/elements.py
"""
This module provides the concrete implementations of the DC circuit elements:
Resistor, Capacitor, Inductor, VoltageSource and CurrentSource.

Every element emits its MNA stamps through the `IDcStampContributor` capability.
Terms that touch the ground node are dropped here, so the assembler never sees
the ground index.
"""

import logging

import numpy as np

from .base import ComponentBase, register_component, is_ground
from .base_enums import DCBehaviorType
from .capabilities import IDcStampContributor, IDcCurrentProvider, IDcContributor, provides
from .exceptions import ComponentError
from .stamps import ComponentContribution


logger = logging.getLogger(__name__)


def _stamp_conductance(contribution: ComponentContribution, i: int, j: int, g: float) -> None:
    """The symmetric two-terminal conductance pattern, without ground terms."""
    if not is_ground(i):
        contribution.stamp_matrix(i, i, g)
    if not is_ground(j):
        contribution.stamp_matrix(j, j, g)
    if not is_ground(i) and not is_ground(j):
        contribution.stamp_matrix(i, j, -g)
        contribution.stamp_matrix(j, i, -g)


def _stamp_branch_incidence(contribution: ComponentContribution, i: int, j: int, k: int) -> None:
    """Couples the branch-current variable k to its (+) node i and (-) node j."""
    if not is_ground(i):
        contribution.stamp_matrix(i, k, 1.0)
        contribution.stamp_matrix(k, i, 1.0)
    if not is_ground(j):
        contribution.stamp_matrix(j, k, -1.0)
        contribution.stamp_matrix(k, j, -1.0)


def _require_non_negative(instance_id: str, value: float, quantity_name: str) -> float:
    if value < 0:
        raise ComponentError(
            component_fqn=instance_id,
            details=f"Negative {quantity_name} {value:g} is not supported."
        )
    return value


@register_component("R", "Resistor")
class Resistor(ComponentBase):
    """Represents an ideal Resistor component."""

    @classmethod
    def declare_unit(cls) -> str:
        return "ohm"

    @classmethod
    def validate_value(cls, instance_id: str, value: float) -> float:
        value = super().validate_value(instance_id, value)
        if value <= 0:
            raise ComponentError(
                component_fqn=instance_id,
                details=f"Resistance must be strictly positive for DC analysis, got {value:g}."
            )
        return value

    @property
    def conductance(self) -> float:
        return 1.0 / self.value

    @provides(IDcStampContributor)
    class DcStampContributor:
        def get_dc_stamps(self, component: 'Resistor') -> ComponentContribution:
            contribution = ComponentContribution()
            i, j = component.terminal_indices
            _stamp_conductance(contribution, i, j, component.conductance)
            return contribution

    @provides(IDcCurrentProvider)
    class DcCurrentProvider:
        def get_dc_current(self, component: 'Resistor', solution: np.ndarray) -> float:
            return component.voltage_drop(solution) / component.value

    @provides(IDcContributor)
    class DcContributor:
        def get_dc_behavior(self, component: 'Resistor') -> DCBehaviorType:
            return DCBehaviorType.ADMITTANCE


@register_component("C", "Capacitor")
class Capacitor(ComponentBase):
    """Represents an ideal Capacitor component. At DC it is an open circuit."""

    @classmethod
    def declare_unit(cls) -> str:
        return "farad"

    @classmethod
    def validate_value(cls, instance_id: str, value: float) -> float:
        return _require_non_negative(instance_id, super().validate_value(instance_id, value), "capacitance")

    @provides(IDcStampContributor)
    class DcStampContributor:
        def get_dc_stamps(self, component: 'Capacitor') -> ComponentContribution:
            return ComponentContribution()

    @provides(IDcCurrentProvider)
    class DcCurrentProvider:
        def get_dc_current(self, component: 'Capacitor', solution: np.ndarray) -> float:
            return 0.0

    @provides(IDcContributor)
    class DcContributor:
        def get_dc_behavior(self, component: 'Capacitor') -> DCBehaviorType:
            return DCBehaviorType.OPEN_CIRCUIT


@register_component("L", "Inductor")
class Inductor(ComponentBase):
    """
    Represents an ideal Inductor component. At DC it is a short circuit, modelled as a
    zero-volt source with its own branch-current variable.
    """

    @classmethod
    def declare_unit(cls) -> str:
        return "henry"

    @classmethod
    def declare_branch_variable(cls) -> bool:
        return True

    @classmethod
    def validate_value(cls, instance_id: str, value: float) -> float:
        return _require_non_negative(instance_id, super().validate_value(instance_id, value), "inductance")

    @provides(IDcStampContributor)
    class DcStampContributor:
        def get_dc_stamps(self, component: 'Inductor') -> ComponentContribution:
            contribution = ComponentContribution()
            i, j = component.terminal_indices
            _stamp_branch_incidence(contribution, i, j, component.branch_index)
            return contribution

    @provides(IDcCurrentProvider)
    class DcCurrentProvider:
        def get_dc_current(self, component: 'Inductor', solution: np.ndarray) -> float:
            return float(solution[component.branch_index])

    @provides(IDcContributor)
    class DcContributor:
        def get_dc_behavior(self, component: 'Inductor') -> DCBehaviorType:
            return DCBehaviorType.SHORT_CIRCUIT


@register_component("V", "VoltageSource")
class VoltageSource(ComponentBase):
    """
    Represents an independent DC voltage source. The positive terminal is held at
    `value` volts above the negative one; the branch variable carries the current
    entering the positive terminal.
    """

    @classmethod
    def declare_unit(cls) -> str:
        return "volt"

    @classmethod
    def declare_branch_variable(cls) -> bool:
        return True

    @provides(IDcStampContributor)
    class DcStampContributor:
        def get_dc_stamps(self, component: 'VoltageSource') -> ComponentContribution:
            contribution = ComponentContribution()
            i, j = component.terminal_indices
            k = component.branch_index
            _stamp_branch_incidence(contribution, i, j, k)
            contribution.stamp_vector(k, component.value)
            return contribution

    @provides(IDcCurrentProvider)
    class DcCurrentProvider:
        def get_dc_current(self, component: 'VoltageSource', solution: np.ndarray) -> float:
            return float(solution[component.branch_index])

    @provides(IDcContributor)
    class DcContributor:
        def get_dc_behavior(self, component: 'VoltageSource') -> DCBehaviorType:
            return DCBehaviorType.FIXED_VOLTAGE


@register_component("I", "CurrentSource")
class CurrentSource(ComponentBase):
    """
    Represents an independent DC current source. `value` amperes flow through the
    source from its positive to its negative terminal, i.e. they are drawn out of
    the positive node and injected into the negative one.
    """

    @classmethod
    def declare_unit(cls) -> str:
        return "ampere"

    @provides(IDcStampContributor)
    class DcStampContributor:
        def get_dc_stamps(self, component: 'CurrentSource') -> ComponentContribution:
            contribution = ComponentContribution()
            i, j = component.terminal_indices
            if not is_ground(i):
                contribution.stamp_vector(i, -component.value)
            if not is_ground(j):
                contribution.stamp_vector(j, component.value)
            return contribution

    @provides(IDcCurrentProvider)
    class DcCurrentProvider:
        def get_dc_current(self, component: 'CurrentSource', solution: np.ndarray) -> float:
            return component.value

    @provides(IDcContributor)
    class DcContributor:
        def get_dc_behavior(self, component: 'CurrentSource') -> DCBehaviorType:
            return DCBehaviorType.OPEN_CIRCUIT
