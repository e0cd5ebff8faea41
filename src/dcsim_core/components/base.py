# src/dcsim_core/components/base.py

import logging
import inspect
import math
from abc import ABC, abstractmethod
from typing import ClassVar, Dict, Optional, Tuple, Type, TYPE_CHECKING

import numpy as np

from ..constants import GROUND_INDEX
from ..indexing import VariableAllocator
from ..units import ureg, format_quantity
from .capabilities import ComponentCapability, TCapability
from .exceptions import ComponentError

if TYPE_CHECKING:
    from ..data_structures import Node


logger = logging.getLogger(__name__)


class ComponentBase(ABC):
    """
    The abstract base class for all two-terminal circuit components in DCSim Core.

    A component knows its id, its two terminal nodes, its value in SI units and,
    for voltage sources and inductors, the index of its extra branch-current
    variable. Everything an analysis needs from it is exposed through capabilities.
    """
    component_type_str: ClassVar[str] = "BaseComponent"
    type_letter: ClassVar[str] = ""

    def __init__(
        self,
        instance_id: str,
        node_pos: "Node",
        node_neg: "Node",
        value: float,
        allocator: VariableAllocator,
    ):
        """
        Initializes the base attributes of a component instance.

        Args:
            instance_id: The unique id of this component (e.g., 'R1').
            node_pos: The node connected to the positive terminal.
            node_neg: The node connected to the negative terminal.
            value: The component value in SI base units (ohm, farad, henry, volt, ampere).
            allocator: The variable allocator of the circuit being built. Components that
                       need a branch-current unknown claim their index from it here.
        """
        self.instance_id: str = instance_id
        self.node_pos: "Node" = node_pos
        self.node_neg: "Node" = node_neg
        self.value: float = type(self).validate_value(instance_id, value)

        self.branch_index: Optional[int] = None
        if type(self).declare_branch_variable():
            self.branch_index = allocator.allocate_branch(instance_id)

        self._capability_cache: Dict[Type[ComponentCapability], ComponentCapability] = {}
        logger.debug(f"Initialized {type(self).__name__} '{self.instance_id}'")

    @property
    def fqn(self) -> str:
        return self.instance_id

    @property
    def terminal_indices(self) -> Tuple[int, int]:
        """MNA variable indices of the (positive, negative) terminals."""
        return self.node_pos.index, self.node_neg.index

    def voltage_drop(self, solution: np.ndarray) -> float:
        """Voltage of the positive terminal relative to the negative one."""
        i, j = self.terminal_indices
        return float(solution[i] - solution[j])

    @classmethod
    def declare_capabilities(cls) -> Dict[Type[ComponentCapability], Type]:
        """
        Discovers the capability implementations of this class by inspecting its MRO
        for nested classes tagged with `@provides`. A subclass implementation hides
        the one of its parent.
        """
        discovered_capabilities = {}
        for base_class in cls.__mro__:
            for _, member_obj in inspect.getmembers(base_class):
                if hasattr(member_obj, '_implements_capability'):
                    protocol = member_obj._implements_capability
                    if protocol not in discovered_capabilities:
                        discovered_capabilities[protocol] = member_obj
        return discovered_capabilities

    def get_capability(self, capability_type: Type[TCapability]) -> Optional[TCapability]:
        """
        Queries the component instance for a specific capability.

        Returns:
            An instance of the capability implementation if supported, otherwise `None`.
        """
        if capability_type in self._capability_cache:
            return self._capability_cache[capability_type]

        impl_class = type(self).declare_capabilities().get(capability_type)
        if impl_class:
            instance = impl_class()
            self._capability_cache[capability_type] = instance
            return instance

        return None

    @classmethod
    @abstractmethod
    def declare_unit(cls) -> str:
        """The pint unit name of the component value, e.g. 'ohm'."""
        pass

    @classmethod
    def declare_branch_variable(cls) -> bool:
        """Whether the component needs an extra branch-current unknown in the MNA system."""
        return False

    @classmethod
    def validate_value(cls, instance_id: str, value: float) -> float:
        """Checks the value is usable for DC analysis and returns it as a float."""
        value = float(value)
        if not math.isfinite(value):
            raise ComponentError(component_fqn=instance_id, details=f"Value must be finite, got {value}.")
        return value

    def format_value(self) -> str:
        return format_quantity(self.value, type(self).declare_unit())

    def __str__(self) -> str:
        return f"{type(self).__name__}('{self.instance_id}')"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(id='{self.instance_id}', nodes=('{self.node_pos.name}', "
            f"'{self.node_neg.name}'), value={self.value!r})"
        )


def is_ground(index: int) -> bool:
    return index == GROUND_INDEX


# --- Global Component Registry and Decorator ---

COMPONENT_REGISTRY: Dict[str, type[ComponentBase]] = {}


def register_component(type_letter: str, type_str: str):
    """
    A class decorator to register a component class under its netlist type letter,
    making it available to the netlist parser and the circuit builder.
    """
    def decorator(cls: type[ComponentBase]):
        if not issubclass(cls, ComponentBase):
            raise TypeError(f"Class {cls.__name__} must inherit from ComponentBase.")
        if len(type_letter) != 1 or not type_letter.isalpha() or not type_letter.isupper():
            raise TypeError(
                f"Component class '{cls.__name__}' must be registered under a single upper-case "
                f"letter, got '{type_letter}'."
            )

        try:
            ureg.Unit(cls.declare_unit())
        except Exception as e:
            raise TypeError(
                f"Component class '{cls.__name__}' violates API contract. "
                f"declare_unit() must return a unit known to pint: {e}"
            ) from e

        if type_letter in COMPONENT_REGISTRY:
            logger.warning(f"Component type '{type_letter}' is being redefined/overwritten.")
        cls.type_letter = type_letter
        cls.component_type_str = type_str
        COMPONENT_REGISTRY[type_letter] = cls
        logger.debug(f"Registered component type '{type_letter}' -> {cls.__name__}")
        return cls
    return decorator
