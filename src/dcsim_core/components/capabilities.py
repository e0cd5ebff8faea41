# src/dcsim_core/components/capabilities.py
"""
Defines the capability architecture for DCSim Core components.

Analysis services do not call component methods directly. They ask a component
instance for a capability (a `typing.Protocol`) and use it if it is provided:

- IDcStampContributor: emits the component's MNA stamps for DC analysis.
- IDcCurrentProvider: computes the component's DC current from a solved vector.
- IDcContributor: reports how the component behaves at DC, for topology checks.

Implementations are nested classes tagged with the `@provides` decorator and are
discovered by `ComponentBase.declare_capabilities`.
"""

import logging
from typing import Protocol, Type, TypeVar, TYPE_CHECKING, runtime_checkable

import numpy as np

from .base_enums import DCBehaviorType
from .stamps import ComponentContribution

# Use TYPE_CHECKING to import ComponentBase only for type analysis,
# preventing a circular import at runtime.
if TYPE_CHECKING:
    from .base import ComponentBase

logger = logging.getLogger(__name__)


@runtime_checkable
class ComponentCapability(Protocol):
    """
    A marker protocol for all component capabilities.
    """

    pass


# TCapability lets `ComponentBase.get_capability` return the requested protocol type.
TCapability = TypeVar("TCapability", bound=ComponentCapability)


@runtime_checkable
class IDcStampContributor(ComponentCapability, Protocol):
    """
    Defines the capability of a component to contribute to the DC MNA system.

    The returned contribution must never reference the ground index; terms
    touching ground are dropped by the component itself.
    """

    def get_dc_stamps(self, component: "ComponentBase") -> ComponentContribution:
        ...


@runtime_checkable
class IDcCurrentProvider(ComponentCapability, Protocol):
    """
    Defines the capability of a component to report its DC current, flowing from its
    positive to its negative terminal through the component, given a solved MNA vector.
    """

    def get_dc_current(self, component: "ComponentBase", solution: np.ndarray) -> float:
        ...


@runtime_checkable
class IDcContributor(ComponentCapability, Protocol):
    """
    Defines the capability of a component to describe its DC behavior.
    """

    def get_dc_behavior(self, component: "ComponentBase") -> DCBehaviorType:
        ...


def provides(capability_protocol: Type[ComponentCapability]):
    """
    A class decorator to register a class as an implementation for a capability.

    Args:
        capability_protocol: The capability Protocol (e.g., IDcStampContributor)
                             that this class implements.
    """

    def decorator(cls: Type) -> Type:
        if not issubclass(capability_protocol, ComponentCapability):
            raise TypeError(
                f"Decorator argument for @provides must be a ComponentCapability "
                f"Protocol, but got {capability_protocol}."
            )
        cls._implements_capability = capability_protocol
        logger.debug(
            f"Class '{cls.__name__}' registered as providing capability '{capability_protocol.__name__}'."
        )
        return cls

    return decorator
