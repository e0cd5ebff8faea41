# src/dcsim_core/components/__init__.py
import logging
logger = logging.getLogger(__name__)

# Import base first to define registry and decorator
from .base import ComponentBase, COMPONENT_REGISTRY, register_component
from .base_enums import DCBehaviorType
from .capabilities import (
    ComponentCapability, IDcStampContributor, IDcCurrentProvider, IDcContributor, provides
)
from .exceptions import ComponentError
from .stamps import ComponentContribution, MatrixStamp, VectorStamp
# Import concrete elements to trigger registration
from .elements import Resistor, Capacitor, Inductor, VoltageSource, CurrentSource

logger.debug(f"Available component types: {list(COMPONENT_REGISTRY.keys())}")

__all__ = [
    "ComponentBase",
    "COMPONENT_REGISTRY",
    "register_component",
    "DCBehaviorType",
    "ComponentCapability",
    "IDcStampContributor",
    "IDcCurrentProvider",
    "IDcContributor",
    "provides",
    "ComponentError",
    "ComponentContribution",
    "MatrixStamp",
    "VectorStamp",
    "Resistor",
    "Capacitor",
    "Inductor",
    "VoltageSource",
    "CurrentSource",
]
