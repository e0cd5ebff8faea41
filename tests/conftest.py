# tests/conftest.py
import logging
import textwrap

import pytest

from dcsim_core import CircuitBuilder, NetlistParser, VariableAllocator, Node
from dcsim_core.constants import GROUND_NODE_NAME, GROUND_INDEX
from dcsim_core.log_config import StdoutHandler


VOLTAGE_DIVIDER = """
* Voltage divider
V1 1 0 10
R1 1 2 1000
R2 2 0 1000
"""

CURRENT_INJECTION = """
* Current injection
I1 0 1 0.001
R1 1 0 1000
"""

CAPACITOR_BLOCKS_DC = """
* Capacitor blocks DC
V1 1 0 10
C1 1 2 1e-4
R1 2 0 1000
"""

INDUCTOR_SHORTS_DC = """
* Inductor shorts DC
V1 1 0 10
L1 1 2 0.01
R1 2 0 1000
"""


@pytest.fixture(autouse=True)
def preserve_root_logging():
    """Undo any `setup_logging` call a test makes (the CLI installs its own handler)."""
    root = logging.getLogger()
    saved_handlers = [h for h in root.handlers if isinstance(h, StdoutHandler)]
    saved_level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler, StdoutHandler) and handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in saved_handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(saved_level)


@pytest.fixture
def circuit_builder_instance():
    return CircuitBuilder()


@pytest.fixture
def parser_instance():
    return NetlistParser()


def build_circuit_from_text(netlist_text: str):
    """Parses and builds a netlist held in a string."""
    return CircuitBuilder().build_from_string(textwrap.dedent(netlist_text))


@pytest.fixture
def build_circuit():
    return build_circuit_from_text


@pytest.fixture
def allocator():
    return VariableAllocator()


@pytest.fixture
def make_nodes(allocator):
    """Returns a factory that allocates (or reuses) nodes by name on a fresh allocator."""
    nodes = {GROUND_NODE_NAME: Node(name=GROUND_NODE_NAME, index=GROUND_INDEX, is_ground=True)}

    def _make(*names):
        result = []
        for name in names:
            if name not in nodes:
                nodes[name] = Node(name=name, index=allocator.allocate_node(name))
            result.append(nodes[name])
        return result

    return _make
