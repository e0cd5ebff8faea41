# src/dcsim_core/parser/__init__.py
from .raw_data import ParsedComponentLine, ParsedNetlist
from .parser import NetlistParser
from .exceptions import ParsingError, SchemaValidationError

__all__ = [
    # IR Data Structures
    "ParsedComponentLine",
    "ParsedNetlist",
    # Parser and Exceptions
    "NetlistParser",
    "ParsingError",
    "SchemaValidationError",
]
