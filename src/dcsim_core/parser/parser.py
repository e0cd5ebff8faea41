# src/dcsim_core/parser/parser.py
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import cerberus

from ..components.base import COMPONENT_REGISTRY
from ..units import SPICE_VALUE_REGEX, parse_spice_value
from .raw_data import ParsedComponentLine, ParsedNetlist
from .exceptions import ParsingError, SchemaValidationError

logger = logging.getLogger(__name__)

# Ids and node names are any whitespace-free token; an id starts with its type letter.
ID_REGEX = r"[A-Za-z]\S*"
NODE_NAME_REGEX = r"\S+"

COMMENT_PREFIX = "*"
INLINE_COMMENT = ";"
CONTROL_PREFIX = "."
COMPONENT_FIELDS = ("id", "node_pos", "node_neg", "value")


class NetlistValidator(cerberus.Validator):
    """Cerberus validator with the netlist-specific rules."""

    def _validate_registered_type(self, constraint, field, value):
        """
        Checks that a type letter belongs to a registered component class.
        The rule's arguments are validated against this schema:
        {'type': 'boolean'}
        """
        if constraint and isinstance(value, str) and value not in COMPONENT_REGISTRY:
            self._error(
                field,
                f"Unknown component type '{value}'. Available types: {sorted(COMPONENT_REGISTRY)}.",
            )

    def _validate_spice_value(self, constraint, field, value):
        """
        Checks that a value token is a number with an optional SPICE multiplier.
        The rule's arguments are validated against this schema:
        {'type': 'boolean'}
        """
        if constraint and isinstance(value, str) and not SPICE_VALUE_REGEX.match(value):
            self._error(
                field,
                f"Value '{value}' is not a number with an optional SPICE suffix (e.g. 4.7k, 10u, 1meg).",
            )

    def _validate_unique_elements_by_key(self, key_for_uniqueness, field, value):
        """
        Validates that all dictionaries in a list have a unique value for a given key.
        The rule's arguments are validated against this schema:
        {'type': 'string'}
        """
        if not isinstance(value, list):
            return

        seen_keys = set()
        duplicates = []
        for item in value:
            if not isinstance(item, dict):
                continue
            item_key = item.get(key_for_uniqueness)
            if item_key is None:
                continue
            if item_key in seen_keys:
                duplicates.append(item_key)
            else:
                seen_keys.add(item_key)

        if duplicates:
            self._error(field, f"Duplicate values found for key '{key_for_uniqueness}': {sorted(set(duplicates))}")


class NetlistParser:
    """
    Parses SPICE-like DC netlists into a `ParsedNetlist` IR.

    Format, one element per line: ``<TypeLetter><Id> <node+> <node-> <value>``.
    A first line starting with ``*`` is the title; later ``*`` lines are comments;
    text after ``;`` is ignored; ``.end`` stops parsing. The ground node is ``0``.
    """
    _line_schema = {
        "id": {"type": "string", "required": True, "empty": False, "regex": ID_REGEX},
        "type": {"type": "string", "required": True, "registered_type": True},
        "node_pos": {"type": "string", "required": True, "empty": False, "regex": NODE_NAME_REGEX},
        "node_neg": {"type": "string", "required": True, "empty": False, "regex": NODE_NAME_REGEX},
        "value": {"type": "string", "required": True, "empty": False, "spice_value": True},
    }

    _document_schema = {
        "components": {"type": "list", "required": True, "unique_elements_by_key": "id"},
    }

    def __init__(self):
        self._line_validator = NetlistValidator(self._line_schema)
        self._line_validator.allow_unknown = False
        self._document_validator = NetlistValidator(self._document_schema)
        logger.debug("NetlistParser initialized.")

    def parse_file(self, netlist_path: Union[str, Path]) -> ParsedNetlist:
        """Reads and parses a netlist file."""
        path = Path(netlist_path).resolve()
        logger.info(f"Parsing netlist file: {path}")
        text = self._load_text(path)
        return self._parse_lines(text.splitlines(), source_path=path)

    def parse_string(self, netlist_text: str, source_path: Optional[Path] = None) -> ParsedNetlist:
        """Parses netlist text held in memory."""
        return self._parse_lines(netlist_text.splitlines(), source_path=source_path)

    def _parse_lines(self, lines: Iterable[str], source_path: Optional[Path]) -> ParsedNetlist:
        title: Optional[str] = None
        components: List[ParsedComponentLine] = []
        seen_content = False

        for line_number, raw_line in enumerate(lines, start=1):
            line = raw_line.split(INLINE_COMMENT, 1)[0].strip()
            if not line:
                continue

            if line.startswith(COMMENT_PREFIX):
                if not seen_content:
                    title = line[len(COMMENT_PREFIX):].strip() or None
                seen_content = True
                continue
            seen_content = True

            if line.startswith(CONTROL_PREFIX):
                directive = line.split()[0].lower()
                if directive == ".end":
                    logger.debug(f"Reached '.end' at line {line_number}; ignoring the rest of the netlist.")
                    break
                logger.warning(f"Ignoring unsupported control line {line_number}: '{line}'")
                continue

            components.append(self._parse_component_line(line, line_number, source_path))

        if not components:
            raise ParsingError(details="The netlist contains no component lines.", file_path=source_path)

        document = {"components": [{"id": c.instance_id, "line": c.line_number} for c in components]}
        if not self._document_validator.validate(document):
            raise SchemaValidationError(self._document_validator.errors, source_path)

        if title is None:
            title = source_path.stem if source_path else "Circuit"

        logger.info(f"Parsed netlist '{title}' with {len(components)} component(s).")
        return ParsedNetlist(title=title, source_path=source_path, components=components)

    def _parse_component_line(self, line: str, line_number: int, source_path: Optional[Path]) -> ParsedComponentLine:
        fields = line.split()
        if len(fields) != len(COMPONENT_FIELDS):
            raise ParsingError(
                details=(
                    f"Expected {len(COMPONENT_FIELDS)} fields (<TypeLetter><Id> <node+> <node-> <value>), "
                    f"found {len(fields)}."
                ),
                file_path=source_path,
                line_number=line_number,
                user_input=line,
            )

        line_doc: Dict[str, Any] = dict(zip(COMPONENT_FIELDS, fields))
        line_doc["type"] = line_doc["id"][0].upper()
        if not self._line_validator.validate(line_doc):
            raise SchemaValidationError(
                self._line_validator.errors, source_path, line_number=line_number, user_input=line
            )

        return ParsedComponentLine(
            instance_id=line_doc["id"],
            component_type=line_doc["type"],
            node_pos=line_doc["node_pos"],
            node_neg=line_doc["node_neg"],
            raw_value=line_doc["value"],
            value=parse_spice_value(line_doc["value"]),
            line_number=line_number,
            source_path=source_path,
        )

    def _load_text(self, source: Path) -> str:
        """Loads a netlist file as text."""
        if not source.is_file():
            raise ParsingError(details=f"Netlist file not found at path: {source}", file_path=source)
        try:
            return source.read_text(encoding="utf-8")
        except PermissionError as e:
            raise ParsingError(details=f"Permission denied when trying to read file: {e}", file_path=source) from e
        except UnicodeDecodeError as e:
            raise ParsingError(details=f"The netlist is not valid UTF-8 text: {e}", file_path=source) from e
