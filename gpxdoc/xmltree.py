"""Adapter over the generic element-tree engine and the schema checker.

The engine is :mod:`xml.etree.ElementTree`. Trees cross the gpxdoc boundary
as plain ``Element`` objects; tags use Clark notation (``{uri}local``).
"""

from __future__ import annotations

import copy
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Protocol

from .errors import TreeParseError, TreeWriteError

logger = logging.getLogger(__name__)


class SchemaValidator(Protocol):
    """Anything that can tell whether a tree conforms to a grammar."""

    def __call__(self, root: ET.Element) -> bool: ...


def local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1] if tag.startswith("{") else tag


def namespace_of(tag: str) -> str:
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return ""


def qualify(namespace: str, name: str) -> str:
    """Clark-notation tag for ``name``; names already qualified pass through."""
    if not namespace or name.startswith("{"):
        return name
    return f"{{{namespace}}}{name}"


def parse_tree(source: bytes | Path) -> ET.Element:
    """Read raw GPX bytes, or a file Path, into its root element."""
    try:
        if isinstance(source, (bytes, bytearray)):
            return ET.fromstring(bytes(source))
        return ET.parse(source).getroot()
    except ET.ParseError as e:
        raise TreeParseError(f"Not well-formed XML: {e}") from e
    except OSError as e:
        raise TreeParseError(f"Cannot read {source}: {e}") from e


def write_tree(root: ET.Element, pretty: bool = True) -> bytes:
    """Serialize a tree to UTF-8 bytes with an XML declaration.

    The root's namespace, if any, is written as the default namespace.
    The caller's tree is left untouched.
    """
    if pretty:
        root = copy.deepcopy(root)
        ET.indent(root, space="  ")
    namespace = namespace_of(root.tag)
    kwargs = {"default_namespace": namespace} if namespace else {}
    try:
        return ET.tostring(root, encoding="UTF-8", xml_declaration=True, **kwargs)
    except (ValueError, TypeError) as e:
        raise TreeWriteError(f"Cannot serialize <{local_name(root.tag)}>: {e}") from e


def check_schema(root: ET.Element, validator: SchemaValidator) -> bool:
    valid = bool(validator(root))
    if not valid:
        logger.warning("Tree <%s> does not conform to the schema", local_name(root.tag))
    return valid
