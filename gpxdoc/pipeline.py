"""Orchestrator: config + GPX bytes -> ProcessResult."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .builder import build_document, create_document
from .config import DEFAULT_CONFIG, ParserConfig
from .errors import TreeParseError
from .model import Document
from .serializer import document_to_json, to_tree
from .validator import validate_document
from .xmltree import SchemaValidator, check_schema, parse_tree, write_tree

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    document: Document
    is_valid: bool
    summary_json: str
    gpx_bytes: bytes


def load_document(source: bytes | Path) -> Document:
    """Parse and build a Document. Raises TreeParseError or BuildError."""
    return build_document(parse_tree(source))


def create_valid_document(source: bytes | Path, schema_validator: SchemaValidator) -> Document | None:
    """Build a Document only if the raw tree passes the schema check first.

    Returns ``None`` when any step fails, unreadable input included.
    """
    try:
        root = parse_tree(source)
    except TreeParseError as e:
        logger.warning("Could not read document: %s", e)
        return None
    if not check_schema(root, schema_validator):
        return None
    return create_document(root)


def validate_document_with_schema(doc: Document | None, schema_validator: SchemaValidator,
                                  config: ParserConfig = DEFAULT_CONFIG) -> bool:
    """Schema-check the regenerated tree, then check the model invariants."""
    if doc is None:
        return False
    if not check_schema(to_tree(doc, config), schema_validator):
        return False
    return validate_document(doc)


def write_document(doc: Document, config: ParserConfig = DEFAULT_CONFIG) -> bytes:
    return write_tree(to_tree(doc, config), pretty=config.pretty_print)


def summarize(source: bytes | Path, config: ParserConfig = DEFAULT_CONFIG) -> str:
    """JSON summary of a GPX file's document."""
    return document_to_json(load_document(source), config)


def process(config: ParserConfig, source: bytes | Path,
            schema_validator: SchemaValidator | None = None) -> ProcessResult:
    """Takes config + raw GPX bytes, returns the document and its renderings (no disk writes)."""
    logger.debug("Building document...")
    doc = load_document(source)
    logger.info("Document by %r: %d waypoint(s), %d route(s), %d track(s)",
                doc.creator, len(doc.waypoints), len(doc.routes), len(doc.tracks))

    if schema_validator is not None:
        is_valid = validate_document_with_schema(doc, schema_validator, config)
    else:
        is_valid = validate_document(doc)
    if not is_valid:
        logger.warning("Document by %r failed validation", doc.creator)

    return ProcessResult(
        document=doc,
        is_valid=is_valid,
        summary_json=document_to_json(doc, config),
        gpx_bytes=write_document(doc, config),
    )
