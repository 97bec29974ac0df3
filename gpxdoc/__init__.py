"""gpxdoc: GPX trees to a typed, validated document model and back."""

from .builder import build_document, create_document
from .config import ParserConfig
from .model import Document, Route, Track, TrackSegment, Waypoint, ExtensionField
from .pipeline import ProcessResult, process
from .serializer import document_to_json, to_tree
from .validator import validate_document

__all__ = [
    "Document", "Route", "Track", "TrackSegment", "Waypoint", "ExtensionField",
    "ParserConfig", "ProcessResult", "process",
    "build_document", "create_document", "validate_document",
    "to_tree", "document_to_json",
]
