"""Read-only structural and value checks over a Document.

The walk mirrors the entity graph and stops at the first violation.
Nothing here mutates its argument.
"""

from __future__ import annotations

import math

from .model import Document, ExtensionField, Route, Track, TrackSegment, Waypoint

MIN_LATITUDE, MAX_LATITUDE = -90.0, 90.0
MIN_LONGITUDE, MAX_LONGITUDE = -180.0, 180.0


def _in_range(value: float | None, low: float, high: float) -> bool:
    if value is None or math.isnan(value):
        return False
    return low <= value <= high


def validate_extension(ext: ExtensionField) -> bool:
    return bool(ext.name) and bool(ext.value)


def validate_waypoint(wpt: Waypoint) -> bool:
    if wpt.name is None or wpt.extensions is None:
        return False
    if not _in_range(wpt.latitude, MIN_LATITUDE, MAX_LATITUDE):
        return False
    if not _in_range(wpt.longitude, MIN_LONGITUDE, MAX_LONGITUDE):
        return False
    return all(validate_extension(ext) for ext in wpt.extensions)


def validate_route(route: Route) -> bool:
    if route.name is None or route.waypoints is None or route.extensions is None:
        return False
    return (all(validate_extension(ext) for ext in route.extensions)
            and all(validate_waypoint(wpt) for wpt in route.waypoints))


def validate_segment(segment: TrackSegment) -> bool:
    if segment.waypoints is None:
        return False
    return all(validate_waypoint(wpt) for wpt in segment.waypoints)


def validate_track(track: Track) -> bool:
    if track.name is None or track.segments is None or track.extensions is None:
        return False
    return (all(validate_segment(seg) for seg in track.segments)
            and all(validate_extension(ext) for ext in track.extensions))


def validate_document(doc: Document | None) -> bool:
    """True iff the document and everything it owns satisfy the model invariants."""
    if doc is None:
        return False
    if not doc.namespace or not doc.creator:
        return False
    if doc.version is None or math.isnan(doc.version):
        return False
    if doc.waypoints is None or doc.routes is None or doc.tracks is None:
        return False
    return (all(validate_waypoint(wpt) for wpt in doc.waypoints)
            and all(validate_route(route) for route in doc.routes)
            and all(validate_track(track) for track in doc.tracks))
