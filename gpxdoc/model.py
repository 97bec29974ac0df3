"""Typed GPX document model.

Every one-to-many relationship is an :class:`~gpxdoc.containers.OrderedList`
whose element behaviour (stringify, destroy, compare) is registered at the
bottom of this module. Ownership runs strictly down the tree: a Document owns
its waypoints, routes and tracks; each of those owns its own children.

Values that were absent or unreadable in the source are ``None`` rather than
an in-range sentinel; the validator rejects them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from .config import GPX_11_NAMESPACE
from .containers import EntityKind, OrderedList, register_behaviour


def _extension_list() -> OrderedList:
    return OrderedList(EntityKind.EXTENSION_FIELD)


def _waypoint_list() -> OrderedList:
    return OrderedList(EntityKind.WAYPOINT)


@dataclass(eq=False)
class ExtensionField:
    """Unmodelled child element carried through as a name/value pair."""
    name: str = ""
    value: str = ""

    def destroy(self) -> None:
        pass


@dataclass(eq=False)
class Waypoint:
    name: str = ""
    latitude: float | None = None
    longitude: float | None = None
    extensions: OrderedList = field(default_factory=_extension_list)

    def destroy(self) -> None:
        if self.extensions is not None:
            self.extensions.destroy_all()


@dataclass(eq=False)
class TrackSegment:
    waypoints: OrderedList = field(default_factory=_waypoint_list)

    def destroy(self) -> None:
        if self.waypoints is not None:
            self.waypoints.destroy_all()


@dataclass(eq=False)
class Track:
    name: str = ""
    segments: OrderedList = field(default_factory=lambda: OrderedList(EntityKind.TRACK_SEGMENT))
    extensions: OrderedList = field(default_factory=_extension_list)

    def points(self) -> Iterator[Waypoint]:
        """All track points, segment after segment."""
        for segment in self.segments:
            yield from segment.waypoints

    def destroy(self) -> None:
        if self.segments is not None:
            self.segments.destroy_all()
        if self.extensions is not None:
            self.extensions.destroy_all()


@dataclass(eq=False)
class Route:
    name: str = ""
    waypoints: OrderedList = field(default_factory=_waypoint_list)
    extensions: OrderedList = field(default_factory=_extension_list)

    def points(self) -> Iterator[Waypoint]:
        return iter(self.waypoints)

    def destroy(self) -> None:
        if self.waypoints is not None:
            self.waypoints.destroy_all()
        if self.extensions is not None:
            self.extensions.destroy_all()


@dataclass(eq=False)
class Document:
    namespace: str = ""
    version: float | None = None
    creator: str = ""
    waypoints: OrderedList = field(default_factory=_waypoint_list)
    routes: OrderedList = field(default_factory=lambda: OrderedList(EntityKind.ROUTE))
    tracks: OrderedList = field(default_factory=lambda: OrderedList(EntityKind.TRACK))

    def destroy(self) -> None:
        """Release every owned entity, depth first."""
        for children in (self.waypoints, self.routes, self.tracks):
            if children is not None:
                children.destroy_all()

    def to_string(self) -> str:
        return document_to_string(self)

    def __str__(self) -> str:
        return document_to_string(self)


def new_document(creator: str, version: float | None = 1.1,
                 namespace: str = GPX_11_NAMESPACE) -> Document:
    return Document(namespace=namespace, version=version, creator=creator)


# --- Mutators ---

def add_waypoint(route: Route, waypoint: Waypoint) -> None:
    if route is None or waypoint is None:
        return
    route.waypoints.append(waypoint)


def add_route(doc: Document, route: Route) -> None:
    if doc is None or route is None:
        return
    doc.routes.append(route)


# --- Counts ---

def num_waypoints(doc: Document | None) -> int:
    return len(doc.waypoints) if doc is not None else 0


def num_routes(doc: Document | None) -> int:
    return len(doc.routes) if doc is not None else 0


def num_tracks(doc: Document | None) -> int:
    return len(doc.tracks) if doc is not None else 0


def num_segments(doc: Document | None) -> int:
    if doc is None:
        return 0
    return sum(len(track.segments) for track in doc.tracks)


def num_route_waypoints(route: Route | None) -> int:
    return len(route.waypoints) if route is not None else 0


def num_extension_fields(doc: Document | None) -> int:
    """Non-empty entity names plus extension fields, across the whole tree."""
    if doc is None:
        return 0
    count = 0
    named = [*doc.routes, *doc.tracks, *iter_waypoints(doc)]
    for entity in named:
        if entity.name:
            count += 1
        count += len(entity.extensions)
    return count


# --- Lookups ---

def iter_waypoints(doc: Document) -> Iterator[Waypoint]:
    """Document waypoints, then route points, then track points."""
    yield from doc.waypoints
    for route in doc.routes:
        yield from route.waypoints
    for track in doc.tracks:
        yield from track.points()


def find_waypoint(doc: Document | None, name: str | None) -> Waypoint | None:
    if doc is None or name is None:
        return None
    for waypoint in iter_waypoints(doc):
        if waypoint.name == name:
            return waypoint
    return None


def get_route(doc: Document | None, name: str | None) -> Route | None:
    if doc is None or name is None:
        return None
    return doc.routes.find(Route(name=name))


def get_track(doc: Document | None, name: str | None) -> Track | None:
    if doc is None or name is None:
        return None
    return doc.tracks.find(Track(name=name))


# --- Element behaviour: stringify ---

def _coord(value: float | None) -> str:
    return "unset" if value is None else f"{value:f}"


def extension_to_string(ext: ExtensionField) -> str:
    return f"\textension name: {ext.name} value: {ext.value}\n"


def waypoint_to_string(wpt: Waypoint) -> str:
    text = f"\tWaypoint:\n\tname: {wpt.name}\n\tlat: {_coord(wpt.latitude)} lon: {_coord(wpt.longitude)}\n"
    return text + wpt.extensions.to_string()


def segment_to_string(segment: TrackSegment) -> str:
    return "\tTrack segment:\n" + segment.waypoints.to_string()


def route_to_string(route: Route) -> str:
    text = f"\tRoute:\n\tname: {route.name}\n"
    return text + route.waypoints.to_string() + route.extensions.to_string()


def track_to_string(track: Track) -> str:
    text = f"\tTrack:\n\tname: {track.name}\n"
    return text + track.segments.to_string() + track.extensions.to_string()


def document_to_string(doc: Document) -> str:
    version = "unset" if doc.version is None else f"{doc.version:.1f}"
    text = f"doc:\nnamespace: {doc.namespace}\nversion: {version}\ncreator: {doc.creator}\n"
    return (text + doc.waypoints.to_string() + doc.routes.to_string()
            + doc.tracks.to_string())


def describe(entity) -> str:
    """Human-readable, multi-line rendering of any model entity."""
    renderers = {
        Document: document_to_string,
        Track: track_to_string,
        TrackSegment: segment_to_string,
        Route: route_to_string,
        Waypoint: waypoint_to_string,
        ExtensionField: extension_to_string,
    }
    return renderers[type(entity)](entity)


# --- Element behaviour: compare ---

def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def compare_by_name(first, second) -> int:
    return _cmp(first.name, second.name)


def compare_segments(first: TrackSegment, second: TrackSegment) -> int:
    """Point-by-point comparison of rendered waypoints, then by length."""
    for a, b in zip(first.waypoints, second.waypoints):
        result = _cmp(waypoint_to_string(a), waypoint_to_string(b))
        if result:
            return result
    return _cmp(len(first.waypoints), len(second.waypoints))


def compare_documents(first: Document, second: Document) -> int:
    return _cmp(first.creator, second.creator)


def _destroy(entity) -> None:
    if entity is not None:
        entity.destroy()


register_behaviour(EntityKind.DOCUMENT, document_to_string, _destroy, compare_documents)
register_behaviour(EntityKind.TRACK, track_to_string, _destroy, compare_by_name)
register_behaviour(EntityKind.TRACK_SEGMENT, segment_to_string, _destroy, compare_segments)
register_behaviour(EntityKind.ROUTE, route_to_string, _destroy, compare_by_name)
register_behaviour(EntityKind.WAYPOINT, waypoint_to_string, _destroy, compare_by_name)
register_behaviour(EntityKind.EXTENSION_FIELD, extension_to_string, _destroy, compare_by_name)
