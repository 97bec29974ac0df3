"""Document -> tree, and Document -> compact JSON summaries.

``to_tree`` is the inverse of :func:`gpxdoc.builder.build_document`: for any
document the builder produced, building from ``to_tree(doc)`` and converting
back yields an equal tree. The JSON projection is one-way apart from the small
fragment parsers at the end of this module.
"""

from __future__ import annotations

import json
import math
import xml.etree.ElementTree as ET
from typing import Callable, Iterable

from pydantic import BaseModel, ValidationError

from .config import DEFAULT_CONFIG, ParserConfig
from .errors import MalformedInputError
from .geometry import is_loop, path_length, round_up
from .model import Document, Route, Track, Waypoint, new_document
from .xmltree import qualify


# --- Model -> tree ---

def _add_text_child(parent: ET.Element, namespace: str, name: str, text: str) -> ET.Element:
    child = ET.SubElement(parent, qualify(namespace, name))
    child.text = text
    return child


def _add_name_and_extensions(parent: ET.Element, entity, namespace: str) -> None:
    if entity.name:
        _add_text_child(parent, namespace, "name", entity.name)
    for ext in entity.extensions:
        if not (ext.name and ext.value):
            continue
        _add_text_child(parent, namespace, ext.name, ext.value)


def _finite(value: float | None) -> bool:
    return value is not None and math.isfinite(value)


def _add_point(parent: ET.Element, wpt: Waypoint, tag: str, namespace: str,
               config: ParserConfig) -> None:
    node = ET.SubElement(parent, qualify(namespace, tag))
    if _finite(wpt.latitude):
        node.set("lat", config.coordinate_format % wpt.latitude)
    if _finite(wpt.longitude):
        node.set("lon", config.coordinate_format % wpt.longitude)
    _add_name_and_extensions(node, wpt, namespace)


def to_tree(doc: Document, config: ParserConfig = DEFAULT_CONFIG) -> ET.Element:
    """Regenerate the GPX element tree: waypoints, then routes, then tracks."""
    ns = doc.namespace
    root = ET.Element(qualify(ns, "gpx"))
    if _finite(doc.version):
        root.set("version", config.version_format % doc.version)
    root.set("creator", doc.creator)

    for wpt in doc.waypoints:
        _add_point(root, wpt, "wpt", ns, config)

    for route in doc.routes:
        rte = ET.SubElement(root, qualify(ns, "rte"))
        _add_name_and_extensions(rte, route, ns)
        for wpt in route.waypoints:
            _add_point(rte, wpt, "rtept", ns, config)

    for track in doc.tracks:
        trk = ET.SubElement(root, qualify(ns, "trk"))
        _add_name_and_extensions(trk, track, ns)
        for segment in track.segments:
            trkseg = ET.SubElement(trk, qualify(ns, "trkseg"))
            for wpt in segment.waypoints:
                _add_point(trkseg, wpt, "trkpt", ns, config)

    return root


# --- Model -> JSON ---

def _string(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def _number(value: float | None, fmt: str) -> str:
    return fmt % value if _finite(value) else "null"


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _json_list(items: Iterable | None, render: Callable[..., str], config: ParserConfig) -> str:
    if items is None:
        return "[]"
    return "[" + ",".join(render(item, config) for item in items) + "]"


def _summary_fields(entity: Route | Track, config: ParserConfig) -> tuple[str, str, str]:
    geo = config.geometry
    points = list(entity.points())
    length = round_up(path_length(points, geo.earth_radius_m), geo.length_rounding_m)
    loop = is_loop(points, config.summary.loop_delta_m,
                   min_points=geo.min_loop_points, radius_m=geo.earth_radius_m)
    return _string(entity.name or "None"), "%.1f" % length, _bool(loop)


def waypoint_to_json(wpt: Waypoint | None, config: ParserConfig = DEFAULT_CONFIG) -> str:
    if wpt is None:
        return "{}"
    fmt = config.coordinate_format
    return (f'{{"name":{_string(wpt.name or "None")},'
            f'"latitude":{_number(wpt.latitude, fmt)},'
            f'"longitude":{_number(wpt.longitude, fmt)}}}')


def route_to_json(route: Route | None, config: ParserConfig = DEFAULT_CONFIG) -> str:
    if route is None:
        return "{}"
    name, length, loop = _summary_fields(route, config)
    return (f'{{"name":{name},"numPoints":{len(route.waypoints)},'
            f'"len":{length},"loop":{loop}}}')


def track_to_json(track: Track | None, config: ParserConfig = DEFAULT_CONFIG) -> str:
    if track is None:
        return "{}"
    name, length, loop = _summary_fields(track, config)
    return f'{{"name":{name},"len":{length},"loop":{loop}}}'


def document_to_json(doc: Document | None, config: ParserConfig = DEFAULT_CONFIG) -> str:
    if doc is None:
        return "{}"
    return (f'{{"version":{_number(doc.version, config.version_format)},'
            f'"creator":{_string(doc.creator)},'
            f'"numWaypoints":{len(doc.waypoints)},'
            f'"numRoutes":{len(doc.routes)},'
            f'"numTracks":{len(doc.tracks)}}}')


def waypoint_list_to_json(items: Iterable[Waypoint] | None, config: ParserConfig = DEFAULT_CONFIG) -> str:
    return _json_list(items, waypoint_to_json, config)


def route_list_to_json(items: Iterable[Route] | None, config: ParserConfig = DEFAULT_CONFIG) -> str:
    return _json_list(items, route_to_json, config)


def track_list_to_json(items: Iterable[Track] | None, config: ParserConfig = DEFAULT_CONFIG) -> str:
    return _json_list(items, track_to_json, config)


def route_points_to_json(doc: Document, config: ParserConfig = DEFAULT_CONFIG) -> str:
    """Routes plus each route's points, keyed ``wpts1``, ``wpts2``, ..."""
    if not doc.routes:
        return '{"routes":[]}'
    points = ",".join(
        f'"wpts{i}":{waypoint_list_to_json(route.waypoints, config)}'
        for i, route in enumerate(doc.routes, start=1)
    )
    return f'{{"routes":{route_list_to_json(doc.routes, config)},"points":{{{points}}}}}'


# --- JSON fragments -> model ---

class DocumentFragment(BaseModel):
    version: float
    creator: str


class WaypointFragment(BaseModel):
    lat: float
    lon: float
    name: str = ""


class RouteFragment(BaseModel):
    name: str = ""


def _load(model: type[BaseModel], text: str):
    try:
        return model.model_validate_json(text)
    except ValidationError as e:
        raise MalformedInputError(f"Invalid {model.__name__}: {e}") from e


def document_from_json(text: str, config: ParserConfig = DEFAULT_CONFIG) -> Document:
    """Empty document from ``{"version":1.1,"creator":"..."}``."""
    fragment = _load(DocumentFragment, text)
    return new_document(fragment.creator, fragment.version, config.default_namespace)


def waypoint_from_json(text: str) -> Waypoint:
    fragment = _load(WaypointFragment, text)
    return Waypoint(name=fragment.name, latitude=fragment.lat, longitude=fragment.lon)


def route_from_json(text: str) -> Route:
    return Route(name=_load(RouteFragment, text).name)

