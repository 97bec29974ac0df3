"""Tree -> Document: one depth-first pass over a GPX element tree.

The walk keeps a :class:`BuildContext` per level holding the track, segment
and route that are currently open. Points and segments found with no open
container get an implicit, unnamed one, which stays open for the following
siblings at that level. Implicit containers are always appended at the back.

Syntactic problems (missing ``creator``, a non-GPX root) raise
:class:`~gpxdoc.errors.MalformedInputError`. Unreadable values only become
``None`` here; rejecting them is the validator's job.
"""

from __future__ import annotations

import logging
import math
import xml.etree.ElementTree as ET
from dataclasses import dataclass, replace

from .errors import AllocationFailureError, BuildError, MalformedInputError
from .model import Document, ExtensionField, Route, Track, TrackSegment, Waypoint
from .xmltree import local_name, namespace_of

logger = logging.getLogger(__name__)

GPX = "gpx"
WPT = "wpt"
RTE = "rte"
RTEPT = "rtept"
TRK = "trk"
TRKSEG = "trkseg"
TRKPT = "trkpt"
NAME = "name"


@dataclass
class BuildContext:
    """Containers open at the current level of the walk."""
    document: Document
    track: Track | None = None
    segment: TrackSegment | None = None
    route: Route | None = None


def _parse_float(text: str | None) -> float | None:
    if text is None:
        return None
    try:
        value = float(text.strip())
    except ValueError:
        return None
    # "nan" and "inf" parse but are not positions or versions
    return value if math.isfinite(value) else None


def _elements(node: ET.Element):
    # Comments and processing instructions carry a non-string tag
    return (child for child in node if isinstance(child.tag, str))


def _scan_name(node: ET.Element) -> str:
    """Text of the first direct ``name`` child, or ``""``."""
    for i, child in enumerate(_elements(node)):
        if local_name(child.tag) == NAME:
            if i:
                logger.warning("<name> is not the first child of <%s>; using it anyway",
                               local_name(node.tag))
            return child.text or ""
    return ""


def _extension_name(tag: str, namespace: str) -> str:
    if namespace_of(tag) in ("", namespace):
        return local_name(tag)
    return tag


def _capture_extensions(node: ET.Element, target, namespace: str, structural: tuple[str, ...]) -> None:
    for child in _elements(node):
        tag = local_name(child.tag)
        if tag == NAME or tag in structural:
            continue
        target.extensions.append(ExtensionField(
            name=_extension_name(child.tag, namespace),
            value="".join(child.itertext()),
        ))


def _build_point(node: ET.Element, namespace: str) -> Waypoint:
    waypoint = Waypoint(
        name=_scan_name(node),
        latitude=_parse_float(node.get("lat")),
        longitude=_parse_float(node.get("lon")),
    )
    _capture_extensions(node, waypoint, namespace, ())
    return waypoint


def _build_root(root: ET.Element) -> Document:
    if local_name(root.tag) != GPX:
        raise MalformedInputError(f"Root element is <{local_name(root.tag)}>, expected <gpx>")
    creator = root.get("creator")
    if creator is None:
        raise MalformedInputError("<gpx> has no creator attribute")
    return Document(
        namespace=namespace_of(root.tag),
        version=_parse_float(root.get("version")),
        creator=creator,
    )


def _open_track(ctx: BuildContext) -> Track:
    if ctx.track is None:
        logger.debug("Opening implicit track #%d", len(ctx.document.tracks) + 1)
        ctx.track = Track()
        ctx.segment = None
        ctx.document.tracks.append(ctx.track)
    return ctx.track


def _open_segment(ctx: BuildContext) -> TrackSegment:
    if ctx.segment is None:
        track = _open_track(ctx)
        logger.debug("Opening implicit segment in track %r", track.name)
        ctx.segment = TrackSegment()
        track.segments.append(ctx.segment)
    return ctx.segment


def _open_route(ctx: BuildContext) -> Route:
    if ctx.route is None:
        logger.debug("Opening implicit route #%d", len(ctx.document.routes) + 1)
        ctx.route = Route()
        ctx.document.routes.append(ctx.route)
    return ctx.route


def _visit_children(node: ET.Element, ctx: BuildContext, only: tuple[str, ...] | None = None) -> None:
    """Visit ``node``'s element children in document order.

    ``ctx`` is copied first, so containers opened here stay local to this
    level. With ``only`` set, other children are skipped (already captured).
    """
    ctx = replace(ctx)
    doc = ctx.document
    namespace = doc.namespace

    for child in _elements(node):
        tag = local_name(child.tag)
        if only is not None and tag not in only:
            continue

        if tag == WPT:
            doc.waypoints.append(_build_point(child, namespace))

        elif tag == RTE:
            route = Route(name=_scan_name(child))
            _capture_extensions(child, route, namespace, (RTEPT,))
            doc.routes.append(route)
            ctx.route = route
            _visit_children(child, ctx, only=(RTEPT,))

        elif tag == RTEPT:
            _open_route(ctx).waypoints.append(_build_point(child, namespace))

        elif tag == TRK:
            track = Track(name=_scan_name(child))
            _capture_extensions(child, track, namespace, (TRKSEG, TRKPT))
            doc.tracks.append(track)
            ctx.track, ctx.segment = track, None
            _visit_children(child, ctx, only=(TRKSEG, TRKPT))

        elif tag == TRKSEG:
            track = _open_track(ctx)
            segment = TrackSegment()
            track.segments.append(segment)
            ctx.segment = segment
            _visit_children(child, ctx, only=(TRKPT,))

        elif tag == TRKPT:
            _open_segment(ctx).waypoints.append(_build_point(child, namespace))

        elif tag == GPX:
            raise MalformedInputError("Nested <gpx> element")

        else:
            _visit_children(child, ctx)


def build_document(root: ET.Element) -> Document:
    """Build a Document from a GPX root element.

    Raises BuildError on failure; anything built before the failure is
    destroyed first, so no partial Document escapes.
    """
    doc = _build_root(root)
    try:
        _visit_children(root, BuildContext(doc))
    except BuildError:
        doc.destroy()
        raise
    except MemoryError as e:
        doc.destroy()
        raise AllocationFailureError("Out of memory while building document") from e
    except RecursionError as e:
        doc.destroy()
        raise MalformedInputError("Element tree is nested too deeply to build") from e

    logger.debug("Built document: %d waypoint(s), %d route(s), %d track(s)",
                 len(doc.waypoints), len(doc.routes), len(doc.tracks))
    return doc


def create_document(root: ET.Element) -> Document | None:
    """Like :func:`build_document`, but reports failure as ``None``."""
    try:
        return build_document(root)
    except BuildError as e:
        logger.warning("Could not build document: %s", e)
        return None
