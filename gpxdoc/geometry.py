"""Distance, length, loop and proximity helpers over waypoint sequences."""

from __future__ import annotations

import math
from typing import Iterable

from .config import GeometryConfig
from .containers import ListView, OrderedList
from .model import Document, Route, Track, Waypoint

_DEFAULTS = GeometryConfig()
EARTH_RADIUS_M = _DEFAULTS.earth_radius_m
MIN_LOOP_POINTS = _DEFAULTS.min_loop_points


def distance(lat1: float, lon1: float, lat2: float, lon2: float,
             radius_m: float = EARTH_RADIUS_M) -> float:
    """Haversine great-circle distance in meters between two WGS84 points."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return radius_m * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def _is_finite(value: float | None) -> bool:
    return value is not None and math.isfinite(value)


def _has_position(wpt: Waypoint) -> bool:
    return _is_finite(wpt.latitude) and _is_finite(wpt.longitude)


def waypoint_distance(a: Waypoint, b: Waypoint, radius_m: float = EARTH_RADIUS_M) -> float:
    return distance(a.latitude, a.longitude, b.latitude, b.longitude, radius_m)


def path_length(points: Iterable[Waypoint], radius_m: float = EARTH_RADIUS_M) -> float:
    """Sum of consecutive distances; pairs with a missing coordinate add nothing."""
    total = 0.0
    prev = None
    for wpt in points:
        if prev is not None and _has_position(prev) and _has_position(wpt):
            total += waypoint_distance(prev, wpt, radius_m)
        prev = wpt
    return total


def route_length(route: Route | None, radius_m: float = EARTH_RADIUS_M) -> float:
    if route is None:
        return 0.0
    return path_length(route.points(), radius_m)


def track_length(track: Track | None, radius_m: float = EARTH_RADIUS_M) -> float:
    """Length across all segments, joining the end of one to the start of the next."""
    if track is None:
        return 0.0
    return path_length(track.points(), radius_m)


def round_up(length: float, step: float = _DEFAULTS.length_rounding_m) -> float:
    """Round ``length`` up to the next multiple of ``step``."""
    return float(math.ceil(length / step) * step)


def is_loop(points: Iterable[Waypoint], delta: float,
            min_points: int = MIN_LOOP_POINTS, radius_m: float = EARTH_RADIUS_M) -> bool:
    points = list(points)
    if delta < 0 or len(points) < min_points:
        return False
    first, last = points[0], points[-1]
    if not (_has_position(first) and _has_position(last)):
        return False
    return waypoint_distance(first, last, radius_m) <= delta


def is_loop_route(route: Route | None, delta: float, **kwargs) -> bool:
    if route is None:
        return False
    return is_loop(route.points(), delta, **kwargs)


def is_loop_track(track: Track | None, delta: float, **kwargs) -> bool:
    if track is None:
        return False
    return is_loop(track.points(), delta, **kwargs)


def count_with_length(items: Iterable[Route | Track], length: float, delta: float,
                      radius_m: float = EARTH_RADIUS_M) -> int:
    """Number of routes/tracks whose length is within ``delta`` of ``length``."""
    if length < 0 or delta < 0:
        return 0
    return sum(
        1 for item in items
        if abs(path_length(item.points(), radius_m) - length) <= delta
    )


def num_routes_with_length(doc: Document | None, length: float, delta: float) -> int:
    if doc is None:
        return 0
    return count_with_length(doc.routes, length, delta)


def num_tracks_with_length(doc: Document | None, length: float, delta: float) -> int:
    if doc is None:
        return 0
    return count_with_length(doc.tracks, length, delta)


def _endpoints(item: Route | Track) -> tuple[Waypoint, Waypoint] | None:
    first = last = None
    for wpt in item.points():
        if first is None:
            first = wpt
        last = wpt
    if first is None:
        return None
    return first, last


def find_between(items: OrderedList, src_lat: float, src_lon: float,
                 dst_lat: float, dst_lon: float, delta: float,
                 radius_m: float = EARTH_RADIUS_M) -> ListView | None:
    """Routes/tracks starting near ``src`` and ending near ``dst``.

    Returns a borrowed view in the original order, or None when nothing
    matches. Entities without points or with an unset endpoint never match.
    """
    matches = []
    for item in items:
        ends = _endpoints(item)
        if ends is None:
            continue
        first, last = ends
        if not (_has_position(first) and _has_position(last)):
            continue
        if (distance(src_lat, src_lon, first.latitude, first.longitude, radius_m) <= delta
                and distance(dst_lat, dst_lon, last.latitude, last.longitude, radius_m) <= delta):
            matches.append(item)
    if not matches:
        return None
    return ListView(items.kind, matches)


def routes_between(doc: Document | None, src_lat: float, src_lon: float,
                   dst_lat: float, dst_lon: float, delta: float) -> ListView | None:
    if doc is None:
        return None
    return find_between(doc.routes, src_lat, src_lon, dst_lat, dst_lon, delta)


def tracks_between(doc: Document | None, src_lat: float, src_lon: float,
                   dst_lat: float, dst_lon: float, delta: float) -> ListView | None:
    if doc is None:
        return None
    return find_between(doc.tracks, src_lat, src_lon, dst_lat, dst_lon, delta)
