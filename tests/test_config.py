"""Tests for config defaults, overrides and their effect on output."""

import json

import pytest
from pydantic import ValidationError

from gpxdoc.config import (
    GPX_11_NAMESPACE,
    GeometryConfig,
    ParserConfig,
    SummaryConfig,
)
from gpxdoc.model import Route, Waypoint, add_waypoint
from gpxdoc.serializer import document_from_json, route_to_json, to_tree, waypoint_to_json


def _nearly_closed_route():
    route = Route(name="almost")
    for lat, lon in ((0, 0), (1, 0), (1, 1), (0, 0.001)):
        add_waypoint(route, Waypoint(latitude=lat, longitude=lon))
    return route


class TestDefaults:
    def test_format_strings(self):
        cfg = ParserConfig()
        assert cfg.version_format == "%.1f"
        assert cfg.coordinate_format == "%.6f"

    def test_geometry_defaults(self):
        cfg = ParserConfig()
        assert cfg.geometry.earth_radius_m == 6_371_000
        assert cfg.geometry.min_loop_points == 4
        assert cfg.summary.loop_delta_m == 10.0

    def test_default_namespace(self):
        assert ParserConfig().default_namespace == GPX_11_NAMESPACE


class TestOverrides:
    def test_nested_override(self):
        cfg = ParserConfig(summary=SummaryConfig(coordinate_decimals=2))
        assert cfg.coordinate_format == "%.2f"
        assert cfg.version_format == "%.1f"

    def test_from_dict(self):
        cfg = ParserConfig.model_validate({"geometry": {"length_rounding_m": 100}})
        assert cfg.geometry.length_rounding_m == 100
        assert cfg.geometry.earth_radius_m == 6_371_000

    @pytest.mark.parametrize("kwargs", [
        {"earth_radius_m": 0},
        {"earth_radius_m": -1},
        {"min_loop_points": 1},
        {"length_rounding_m": 0},
    ])
    def test_invalid_geometry_rejected(self, kwargs):
        with pytest.raises(ValidationError):
            GeometryConfig(**kwargs)

    def test_negative_loop_delta_rejected(self):
        with pytest.raises(ValidationError):
            SummaryConfig(loop_delta_m=-1)


class TestEffectOnOutput:
    def test_coordinate_decimals(self, sample_doc):
        cfg = ParserConfig(summary=SummaryConfig(coordinate_decimals=2))
        wpt = to_tree(sample_doc, cfg)[0]
        assert wpt.get("lat") == "45.00"
        assert '"latitude":45.00,' in waypoint_to_json(sample_doc.waypoints[0], cfg)

    def test_loop_delta_changes_loop_flag(self):
        route = _nearly_closed_route()
        assert json.loads(route_to_json(route))["loop"] is False
        loose = ParserConfig(summary=SummaryConfig(loop_delta_m=200))
        assert json.loads(route_to_json(route, loose))["loop"] is True

    def test_length_rounding_step(self, sample_doc):
        cfg = ParserConfig(geometry=GeometryConfig(length_rounding_m=1000))
        assert json.loads(route_to_json(sample_doc.routes[0], cfg))["len"] == 112000

    def test_namespace_for_new_documents(self):
        cfg = ParserConfig(default_namespace="urn:custom")
        assert document_from_json('{"version":1.0,"creator":"me"}', cfg).namespace == "urn:custom"
