"""Shared fixtures for gpxdoc tests."""

import pytest

from gpxdoc.builder import build_document
from gpxdoc.config import GPX_11_NAMESPACE
from gpxdoc.xmltree import parse_tree

GPX_NS = GPX_11_NAMESPACE

SAMPLE_BODY = """
  <wpt lat="45.0" lon="-75.0"><name>A</name><ele>100</ele></wpt>
  <rte>
    <name>R1</name>
    <desc>first</desc>
    <rtept lat="0.0" lon="0.0"><name>R1-start</name></rtept>
    <rtept lat="0.0" lon="1.0"/>
  </rte>
  <trk>
    <name>T1</name>
    <trkseg>
      <trkpt lat="0" lon="0"/>
      <trkpt lat="1" lon="0"/>
    </trkseg>
    <trkseg>
      <trkpt lat="1" lon="1"/>
      <trkpt lat="0" lon="0"/>
    </trkseg>
  </trk>
"""


def _gpx_bytes(body: str, version: str | None = "1.1", creator: str | None = "test",
               namespace: str | None = GPX_NS) -> bytes:
    attrs = []
    if version is not None:
        attrs.append(f'version="{version}"')
    if creator is not None:
        attrs.append(f'creator="{creator}"')
    if namespace is not None:
        attrs.append(f'xmlns="{namespace}"')
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<gpx {" ".join(attrs)}>{body}</gpx>'
    ).encode("utf-8")


@pytest.fixture(scope="session")
def gpx_bytes():
    return _gpx_bytes


@pytest.fixture(scope="session")
def gpx_tree():
    def make(body: str, **kwargs):
        return parse_tree(_gpx_bytes(body, **kwargs))
    return make


@pytest.fixture
def build(gpx_tree):
    def make(body: str, **kwargs):
        return build_document(gpx_tree(body, **kwargs))
    return make


@pytest.fixture
def sample_bytes():
    return _gpx_bytes(SAMPLE_BODY)


@pytest.fixture
def sample_doc(build):
    return build(SAMPLE_BODY)
