"""Configuration models for the GPX document pipeline."""

from __future__ import annotations

from pydantic import BaseModel, Field

GPX_11_NAMESPACE = "http://www.topografix.com/GPX/1/1"


class GeometryConfig(BaseModel):
    earth_radius_m: float = Field(default=6_371_000, gt=0)
    min_loop_points: int = Field(default=4, ge=2)
    length_rounding_m: float = Field(default=10, gt=0)


class SummaryConfig(BaseModel):
    loop_delta_m: float = Field(default=10.0, ge=0)
    version_decimals: int = Field(default=1, ge=0)
    coordinate_decimals: int = Field(default=6, ge=0)


class ParserConfig(BaseModel):
    default_namespace: str = GPX_11_NAMESPACE
    geometry: GeometryConfig = GeometryConfig()
    summary: SummaryConfig = SummaryConfig()
    pretty_print: bool = True

    @property
    def version_format(self) -> str:
        """printf-style format applied to the document version."""
        return f"%.{self.summary.version_decimals}f"

    @property
    def coordinate_format(self) -> str:
        return f"%.{self.summary.coordinate_decimals}f"


DEFAULT_CONFIG = ParserConfig()
