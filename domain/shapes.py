from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from domain.models import Point

STROKE_COLOR = "#000000"
FILL_COLOR = "#ffffff"
CONTAINER_FILL = "#f9f9f9"
CONTAINER_STROKE = "#333333"
HEADER_FILL = "#e0e0e0"
ERROR_FILL = "#ffecec"
ERROR_STROKE = "#d33a3a"


@dataclass(frozen=True)
class RectShape:
    role: str
    x: float
    y: float
    width: float
    height: float
    fill: str = FILL_COLOR
    stroke: str = STROKE_COLOR
    stroke_width: float = 1.0
    corner_radius: float = 0.0


@dataclass(frozen=True)
class CapsuleShape:
    role: str
    x: float
    y: float
    width: float
    height: float
    fill: str = FILL_COLOR
    stroke: str = STROKE_COLOR
    stroke_width: float = 1.5

    @property
    def corner_radius(self) -> float:
        return self.height / 2


@dataclass(frozen=True)
class PolygonShape:
    role: str
    points: tuple[Point, ...]
    fill: str = FILL_COLOR
    stroke: str = STROKE_COLOR
    stroke_width: float = 1.5


@dataclass(frozen=True)
class LineShape:
    role: str
    start: Point
    end: Point
    stroke: str = STROKE_COLOR
    stroke_width: float = 1.5


@dataclass(frozen=True)
class TextShape:
    role: str
    text: str
    x: float
    y: float
    anchor: str = "start"  # "start", "middle" or "end"
    baseline: str = "middle"
    font_family: str = "monospace"
    font_size: float = 14.0
    font_weight: str = "normal"
    fill: str = STROKE_COLOR


Shape = Union[RectShape, CapsuleShape, PolygonShape, LineShape, TextShape]
