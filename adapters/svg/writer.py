from __future__ import annotations

from pathlib import Path

import drawsvg as draw

from adapters.surface.memory import InMemorySurface
from domain.models import Rect, ViewTransform
from domain.shapes import CapsuleShape, LineShape, PolygonShape, RectShape, Shape, TextShape

DEFAULT_BACKGROUND = "#ffffff"
DEFAULT_PADDING = 10.0

_TEXT_BASELINES = {"middle": "middle", "auto": "auto", "hanging": "hanging"}


class SvgSceneWriter:
    """Serializes an in-memory surface into a standalone SVG document.

    The surface tree is mirrored as nested ``<g>`` elements, so each node
    keeps its own ``translate`` and opacity. The view transform becomes the
    outermost group; without one the drawing is sized to fit the scene.
    """

    def __init__(
        self,
        background: str = DEFAULT_BACKGROUND,
        padding: float = DEFAULT_PADDING,
    ) -> None:
        self.background = background
        self.padding = padding

    def render(
        self,
        surface: InMemorySurface,
        view: ViewTransform | None = None,
        size: tuple[float, float] | None = None,
    ) -> draw.Drawing:
        bounds = surface.bounds()
        if view is None:
            view = ViewTransform(
                x=self.padding - bounds.x, y=self.padding - bounds.y, scale=1.0
            )
        width, height = size or self._fit(bounds, view)

        d = draw.Drawing(width, height)
        d.append(draw.Rectangle(0, 0, width, height, fill=self.background))

        root = draw.Group(
            transform=f"translate({view.x}, {view.y}) scale({view.scale})",
            id="pad-root",
        )
        self._append_children(root, surface, surface.root())
        d.append(root)
        return d

    def to_string(
        self,
        surface: InMemorySurface,
        view: ViewTransform | None = None,
        size: tuple[float, float] | None = None,
    ) -> str:
        return self.render(surface, view, size).as_svg()

    def save(
        self,
        surface: InMemorySurface,
        path: Path,
        view: ViewTransform | None = None,
        size: tuple[float, float] | None = None,
    ) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_string(surface, view, size), encoding="utf-8")

    def _fit(self, bounds: Rect, view: ViewTransform) -> tuple[float, float]:
        width = view.x + bounds.right * view.scale + self.padding
        height = view.y + bounds.bottom * view.scale + self.padding
        return max(width, 1.0), max(height, 1.0)

    def _append_children(self, parent: draw.Group, surface: InMemorySurface, handle: int) -> None:
        for group in surface.children(handle):
            element = draw.Group(
                transform=f"translate({group.x}, {group.y}) scale({group.scale})",
                opacity=group.opacity,
                **{"data-key": group.key},
            )
            for shape in group.shapes:
                if isinstance(shape, TextShape) and not shape.text:
                    continue
                element.append(self._shape(shape))
            self._append_children(element, surface, group.handle)
            parent.append(element)

    def _shape(self, shape: Shape) -> draw.DrawingElement:
        if isinstance(shape, (RectShape, CapsuleShape)):
            radius = shape.corner_radius
            return draw.Rectangle(
                shape.x,
                shape.y,
                shape.width,
                shape.height,
                rx=radius,
                ry=radius,
                fill=shape.fill,
                stroke=shape.stroke,
                stroke_width=shape.stroke_width,
                class_=shape.role,
            )
        if isinstance(shape, PolygonShape):
            coords = [value for point in shape.points for value in (point.x, point.y)]
            return draw.Lines(
                *coords,
                close=True,
                fill=shape.fill,
                stroke=shape.stroke,
                stroke_width=shape.stroke_width,
                class_=shape.role,
            )
        if isinstance(shape, LineShape):
            return draw.Line(
                shape.start.x,
                shape.start.y,
                shape.end.x,
                shape.end.y,
                stroke=shape.stroke,
                stroke_width=shape.stroke_width,
                class_=shape.role,
            )
        if isinstance(shape, TextShape):
            return draw.Text(
                shape.text,
                shape.font_size,
                shape.x,
                shape.y,
                text_anchor=shape.anchor,
                dominant_baseline=_TEXT_BASELINES.get(shape.baseline, "auto"),
                font_family=shape.font_family,
                font_weight=shape.font_weight,
                fill=shape.fill,
                class_=shape.role,
            )
        msg = f"Unsupported shape: {shape!r}"
        raise TypeError(msg)
