from __future__ import annotations

import uuid
from typing import Any

from adapters.surface.memory import InMemorySurface, PlacedGroup
from domain.models import ExcalidrawDocument, Point, ViewTransform
from domain.shapes import CapsuleShape, LineShape, PolygonShape, RectShape, Shape, TextShape

CUSTOM_DATA_KEY = "pad"
TEXT_WIDTH_FACTOR = 0.6
TEXT_LINE_HEIGHT = 1.25


class SceneToExcalidrawExporter:
    """Flattens a rendered surface into Excalidraw elements.

    Element ids are ``uuid5`` of the node id and shape role, so exporting the
    same scene twice yields the same ids and a dragged node keeps its ids.
    """

    def __init__(self) -> None:
        self.namespace = uuid.uuid5(uuid.NAMESPACE_DNS, "pad-viewer")

    def export(self, surface: InMemorySurface, view: ViewTransform | None = None) -> ExcalidrawDocument:
        elements: list[dict[str, Any]] = []
        for placed in surface.placed_groups():
            if not placed.group.shapes:
                continue
            group_id = self._stable_id("group", placed.group.key)
            for index, shape in enumerate(placed.group.shapes):
                element_id = self._stable_id("shape", placed.group.key, shape.role, str(index))
                metadata = {"node_id": placed.group.key, "role": shape.role}
                elements.append(
                    self._element(element_id, shape, placed, [group_id], metadata)
                )
        return ExcalidrawDocument(
            elements=elements, app_state=self._build_app_state(view), files={}
        )

    def _build_app_state(self, view: ViewTransform | None) -> dict[str, Any]:
        view = view or ViewTransform()
        return {
            "viewBackgroundColor": "#ffffff",
            "gridSize": None,
            "currentItemFontFamily": 3,
            "currentItemFontSize": 14,
            "currentItemStrokeColor": "#1e1e1e",
            # Excalidraw maps scene to screen as (scene + scroll) * zoom.
            "scrollX": view.x / view.scale,
            "scrollY": view.y / view.scale,
            "zoom": {"value": view.scale},
        }

    def _element(
        self,
        element_id: str,
        shape: Shape,
        placed: PlacedGroup,
        group_ids: list[str],
        metadata: dict[str, Any],
    ) -> dict[str, Any]:
        opacity = round(placed.opacity * 100)
        if isinstance(shape, (RectShape, CapsuleShape)):
            rounded = isinstance(shape, CapsuleShape) or shape.corner_radius > 0
            return self._base_shape(
                element_id=element_id,
                type_name="rectangle",
                position=self._place(placed, Point(shape.x, shape.y)),
                width=shape.width * placed.scale,
                height=shape.height * placed.scale,
                group_ids=group_ids,
                metadata=metadata,
                extra={
                    "strokeColor": shape.stroke,
                    "backgroundColor": shape.fill,
                    "fillStyle": "solid",
                    "strokeWidth": shape.stroke_width,
                    "roundness": {"type": 3} if rounded else None,
                    "opacity": opacity,
                },
            )
        if isinstance(shape, (PolygonShape, LineShape)):
            points = shape.points + (shape.points[0],) if isinstance(shape, PolygonShape) else (shape.start, shape.end)
            return self._line_element(element_id, points, shape, placed, group_ids, metadata, opacity)
        return self._text_element(element_id, shape, placed, group_ids, metadata, opacity)

    def _line_element(
        self,
        element_id: str,
        points: tuple[Point, ...],
        shape: PolygonShape | LineShape,
        placed: PlacedGroup,
        group_ids: list[str],
        metadata: dict[str, Any],
        opacity: int,
    ) -> dict[str, Any]:
        absolute = [self._place(placed, point) for point in points]
        origin = absolute[0]
        xs = [point.x for point in absolute]
        ys = [point.y for point in absolute]
        is_polygon = isinstance(shape, PolygonShape)
        return self._base_shape(
            element_id=element_id,
            type_name="line",
            position=origin,
            width=max(xs) - min(xs),
            height=max(ys) - min(ys),
            group_ids=group_ids,
            metadata=metadata,
            extra={
                "strokeColor": shape.stroke,
                "backgroundColor": shape.fill if is_polygon else "transparent",
                "fillStyle": "solid",
                "strokeWidth": shape.stroke_width,
                "opacity": opacity,
                "points": [[point.x - origin.x, point.y - origin.y] for point in absolute],
                "lastCommittedPoint": None,
                "startBinding": None,
                "endBinding": None,
                "startArrowhead": None,
                "endArrowhead": None,
            },
        )

    def _text_element(
        self,
        element_id: str,
        shape: TextShape,
        placed: PlacedGroup,
        group_ids: list[str],
        metadata: dict[str, Any],
        opacity: int,
    ) -> dict[str, Any]:
        size = shape.font_size * placed.scale
        width = max(1.0, len(shape.text) * size * TEXT_WIDTH_FACTOR)
        height = size * TEXT_LINE_HEIGHT
        anchor = self._place(placed, Point(shape.x, shape.y))
        x = anchor.x
        if shape.anchor == "middle":
            x -= width / 2
        elif shape.anchor == "end":
            x -= width
        y = anchor.y - height / 2 if shape.baseline == "middle" else anchor.y - size
        return self._base_shape(
            element_id=element_id,
            type_name="text",
            position=Point(x, y),
            width=width,
            height=height,
            group_ids=group_ids,
            metadata=metadata,
            extra={
                "strokeColor": shape.fill,
                "backgroundColor": "transparent",
                "fillStyle": "solid",
                "opacity": opacity,
                "text": shape.text,
                "originalText": shape.text,
                "fontSize": size,
                "fontFamily": 3,
                "textAlign": {"start": "left", "middle": "center", "end": "right"}[shape.anchor],
                "verticalAlign": "middle",
                "baseline": height / 2,
                "containerId": None,
                "lineHeight": TEXT_LINE_HEIGHT,
            },
        )

    def _base_shape(
        self,
        element_id: str,
        type_name: str,
        position: Point,
        width: float,
        height: float,
        metadata: dict[str, Any],
        group_ids: list[str] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        seed = self._seed(element_id)
        return {
            "id": element_id,
            "type": type_name,
            "x": position.x,
            "y": position.y,
            "width": width,
            "height": height,
            "angle": 0,
            "strokeWidth": 1,
            "strokeStyle": "solid",
            "roughness": 0,
            "opacity": 100,
            "groupIds": group_ids or [],
            "roundness": None,
            "seed": seed,
            "version": 1,
            "versionNonce": seed,
            "isDeleted": False,
            "boundElements": [],
            "locked": False,
            "frameId": None,
            "customData": {CUSTOM_DATA_KEY: metadata},
            **(extra or {}),
        }

    def _place(self, placed: PlacedGroup, point: Point) -> Point:
        return Point(
            placed.origin.x + point.x * placed.scale,
            placed.origin.y + point.y * placed.scale,
        )

    def _stable_id(self, *parts: str) -> str:
        return str(uuid.uuid5(self.namespace, "|".join(parts)))

    def _seed(self, element_id: str) -> int:
        return uuid.UUID(element_id).int % (2**31 - 1) + 1
