from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from domain.models import Point, Rect
from domain.ports.surface import DrawingSurface
from domain.shapes import CapsuleShape, LineShape, PolygonShape, RectShape, Shape, TextShape

ROOT_HANDLE = 0
ROOT_KEY = "root"


@dataclass
class SurfaceGroup:
    handle: int
    key: str
    parent: int | None
    x: float = 0.0
    y: float = 0.0
    scale: float = 1.0
    opacity: float = 1.0
    shapes: tuple[Shape, ...] = ()
    children: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class SurfaceOperation:
    op: str  # "create", "transform", "opacity", "shapes" or "remove"
    key: str


@dataclass(frozen=True)
class PlacedGroup:
    """A group with its transform and opacity resolved against its ancestors."""

    group: SurfaceGroup
    origin: Point
    scale: float
    opacity: float
    depth: int


class InMemorySurface(DrawingSurface):
    """Retained scene tree kept in memory; records every mutation it receives."""

    def __init__(self) -> None:
        self._groups: dict[int, SurfaceGroup] = {
            ROOT_HANDLE: SurfaceGroup(handle=ROOT_HANDLE, key=ROOT_KEY, parent=None)
        }
        self._next_handle = ROOT_HANDLE + 1
        self.operations: list[SurfaceOperation] = []

    def root(self) -> int:
        return ROOT_HANDLE

    def create_group(self, parent: int, key: str) -> int:
        parent_group = self._require(parent)
        handle = self._next_handle
        self._next_handle += 1
        self._groups[handle] = SurfaceGroup(handle=handle, key=key, parent=parent)
        parent_group.children.append(handle)
        self._record("create", key)
        return handle

    def set_transform(self, group: int, x: float, y: float, scale: float = 1.0) -> None:
        target = self._require(group)
        target.x, target.y, target.scale = x, y, scale
        self._record("transform", target.key)

    def set_opacity(self, group: int, opacity: float) -> None:
        target = self._require(group)
        target.opacity = opacity
        self._record("opacity", target.key)

    def set_shapes(self, group: int, shapes: Sequence[Shape]) -> None:
        target = self._require(group)
        target.shapes = tuple(shapes)
        self._record("shapes", target.key)

    def remove(self, group: int) -> None:
        if group == ROOT_HANDLE:
            msg = "The root group cannot be removed"
            raise ValueError(msg)
        target = self._groups.get(group)
        if target is None:
            return
        if target.parent is not None and target.parent in self._groups:
            self._groups[target.parent].children.remove(group)
        stack = [group]
        while stack:
            removed = self._groups.pop(stack.pop())
            stack.extend(removed.children)
        self._record("remove", target.key)

    def group(self, handle: int) -> SurfaceGroup:
        return self._require(handle)

    def find(self, key: str) -> SurfaceGroup | None:
        found: SurfaceGroup | None = None
        for group in self._groups.values():
            if group.key == key:
                found = group
        return found

    def keys(self) -> list[str]:
        return [group.key for group in self._groups.values() if group.handle != ROOT_HANDLE]

    def children(self, handle: int) -> list[SurfaceGroup]:
        return [self._groups[child] for child in self._require(handle).children]

    def clear_operations(self) -> None:
        self.operations.clear()

    def operations_for(self, key: str) -> list[str]:
        return [operation.op for operation in self.operations if operation.key == key]

    def placed_groups(self, include_root_transform: bool = False) -> Iterator[PlacedGroup]:
        """Depth-first walk yielding every group under the root in scene space."""
        root = self._groups[ROOT_HANDLE]
        if include_root_transform:
            origin, scale = Point(root.x, root.y), root.scale
        else:
            origin, scale = Point(0.0, 0.0), 1.0

        def visit(handle: int, origin: Point, scale: float, opacity: float, depth: int) -> Iterator[PlacedGroup]:
            for child_handle in self._groups[handle].children:
                child = self._groups[child_handle]
                child_origin = Point(origin.x + child.x * scale, origin.y + child.y * scale)
                child_scale = scale * child.scale
                child_opacity = opacity * child.opacity
                yield PlacedGroup(child, child_origin, child_scale, child_opacity, depth)
                yield from visit(child_handle, child_origin, child_scale, child_opacity, depth + 1)

        yield from visit(ROOT_HANDLE, origin, scale, 1.0, 0)

    def bounds(self) -> Rect:
        """Scene-space bounding box of every shape, ignoring the root transform."""
        min_x = min_y = float("inf")
        max_x = max_y = float("-inf")
        for placed in self.placed_groups():
            for shape in placed.group.shapes:
                for point in _shape_extent(shape):
                    x = placed.origin.x + point.x * placed.scale
                    y = placed.origin.y + point.y * placed.scale
                    min_x, min_y = min(min_x, x), min(min_y, y)
                    max_x, max_y = max(max_x, x), max(max_y, y)
        if min_x == float("inf"):
            return Rect(0.0, 0.0, 0.0, 0.0)
        return Rect(min_x, min_y, max_x - min_x, max_y - min_y)

    def _require(self, handle: int) -> SurfaceGroup:
        group = self._groups.get(handle)
        if group is None:
            msg = f"Unknown surface group: {handle}"
            raise KeyError(msg)
        return group

    def _record(self, op: str, key: str) -> None:
        self.operations.append(SurfaceOperation(op=op, key=key))


def _shape_extent(shape: Shape) -> tuple[Point, ...]:
    if isinstance(shape, (RectShape, CapsuleShape)):
        return (Point(shape.x, shape.y), Point(shape.x + shape.width, shape.y + shape.height))
    if isinstance(shape, PolygonShape):
        return shape.points
    if isinstance(shape, LineShape):
        return (shape.start, shape.end)
    if isinstance(shape, TextShape):
        return (Point(shape.x, shape.y),)
    return ()
