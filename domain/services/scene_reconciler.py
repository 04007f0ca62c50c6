from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from domain.geometry import HEADER_HEIGHT
from domain.models import ZERO_OFFSET, GeometryNode, Offset, Point, Rect
from domain.ports.surface import DrawingSurface, GroupHandle
from domain.services.scene_shapes import node_shapes
from domain.services.transitions import Frame, TransitionScheduler
from domain.services.view_controller import ViewController
from domain.shapes import Shape

logger = logging.getLogger(__name__)

DRAGGABLE_KINDS = frozenset({"block"})
CHILDREN_GROUP_SUFFIX = "#children"


class DragError(ValueError):
    pass


@dataclass
class RenderedNode:
    node_id: str
    group: GroupHandle
    children_group: GroupHandle
    geometry: GeometryNode
    shapes: tuple[Shape, ...] = ()
    frame: Frame = Frame(0.0, 0.0, 0.0)
    target: Frame = Frame(0.0, 0.0, 0.0)
    children: dict[str, RenderedNode] = field(default_factory=dict)

    def walk(self) -> Iterator[RenderedNode]:
        yield self
        for child in self.children.values():
            yield from child.walk()


@dataclass
class ReconcileStats:
    entered: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    exited: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.entered or self.updated or self.exited)


@dataclass
class _DragState:
    node_id: str
    baseline: Offset
    dx: float = 0.0
    dy: float = 0.0


class SceneReconciler:
    """Keeps a drawing surface in sync with successive geometry trees.

    Nodes are matched by id level by level: ids that disappear fade out and
    are removed, new ids are created hidden and faded in, and surviving ids
    keep their surface group and only get patched. Manual offsets set by
    dragging are stored per id and added to the computed position on every
    render.
    """

    def __init__(
        self,
        surface: DrawingSurface,
        view: ViewController | None = None,
        scheduler: TransitionScheduler | None = None,
        draggable_kinds: frozenset[str] = DRAGGABLE_KINDS,
    ) -> None:
        self.surface = surface
        self.view = view or ViewController(surface)
        self.scheduler = scheduler or TransitionScheduler(surface)
        self.draggable_kinds = draggable_kinds
        self.offsets: dict[str, Offset] = {}
        self._roots: dict[str, RenderedNode] = {}
        self._index: dict[str, RenderedNode] = {}
        self._drag: _DragState | None = None

    @property
    def active_drag(self) -> str | None:
        return self._drag.node_id if self._drag else None

    def render(self, root: GeometryNode) -> ReconcileStats:
        stats = ReconcileStats()
        self._roots = self._reconcile(self.surface.root(), self._roots, (root,), stats)
        self._index = {
            rendered.node_id: rendered
            for top in self._roots.values()
            for rendered in top.walk()
        }
        for node_id in [node_id for node_id in self.offsets if node_id not in self._index]:
            del self.offsets[node_id]
        if self._drag is not None and self._drag.node_id not in self._index:
            self.drag_end()
        logger.debug(
            "Reconciled %s: %d entered, %d updated, %d exited",
            root.id,
            len(stats.entered),
            len(stats.updated),
            len(stats.exited),
        )
        return stats

    def rendered(self, node_id: str) -> RenderedNode | None:
        return self._index.get(node_id)

    def offset_of(self, node_id: str) -> Offset:
        return self.offsets.get(node_id, ZERO_OFFSET)

    def target_position(self, node_id: str) -> Point:
        rendered = self._index.get(node_id)
        if rendered is None:
            msg = f"Node is not rendered: {node_id}"
            raise KeyError(msg)
        offset = self.offset_of(node_id)
        return Point(rendered.geometry.x + offset.dx, rendered.geometry.y + offset.dy)

    def drag_start(self, node_id: str) -> Offset:
        rendered = self._index.get(node_id)
        if rendered is None:
            msg = f"Cannot drag unknown node: {node_id}"
            raise DragError(msg)
        if rendered.geometry.kind not in self.draggable_kinds:
            msg = f"Node {node_id} of kind {rendered.geometry.kind!r} is not draggable"
            raise DragError(msg)
        if self._drag is not None:
            self.drag_end()
        baseline = self.offset_of(node_id)
        self._drag = _DragState(node_id=node_id, baseline=baseline)
        self.scheduler.cancel(rendered.group)
        self._place_now(rendered, self.target_position(node_id))
        self.view.suspend()
        logger.debug("Drag started on %s", node_id)
        return baseline

    def drag_move(self, dx: float, dy: float) -> Offset:
        """Move the dragged node by a screen-space pointer delta."""
        if self._drag is None:
            msg = "drag_move called without an active drag"
            raise DragError(msg)
        drag = self._drag
        node_id = drag.node_id
        scale = self.view.transform.scale
        drag.dx += dx / scale
        drag.dy += dy / scale
        offset = drag.baseline.shifted(drag.dx, drag.dy)
        self.offsets[node_id] = offset
        rendered = self._index[node_id]
        self._place_now(rendered, self.target_position(node_id))
        return offset

    def drag_end(self) -> None:
        if self._drag is None:
            return
        node_id = self._drag.node_id
        self._drag = None
        self.view.resume()
        logger.debug("Drag ended on %s at %s", node_id, self.offsets.get(node_id))

    def header_at(self, screen_point: Point) -> str | None:
        """Id of the innermost draggable node whose header is under the pointer."""
        scene_point = self.view.transform.to_scene(screen_point)
        hit: str | None = None
        for node_id, rect in self._header_rects():
            if rect.contains(scene_point):
                hit = node_id
        return hit

    def _header_rects(self) -> Iterator[tuple[str, Rect]]:
        def visit(nodes: Sequence[RenderedNode], origin_x: float, origin_y: float) -> Iterator[tuple[str, Rect]]:
            for rendered in nodes:
                position = self.target_position(rendered.node_id)
                x = origin_x + position.x
                y = origin_y + position.y
                if rendered.geometry.kind in self.draggable_kinds:
                    yield rendered.node_id, Rect(x, y, rendered.geometry.width, HEADER_HEIGHT)
                yield from visit(list(rendered.children.values()), x, y)

        yield from visit(list(self._roots.values()), 0.0, 0.0)

    def _reconcile(
        self,
        container: GroupHandle,
        previous: dict[str, RenderedNode],
        layouts: Sequence[GeometryNode],
        stats: ReconcileStats,
    ) -> dict[str, RenderedNode]:
        wanted = {layout.id for layout in layouts}
        for node_id, rendered in previous.items():
            if node_id not in wanted:
                self._exit(rendered)
                stats.exited.append(node_id)

        current: dict[str, RenderedNode] = {}
        for layout in layouts:
            rendered = previous.get(layout.id)
            if rendered is None:
                current[layout.id] = self._enter(container, layout)
                stats.entered.append(layout.id)
            else:
                if self._update(rendered, layout):
                    stats.updated.append(layout.id)
                current[layout.id] = rendered

        for layout in layouts:
            rendered = current[layout.id]
            rendered.children = self._reconcile(
                rendered.children_group, rendered.children, layout.children, stats
            )
        return current

    def _enter(self, container: GroupHandle, layout: GeometryNode) -> RenderedNode:
        group = self.surface.create_group(container, layout.id)
        children_group = self.surface.create_group(group, layout.id + CHILDREN_GROUP_SUFFIX)
        shapes = node_shapes(layout)
        rendered = RenderedNode(
            node_id=layout.id,
            group=group,
            children_group=children_group,
            geometry=layout,
            shapes=shapes,
        )
        self.surface.set_shapes(group, shapes)
        position = self._position(layout)
        hidden = Frame(position.x, position.y, 0.0)
        rendered.frame = hidden
        self.surface.set_opacity(group, 0.0)
        self.surface.set_transform(group, hidden.x, hidden.y)
        self._transition(rendered, Frame(position.x, position.y, 1.0))
        return rendered

    def _update(self, rendered: RenderedNode, layout: GeometryNode) -> bool:
        rendered.geometry = layout
        changed = False
        shapes = node_shapes(layout)
        if shapes != rendered.shapes:
            rendered.shapes = shapes
            self.surface.set_shapes(rendered.group, shapes)
            changed = True

        position = self._position(layout)
        target = Frame(position.x, position.y, 1.0)
        if self.active_drag == layout.id:
            self.scheduler.cancel(rendered.group)
            changed = self._place_now(rendered, position) or changed
        elif target != rendered.target:
            self._transition(rendered, target)
            changed = True
        return changed

    def _exit(self, rendered: RenderedNode) -> None:
        for descendant in rendered.walk():
            if descendant is not rendered:
                self.scheduler.cancel(descendant.group)
        frame = rendered.frame
        rendered.target = Frame(frame.x, frame.y, 0.0)
        self.scheduler.start(rendered.group, frame, rendered.target, remove_on_end=True)

    def _transition(self, rendered: RenderedNode, target: Frame) -> None:
        rendered.target = target

        def follow(frame: Frame) -> None:
            rendered.frame = frame

        self.scheduler.start(rendered.group, rendered.frame, target, listener=follow)

    def _place_now(self, rendered: RenderedNode, position: Point) -> bool:
        frame = Frame(position.x, position.y, 1.0)
        rendered.target = frame
        if frame == rendered.frame:
            return False
        rendered.frame = frame
        self.surface.set_transform(rendered.group, frame.x, frame.y)
        self.surface.set_opacity(rendered.group, frame.opacity)
        return True

    def _position(self, layout: GeometryNode) -> Point:
        offset = self.offset_of(layout.id)
        return Point(layout.x + offset.dx, layout.y + offset.dy)
