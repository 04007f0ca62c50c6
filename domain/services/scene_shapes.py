from __future__ import annotations

from domain.geometry import (
    CONTAINER_PADDING,
    END_CAPSULE_WIDTH,
    END_LABEL,
    GAP_X,
    HEADER_HEIGHT,
    START_LABEL,
    CapsuleGeometry,
    ContainerFrameGeometry,
    LoopConditionGeometry,
    WedgeGeometry,
)
from domain.models import GeometryNode, Point
from domain.shapes import (
    CONTAINER_FILL,
    CONTAINER_STROKE,
    ERROR_FILL,
    ERROR_STROKE,
    HEADER_FILL,
    CapsuleShape,
    LineShape,
    PolygonShape,
    RectShape,
    Shape,
    TextShape,
)

FONT_SIZE = 14.0
BRANCH_FONT_SIZE = 12.0
COMMAND_TEXT_INSET = 10.0
UNKNOWN_BLOCK_LABEL = "Unknown Function"


def node_shapes(node: GeometryNode) -> tuple[Shape, ...]:
    """Shapes drawn for ``node`` in its own coordinate space (children excluded)."""
    if node.kind == "block":
        return _block_shapes(node)
    if node.kind == "command":
        return _command_shapes(node)
    if node.kind == "if":
        return _if_shapes(node)
    if node.kind == "loop":
        return _loop_shapes(node)
    if node.kind == "error":
        return _error_shapes(node)
    return ()


def _block_shapes(node: GeometryNode) -> tuple[Shape, ...]:
    frame = ContainerFrameGeometry(0.0, 0.0, node.width, node.height)
    header = frame.header_rect()
    title = frame.title_position()
    content = frame.content_offset()

    start = CapsuleGeometry.start(content.x, content.y)
    end = CapsuleGeometry.end(
        start.bottom_center().x - END_CAPSULE_WIDTH / 2,
        node.height - CONTAINER_PADDING - start.height,
    )
    return (
        RectShape(
            "container-bg",
            0.0,
            0.0,
            frame.width,
            frame.height,
            fill=CONTAINER_FILL,
            stroke=CONTAINER_STROKE,
            corner_radius=5.0,
        ),
        RectShape(
            "header-bg",
            header.x,
            header.y,
            header.width,
            HEADER_HEIGHT,
            fill=HEADER_FILL,
            stroke=CONTAINER_STROKE,
            corner_radius=5.0,
        ),
        TextShape(
            "header-text",
            node.label or UNKNOWN_BLOCK_LABEL,
            title.x,
            title.y,
            font_size=FONT_SIZE,
            font_weight="bold",
        ),
        LineShape("vertical-line", start.bottom_center(), end.top_center()),
        CapsuleShape("start-node", start.x, start.y, start.width, start.height),
        _centered_text("start-text", START_LABEL, start.center()),
        CapsuleShape("end-node", end.x, end.y, end.width, end.height),
        _centered_text("end-text", END_LABEL, end.center()),
    )


def _command_shapes(node: GeometryNode) -> tuple[Shape, ...]:
    return (
        RectShape("command-rect", 0.0, 0.0, node.width, node.height),
        TextShape(
            "command-text",
            node.label or "",
            COMMAND_TEXT_INSET,
            node.height / 2,
            font_size=FONT_SIZE,
        ),
    )


def _if_shapes(node: GeometryNode) -> tuple[Shape, ...]:
    then_box = node.children[0].rect
    else_box = node.children[1].rect if len(node.children) > 1 else None
    wedge = WedgeGeometry(then_box=then_box, else_box=else_box, height=node.height)
    label = wedge.label_position()
    then_start, then_end = wedge.then_connector()

    shapes: list[Shape] = [
        PolygonShape("if-wedge", wedge.points()),
        TextShape(
            "if-condition",
            node.condition or "?",
            label.x,
            label.y,
            anchor="middle",
            font_size=FONT_SIZE,
            font_weight="bold",
        ),
        LineShape("then-connector", then_start, then_end, stroke_width=1.0),
        _branch_label("then-label", "T", then_start),
    ]
    else_connector = wedge.else_connector()
    if else_connector is not None:
        else_start, else_end = else_connector
        shapes.append(LineShape("else-connector", else_start, else_end, stroke_width=1.0))
        shapes.append(_branch_label("else-label", "F", else_start))
    return tuple(shapes)


def _loop_shapes(node: GeometryNode) -> tuple[Shape, ...]:
    body = node.children[0]
    box = LoopConditionGeometry(width=body.x - GAP_X, body_x=body.x, body_height=body.height)
    stripe_top, stripe_bottom = box.stripe()
    connector_start, connector_end = box.connector()
    rail_top, rail_bottom = box.rail()
    label = box.label_position()
    return (
        RectShape("loop-condition-box", 0.0, 0.0, box.width, box.height),
        LineShape("loop-stripe", stripe_top, stripe_bottom, stroke_width=1.0),
        TextShape(
            "loop-condition",
            node.condition or "",
            label.x,
            label.y,
            anchor="middle",
            font_size=FONT_SIZE,
        ),
        LineShape("loop-connector", connector_start, connector_end),
        LineShape("loop-rail", rail_top, rail_bottom),
    )


def _error_shapes(node: GeometryNode) -> tuple[Shape, ...]:
    return (
        RectShape(
            "error-rect",
            0.0,
            0.0,
            node.width,
            node.height,
            fill=ERROR_FILL,
            stroke=ERROR_STROKE,
        ),
        TextShape(
            "error-text",
            node.message or "error",
            COMMAND_TEXT_INSET,
            node.height / 2,
            font_size=BRANCH_FONT_SIZE,
            fill=ERROR_STROKE,
        ),
    )


def _centered_text(role: str, text: str, center: Point) -> TextShape:
    return TextShape(role, text, center.x, center.y, anchor="middle", font_size=BRANCH_FONT_SIZE)


def _branch_label(role: str, text: str, anchor: Point) -> TextShape:
    return TextShape(
        role,
        text,
        anchor.x - 5,
        anchor.y - 5,
        anchor="end",
        baseline="auto",
        font_size=BRANCH_FONT_SIZE,
        font_weight="bold",
    )
