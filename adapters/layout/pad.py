from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Sequence

from adapters.text_metrics.monospace import MonospaceTextMeasurer
from domain.geometry import (
    CAPSULE_HEIGHT,
    GAP_X,
    HEADER_TEXT_INSET,
    LOOP_STRIPE_X,
    MARGIN_Y,
    MIN_HEIGHT,
    MIN_WIDTH,
    START_LABEL,
    ContainerFrameGeometry,
    capsule_width,
)
from domain.models import (
    BlockNode,
    CommandNode,
    ControlFlowNode,
    ErrorNode,
    Font,
    GeometryNode,
    IfNode,
    LoopNode,
    SequenceNode,
)
from domain.ports.layout import LayoutEngine
from domain.ports.text_metrics import TextMeasurer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutConfig:
    font: Font = field(default_factory=Font)
    header_font: Font = field(default_factory=lambda: Font(weight="bold"))
    command_padding: float = 20.0
    if_min_label_width: float = 40.0
    if_label_padding: float = 60.0
    if_branch_gap: float = 40.0
    if_min_wedge_height: float = 60.0
    if_trailing_padding: float = 50.0
    if_bottom_padding: float = 20.0
    loop_text_padding: float = 40.0


def child_id(parent_id: str, index: int, kind: str) -> str:
    return f"{parent_id}/{index}:{kind}"


def find_identity_collisions(root: GeometryNode) -> list[str]:
    seen: set[str] = set()
    collisions: list[str] = []
    for node in root.walk():
        if node.id in seen:
            collisions.append(node.id)
        seen.add(node.id)
    return collisions


class PadLayoutEngine(LayoutEngine):
    """Turns a control-flow tree into a geometry tree, bottom-up.

    Every node is first laid out at the origin of its own coordinate space;
    the parent then moves it into place with ``dataclasses.replace``. Node ids
    come from the structural path only, so laying out the same tree twice
    gives identical results and an edited label never changes an id.
    """

    def __init__(
        self,
        measurer: TextMeasurer | None = None,
        config: LayoutConfig | None = None,
    ) -> None:
        self.measurer = measurer or MonospaceTextMeasurer()
        self.config = config or LayoutConfig()

    def compute_layout(self, root: ControlFlowNode) -> GeometryNode:
        geometry = self._layout(root, root.type)
        logger.debug(
            "Computed layout %s: %.1fx%.1f", geometry.id, geometry.width, geometry.height
        )
        return geometry

    def _layout(self, node: ControlFlowNode, node_id: str) -> GeometryNode:
        if isinstance(node, SequenceNode):
            return self._layout_sequence(node.children, node_id)
        if isinstance(node, BlockNode):
            return self._layout_block(node, node_id)
        if isinstance(node, CommandNode):
            return self._layout_command(node, node_id)
        if isinstance(node, IfNode):
            if node.then_block is None:
                return self._placeholder(node_id, "if node without then_block")
            return self._layout_if(node, node.then_block, node_id)
        if isinstance(node, LoopNode):
            if node.body is None:
                return self._placeholder(node_id, "loop node without body")
            return self._layout_loop(node, node.body, node_id)
        if isinstance(node, ErrorNode):
            return self._placeholder(node_id, node.message)
        return self._placeholder(node_id, f"unsupported node: {type(node).__name__}")

    def _layout_child(self, node: ControlFlowNode, parent_id: str, index: int) -> GeometryNode:
        return self._layout(node, child_id(parent_id, index, node.type))

    def _layout_sequence(self, nodes: Sequence[ControlFlowNode], node_id: str) -> GeometryNode:
        children: list[GeometryNode] = []
        current_y = 0.0
        max_width = MIN_WIDTH
        for index, node in enumerate(nodes):
            if index:
                current_y += MARGIN_Y
            child = replace(self._layout_child(node, node_id, index), x=0.0, y=current_y)
            children.append(child)
            current_y += child.height
            max_width = max(max_width, child.width)
        return GeometryNode(
            id=node_id,
            kind="sequence",
            x=0.0,
            y=0.0,
            width=max_width,
            height=current_y,
            children=tuple(children),
        )

    def _layout_block(self, node: BlockNode, node_id: str) -> GeometryNode:
        sequence = self._layout_sequence(node.children, child_id(node_id, 0, "sequence"))

        start_width = capsule_width(START_LABEL)
        center_line_x = start_width / 2
        title_width = self._measure(node.label, self.config.header_font) + HEADER_TEXT_INSET * 2
        graph_width = max(sequence.width + center_line_x, start_width, title_width)

        padding_top = CAPSULE_HEIGHT + MARGIN_Y
        padding_bottom = MARGIN_Y
        graph_height = padding_top + sequence.height + padding_bottom + CAPSULE_HEIGHT

        frame = ContainerFrameGeometry.around(graph_width, graph_height)
        content = frame.content_offset()
        sequence = replace(sequence, x=content.x + center_line_x, y=content.y + padding_top)
        return GeometryNode(
            id=node_id,
            kind="block",
            x=0.0,
            y=0.0,
            width=frame.width,
            height=frame.height,
            children=(sequence,),
            label=node.label,
        )

    def _layout_command(self, node: CommandNode, node_id: str) -> GeometryNode:
        text_width = self._measure(node.label, self.config.font) + self.config.command_padding
        return GeometryNode(
            id=node_id,
            kind="command",
            x=0.0,
            y=0.0,
            width=max(MIN_WIDTH, text_width),
            height=MIN_HEIGHT,
            label=node.label,
        )

    def _layout_if(
        self, node: IfNode, then_block: ControlFlowNode, node_id: str
    ) -> GeometryNode:
        cfg = self.config
        then_layout = self._layout_child(then_block, node_id, 0)
        else_layout = (
            self._layout_child(node.else_block, node_id, 1) if node.else_block is not None else None
        )

        label_width = (
            max(self._measure(node.condition, cfg.font), cfg.if_min_label_width)
            + cfg.if_label_padding
        )
        child_x = label_width
        then_layout = replace(then_layout, x=child_x, y=0.0)
        top_vertex_y = then_layout.height / 2

        children = [then_layout]
        if else_layout is not None:
            else_half = else_layout.height / 2
            bottom_vertex_y = max(
                then_layout.height + cfg.if_branch_gap + else_half,
                top_vertex_y + cfg.if_min_wedge_height,
            )
            else_layout = replace(else_layout, x=child_x, y=bottom_vertex_y - else_half)
            children.append(else_layout)
            extent = else_layout.y + else_layout.height
            branch_width = max(then_layout.width, else_layout.width)
        else:
            extent = max(then_layout.height, top_vertex_y + cfg.if_min_wedge_height)
            branch_width = then_layout.width

        return GeometryNode(
            id=node_id,
            kind="if",
            x=0.0,
            y=0.0,
            width=child_x + branch_width + cfg.if_trailing_padding,
            height=extent + cfg.if_bottom_padding,
            children=tuple(children),
            label=node.condition,
            condition=node.condition,
        )

    def _layout_loop(self, node: LoopNode, body_node: ControlFlowNode, node_id: str) -> GeometryNode:
        body = self._layout_child(body_node, node_id, 0)
        condition_width = (
            LOOP_STRIPE_X
            + self._measure(node.condition, self.config.font)
            + self.config.loop_text_padding
        )
        box_width = max(MIN_WIDTH, condition_width)
        body = replace(body, x=box_width + GAP_X, y=0.0)
        return GeometryNode(
            id=node_id,
            kind="loop",
            x=0.0,
            y=0.0,
            width=box_width + GAP_X + body.width,
            height=max(MIN_HEIGHT, body.height),
            children=(body,),
            condition=node.condition,
        )

    def _placeholder(self, node_id: str, message: str) -> GeometryNode:
        return GeometryNode(
            id=node_id,
            kind="error",
            x=0.0,
            y=0.0,
            width=MIN_WIDTH,
            height=MIN_HEIGHT,
            message=message,
        )

    def _measure(self, text: str, font: Font) -> float:
        return self.measurer.measure(text or "", font)
