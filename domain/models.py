from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _ControlFlowBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class SequenceNode(_ControlFlowBase):
    type: Literal["sequence"] = "sequence"
    children: List[ControlFlowNode] = Field(default_factory=list)


class BlockNode(_ControlFlowBase):
    type: Literal["block"] = "block"
    label: str = ""
    children: List[ControlFlowNode] = Field(default_factory=list)


class IfNode(_ControlFlowBase):
    type: Literal["if"] = "if"
    condition: str = ""
    # Optional so a malformed conditional still reaches layout as a placeholder.
    then_block: Optional[ControlFlowNode] = None
    else_block: Optional[ControlFlowNode] = None


class LoopNode(_ControlFlowBase):
    type: Literal["loop"] = "loop"
    condition: str = ""
    body: Optional[ControlFlowNode] = None


class CommandNode(_ControlFlowBase):
    type: Literal["command"] = "command"
    label: str = ""


class ErrorNode(_ControlFlowBase):
    type: Literal["error"] = "error"
    message: str = ""


ControlFlowNode = Annotated[
    Union[SequenceNode, BlockNode, IfNode, LoopNode, CommandNode, ErrorNode],
    Field(discriminator="type"),
]

for _model in (SequenceNode, BlockNode, IfNode, LoopNode):
    _model.model_rebuild()

_CONTROL_FLOW_ADAPTER: TypeAdapter[Any] = TypeAdapter(ControlFlowNode)


def parse_control_flow(payload: Any) -> ControlFlowNode:
    """Validate a parser payload (dict or JSON text/bytes) into a control-flow tree."""
    if isinstance(payload, (str, bytes, bytearray)):
        return _CONTROL_FLOW_ADAPTER.validate_json(payload)
    return _CONTROL_FLOW_ADAPTER.validate_python(payload)


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, point: Point) -> bool:
        return self.x <= point.x <= self.right and self.y <= point.y <= self.bottom


@dataclass(frozen=True)
class Font:
    family: str = "monospace"
    size: float = 14.0
    weight: str = "normal"


@dataclass(frozen=True)
class GeometryNode:
    id: str
    kind: str
    x: float
    y: float
    width: float
    height: float
    children: tuple[GeometryNode, ...] = ()
    label: str | None = None
    condition: str | None = None
    message: str | None = None

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    def walk(self) -> Iterator[GeometryNode]:
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, node_id: str) -> GeometryNode | None:
        for node in self.walk():
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "kind": self.kind,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }
        if self.label is not None:
            payload["label"] = self.label
        if self.condition is not None:
            payload["condition"] = self.condition
        if self.message is not None:
            payload["message"] = self.message
        payload["children"] = [child.to_dict() for child in self.children]
        return payload


@dataclass(frozen=True)
class Offset:
    dx: float = 0.0
    dy: float = 0.0

    def shifted(self, dx: float, dy: float) -> Offset:
        return Offset(self.dx + dx, self.dy + dy)


ZERO_OFFSET = Offset()


@dataclass(frozen=True)
class ViewTransform:
    x: float = 10.0
    y: float = 10.0
    scale: float = 1.0

    def to_scene(self, point: Point) -> Point:
        return Point((point.x - self.x) / self.scale, (point.y - self.y) / self.scale)

    def to_screen(self, point: Point) -> Point:
        return Point(point.x * self.scale + self.x, point.y * self.scale + self.y)


@dataclass(frozen=True)
class ExcalidrawDocument:
    elements: list[dict[str, Any]]
    app_state: dict[str, Any]
    files: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "excalidraw",
            "version": 2,
            "source": "pad-viewer",
            "elements": self.elements,
            "appState": self.app_state,
            "files": self.files,
        }
