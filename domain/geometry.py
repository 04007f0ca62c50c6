"""Fixed-shape geometry of PAD diagram parts.

Everything here is pure arithmetic on already-known sizes. The layout engine
uses these helpers to size containers and the scene builder uses them again to
place shapes, so both sides agree on every anchor point.
"""

from __future__ import annotations

from dataclasses import dataclass

from domain.models import Point, Rect

MIN_WIDTH = 100.0
MIN_HEIGHT = 40.0
MARGIN_Y = 20.0
GAP_X = 20.0

HEADER_HEIGHT = 30.0
HEADER_TEXT_INSET = 10.0
CONTAINER_PADDING = 20.0

CAPSULE_HEIGHT = 30.0
CAPSULE_MIN_WIDTH = 60.0
CAPSULE_CHAR_WIDTH = 9.0
CAPSULE_TEXT_PADDING = 40.0
END_CAPSULE_WIDTH = 60.0
START_LABEL = "START"
END_LABEL = "END"

WEDGE_GAP = 20.0
WEDGE_NOTCH = 15.0
WEDGE_MIN_HEIGHT = 60.0
WEDGE_BOTTOM_INSET = 20.0

LOOP_BOX_HEIGHT = 40.0
LOOP_STRIPE_X = 10.0


def capsule_width(label: str) -> float:
    return max(CAPSULE_MIN_WIDTH, len(label) * CAPSULE_CHAR_WIDTH + CAPSULE_TEXT_PADDING)


@dataclass(frozen=True)
class CapsuleGeometry:
    x: float
    y: float
    width: float
    height: float = CAPSULE_HEIGHT

    @classmethod
    def start(cls, x: float, y: float, label: str = START_LABEL) -> CapsuleGeometry:
        return cls(x, y, capsule_width(label))

    @classmethod
    def end(cls, x: float, y: float) -> CapsuleGeometry:
        return cls(x, y, END_CAPSULE_WIDTH)

    @property
    def corner_radius(self) -> float:
        return self.height / 2

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    def top_center(self) -> Point:
        return Point(self.x + self.width / 2, self.y)

    def bottom_center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height)

    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)


@dataclass(frozen=True)
class HeaderBarGeometry:
    x: float
    y: float
    width: float
    height: float = HEADER_HEIGHT

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    def text_position(self) -> Point:
        # Left aligned, vertically centred.
        return Point(self.x + HEADER_TEXT_INSET, self.y + self.height / 2)


@dataclass(frozen=True)
class ContainerFrameGeometry:
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def around(cls, content_width: float, content_height: float) -> ContainerFrameGeometry:
        return cls(
            0.0,
            0.0,
            content_width + CONTAINER_PADDING * 2,
            content_height + HEADER_HEIGHT + CONTAINER_PADDING * 2,
        )

    @property
    def header(self) -> HeaderBarGeometry:
        return HeaderBarGeometry(self.x, self.y, self.width)

    def header_rect(self) -> Rect:
        return self.header.rect

    def body_rect(self) -> Rect:
        return Rect(self.x, self.y + HEADER_HEIGHT, self.width, self.height - HEADER_HEIGHT)

    def title_position(self) -> Point:
        return self.header.text_position()

    def content_offset(self) -> Point:
        return Point(self.x + CONTAINER_PADDING, self.y + HEADER_HEIGHT + CONTAINER_PADDING)


@dataclass(frozen=True)
class WedgeGeometry:
    """The condition polygon of an ``if`` node, in the node's own coordinates.

    ``then_box``/``else_box`` are the laid-out branch boxes relative to the
    conditional; ``height`` is the conditional's total height.
    """

    then_box: Rect
    else_box: Rect | None
    height: float
    gap: float = WEDGE_GAP
    notch_depth: float = WEDGE_NOTCH
    min_height: float = WEDGE_MIN_HEIGHT

    @property
    def top_y(self) -> float:
        return self.then_box.height / 2

    @property
    def bottom_y(self) -> float:
        if self.else_box is not None:
            return self.else_box.y + self.else_box.height / 2
        return max(self.top_y + self.min_height, self.height - WEDGE_BOTTOM_INSET)

    @property
    def edge_x(self) -> float:
        return self.then_box.x - self.gap

    def top_left(self) -> Point:
        return Point(0.0, self.top_y)

    def top_right(self) -> Point:
        return Point(self.edge_x, self.top_y)

    def notch(self) -> Point:
        return Point(self.edge_x - self.notch_depth, (self.top_y + self.bottom_y) / 2)

    def bottom_right(self) -> Point:
        return Point(self.edge_x, self.bottom_y)

    def bottom_left(self) -> Point:
        return Point(0.0, self.bottom_y)

    def points(self) -> tuple[Point, ...]:
        return (
            self.top_left(),
            self.top_right(),
            self.notch(),
            self.bottom_right(),
            self.bottom_left(),
        )

    def label_position(self) -> Point:
        notch = self.notch()
        return Point(notch.x / 2, notch.y)

    def then_connector(self) -> tuple[Point, Point]:
        start = self.top_right()
        return start, Point(self.then_box.x, start.y)

    def else_connector(self) -> tuple[Point, Point] | None:
        if self.else_box is None:
            return None
        start = self.bottom_right()
        return start, Point(self.else_box.x, start.y)


@dataclass(frozen=True)
class LoopConditionGeometry:
    width: float
    body_x: float
    body_height: float
    height: float = LOOP_BOX_HEIGHT

    @property
    def rect(self) -> Rect:
        return Rect(0.0, 0.0, self.width, self.height)

    def stripe(self) -> tuple[Point, Point]:
        return Point(LOOP_STRIPE_X, 0.0), Point(LOOP_STRIPE_X, self.height)

    def label_position(self) -> Point:
        return Point(self.width / 2, self.height / 2)

    def connector(self) -> tuple[Point, Point]:
        mid = self.height / 2
        return Point(self.width, mid), Point(self.body_x, mid)

    def rail(self) -> tuple[Point, Point]:
        return Point(self.body_x, 0.0), Point(self.body_x, self.body_height)
