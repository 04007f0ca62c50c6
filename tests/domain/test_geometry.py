from __future__ import annotations

from domain.geometry import (
    CAPSULE_MIN_WIDTH,
    CapsuleGeometry,
    ContainerFrameGeometry,
    LoopConditionGeometry,
    WedgeGeometry,
    capsule_width,
)
from domain.models import Point, Rect


def test_capsule_width_has_floor_and_grows_with_label() -> None:
    assert capsule_width("") == CAPSULE_MIN_WIDTH
    assert capsule_width("START") == 85
    assert capsule_width("A much longer label") > capsule_width("START")


def test_capsule_anchors() -> None:
    capsule = CapsuleGeometry.start(10, 20)

    assert capsule.corner_radius == 15
    assert capsule.top_center() == Point(52.5, 20)
    assert capsule.bottom_center() == Point(52.5, 50)
    assert capsule.center() == Point(52.5, 35)
    assert CapsuleGeometry.end(0, 0).width == 60


def test_container_frame_wraps_content() -> None:
    frame = ContainerFrameGeometry.around(200, 100)

    assert (frame.width, frame.height) == (240, 170)
    assert frame.header_rect() == Rect(0, 0, 240, 30)
    assert frame.body_rect() == Rect(0, 30, 240, 140)
    assert frame.content_offset() == Point(20, 50)
    assert frame.title_position() == Point(10, 15)


def test_wedge_with_else_spans_branch_centres() -> None:
    wedge = WedgeGeometry(
        then_box=Rect(102, 0, 100, 40),
        else_box=Rect(102, 80, 100, 40),
        height=140,
    )

    assert wedge.points() == (
        Point(0, 20),
        Point(82, 20),
        Point(67, 60),
        Point(82, 100),
        Point(0, 100),
    )
    assert wedge.then_connector() == (Point(82, 20), Point(102, 20))
    assert wedge.else_connector() == (Point(82, 100), Point(102, 100))
    assert wedge.label_position() == Point(33.5, 60)


def test_wedge_without_else_keeps_minimum_height() -> None:
    wedge = WedgeGeometry(then_box=Rect(100, 0, 100, 40), else_box=None, height=100)

    assert wedge.bottom_y - wedge.top_y >= 60
    assert wedge.else_connector() is None


def test_loop_condition_geometry() -> None:
    box = LoopConditionGeometry(width=100, body_x=120, body_height=90)

    assert box.rect == Rect(0, 0, 100, 40)
    assert box.stripe() == (Point(10, 0), Point(10, 40))
    assert box.connector() == (Point(100, 20), Point(120, 20))
    assert box.rail() == (Point(120, 0), Point(120, 90))
