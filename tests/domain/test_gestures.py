from __future__ import annotations

from adapters.layout.pad import PadLayoutEngine
from domain.models import Offset, ViewTransform, parse_control_flow
from domain.services.gestures import GestureRouter
from domain.services.scene_reconciler import SceneReconciler
from tests.helpers.control_flow_fixtures import branching_payload


def _router(reconciler: SceneReconciler, engine: PadLayoutEngine) -> GestureRouter:
    reconciler.render(engine.compute_layout(parse_control_flow(branching_payload())))
    reconciler.scheduler.flush()
    return GestureRouter(reconciler)


def test_pointer_on_header_drags_the_block(
    reconciler: SceneReconciler, engine: PadLayoutEngine
) -> None:
    router = _router(reconciler, engine)

    assert router.pointer_down(80, 340) == "drag"
    assert router.pointer_move(10, -5)
    router.pointer_up()

    assert router.gesture is None
    assert reconciler.offset_of("block/0:sequence/2:block") == Offset(10, -5)
    assert reconciler.view.transform == ViewTransform(10, 10, 1)
    assert not reconciler.view.suspended


def test_pointer_elsewhere_pans_the_view(
    reconciler: SceneReconciler, engine: PadLayoutEngine
) -> None:
    router = _router(reconciler, engine)

    assert router.pointer_down(500, 500) == "pan"
    router.pointer_move(5, 5)
    router.pointer_up()

    assert reconciler.view.transform == ViewTransform(15, 15, 1)
    assert reconciler.offsets == {}


def test_wheel_zooms_around_pointer(
    reconciler: SceneReconciler, engine: PadLayoutEngine
) -> None:
    router = _router(reconciler, engine)

    assert router.wheel(-500, 0, 0)

    assert reconciler.view.transform == ViewTransform(20, 20, 2)


def test_wheel_is_ignored_while_dragging(
    reconciler: SceneReconciler, engine: PadLayoutEngine
) -> None:
    router = _router(reconciler, engine)
    router.pointer_down(15, 15)

    assert not router.wheel(-500, 0, 0)
    assert reconciler.active_drag == "block"
    assert reconciler.view.transform.scale == 1


def test_move_without_pointer_down_does_nothing(
    reconciler: SceneReconciler, engine: PadLayoutEngine
) -> None:
    router = _router(reconciler, engine)

    assert not router.pointer_move(5, 5)
    assert reconciler.view.transform == ViewTransform(10, 10, 1)
