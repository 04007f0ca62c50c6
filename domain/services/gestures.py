from __future__ import annotations

import logging
from typing import Literal

from domain.models import Point
from domain.services.scene_reconciler import SceneReconciler

logger = logging.getLogger(__name__)

Gesture = Literal["drag", "pan"]

# Matches the usual browser wheel-to-zoom mapping: 2 ** (-deltaY * 0.002).
WHEEL_ZOOM_RATE = 0.002


class GestureRouter:
    """Routes raw pointer events to either a node drag or a view pan.

    A pointer-down on a block header starts a drag, anywhere else starts a
    pan. Only one gesture is active between ``pointer_down`` and
    ``pointer_up``; wheel zoom is ignored while a drag is in progress.
    """

    def __init__(self, reconciler: SceneReconciler) -> None:
        self.reconciler = reconciler
        self._gesture: Gesture | None = None

    @property
    def gesture(self) -> Gesture | None:
        return self._gesture

    def pointer_down(self, x: float, y: float) -> Gesture:
        if self._gesture is not None:
            self.pointer_up()
        node_id = self.reconciler.header_at(Point(x, y))
        if node_id is not None:
            self.reconciler.drag_start(node_id)
            self._gesture = "drag"
        else:
            self._gesture = "pan"
        return self._gesture

    def pointer_move(self, dx: float, dy: float) -> bool:
        if self._gesture == "drag":
            self.reconciler.drag_move(dx, dy)
            return True
        if self._gesture == "pan":
            return self.reconciler.view.pan(dx, dy)
        return False

    def pointer_up(self) -> None:
        if self._gesture == "drag":
            self.reconciler.drag_end()
        self._gesture = None

    def wheel(self, delta_y: float, x: float, y: float) -> bool:
        factor = 2 ** (-delta_y * WHEEL_ZOOM_RATE)
        return self.reconciler.view.zoom_at(factor, Point(x, y))
