from __future__ import annotations

import logging
from dataclasses import replace

from domain.models import Point, ViewTransform
from domain.ports.surface import DrawingSurface
from domain.ports.view_state import ViewStateHost

logger = logging.getLogger(__name__)

DEFAULT_SCALE_EXTENT = (0.1, 4.0)


class ViewController:
    """Pan/zoom transform applied once at the surface root.

    Gestures (``pan``, ``zoom_at``) are ignored while a node drag holds the
    controller suspended; ``set_transform`` always applies.
    """

    def __init__(
        self,
        surface: DrawingSurface,
        host: ViewStateHost | None = None,
        scale_extent: tuple[float, float] = DEFAULT_SCALE_EXTENT,
        default: ViewTransform | None = None,
    ) -> None:
        min_scale, max_scale = scale_extent
        if min_scale <= 0 or min_scale > max_scale:
            msg = f"Invalid scale extent: {scale_extent}"
            raise ValueError(msg)
        self.surface = surface
        self.host = host
        self.scale_extent = (min_scale, max_scale)
        initial = (host.load() if host else None) or default or ViewTransform()
        self._transform = self._clamp(initial)
        self._suspended = False
        # A clamped host value is written back so the host matches the view.
        self._apply(save=initial != self._transform)

    @property
    def transform(self) -> ViewTransform:
        return self._transform

    @property
    def suspended(self) -> bool:
        return self._suspended

    def suspend(self) -> None:
        self._suspended = True

    def resume(self) -> None:
        self._suspended = False

    def set_transform(self, transform: ViewTransform) -> ViewTransform:
        clamped = self._clamp(transform)
        if clamped != self._transform:
            self._transform = clamped
            self._apply()
        return self._transform

    def pan(self, dx: float, dy: float) -> bool:
        if self._suspended:
            return False
        self.set_transform(replace(self._transform, x=self._transform.x + dx, y=self._transform.y + dy))
        return True

    def zoom_at(self, factor: float, focus: Point) -> bool:
        """Scale by ``factor`` keeping the screen point ``focus`` fixed."""
        if self._suspended or factor <= 0:
            return False
        current = self._transform
        scale = self._clamp_scale(current.scale * factor)
        ratio = scale / current.scale
        self.set_transform(
            ViewTransform(
                x=focus.x - (focus.x - current.x) * ratio,
                y=focus.y - (focus.y - current.y) * ratio,
                scale=scale,
            )
        )
        return True

    def _clamp_scale(self, scale: float) -> float:
        min_scale, max_scale = self.scale_extent
        return min(max(scale, min_scale), max_scale)

    def _clamp(self, transform: ViewTransform) -> ViewTransform:
        return replace(transform, scale=self._clamp_scale(transform.scale))

    def _apply(self, save: bool = True) -> None:
        transform = self._transform
        self.surface.set_transform(self.surface.root(), transform.x, transform.y, transform.scale)
        if save and self.host is not None:
            self.host.save(transform)
        logger.debug(
            "View transform x=%.2f y=%.2f scale=%.2f", transform.x, transform.y, transform.scale
        )
