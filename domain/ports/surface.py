from __future__ import annotations

from collections.abc import Hashable, Sequence
from typing import Protocol

from domain.shapes import Shape

GroupHandle = Hashable


class DrawingSurface(Protocol):
    """Retained-mode vector surface the reconciler patches."""

    def root(self) -> GroupHandle: ...

    def create_group(self, parent: GroupHandle, key: str) -> GroupHandle: ...

    def set_transform(
        self, group: GroupHandle, x: float, y: float, scale: float = 1.0
    ) -> None: ...

    def set_opacity(self, group: GroupHandle, opacity: float) -> None: ...

    def set_shapes(self, group: GroupHandle, shapes: Sequence[Shape]) -> None: ...

    def remove(self, group: GroupHandle) -> None: ...
