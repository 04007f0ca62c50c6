from __future__ import annotations

from typing import Protocol

from domain.models import ViewTransform


class ViewStateHost(Protocol):
    def load(self) -> ViewTransform | None: ...

    def save(self, transform: ViewTransform) -> None: ...
