from __future__ import annotations

from domain.models import ViewTransform
from domain.ports.view_state import ViewStateHost


class InMemoryViewStateHost(ViewStateHost):
    def __init__(self, initial: ViewTransform | None = None) -> None:
        self.transform = initial
        self.saves = 0

    def load(self) -> ViewTransform | None:
        return self.transform

    def save(self, transform: ViewTransform) -> None:
        self.transform = transform
        self.saves += 1
