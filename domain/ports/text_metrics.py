from __future__ import annotations

from typing import Protocol

from domain.models import Font


class TextMeasurer(Protocol):
    def measure(self, text: str, font: Font) -> float:
        ...
