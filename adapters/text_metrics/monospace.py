from __future__ import annotations

import unicodedata
from dataclasses import dataclass

from domain.models import Font
from domain.ports.text_metrics import TextMeasurer

# Advance width of one monospace cell relative to the font size.
DEFAULT_ADVANCE_RATIO = 0.6


@dataclass(frozen=True)
class MonospaceTextMeasurer(TextMeasurer):
    advance_ratio: float = DEFAULT_ADVANCE_RATIO

    def measure(self, text: str, font: Font) -> float:
        if not text:
            return 0.0
        cells = 0
        for char in text:
            if unicodedata.combining(char):
                continue
            cells += 2 if unicodedata.east_asian_width(char) in {"W", "F"} else 1
        return cells * font.size * self.advance_ratio
