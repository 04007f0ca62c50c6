from __future__ import annotations

from typing import Protocol

from domain.models import ControlFlowNode, GeometryNode


class LayoutEngine(Protocol):
    def compute_layout(self, root: ControlFlowNode) -> GeometryNode:
        ...
