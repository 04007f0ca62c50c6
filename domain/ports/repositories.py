from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from domain.models import ControlFlowNode, ExcalidrawDocument


class ControlFlowRepository(Protocol):
    def load_by_path(self, path: Path) -> ControlFlowNode: ...

    def load_all_with_paths(self, directory: Path) -> Sequence[tuple[Path, ControlFlowNode]]: ...


class ExcalidrawRepository(Protocol):
    def load_by_path(self, path: Path) -> ExcalidrawDocument: ...

    def save(self, document: ExcalidrawDocument, path: Path) -> None: ...
