from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import orjson

from domain.models import ControlFlowNode, parse_control_flow
from domain.ports.repositories import ControlFlowRepository


class FileSystemControlFlowRepository(ControlFlowRepository):
    """Reads control-flow trees written by the language parsers as ``*.json`` files."""

    def load_by_path(self, path: Path) -> ControlFlowNode:
        if not path.exists():
            msg = f"Control-flow file not found: {path}"
            raise FileNotFoundError(msg)
        return parse_control_flow(orjson.loads(path.read_bytes()))

    def load_all_with_paths(self, directory: Path) -> list[tuple[Path, ControlFlowNode]]:
        return [(path, self.load_by_path(path)) for path in sorted(self._iter_paths(directory))]

    def _iter_paths(self, directory: Path) -> Iterable[Path]:
        yield from directory.glob("*.json")
