from __future__ import annotations

from pathlib import Path

from filelock import FileLock

from adapters.filesystem.json_utils import load_json, write_json_atomic
from domain.models import ViewTransform
from domain.ports.view_state import ViewStateHost


class FileSystemViewStateHost(ViewStateHost):
    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> ViewTransform | None:
        if not self.path.exists():
            return None
        data = load_json(self.path)
        try:
            return ViewTransform(
                x=float(data.get("x", 10.0)),
                y=float(data.get("y", 10.0)),
                scale=float(data.get("zoom", 1.0)),
            )
        except (TypeError, ValueError) as exc:
            msg = f"Invalid view state file: {self.path}"
            raise ValueError(msg) from exc

    def save(self, transform: ViewTransform) -> None:
        lock_path = self.path.with_suffix(f"{self.path.suffix}.lock")
        with FileLock(str(lock_path)):
            write_json_atomic(
                self.path, {"x": transform.x, "y": transform.y, "zoom": transform.scale}
            )
