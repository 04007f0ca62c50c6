from __future__ import annotations

from pathlib import Path

from adapters.filesystem.json_utils import load_json, write_json_atomic
from domain.models import ExcalidrawDocument
from domain.ports.repositories import ExcalidrawRepository


class FileSystemExcalidrawRepository(ExcalidrawRepository):
    def load_by_path(self, path: Path) -> ExcalidrawDocument:
        if not path.exists():
            msg = f"Excalidraw file not found: {path}"
            raise FileNotFoundError(msg)
        data = load_json(path)
        return ExcalidrawDocument(
            elements=data.get("elements", []),
            app_state=data.get("appState", {}),
            files=data.get("files", {}),
        )

    def save(self, document: ExcalidrawDocument, path: Path) -> None:
        write_json_atomic(path, document.to_dict())
