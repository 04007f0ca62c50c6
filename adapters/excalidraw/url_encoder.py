from __future__ import annotations

import json
from typing import Any, cast

from lzstring import LZString  # type: ignore[import-untyped]

URL_MARKER = "#json="


def encode_scene_payload(scene: dict[str, Any]) -> str:
    payload = json.dumps(scene, ensure_ascii=True, separators=(",", ":"))
    encoded = LZString().compressToEncodedURIComponent(payload)
    return cast(str, encoded)


def decode_scene_payload(encoded: str) -> dict[str, Any]:
    payload = LZString().decompressFromEncodedURIComponent(encoded)
    if not payload:
        msg = "Scene payload could not be decompressed"
        raise ValueError(msg)
    data = json.loads(payload)
    if not isinstance(data, dict):
        msg = "Scene payload is not a JSON object"
        raise ValueError(msg)
    return data


def build_excalidraw_url(base_url: str, scene: dict[str, Any]) -> str:
    clean_base = base_url.split("#", 1)[0]
    encoded = encode_scene_payload(scene)
    return f"{clean_base}{URL_MARKER}{encoded}"


def scene_from_url(url: str) -> dict[str, Any]:
    _, marker, encoded = url.partition(URL_MARKER)
    if not marker:
        msg = f"URL has no {URL_MARKER} fragment"
        raise ValueError(msg)
    return decode_scene_payload(encoded)
