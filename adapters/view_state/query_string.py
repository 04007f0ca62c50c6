from __future__ import annotations

import math
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from domain.models import ViewTransform
from domain.ports.view_state import ViewStateHost

DEFAULT_VIEW = ViewTransform(x=10.0, y=10.0, scale=1.0)
VIEW_PARAMS = ("x", "y", "zoom")


def _parse_float(raw: str | None, default: float) -> float:
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if math.isfinite(value) else default


class QueryStringViewStateHost(ViewStateHost):
    """Keeps the view transform in the ``x``, ``y`` and ``zoom`` query parameters of a location.

    Every other query parameter is left untouched, repeated and blank ones included.
    """

    def __init__(self, location: str = "", default: ViewTransform = DEFAULT_VIEW) -> None:
        self.location = location
        self.default = default

    def load(self) -> ViewTransform:
        pairs = parse_qsl(urlsplit(self.location).query, keep_blank_values=True)
        # First occurrence wins when a view parameter is repeated.
        params: dict[str, str] = {}
        for key, value in pairs:
            if key in VIEW_PARAMS:
                params.setdefault(key, value)
        return ViewTransform(
            x=_parse_float(params.get("x"), self.default.x),
            y=_parse_float(params.get("y"), self.default.y),
            scale=_parse_float(params.get("zoom"), self.default.scale),
        )

    def save(self, transform: ViewTransform) -> None:
        parts = urlsplit(self.location)
        pairs = [
            (key, value)
            for key, value in parse_qsl(parts.query, keep_blank_values=True)
            if key not in VIEW_PARAMS
        ]
        pairs += [
            ("x", f"{transform.x:.2f}"),
            ("y", f"{transform.y:.2f}"),
            ("zoom", f"{transform.scale:.2f}"),
        ]
        self.location = urlunsplit(parts._replace(query=urlencode(pairs)))
