from __future__ import annotations

import logging
from typing import Any, Literal

from fastapi import Body, FastAPI, HTTPException, Query, Request
from fastapi.responses import ORJSONResponse, Response
from pydantic import BaseModel, ValidationError

from adapters.excalidraw.url_encoder import build_excalidraw_url
from adapters.view_state.memory import InMemoryViewStateHost
from adapters.view_state.query_string import QueryStringViewStateHost
from app.config import AppSettings, is_absolute_url, load_settings
from app.scene_wiring import build_layout_engine, build_scene_session
from domain.models import ControlFlowNode, parse_control_flow

logger = logging.getLogger(__name__)

RenderFormat = Literal["svg", "excalidraw"]
SVG_MEDIA_TYPE = "image/svg+xml"


class ShareUrlResponse(BaseModel):
    url: str
    length: int


def create_app(settings: AppSettings) -> FastAPI:
    app = FastAPI(title="PAD viewer", default_response_class=ORJSONResponse)
    app.state.settings = settings
    engine = build_layout_engine(settings)

    def parse_tree(payload: Any) -> ControlFlowNode:
        try:
            return parse_control_flow(payload)
        except ValidationError as exc:
            raise HTTPException(
                status_code=422, detail=exc.errors(include_url=False, include_context=False)
            ) from exc

    @app.get("/healthz")
    def healthz() -> ORJSONResponse:
        return ORJSONResponse({"status": "ok"})

    @app.post("/api/layout")
    def api_layout(payload: dict[str, Any] = Body(...)) -> ORJSONResponse:
        geometry = engine.compute_layout(parse_tree(payload))
        return ORJSONResponse(geometry.to_dict())

    @app.post("/api/render")
    def api_render(
        request: Request,
        payload: dict[str, Any] = Body(...),
        format: RenderFormat = Query(default="svg"),
    ) -> Response:
        """Render a tree; the view comes from the ``x``, ``y`` and ``zoom`` query parameters."""
        tree = parse_tree(payload)
        host = QueryStringViewStateHost(
            str(request.url), default=settings.view.default_transform()
        )
        session = build_scene_session(settings, host=host)
        session.show(tree)
        if format == "excalidraw":
            return ORJSONResponse(session.to_excalidraw().to_dict())
        return Response(
            content=session.to_svg(settings.scene.svg_background), media_type=SVG_MEDIA_TYPE
        )

    @app.post("/api/share-url")
    def api_share_url(
        request: Request,
        payload: dict[str, Any] = Body(...),
    ) -> ShareUrlResponse:
        tree = parse_tree(payload)
        session = build_scene_session(
            settings, host=InMemoryViewStateHost(settings.view.default_transform())
        )
        session.show(tree)
        base_url = settings.scene.excalidraw_base_url
        if not is_absolute_url(base_url):
            base_url = str(request.base_url).rstrip("/") + "/" + base_url.lstrip("/")
        url = build_excalidraw_url(base_url, session.to_excalidraw().to_dict())
        logger.debug("Share URL for %s has %d characters", tree.type, len(url))
        return ShareUrlResponse(url=url, length=len(url))

    return app


app = create_app(load_settings())
