from __future__ import annotations

import logging
from dataclasses import dataclass

from adapters.excalidraw.scene_exporter import SceneToExcalidrawExporter
from adapters.layout.pad import PadLayoutEngine
from adapters.surface.memory import InMemorySurface
from adapters.svg.writer import SvgSceneWriter
from adapters.text_metrics.monospace import MonospaceTextMeasurer
from adapters.view_state.filesystem import FileSystemViewStateHost
from app.config import AppSettings
from domain.models import ControlFlowNode, ExcalidrawDocument, GeometryNode
from domain.ports.view_state import ViewStateHost
from domain.services.gestures import GestureRouter
from domain.services.scene_reconciler import ReconcileStats, SceneReconciler
from domain.services.transitions import TransitionScheduler
from domain.services.view_controller import ViewController

logger = logging.getLogger(__name__)


@dataclass
class SceneSession:
    """One diagram viewer: layout engine, retained surface and its controllers.

    Pointer and wheel input goes through ``gestures``, which decides between
    dragging a block and panning or zooming the view.
    """

    engine: PadLayoutEngine
    surface: InMemorySurface
    view: ViewController
    scheduler: TransitionScheduler
    reconciler: SceneReconciler
    gestures: GestureRouter

    def show(self, root: ControlFlowNode, settle: bool = True) -> ReconcileStats:
        geometry = self.engine.compute_layout(root)
        stats = self.reconciler.render(geometry)
        if settle:
            self.scheduler.flush()
        return stats

    def layout(self, root: ControlFlowNode) -> GeometryNode:
        return self.engine.compute_layout(root)

    def to_svg(self, background: str = "#ffffff") -> str:
        return SvgSceneWriter(background=background).to_string(
            self.surface, self.view.transform
        )

    def to_excalidraw(self) -> ExcalidrawDocument:
        return SceneToExcalidrawExporter().export(self.surface, self.view.transform)


def build_layout_engine(settings: AppSettings) -> PadLayoutEngine:
    measurer = MonospaceTextMeasurer(advance_ratio=settings.layout.char_advance)
    return PadLayoutEngine(measurer=measurer, config=settings.layout.to_layout_config())


def build_view_state_host(settings: AppSettings) -> ViewStateHost | None:
    if settings.view.state_path is None:
        return None
    return FileSystemViewStateHost(settings.view.state_path)


def build_scene_session(
    settings: AppSettings,
    host: ViewStateHost | None = None,
) -> SceneSession:
    surface = InMemorySurface()
    view = ViewController(
        surface,
        host=host if host is not None else build_view_state_host(settings),
        scale_extent=settings.view.scale_extent,
        default=settings.view.default_transform(),
    )
    scheduler = TransitionScheduler(surface, duration=settings.scene.transition_seconds)
    reconciler = SceneReconciler(surface, view=view, scheduler=scheduler)
    logger.debug("Scene session ready, view %s", view.transform)
    return SceneSession(
        engine=build_layout_engine(settings),
        surface=surface,
        view=view,
        scheduler=scheduler,
        reconciler=reconciler,
        gestures=GestureRouter(reconciler),
    )
