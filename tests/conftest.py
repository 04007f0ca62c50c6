from __future__ import annotations

import os
from collections.abc import Generator

import pytest

from adapters.layout.pad import PadLayoutEngine
from adapters.surface.memory import InMemorySurface
from adapters.text_metrics.monospace import MonospaceTextMeasurer
from app.config import AppSettings
from domain.services.scene_reconciler import SceneReconciler
from domain.services.transitions import TransitionScheduler
from domain.services.view_controller import ViewController
from tests.helpers.clock import ManualClock


def _clear_pad_env() -> None:
    for key in list(os.environ):
        if key.startswith("PAD_"):
            os.environ.pop(key, None)


_clear_pad_env()


@pytest.fixture(autouse=True)
def clear_pad_env() -> Generator[None, None, None]:
    _clear_pad_env()
    yield
    _clear_pad_env()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def measurer() -> MonospaceTextMeasurer:
    return MonospaceTextMeasurer()


@pytest.fixture
def engine(measurer: MonospaceTextMeasurer) -> PadLayoutEngine:
    return PadLayoutEngine(measurer=measurer)


@pytest.fixture
def surface() -> InMemorySurface:
    return InMemorySurface()


@pytest.fixture
def scheduler(surface: InMemorySurface, clock: ManualClock) -> TransitionScheduler:
    return TransitionScheduler(surface, duration=0.2, clock=clock)


@pytest.fixture
def view(surface: InMemorySurface) -> ViewController:
    return ViewController(surface)


@pytest.fixture
def reconciler(
    surface: InMemorySurface, view: ViewController, scheduler: TransitionScheduler
) -> SceneReconciler:
    return SceneReconciler(surface, view=view, scheduler=scheduler)


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings()
