from __future__ import annotations

from pathlib import Path

from adapters.layout.pad import PadLayoutEngine
from adapters.surface.memory import InMemorySurface
from adapters.svg.writer import SvgSceneWriter
from domain.models import ViewTransform, parse_control_flow
from domain.services.scene_reconciler import SceneReconciler
from tests.helpers.control_flow_fixtures import block, command, counter_block, if_node


def _render(reconciler: SceneReconciler, engine: PadLayoutEngine, tree: object) -> None:
    reconciler.render(engine.compute_layout(tree))
    reconciler.scheduler.flush()


def test_svg_contains_every_node_group_and_label(
    reconciler: SceneReconciler, engine: PadLayoutEngine, surface: InMemorySurface
) -> None:
    _render(reconciler, engine, counter_block())

    svg = SvgSceneWriter().to_string(surface, ViewTransform(10, 10, 1))

    assert "<svg" in svg
    assert 'data-key="block"' in svg
    assert 'data-key="block/0:sequence/1:loop/0:command"' in svg
    assert "translate(10, 10) scale(1)" in svg
    for label in ("START", "END", "main", "i = 0", "i &lt; 3"):
        assert label in svg


def test_svg_draws_wedge_as_closed_path(
    reconciler: SceneReconciler, engine: PadLayoutEngine, surface: InMemorySurface
) -> None:
    _render(reconciler, engine, parse_control_flow(if_node("x > 0", command("a"), command("b"))))

    svg = SvgSceneWriter().to_string(surface)

    assert "if-wedge" in svg
    assert "x &gt; 0" in svg
    assert ">T<" in svg and ">F<" in svg


def test_empty_labels_are_not_drawn(
    reconciler: SceneReconciler, engine: PadLayoutEngine, surface: InMemorySurface
) -> None:
    _render(reconciler, engine, parse_control_flow(block("", command(""))))

    svg = SvgSceneWriter().to_string(surface)

    assert "Unknown Function" in svg
    assert "command-text" not in svg


def test_save_writes_file(
    reconciler: SceneReconciler,
    engine: PadLayoutEngine,
    surface: InMemorySurface,
    tmp_path: Path,
) -> None:
    _render(reconciler, engine, counter_block())
    target = tmp_path / "out" / "counter.svg"

    SvgSceneWriter(background="#fafafa").save(surface, target)

    content = target.read_text(encoding="utf-8")
    assert "#fafafa" in content
    assert "</svg>" in content
