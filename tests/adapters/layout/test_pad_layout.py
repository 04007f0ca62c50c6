from __future__ import annotations

import orjson
import pytest
from pydantic import ValidationError

from adapters.layout.pad import PadLayoutEngine, child_id, find_identity_collisions
from domain.geometry import GAP_X, MARGIN_Y, MIN_HEIGHT, MIN_WIDTH, CONTAINER_PADDING, capsule_width
from domain.models import GeometryNode, parse_control_flow
from tests.helpers.control_flow_fixtures import (
    block,
    branching_payload,
    command,
    counter_block,
    counter_block_payload,
    if_node,
    loop,
    sequence,
)


def _ids(root: GeometryNode) -> list[str]:
    return [node.id for node in root.walk()]


def test_every_laid_out_node_respects_minimum_size(engine: PadLayoutEngine) -> None:
    root = engine.compute_layout(parse_control_flow(branching_payload()))

    for node in root.walk():
        assert node.width >= MIN_WIDTH
        if node.kind != "sequence":
            assert node.height >= MIN_HEIGHT


def test_empty_sequence_has_no_height(engine: PadLayoutEngine) -> None:
    root = engine.compute_layout(parse_control_flow(sequence()))

    assert root.width == MIN_WIDTH
    assert root.height == 0
    assert root.children == ()


def test_sequence_stacks_children_with_margin(engine: PadLayoutEngine) -> None:
    wide = "x" * 20
    root = engine.compute_layout(
        parse_control_flow(sequence(command("a"), command(wide), command("c")))
    )

    heights = [child.height for child in root.children]
    assert root.height == sum(heights) + MARGIN_Y * (len(heights) - 1)
    assert root.width == max(child.width for child in root.children)
    assert [child.y for child in root.children] == [0.0, 60.0, 120.0]
    assert all(child.x == 0.0 for child in root.children)


def test_command_width_follows_measured_label(engine: PadLayoutEngine) -> None:
    short = engine.compute_layout(parse_control_flow(command("i = 0")))
    long = engine.compute_layout(parse_control_flow(command("x" * 20)))

    assert (short.width, short.height) == (MIN_WIDTH, MIN_HEIGHT)
    assert long.width == pytest.approx(20 * 14 * 0.6 + 20)


def test_if_without_else_height(engine: PadLayoutEngine) -> None:
    single = engine.compute_layout(parse_control_flow(if_node("ok", command("a"))))
    tall_then = sequence(command("a"), command("b"), command("c"))
    tall = engine.compute_layout(parse_control_flow(if_node("ok", tall_then)))

    assert single.height == max(40, 40 / 2 + 60) + 20
    assert tall.height == max(160, 160 / 2 + 60) + 20
    assert len(single.children) == 1


def test_if_with_else_scenario(engine: PadLayoutEngine) -> None:
    root = engine.compute_layout(
        parse_control_flow(if_node("x > 0", command("a"), command("b")))
    )
    then_box, else_box = root.children

    assert then_box.y == 0
    assert else_box.y == 80
    assert else_box.y + else_box.height / 2 == 100
    assert root.height == 80 + 40 + 20
    assert then_box.x == else_box.x == pytest.approx(max(5 * 8.4, 40) + 60)


def test_if_with_tall_then_keeps_branch_gap_and_wedge_height(engine: PadLayoutEngine) -> None:
    tall_then = sequence(command("a"), command("b"), command("c"))
    root = engine.compute_layout(parse_control_flow(if_node("ok", tall_then, command("z"))))
    then_box, else_box = root.children

    assert else_box.y - (then_box.y + then_box.height) >= 40
    top_vertex = then_box.height / 2
    bottom_vertex = else_box.y + else_box.height / 2
    assert bottom_vertex - top_vertex >= 60


def test_counter_block_scenario(engine: PadLayoutEngine) -> None:
    root = engine.compute_layout(counter_block())

    assert root.id == "block"
    assert root.kind == "block"
    assert root.label == "main"
    assert root.width >= capsule_width("START") + 2 * CONTAINER_PADDING

    seq = root.find("block/0:sequence")
    loop_node = root.find("block/0:sequence/1:loop")
    body = root.find("block/0:sequence/1:loop/0:command")
    assert seq is not None and loop_node is not None and body is not None

    box_width = max(MIN_WIDTH, 10 + 5 * 8.4 + 40)
    assert body.x == pytest.approx(box_width + GAP_X)
    assert loop_node.height == MIN_HEIGHT
    assert loop_node.width == pytest.approx(box_width + GAP_X + body.width)
    assert seq.height == 40 + MARGIN_Y + 40
    assert seq.x == pytest.approx(CONTAINER_PADDING + capsule_width("START") / 2)
    assert seq.y == 100


def test_block_grows_to_fit_long_title(engine: PadLayoutEngine) -> None:
    title = "a_really_long_function_name_that_dominates_the_body"
    root = engine.compute_layout(parse_control_flow(block(title, command("x"))))

    assert root.width >= len(title) * 8.4 + 20


def test_layout_is_deterministic(engine: PadLayoutEngine) -> None:
    tree = parse_control_flow(branching_payload())

    first = orjson.dumps(engine.compute_layout(tree).to_dict())
    second = orjson.dumps(engine.compute_layout(tree).to_dict())
    fresh = orjson.dumps(PadLayoutEngine().compute_layout(tree).to_dict())

    assert first == second == fresh


def test_label_change_keeps_every_identity(engine: PadLayoutEngine) -> None:
    before = engine.compute_layout(counter_block("i = i + 1"))
    after = engine.compute_layout(counter_block("i += 1"))

    assert _ids(before) == _ids(after)
    changed = [
        node.id
        for node, other in zip(before.walk(), after.walk())
        if node.label != other.label
    ]
    assert changed == ["block/0:sequence/1:loop/0:command"]


def test_identical_subtrees_get_distinct_ids(engine: PadLayoutEngine) -> None:
    root = engine.compute_layout(
        parse_control_flow(sequence(block("f", command("x")), block("f", command("x"))))
    )

    assert find_identity_collisions(root) == []
    assert root.children[0].id == "sequence/0:block"
    assert root.children[1].id == "sequence/1:block"


def test_find_identity_collisions_reports_duplicates() -> None:
    leaf = GeometryNode(id="dup", kind="command", x=0, y=0, width=100, height=40)
    root = GeometryNode(
        id="root", kind="sequence", x=0, y=0, width=100, height=100, children=(leaf, leaf)
    )

    assert find_identity_collisions(root) == ["dup"]


def test_branch_ids_use_fixed_slots(engine: PadLayoutEngine) -> None:
    root = engine.compute_layout(
        parse_control_flow(if_node("c", command("a"), command("b")))
    )

    assert [child.id for child in root.children] == [
        child_id("if", 0, "command"),
        child_id("if", 1, "command"),
    ]


@pytest.mark.parametrize(
    ("payload", "kind_path"),
    [
        (if_node("c", None), "sequence/0:if"),
        (loop("c", None), "sequence/0:loop"),
    ],
)
def test_malformed_nodes_become_placeholders(
    engine: PadLayoutEngine, payload: dict[str, object], kind_path: str
) -> None:
    root = engine.compute_layout(parse_control_flow(sequence(payload, command("after"))))
    placeholder, sibling = root.children

    assert placeholder.id == kind_path
    assert placeholder.kind == "error"
    assert (placeholder.width, placeholder.height) == (MIN_WIDTH, MIN_HEIGHT)
    assert placeholder.message
    assert sibling.y == MIN_HEIGHT + MARGIN_Y


def test_error_node_keeps_parser_message(engine: PadLayoutEngine) -> None:
    root = engine.compute_layout(
        parse_control_flow(block("f", {"type": "error", "message": "unexpected token"}))
    )
    error = root.find("block/0:sequence/0:error")

    assert error is not None
    assert error.message == "unexpected token"
    assert error.height == MIN_HEIGHT


def test_unknown_node_type_is_rejected() -> None:
    with pytest.raises(ValidationError):
        parse_control_flow({"type": "switch", "cases": []})


def test_parse_accepts_json_text() -> None:
    tree = parse_control_flow(orjson.dumps(counter_block_payload()))

    assert tree.type == "block"
    assert tree.label == "main"
