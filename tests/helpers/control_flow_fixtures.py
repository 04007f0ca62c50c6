from __future__ import annotations

from typing import Any

from domain.models import ControlFlowNode, parse_control_flow


def command(label: str) -> dict[str, Any]:
    return {"type": "command", "label": label}


def sequence(*children: dict[str, Any]) -> dict[str, Any]:
    return {"type": "sequence", "children": list(children)}


def block(label: str, *children: dict[str, Any]) -> dict[str, Any]:
    return {"type": "block", "label": label, "children": list(children)}


def if_node(
    condition: str,
    then_block: dict[str, Any] | None,
    else_block: dict[str, Any] | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"type": "if", "condition": condition, "then_block": then_block}
    if else_block is not None:
        payload["else_block"] = else_block
    return payload


def loop(condition: str, body: dict[str, Any] | None) -> dict[str, Any]:
    return {"type": "loop", "condition": condition, "body": body}


def counter_block_payload(step: str = "i = i + 1") -> dict[str, Any]:
    return block(
        "main",
        command("i = 0"),
        loop("i < 3", command(step)),
    )


def counter_block(step: str = "i = i + 1") -> ControlFlowNode:
    return parse_control_flow(counter_block_payload(step))


def branching_payload() -> dict[str, Any]:
    return block(
        "main",
        command("read x"),
        if_node("x > 0", command("a"), command("b")),
        block("helper", command("return")),
    )
