from __future__ import annotations

import json
from pathlib import Path
from urllib.parse import parse_qsl, urlsplit

import pytest

from adapters.view_state.filesystem import FileSystemViewStateHost
from adapters.view_state.memory import InMemoryViewStateHost
from adapters.view_state.query_string import QueryStringViewStateHost
from domain.models import ViewTransform


def test_query_string_defaults_when_parameters_missing() -> None:
    assert QueryStringViewStateHost("http://viewer.local/").load() == ViewTransform(10, 10, 1)


@pytest.mark.parametrize("query", ["x=abc&y=&zoom=2", "x=nan&y=inf&zoom=2"])
def test_query_string_ignores_unusable_values(query: str) -> None:
    host = QueryStringViewStateHost(f"/pad?{query}")

    assert host.load() == ViewTransform(10, 10, 2)


def test_query_string_save_rounds_to_two_decimals() -> None:
    host = QueryStringViewStateHost("/pad?tree=main")

    host.save(ViewTransform(1.005, -3.14159, 0.5))

    assert host.location == "/pad?tree=main&x=1.00&y=-3.14&zoom=0.50"
    assert host.load() == ViewTransform(1.0, -3.14, 0.5)


def test_query_string_save_keeps_unrelated_parameters() -> None:
    host = QueryStringViewStateHost("http://viewer.local/view?tab=a&tab=b&debug=&x=1&y=2&zoom=1")

    host.save(ViewTransform(6, 2, 1))

    assert parse_qsl(urlsplit(host.location).query, keep_blank_values=True) == [
        ("tab", "a"),
        ("tab", "b"),
        ("debug", ""),
        ("x", "6.00"),
        ("y", "2.00"),
        ("zoom", "1.00"),
    ]
    assert host.load() == ViewTransform(6, 2, 1)


def test_query_string_load_uses_first_repeated_view_parameter() -> None:
    host = QueryStringViewStateHost("/pad?zoom=2&zoom=3&x=&y=4")

    assert host.load() == ViewTransform(10, 4, 2)


def test_file_host_round_trips_through_json(tmp_path: Path) -> None:
    path = tmp_path / "state" / "view.json"
    host = FileSystemViewStateHost(path)

    assert host.load() is None
    host.save(ViewTransform(12, 34, 1.5))

    assert json.loads(path.read_text(encoding="utf-8")) == {"x": 12, "y": 34, "zoom": 1.5}
    assert FileSystemViewStateHost(path).load() == ViewTransform(12, 34, 1.5)
    assert not path.with_suffix(".json.tmp").exists()


def test_file_host_rejects_garbage(tmp_path: Path) -> None:
    path = tmp_path / "view.json"
    path.write_text('{"x": "left"}', encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid view state"):
        FileSystemViewStateHost(path).load()


def test_memory_host_counts_saves() -> None:
    host = InMemoryViewStateHost()

    assert host.load() is None
    host.save(ViewTransform(1, 2, 3))
    host.save(ViewTransform(1, 2, 3))

    assert host.load() == ViewTransform(1, 2, 3)
    assert host.saves == 2
