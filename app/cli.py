from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from adapters.excalidraw.repository import FileSystemExcalidrawRepository
from adapters.excalidraw.url_encoder import build_excalidraw_url
from adapters.filesystem.control_flow_repository import FileSystemControlFlowRepository
from adapters.filesystem.json_utils import dump_json_bytes
from adapters.layout.pad import find_identity_collisions
from app.config import AppSettings, load_settings
from app.scene_wiring import build_layout_engine, build_scene_session
from domain.models import ControlFlowNode

app = typer.Typer(no_args_is_help=True)
console = Console()


class RenderFormat(str, Enum):
    svg = "svg"
    excalidraw = "excalidraw"


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", help="Logging level for diagnostic output."),
) -> None:
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _settings(config: Path | None) -> AppSettings:
    try:
        return load_settings(config)
    except FileNotFoundError as exc:
        console.print(f"[red]{escape(str(exc))}[/]")
        raise typer.Exit(code=1) from exc


def _load_tree(input_path: Path) -> ControlFlowNode:
    try:
        return FileSystemControlFlowRepository().load_by_path(input_path)
    except FileNotFoundError as exc:
        console.print(f"[red]File not found:[/] {escape(str(input_path))}")
        raise typer.Exit(code=1) from exc
    except ValueError as exc:
        console.print(f"[red]Invalid control-flow tree:[/] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def _load_trees(input_path: Path) -> list[tuple[Path, ControlFlowNode]]:
    if not input_path.is_dir():
        return [(input_path, _load_tree(input_path))]
    try:
        trees = FileSystemControlFlowRepository().load_all_with_paths(input_path)
    except ValueError as exc:
        console.print(f"[red]Invalid control-flow tree:[/] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    if not trees:
        console.print(f"[yellow]No *.json files in[/] {escape(str(input_path))}")
    return trees


def _emit(payload: bytes, output: Path | None) -> None:
    if output is None:
        typer.echo(payload.decode("utf-8"))
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(payload)
    console.print(f"[green]Wrote[/] {output}")


@app.command("layout")
def layout(
    input_path: Path = typer.Argument(..., help="Control-flow JSON file."),
    output: Path | None = typer.Option(None, help="Write geometry JSON here instead of stdout."),
    config: Path | None = typer.Option(None, help="YAML settings file."),
) -> None:
    settings = _settings(config)
    geometry = build_layout_engine(settings).compute_layout(_load_tree(input_path))
    _emit(dump_json_bytes(geometry.to_dict()), output)


@app.command("render")
def render(
    input_path: Path = typer.Argument(..., help="Control-flow JSON file."),
    output: Path = typer.Option(..., help="Target .svg or .excalidraw file."),
    format: RenderFormat = typer.Option(RenderFormat.svg, help="Output format."),
    config: Path | None = typer.Option(None, help="YAML settings file."),
) -> None:
    settings = _settings(config)
    session = build_scene_session(settings)
    session.show(_load_tree(input_path))
    if format is RenderFormat.excalidraw:
        FileSystemExcalidrawRepository().save(session.to_excalidraw(), output)
        console.print(f"[green]Wrote[/] {output}")
        return
    _emit(session.to_svg(settings.scene.svg_background).encode("utf-8"), output)


@app.command("share-url")
def share_url(
    input_path: Path = typer.Argument(..., help="Control-flow JSON file."),
    base_url: str | None = typer.Option(None, help="Excalidraw base URL, defaults to settings."),
    config: Path | None = typer.Option(None, help="YAML settings file."),
) -> None:
    settings = _settings(config)
    session = build_scene_session(settings)
    session.show(_load_tree(input_path))
    url = build_excalidraw_url(
        base_url or settings.scene.excalidraw_base_url, session.to_excalidraw().to_dict()
    )
    typer.echo(url)


@app.command("validate")
def validate(
    input_path: Path = typer.Argument(
        ..., help="Control-flow JSON file, or a directory of *.json files."
    ),
    config: Path | None = typer.Option(None, help="YAML settings file."),
) -> None:
    settings = _settings(config)
    engine = build_layout_engine(settings)
    failed = False
    for path, tree in _load_trees(input_path):
        geometry = engine.compute_layout(tree)
        collisions = find_identity_collisions(geometry)
        if collisions:
            console.print(
                f"[red]Duplicate node ids in {escape(path.name)}:[/] {', '.join(collisions)}"
            )
            failed = True
            continue
        placeholders = [node.id for node in geometry.walk() if node.kind == "error"]
        if placeholders:
            console.print(
                f"[yellow]Valid with {len(placeholders)} error placeholder(s):[/] "
                + ", ".join(placeholders)
            )
            continue
        console.print(f"[green]Valid control-flow tree:[/] {escape(str(path))}")
    if failed:
        raise typer.Exit(code=1)


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8000, help="Bind port."),
    config: Path | None = typer.Option(None, help="YAML settings file."),
) -> None:
    import uvicorn

    from app.web_main import create_app

    uvicorn.run(create_app(_settings(config)), host=host, port=port, log_level="info")


if __name__ == "__main__":
    app()
