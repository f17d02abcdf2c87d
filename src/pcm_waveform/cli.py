"""CLI interface for pcm-waveform."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import typer

from .interfaces.cli_handlers import CONFIG_ERRORS, RECOVERABLE_ERRORS, inspect_paths, points_for_path, scale_for_path

app = typer.Typer(help="Decode linear PCM audio and compute waveform scaling")


@app.callback()
def _configure(
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)."),
) -> None:
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


def _fail(error: Exception) -> None:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(code=1)


@app.command("info")
def info_command(
    paths: list[Path] = typer.Argument(..., help="Audio files to inspect"),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON."),
    config: Path | None = typer.Option(None, "--config", help="Viewer config (JSON or YAML)."),
    concurrency_limit: int = typer.Option(
        4,
        "--concurrency-limit",
        min=1,
        help="Maximum number of files decoded at once.",
    ),
) -> None:
    """Print the format and sample statistics of each file."""

    try:
        results, summary = inspect_paths(paths, concurrency_limit=concurrency_limit, config_path=config)
    except CONFIG_ERRORS as error:
        _fail(error)

    if as_json:
        typer.echo(json.dumps({"results": results, "summary": summary}, indent=2))
        return

    for item in results:
        if item["status"] == "succeeded":
            details = " ".join(f"{key}={value}" for key, value in item["summary"].items())
            typer.echo(f"[OK] #{item['index']} {item['source']} {details}")
        else:
            typer.echo(f"[FAILED] #{item['index']} {item['source']} error={item['error']['message']}")

    typer.echo(
        "Summary: "
        f"total={summary['total']} "
        f"succeeded={summary['succeeded']} "
        f"failed={summary['failed']}"
    )


@app.command("scale")
def scale_command(
    path: Path = typer.Argument(..., help="Audio file"),
    width: int = typer.Option(..., "--width", "-w", min=1, help="Viewport width in pixels"),
    height: int = typer.Option(..., "--height", "-h", min=1, help="Viewport height in pixels"),
    config: Path | None = typer.Option(None, "--config", help="Viewer config (JSON or YAML)."),
) -> None:
    """Print horizontal/vertical scale factors and the decimation increment."""

    try:
        scale = scale_for_path(path, width, height, config_path=config)
    except (*RECOVERABLE_ERRORS, *CONFIG_ERRORS) as error:
        _fail(error)
    typer.echo(json.dumps(scale, indent=2))


@app.command("points")
def points_command(
    path: Path = typer.Argument(..., help="Audio file"),
    width: int = typer.Option(..., "--width", "-w", min=1, help="Viewport width in pixels"),
    height: int = typer.Option(..., "--height", "-h", min=1, help="Viewport height in pixels"),
    channel: int = typer.Option(0, "--channel", "-c", min=0, help="Channel index (0 = left/mono)"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the polyline JSON here."),
    config: Path | None = typer.Option(None, "--config", help="Viewer config (JSON or YAML)."),
) -> None:
    """Compute the waveform polyline a rendering surface would draw."""

    try:
        points = points_for_path(path, width, height, channel, output=output, config_path=config)
    except (*RECOVERABLE_ERRORS, *CONFIG_ERRORS, IndexError) as error:
        _fail(error)

    if output is not None:
        typer.echo(f"Waveform points written to: {output} ({len(points)} points)")
    else:
        typer.echo(json.dumps([list(point) for point in points]))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
