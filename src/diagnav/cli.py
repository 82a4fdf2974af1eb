from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from diagnav.config import (
    load_navigation_settings,
    merge_payload,
    navigation_defaults,
    navigation_settings,
)
from diagnav.exceptions import DocumentOpenError
from diagnav.model import COMMANDS_BY_ID, NAVIGATION_COMMANDS
from diagnav.navigation import NavigationController
from diagnav.schema import (
    NavigationRequest,
    NavigationResponse,
    PositionDTO,
    SelectionDTO,
)
from diagnav.workspace import RecordingPresentation, RequestLog, SnapshotWorkspace

app = typer.Typer(add_completion=False)


def _load_request(path: Path) -> NavigationRequest:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise typer.BadParameter(f"cannot read snapshot {path}: {exc}") from exc
    try:
        return NavigationRequest.model_validate(raw)
    except ValidationError as exc:
        raise typer.BadParameter(f"invalid snapshot {path}: {exc}") from exc


def replay(
    command_id: str,
    request: NavigationRequest,
    *,
    root: Path | None = None,
    config_path: Path | None = None,
) -> NavigationResponse:
    """Run one navigation command against a snapshot, without an editor."""
    log: RequestLog = []
    workspace = SnapshotWorkspace.from_request(request, log=log)
    defaults = navigation_defaults(root=root, config_path=config_path)
    controller = NavigationController(
        workspace,
        workspace,
        RecordingPresentation(log),
        state=request.seed_state(),
        settings=navigation_settings(merge_payload(request.setting_overrides(), defaults)),
    )
    found = asyncio.run(controller.run(command_id))
    return NavigationResponse(
        command=command_id,
        found=found,
        active_uri=workspace.active_uri(),
        selection=PositionDTO.from_lsp(workspace.cursor()) if found else None,
        state=SelectionDTO.from_state(controller.state),
        requests=log,
    )


@app.command("commands")
def list_commands() -> None:
    """List the navigation command ids."""
    for command in NAVIGATION_COMMANDS:
        typer.echo(command.command_id)


@app.command("goto")
def goto(
    command: str = typer.Argument(..., help="Navigation command id, e.g. diagnav.next.error."),
    input_path: Path = typer.Option(..., "--input", help="JSON navigation snapshot."),
    output: Optional[Path] = typer.Option(None, "--output", help="Write the response JSON here."),
    root: Optional[Path] = typer.Option(None, "--root", help="Directory holding diagnav.toml."),
    config: Optional[Path] = typer.Option(None, "--config", help="Explicit config file."),
) -> None:
    """Replay one navigation command against a snapshot and print the outcome."""
    if command not in COMMANDS_BY_ID:
        raise typer.BadParameter(f"unknown navigation command: {command}")
    request = _load_request(input_path)
    try:
        response = replay(command, request, root=root, config_path=config)
    except DocumentOpenError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    rendered = json.dumps(response.model_dump(), indent=2, sort_keys=True)
    if output is not None:
        output.write_text(rendered + "\n", encoding="utf-8")
    else:
        typer.echo(rendered)
    if not response.found:
        raise typer.Exit(code=2)


@app.command("settings")
def show_settings(
    root: Optional[Path] = typer.Option(None, "--root", help="Directory holding diagnav.toml."),
    config: Optional[Path] = typer.Option(None, "--config", help="Explicit config file."),
) -> None:
    """Print the effective navigation settings."""
    settings = load_navigation_settings(root=root, config_path=config)
    typer.echo(
        json.dumps(
            {
                "settle_delay_ms": settings.settle_delay_ms,
                "loop_in_file": settings.loop_in_file,
            },
            sort_keys=True,
        )
    )


@app.command("lsp")
def lsp() -> None:
    """Start the language server on stdio."""
    from diagnav import server

    server.start()


def main() -> None:  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
