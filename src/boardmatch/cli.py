"""Typer CLI entrypoint for the matching engine."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

import pendulum
import typer
import yaml

from .config import ConfigManager
from .container import MatchContainer, create_container
from .core import MatchScorer
from .errors import BoardMatchError
from .logging import configure_logging
from .schemas import Requirements, Weights
from .schemas.config import AppConfig
from .store import SqlMatchStore

app = typer.Typer(help="Board match scoring CLI.")


def _load_settings(config: Path | None) -> AppConfig:
    if not config:
        return AppConfig()
    try:
        return ConfigManager.from_file(config)
    except (ValueError, yaml.YAMLError) as exc:
        raise typer.BadParameter(str(exc), param_hint="config") from exc


def _build_container(database: Path, config: Path | None, log_level: str | None) -> MatchContainer:
    app_config = _load_settings(config)
    configure_logging(log_level or app_config.logging.level)
    store = SqlMatchStore.for_path(database)
    store.init_schema()
    return create_container(settings=app_config.model_dump(), store=store)


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"Invalid JSON in {path}: {exc}") from exc


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


@app.command()
def score(
    profile: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Candidate profile JSON path."),
    board: Path = typer.Option(
        ...,
        exists=True,
        readable=True,
        dir_okay=False,
        help="Board JSON path with 'requirements' and 'weights' objects.",
    ),
    as_of: Optional[str] = typer.Option(None, help="Reference date (ISO) for age calculations."),
) -> None:
    """Score one profile against one board configuration."""
    board_data = _read_json(board)
    if not isinstance(board_data, dict):
        raise typer.BadParameter("Board file must be a JSON object", param_hint="board")
    profile_data = _read_json(profile)
    if not isinstance(profile_data, dict):
        raise typer.BadParameter("Profile file must be a JSON object", param_hint="profile")
    today = None
    if as_of:
        try:
            today = pendulum.parse(as_of).date()
        except (ValueError, AttributeError) as exc:
            raise typer.BadParameter(f"Invalid date: {as_of}", param_hint="as_of") from exc

    requirements = Requirements.model_validate(board_data.get("requirements") or {})
    weights = Weights.model_validate(
        board_data.get("weights") or board_data.get("scoring_weights") or {}
    )
    result = MatchScorer().score(profile_data, requirements, weights, today=today)
    _echo_json(result.to_dict())


@app.command("init-db")
def init_db(
    database: Path = typer.Option(..., dir_okay=False, help="SQLite database path."),
) -> None:
    """Create the database schema."""
    SqlMatchStore.for_path(database).init_schema()
    typer.echo(f"Initialized {database}.")


@app.command()
def recalculate(
    database: Path = typer.Option(..., dir_okay=False, help="SQLite database path."),
    board: str = typer.Option(..., help="Board id."),
    agency: str = typer.Option(..., help="Owning agency id."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: Optional[str] = typer.Option(None, help="Log level for structured logging."),
) -> None:
    """Recalculate every stored score on a board."""
    container = _build_container(database, config, log_level)
    try:
        report = container.boards().calculate_scores(board, agency)
    except BoardMatchError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    _echo_json(asdict(report))


@app.command()
def assign(
    database: Path = typer.Option(..., dir_okay=False, help="SQLite database path."),
    application: str = typer.Option(..., help="Application id."),
    board: Optional[str] = typer.Option(None, help="Target board id; omit to unassign."),
    agency: Optional[str] = typer.Option(None, help="Owning agency id."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: Optional[str] = typer.Option(None, help="Log level for structured logging."),
) -> None:
    """Assign an application to a board, or unassign it."""
    container = _build_container(database, config, log_level)
    try:
        membership = container.assignment().assign(application, board, agency_id=agency)
    except BoardMatchError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    _echo_json(membership.model_dump(mode="json") if membership else {"application_id": application, "board_id": None})


def main() -> None:
    app()


if __name__ == "__main__":
    main()
