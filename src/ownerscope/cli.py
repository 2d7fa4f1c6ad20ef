from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, List, Mapping, Optional, TypeAlias

import typer

from ownerscope.config import excluded_team_names
from ownerscope.exceptions import OwnershipError
from ownerscope.logging_setup import LOG_LEVEL_ENV, setup_logging
from ownerscope.schema import ForFileResponseDTO, OwnedFrameDTO, ValidationResponseDTO
from ownerscope.session import OwnershipSession

app = typer.Typer(add_completion=False, help="Resolve and validate code ownership.")
SessionFactory: TypeAlias = Callable[..., OwnershipSession]
_STDIN_ALIAS = "-"


def _context_session_factory(ctx: typer.Context) -> SessionFactory:
    obj = ctx.obj
    if isinstance(obj, Mapping):
        candidate = obj.get("session_factory")
        if callable(candidate):
            return candidate
    return OwnershipSession


def _open_session(ctx: typer.Context, *, root: Path, config: Path | None) -> OwnershipSession:
    factory = _context_session_factory(ctx)
    return factory(root, config_path=config)


@contextmanager
def _ownership_errors() -> Iterator[None]:
    try:
        yield
    except (OwnershipError, RuntimeError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        envvar=LOG_LEVEL_ENV,
        help="Log level for diagnostics on stderr (DEBUG, INFO, WARNING, ...).",
    ),
) -> None:
    setup_logging(log_level)


@app.command("validate")
def validate(
    ctx: typer.Context,
    files: Optional[List[str]] = typer.Argument(None, help="Limit validation to these files."),
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
    autocorrect: bool = typer.Option(False, "--autocorrect/--no-autocorrect"),
    stage_changes: bool = typer.Option(False, "--stage-changes/--no-stage-changes"),
    json_output: bool = typer.Option(False, "--json"),
) -> None:
    """Check that every tracked file has exactly one owner."""
    with _ownership_errors():
        session = _open_session(ctx, root=root, config=config)
        result = session.validate(
            files or None,
            autocorrect=autocorrect,
            stage_changes=stage_changes,
        )
    if json_output:
        dto = ValidationResponseDTO(
            ok=result.ok,
            errors=result.errors,
            unowned_files=result.unowned_files,
        )
        typer.echo(dto.model_dump_json(indent=2))
    else:
        for error in result.errors:
            typer.echo(error, err=True)
    raise typer.Exit(code=0 if result.ok else 1)


@app.command("for-file")
def for_file(
    ctx: typer.Context,
    path: str = typer.Argument(...),
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
    json_output: bool = typer.Option(False, "--json"),
) -> None:
    """Print the team owning PATH."""
    with _ownership_errors():
        session = _open_session(ctx, root=root, config=config)
        team = session.for_file(path)
    dto = ForFileResponseDTO(path=path)
    if team is not None:
        dto = ForFileResponseDTO(
            path=path,
            team_name=team.name,
            team_yml=team.config_path or "Unowned",
            github_team=team.github_team,
        )
    if json_output:
        typer.echo(dto.model_dump_json(indent=2))
        return
    typer.echo(f"Team: {dto.team_name}")
    typer.echo(f"Team YML: {dto.team_yml}")


@app.command("for-team")
def for_team(
    ctx: typer.Context,
    name: str = typer.Argument(...),
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Print everything team NAME owns, grouped by ownership strategy."""
    with _ownership_errors():
        session = _open_session(ctx, root=root, config=config)
        typer.echo(session.for_team(name))


@app.command("for-backtrace")
def for_backtrace(
    ctx: typer.Context,
    source: str = typer.Argument(_STDIN_ALIAS, help="File holding the backtrace, or - for stdin."),
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
    exclude: List[str] = typer.Option([], "--exclude", help="Team to skip (repeatable)."),
    json_output: bool = typer.Option(False, "--json"),
) -> None:
    """Print the first frame of a backtrace owned by a team."""
    if source == _STDIN_ALIAS:
        lines = typer.get_text_stream("stdin").read().splitlines()
    else:
        lines = Path(source).read_text(encoding="utf-8").splitlines()
    with _ownership_errors():
        session = _open_session(ctx, root=root, config=config)
        frame = session.first_owned_file_for_backtrace(
            lines, excluded_teams=excluded_team_names(exclude)
        )
    if frame is None or frame.team is None:
        typer.echo("No owned frame found.", err=True)
        raise typer.Exit(code=1)
    dto = OwnedFrameDTO(file=frame.file, team_name=frame.team.name)
    if json_output:
        typer.echo(dto.model_dump_json(indent=2))
        return
    typer.echo(f"{dto.team_name}: {dto.file}")


@app.command("generate-codeowners")
def generate_codeowners(
    ctx: typer.Context,
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Write the CODEOWNERS file derived from the ownership rules."""
    with _ownership_errors():
        session = _open_session(ctx, root=root, config=config)
        changed = session.write_codeowners()
    target = session.config.codeowners_path
    typer.echo(f"Updated {target}" if changed else f"{target} already up to date")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
