from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional


def _require(mod: str) -> None:
    try:
        __import__(mod)
    except Exception as exc:  # pragma: no cover
        raise SystemExit(
            f"Missing dependency '{mod}'. Install project deps first (see pyproject.toml)."
        ) from exc


_require("typer")

import typer  # noqa: E402

from winargv.config import (  # noqa: E402
    Config,
    ConfigError,
    default_config,
    fixture_paths,
    load_config,
    validate_config,
)
from winargv.constants import (  # noqa: E402
    DEFAULT_ALPHABET,
    DEFAULT_MAX_LEN,
    LOG_PREFIX,
    OUTPUT_FORMATS,
)
from winargv.fixtures import (  # noqa: E402
    FixtureError,
    check_fixtures,
    enumerate_command_lines,
    read_fixtures,
    within_limit,
)
from winargv.formatting import fmt_args, fmt_mismatch  # noqa: E402
from winargv.parser import parse  # noqa: E402
from winargv.source import CommandLineUnavailable, command_line  # noqa: E402

app = typer.Typer(add_completion=False, no_args_is_help=True)


def _log(verbose: bool, msg: str) -> None:
    if verbose:
        typer.echo(f"{LOG_PREFIX} {msg}", err=True)


def _load(config: Optional[Path]) -> Config:
    if config is None:
        return default_config()
    try:
        return load_config(config)
    except ConfigError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(2)


def _resolve_format(cfg: Config, fmt: Optional[str]) -> str:
    out = fmt or cfg.output.format
    if out not in OUTPUT_FORMATS:
        typer.echo(f"ERROR: --format must be one of: {'|'.join(OUTPUT_FORMATS)}")
        raise typer.Exit(2)
    return out


def _emit_args(args: list[str], *, fmt: str, show_count: bool) -> None:
    text = fmt_args(args, fmt=fmt, show_count=show_count)
    if fmt == "null":
        typer.echo(text, nl=False)
    elif text:
        typer.echo(text)


@app.command("split")
def split_cmd(
    raw: Optional[str] = typer.Argument(
        None, help="Raw command line. Read from stdin when omitted."
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False
    ),
    fmt: Optional[str] = typer.Option(None, "--format", "-f"),
    count: Optional[bool] = typer.Option(
        None, "--count/--no-count", help="Print argc before the arguments."
    ),
) -> None:
    """
    Split a raw Windows command line into arguments.
    """

    cfg = _load(config)
    out_fmt = _resolve_format(cfg, fmt)
    show_count = cfg.output.show_count if count is None else count

    if raw is None:
        raw = sys.stdin.read()
        # One trailing line break belongs to the pipe, not the command line.
        if raw.endswith("\n"):
            raw = raw[:-1]
            if raw.endswith("\r"):
                raw = raw[:-1]

    _emit_args(parse(raw), fmt=out_fmt, show_count=show_count)


@app.command("env")
def env_cmd(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False
    ),
    fmt: Optional[str] = typer.Option(None, "--format", "-f"),
    count: Optional[bool] = typer.Option(
        None, "--count/--no-count", help="Print argc before the arguments."
    ),
) -> None:
    """
    Split this process's own command line.
    """

    cfg = _load(config)
    out_fmt = _resolve_format(cfg, fmt)
    show_count = cfg.output.show_count if count is None else count
    try:
        raw = command_line()
    except CommandLineUnavailable as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(1)
    _emit_args(parse(raw), fmt=out_fmt, show_count=show_count)


@app.command("check")
def check_cmd(
    fixtures: Optional[list[Path]] = typer.Argument(
        None, exists=True, dir_okay=False, help="Fixture files (default: from config)."
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False
    ),
    max_line_length: Optional[int] = typer.Option(None, "--max-line-length", min=1),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """
    Cross-validate the parser against oracle fixture files.
    """

    cfg = _load(config)
    paths = list(fixtures or [])
    if not paths:
        base_dir = config.expanduser().resolve().parent if config is not None else None
        paths = fixture_paths(cfg, base_dir)
    if not paths:
        typer.echo("ERROR: No fixture files given (pass paths or set fixtures.paths)")
        raise typer.Exit(2)

    limit = max_line_length if max_line_length is not None else cfg.fixtures.max_line_length
    total = 0
    skipped = 0
    failed = 0
    for path in paths:
        _log(verbose, f"reading {path}")
        try:
            records = list(read_fixtures(path, encoding=cfg.fixtures.encoding))
        except (OSError, FixtureError) as exc:
            typer.echo(f"ERROR: {path}: {exc}")
            raise typer.Exit(2)
        checked = sum(1 for r in records if within_limit(r, limit))
        mismatches = check_fixtures(records, max_line_length=limit)
        _log(
            verbose,
            f"{path}: {checked} checked, {len(records) - checked} skipped, "
            f"{len(mismatches)} mismatches",
        )
        total += checked
        skipped += len(records) - checked
        failed += len(mismatches)
        for m in mismatches:
            typer.echo(f"MISMATCH in {path}:")
            typer.echo(fmt_mismatch(m))
            typer.echo("")

    summary = f"{total} records"
    if skipped:
        summary += f", {skipped} skipped by max line length"
    if failed:
        typer.echo(f"FAILED ({failed} of {summary})")
        raise typer.Exit(1)
    typer.echo(f"OK ({summary})")


@app.command("candidates")
def candidates_cmd(
    alphabet: str = typer.Option(DEFAULT_ALPHABET, "--alphabet"),
    max_len: int = typer.Option(DEFAULT_MAX_LEN, "--max-len", min=1),
) -> None:
    """
    Print candidate command lines, one per line, for the offline reference oracle.
    """

    if not alphabet:
        raise typer.BadParameter("--alphabet cannot be empty")
    if "\n" in alphabet or "\r" in alphabet or "\0" in alphabet:
        raise typer.BadParameter("--alphabet cannot contain line breaks or NUL")
    for line in enumerate_command_lines(alphabet, max_len):
        typer.echo(line)


@app.command("validate-config")
def validate_config_cmd(
    config: Path = typer.Option(..., "--config", "-c", exists=True, dir_okay=False),
    check_paths: bool = typer.Option(True, "--check-paths/--no-check-paths"),
) -> None:
    cfg = _load(config)
    errors = validate_config(
        cfg,
        base_dir=config.expanduser().resolve().parent,
        check_paths=check_paths,
    )
    if errors:
        for e in errors:
            typer.echo(f"ERROR: {e}")
        raise typer.Exit(2)
    typer.echo("OK")


if __name__ == "__main__":  # pragma: no cover
    # Allows `python -m winargv.cli ...`.
    app()
