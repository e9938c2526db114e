"""BigDiff CLI — Typer application with diff and init commands."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
import yaml

from bigdiff import __version__
from bigdiff.log import console, setup_logging

app = typer.Typer(
    name="bigdiff",
    help="Compare two directory trees and materialize the differences.",
    add_completion=False,
    no_args_is_help=True,
)


def _fail(label: str, exc: Exception) -> typer.Exit:
    console.print(f"[bold red]{label}:[/bold red] {exc}")
    return typer.Exit(code=2)


# ── diff ──────────────────────────────────────────────────────────────────────


@app.command()
def diff(
    base: Path = typer.Argument(..., help="Base (old) directory"),
    target: Path = typer.Argument(..., help="Target (new) directory"),
    output: Path = typer.Argument(..., help="Output directory for the artifacts"),
    ignore: Optional[List[str]] = typer.Option(
        None, "--ignore", "-i", help="Globs to ignore, comma-separated (repeatable)",
    ),
    ignore_file: Optional[Path] = typer.Option(None, "--ignore-file", help="File with one ignore glob per line"),
    normalize_eol: bool = typer.Option(
        False, "--normalize-eol", "-E", help="Rewrite CRLF / CR to LF before comparing text",
    ),
    max_text_size: Optional[str] = typer.Option(
        None, "--max-text-size", "-S", help="Largest file diffed line by line, e.g. 5MB",
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report what would be written without writing"),
    workers: Optional[int] = typer.Option(None, "--workers", min=1, help="Parallel per-file pipelines"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Report format: terminal | json"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .bigdiff.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output with per-file progress"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write log records to this file"),
) -> None:
    """Compare BASE against TARGET and write the differences under OUTPUT."""
    from bigdiff.compare.engine import Pipeline, RunError
    from bigdiff.config.loader import ConfigError, load_config, parse_size, validate_roots
    from bigdiff.diff.comments import build_table
    from bigdiff.output import json_report, terminal
    from bigdiff.scanner.ignore import IgnoreRules, split_patterns

    try:
        setup_logging(
            "DEBUG" if debug else "INFO" if verbose else "WARNING",
            log_file=str(log_file) if log_file else None,
        )
    except OSError as exc:
        raise _fail("Log file error", exc) from exc

    # --- Load config ---
    try:
        cfg = load_config(Path.cwd(), config)
    except ConfigError as exc:
        raise _fail("Config error", exc) from exc

    # --- CLI overrides ---
    try:
        if max_text_size is not None:
            cfg.diff.max_text_size = parse_size(max_text_size)
        if format is not None:
            if format not in ("terminal", "json"):
                raise ConfigError(f"Invalid format: {format}")
            cfg.output.format = format  # type: ignore[assignment]
        if normalize_eol:
            cfg.diff.normalize_eol = True
        if workers is not None:
            cfg.diff.workers = workers
        base, target, output = validate_roots(base, target, output)
    except ConfigError as exc:
        raise _fail("Error", exc) from exc

    # --- Ignore rules and comment profiles ---
    rules = IgnoreRules(cfg.ignore.patterns, use_defaults=cfg.ignore.use_defaults)
    rules.extend(split_patterns(ignore or []))
    for pattern_file in (cfg.ignore.file, ignore_file):
        if pattern_file is None:
            continue
        try:
            rules.load_file(Path(pattern_file))
        except OSError as exc:
            raise _fail("Ignore file error", exc) from exc

    try:
        profiles = Path(cfg.comments.profiles_file) if cfg.comments.profiles_file else None
        comments = build_table(profiles)
    except (OSError, yaml.YAMLError, ValueError) as exc:
        raise _fail("Comment profile error", exc) from exc

    if verbose or debug:
        console.print(f"[dim]Base:   {base}[/dim]")
        console.print(f"[dim]Target: {target}[/dim]")
        console.print(f"[dim]Output: {output}[/dim]")
        console.print(f"[dim]Ignore: {', '.join(rules.patterns) or '(defaults only)'}[/dim]")
        console.print(f"[dim]Text limit: {cfg.diff.max_text_size} bytes[/dim]")

    # --- Run ---
    pipeline = Pipeline(
        base,
        target,
        output,
        cfg.diff,
        should_ignore=rules,
        comments=comments,
        dry_run=dry_run,
    )
    try:
        result = pipeline.run()
    except RunError as exc:
        raise _fail("Output error", exc) from exc
    except KeyboardInterrupt:
        console.print("[bold yellow]Interrupted.[/bold yellow]")
        raise typer.Exit(code=130)

    if debug:
        console.print(f"[dim]Run duration: {result.duration_ms:.0f}ms[/dim]")

    # --- Output ---
    if cfg.output.format == "json":
        print(json_report.render(result, str(output)))
    else:
        terminal.render(result, str(output), show_summary=cfg.output.show_summary, console=console)

    raise typer.Exit(code=result.exit_code)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing .bigdiff.toml"),
) -> None:
    """Generate a starter .bigdiff.toml in the current directory."""
    from bigdiff.config.defaults import DEFAULT_TOML
    from bigdiff.config.loader import CONFIG_FILENAME

    config_path = Path.cwd() / CONFIG_FILENAME

    if config_path.exists() and not force:
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"bigdiff {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """BigDiff — Compare two directory trees and materialize the differences."""
