"""Command line interface for ZeroDXC using Typer."""

import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import typer

from .config import build_settings, load_settings, resolve_run_mode, separator_char
from .exceptions import ZeroDXCError
from .io import load_sequences, write_diagram
from .pvalue import run_from_settings
from .surrogates import generate_iaaft_surrogates
from .utils.logging import get_logger

app = typer.Typer(help="Windowed zero-delay cross-correlation and its significance.")


def _fail(exc: Exception) -> None:
    typer.echo(f"ERROR: {exc}", err=True)
    raise typer.Exit(code=1)


def _input_source(input_path: Optional[Path]):
    return input_path if input_path is not None else sys.stdin


@app.command()
def diagram(
    columns: Tuple[int, int] = typer.Option(
        (None, None), "-n", "--columns",
        help="Column numbers (1-based) of the two sequences to analyse."),
    width_count: Optional[int] = typer.Option(
        None, "-W", "--widths",
        help="Number of window widths (rows of the diagram)."),
    base_width: Optional[int] = typer.Option(
        None, "-L", "--base-width",
        help="Base window width in samples; an odd value is reduced by 1."),
    correlation: bool = typer.Option(
        False, "-C", "-c", "--correlation",
        help="Only compute the correlation diagram."),
    pvalue: bool = typer.Option(
        False, "-p", "--pvalue",
        help="Compute the p-value diagram by surrogate generation (default)."),
    trial_count: Optional[int] = typer.Option(
        None, "-M", "--surrogates",
        help="Number of surrogate pairs (default 100)."),
    delay: Optional[int] = typer.Option(
        None, "--tau",
        help="Average the correlations at delays +tau and -tau."),
    parallel: bool = typer.Option(
        False, "--parallel", help="Run surrogate trials on several threads."),
    jobs: Optional[int] = typer.Option(
        None, "--jobs", help="Worker threads for --parallel (default: all CPUs)."),
    seed: Optional[int] = typer.Option(
        None, "--seed", help="Base random seed for reproducible p-values."),
    tolerance: Optional[float] = typer.Option(
        None, "--tolerance", help="IAAFT spectral tolerance."),
    input_path: Optional[Path] = typer.Option(
        None, "-i", "--input", dir_okay=False,
        help="Read from this file instead of standard input."),
    output_path: Optional[Path] = typer.Option(
        None, "-o", "--output", dir_okay=False,
        help="Write to this file instead of standard output."),
    separator: Optional[str] = typer.Option(
        None, "-s", "--separator",
        help="Column separator: t (TAB, default), s (space) or c (comma)."),
    config: Optional[Path] = typer.Option(
        None, "--config", dir_okay=False,
        help="JSON or YAML file with run settings; options override it."),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show progress."),
) -> None:
    """Compute a correlation diagram or its p-value diagram."""

    get_logger("zerodxc", level=logging.DEBUG if verbose else logging.INFO)

    overrides = {
        'width_count': width_count,
        'base_width': base_width,
        'delay': delay,
        'trial_count': trial_count,
        'tolerance': tolerance,
        'seed': seed,
        'n_jobs': jobs,
        'separator': separator,
    }
    if columns and None not in columns:
        overrides['column_a'], overrides['column_b'] = columns
    if parallel:
        overrides['parallel'] = True
    if correlation or pvalue:
        overrides['mode'] = resolve_run_mode(correlation, pvalue)

    try:
        if config is not None:
            settings = load_settings(config, **overrides)
        else:
            settings = build_settings(**{k: v for k, v in overrides.items() if v is not None})

        store = load_sequences(_input_source(input_path), settings.separator_char)
        result = run_from_settings(store, settings, verbose=verbose)
    except ZeroDXCError as exc:
        _fail(exc)

    try:
        write_diagram(result.diagram, output_path, settings.separator_char)
    except ZeroDXCError as exc:
        _fail(exc)


@app.command()
def surrogates(
    column: int = typer.Option(..., "-n", "--column",
                               help="Column number (1-based) of the sequence."),
    count: int = typer.Option(1, "-M", "--count", help="Number of surrogates."),
    tolerance: float = typer.Option(0.01, "--tolerance", help="IAAFT spectral tolerance."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed."),
    input_path: Optional[Path] = typer.Option(None, "-i", "--input", dir_okay=False),
    output_path: Optional[Path] = typer.Option(None, "-o", "--output", dir_okay=False),
    separator: str = typer.Option("t", "-s", "--separator"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show progress."),
) -> None:
    """Write IAAFT surrogates of one column, one surrogate per output column."""

    get_logger("zerodxc", level=logging.DEBUG if verbose else logging.INFO)

    if count < 1:
        _fail(ValueError(f"number of surrogates must be positive, got {count}"))
    if tolerance <= 0:
        _fail(ValueError(f"tolerance must be positive, got {tolerance}"))

    try:
        sep = separator_char(separator)
        store = load_sequences(_input_source(input_path), sep, min_sequences=1)
        x = store.column(column)
        table = generate_iaaft_surrogates(x, count, tolerance=tolerance,
                                          seed=seed, verbose=verbose).T
        write_diagram(table, output_path, sep)
    except ZeroDXCError as exc:
        _fail(exc)


def main() -> None:  # pragma: no cover - console entry point
    app()


__all__ = ['app', 'main']
