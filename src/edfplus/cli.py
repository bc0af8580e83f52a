"""
Command-line interface for edfplus.

Provides commands for inspecting EDF+ headers, listing signals, and printing
recordings, annotations and bi-level projections.
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path

import click
import numpy as np

from edfplus.config import (
    get_config_path,
    get_default_tolerance,
    load_config,
    set_default_tolerance,
    unset_default_tolerance,
)
from edfplus.constants import DEFAULT_RECORDING_LIMIT
from edfplus.exceptions import EDFError
from edfplus.logging_config import setup_logging
from edfplus.processing.bilevel import BiLevelSignal
from edfplus.reader import EDFFile, read_edf
from edfplus.signals.annotations import AnnotationSignal
from edfplus.signals.base import EDFSignal, SignalKind

try:
    __version__ = get_version("edfplus")
except PackageNotFoundError:
    __version__ = "dev"


def load_edf(path: str) -> EDFFile:
    """Decode a file, turning decode errors into CLI errors."""
    try:
        return read_edf(Path(path))
    except EDFError as e:
        raise click.ClickException(f"Failed to decode {path}: {e}") from e


def resolve_signal(edf: EDFFile, signal: str) -> EDFSignal:
    """
    Resolve a signal by label, falling back to a numeric index.

    Raises:
        click.ClickException: If the signal cannot be found or built
    """
    try:
        if signal in edf.list_signal_labels():
            return edf.get_signal(signal)
        if signal.isdigit():
            return edf.get_signal(int(signal))
        return edf.get_signal(signal)
    except (KeyError, IndexError) as e:
        raise click.ClickException(str(e).strip("'\"")) from e
    except EDFError as e:
        raise click.ClickException(str(e)) from e


def _format_values(values: np.ndarray, limit: int) -> str:
    shown = values if limit <= 0 else values[:limit]
    text = " ".join(f"{v:.6g}" for v in shown)
    if 0 < limit < len(values):
        text += f" ... ({len(values) - limit} more)"
    return text


@click.group()
@click.version_option(__version__, prog_name="edfplus")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool) -> None:
    """edfplus: EDF/EDF+ biosignal file inspector"""
    setup_logging(verbose=verbose, console_format="%(levelname)s: %(message)s")


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def info(path: str) -> None:
    """Show header information."""
    edf = load_edf(path)
    header = edf.header

    if header.is_discontinuous:
        file_type = "EDF+D"
    elif header.is_edf_plus:
        file_type = "EDF+C"
    else:
        file_type = "EDF"

    try:
        start = header.start_datetime
        end = header.end_datetime
    except EDFError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"File:            {Path(path).name}")
    click.echo(f"Type:            {file_type}")
    click.echo(f"Version:         {header.version}")
    click.echo(f"Patient:         {header.patient_id}")
    click.echo(f"Recording:       {header.recording_id}")
    click.echo(f"Start:           {start}")
    click.echo(f"End:             {end}")
    click.echo(f"Data records:    {header.num_data_records}")
    click.echo(f"Record duration: {header.duration_data_records:g} s")
    click.echo(f"Duration:        {header.duration_seconds:g} s")
    click.echo(f"Signals:         {header.num_signals}")


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def signals(path: str) -> None:
    """List signals in the file."""
    edf = load_edf(path)
    header = edf.header

    click.echo(f"{'#':>3}  {'Label':<16}  {'Kind':<10}  {'Samples':>7}  {'Rate (Hz)':>9}  Unit")
    for index, definition in enumerate(header.signals):
        kind = edf.signal_kind(index)
        rate = (
            definition.samples_per_record / header.duration_data_records
            if header.duration_data_records
            else 0.0
        )
        click.echo(
            f"{index:>3}  {definition.label:<16}  {kind.value:<10}  "
            f"{definition.samples_per_record:>7}  {rate:>9.3f}  "
            f"{definition.physical_dimension}"
        )


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.argument("signal")
@click.option("--start", type=float, help="Window start, seconds from recording start")
@click.option("--end", type=float, help="Window end, seconds from recording start")
@click.option(
    "--limit",
    "-n",
    type=int,
    default=DEFAULT_RECORDING_LIMIT,
    show_default=True,
    help="Maximum values to print (0 for all)",
)
def recording(
    path: str, signal: str, start: float | None, end: float | None, limit: int
) -> None:
    """Print a signal's physical values over a time window."""
    edf = load_edf(path)
    target = resolve_signal(edf, signal)
    if target.kind != SignalKind.NUMERIC:
        raise click.ClickException(
            f"Signal '{target.label}' is an annotation channel; use 'annotations'"
        )

    try:
        values = target.recording(start, end)
    except EDFError as e:
        raise click.ClickException(str(e)) from e

    unit = target.definition.physical_dimension if target.definition else ""
    click.echo(
        f"Signal: {target.label} ({len(values)} samples, "
        f"{target.sample_rate:g} Hz{', ' + unit if unit else ''})"
    )
    click.echo(_format_values(values, limit))


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--signal", "signal_key", help="Annotation channel label or index")
@click.option("--start", type=float, help="Window start, seconds from recording start")
@click.option("--end", type=float, help="Window end, seconds from recording start")
def annotations(
    path: str, signal_key: str | None, start: float | None, end: float | None
) -> None:
    """Print annotations from the annotation channel(s)."""
    edf = load_edf(path)

    try:
        if signal_key is not None:
            target = resolve_signal(edf, signal_key)
            if not isinstance(target, AnnotationSignal):
                raise click.ClickException(
                    f"Signal '{target.label}' is not an annotation channel"
                )
            channels = [target]
        else:
            channels = edf.annotation_signals()
    except EDFError as e:
        raise click.ClickException(str(e)) from e

    if not channels:
        click.echo("No annotation channels found")
        return

    for channel in channels:
        try:
            found = channel.annotations(start, end)
        except EDFError as e:
            raise click.ClickException(str(e)) from e

        click.echo(f"Signal: {channel.label} ({len(found)} annotations)")
        for annotation in found:
            texts = " | ".join(annotation.annotations)
            click.echo(f"  {annotation.time()}  {annotation.duration:>8g}s  {texts}")


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.argument("signal")
@click.option("--low", type=float, required=True, help="Low reference level")
@click.option("--high", type=float, required=True, help="High reference level")
@click.option(
    "--tolerance",
    type=float,
    help="Tolerance band around each level (default: from config, else nearest level)",
)
@click.option("--classify", is_flag=True, help="Print LOW/HIGH/TRANSITION per sample")
@click.option("--start", type=float, help="Window start, seconds from recording start")
@click.option("--end", type=float, help="Window end, seconds from recording start")
@click.option(
    "--limit",
    "-n",
    type=int,
    default=DEFAULT_RECORDING_LIMIT,
    show_default=True,
    help="Maximum values to print (0 for all)",
)
def bilevel(
    path: str,
    signal: str,
    low: float,
    high: float,
    tolerance: float | None,
    classify: bool,
    start: float | None,
    end: float | None,
    limit: int,
) -> None:
    """Project a numeric signal onto two levels."""
    edf = load_edf(path)
    target = resolve_signal(edf, signal)

    if tolerance is None:
        tolerance = get_default_tolerance()

    try:
        projected = BiLevelSignal(target, low, high, tolerance)
        if classify:
            levels = projected.bilevel_recording(start, end)
            shown = levels if limit <= 0 else levels[:limit]
            click.echo(f"Signal: {projected.label} ({len(levels)} samples)")
            text = " ".join(level.name for level in shown)
            if 0 < limit < len(levels):
                text += f" ... ({len(levels) - limit} more)"
            click.echo(text)
        else:
            values = projected.recording(start, end)
            click.echo(f"Signal: {projected.label} ({len(values)} samples)")
            click.echo(_format_values(values, limit))
    except EDFError as e:
        raise click.ClickException(str(e)) from e


@cli.group()
def config() -> None:
    """Manage edfplus configuration."""
    pass


@config.command("show")
def config_show() -> None:
    """Show current configuration."""
    current = load_config()
    if not current:
        click.echo("No configuration set")
        return
    for section, values in current.items():
        click.echo(f"[{section}]")
        if isinstance(values, dict):
            for key, value in values.items():
                click.echo(f"  {key} = {value}")
        else:
            click.echo(f"  {values}")


@config.command("path")
def config_path() -> None:
    """Show the configuration file path."""
    click.echo(str(get_config_path()))


@config.command("set-tolerance")
@click.argument("tolerance", type=float)
def config_set_tolerance(tolerance: float) -> None:
    """Set the default bi-level tolerance."""
    try:
        set_default_tolerance(tolerance)
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"✓ Default tolerance set to {tolerance:g}")


@config.command("unset-tolerance")
def config_unset_tolerance() -> None:
    """Remove the default bi-level tolerance."""
    unset_default_tolerance()
    click.echo("✓ Default tolerance removed")


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
