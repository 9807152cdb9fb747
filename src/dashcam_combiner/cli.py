"""Command line entry point: combine every dashcam directory below the current one."""

import logging
import os
from typing import Optional

import click
from dotenv import load_dotenv

from .__version__ import __version__
from .core.config import CombinerConfig
from .media.context import MediaContext
from .media.encoders import EncoderProfile
from .pipeline.processor import process_tree

logger = logging.getLogger("dashcam_combiner")


@click.command()
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Directory to process recursively (default: current directory).",
)
@click.option(
    "--jobs",
    type=click.IntRange(min=1),
    default=None,
    help="Directories processed in parallel.",
)
@click.option(
    "--window",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds kept from the end of each composite.",
)
@click.option("--software", is_flag=True, help="Skip hardware encoder detection.")
@click.option("--dry-run", is_flag=True, help="Log FFmpeg commands without running them.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging.")
@click.version_option(__version__)
def main(
    root: Optional[str],
    jobs: Optional[int],
    window: Optional[float],
    software: bool,
    dry_run: bool,
    verbose: bool,
) -> None:
    """Composite multi-angle dashcam clips and join them into one file per directory."""
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s  %(levelname)-7s  %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.captureWarnings(True)

    try:
        config = CombinerConfig.from_env()
    except ValueError as e:
        # pydantic's ValidationError is a ValueError too
        raise click.ClickException(f"Invalid DASHCAM_* configuration: {e}")

    overrides = {}
    if jobs is not None:
        overrides["jobs"] = jobs
    if window is not None:
        overrides["window_seconds"] = window
    if software:
        overrides["hardware_encoding"] = False
    if overrides:
        config = config.model_copy(update=overrides)

    try:
        ctx = MediaContext(
            ffmpeg=config.ffmpeg, ffprobe=config.ffprobe, logger=logger, dry_run=dry_run
        )
    except RuntimeError as e:
        raise click.ClickException(str(e))

    encoder = EncoderProfile.detect(
        ctx,
        crf=config.crf,
        preset=config.preset,
        allow_hardware=config.hardware_encoding,
    )

    summary = process_tree(root or os.getcwd(), config, ctx, encoder)

    for failure in summary.failures:
        click.secho(f"  ✗ {failure}", fg="yellow", err=True)
    click.secho(f"Processing complete: {summary.describe()}", fg="green")


if __name__ == "__main__":
    main()
