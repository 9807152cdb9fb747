"""Per-directory processing: group, compose, encode, concatenate."""

import os
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional
from pydantic import BaseModel, Field
from .discovery import find_directories
from ..core.config import CombinerConfig
from ..core.errors import DashcamError
from ..media.clips import TimestampGroup, find_clip_files, group_by_timestamp, probe_group
from ..media.composition import CompositeOutput, Composition
from ..media.context import MediaContext
from ..media.encoders import EncoderProfile
from ..media.session import SessionOutput, concat_to_file, plan_session


class DirectoryResult(BaseModel):
    """Outcome of processing one directory."""

    directory: str
    skipped: bool = False
    composites: List[CompositeOutput] = Field(default_factory=list)
    session: Optional[SessionOutput] = None
    failures: List[str] = Field(default_factory=list)


class RunSummary(BaseModel):
    """Totals across every directory in a run."""

    directories_processed: int = 0
    directories_skipped: int = 0
    composites_written: int = 0
    sessions_written: int = 0
    failures: List[str] = Field(default_factory=list)

    def add(self, result: DirectoryResult) -> None:
        """Fold one directory's result into the totals."""
        if result.skipped:
            self.directories_skipped += 1
        else:
            self.directories_processed += 1
        self.composites_written += len(result.composites)
        if result.session is not None:
            self.sessions_written += 1
        self.failures.extend(result.failures)

    def describe(self) -> str:
        return (
            f"{self.directories_processed} director(ies) processed, "
            f"{self.directories_skipped} skipped, "
            f"{self.composites_written} composite(s), "
            f"{self.sessions_written} session file(s), "
            f"{len(self.failures)} failure(s)"
        )


class DirectoryProcessor:
    """Turns the clips in one directory into composites and a session file."""

    def __init__(
        self,
        config: CombinerConfig,
        ctx: MediaContext,
        encoder: EncoderProfile,
    ):
        self.config = config
        self.ctx = ctx
        self.encoder = encoder

    def work_dir(self, directory: str) -> str:
        return os.path.join(directory, self.config.work_dir_name)

    def composite_path(self, directory: str, timestamp: str) -> str:
        return os.path.join(
            self.work_dir(directory),
            f"{timestamp}_combined{self.config.output_extension}",
        )

    def process(self, directory: str) -> DirectoryResult:
        """
        Process every timestamp group in a directory, then concatenate.

        Group failures are recorded and never stop sibling groups.

        Args:
            directory: Directory holding dashcam clips

        Returns:
            DirectoryResult; `skipped` is set when no clip matched
        """
        result = DirectoryResult(directory=directory)

        try:
            files = find_clip_files(directory, self.config.extensions)
        except OSError as e:
            result.failures.append(f"{directory}: cannot list directory: {e}")
            self.ctx.logger.error(result.failures[-1])
            return result

        if not files:
            self.ctx.logger.info(f"Skipping {directory}: no dashcam clips")
            result.skipped = True
            return result

        groups = group_by_timestamp(files)
        self.ctx.logger.info(
            f"📂 {directory}: {len(files)} clip(s) in {len(groups)} timestamp group(s)"
        )

        if not self.ctx.dry_run:
            try:
                os.makedirs(self.work_dir(directory), exist_ok=True)
            except OSError as e:
                result.failures.append(f"{directory}: cannot create working folder: {e}")
                self.ctx.logger.error(result.failures[-1])
                return result

        for group in groups:
            try:
                result.composites.append(self._process_group(directory, group))
            except DashcamError as e:
                result.failures.append(f"{directory} [{group.timestamp}]: {e}")
                self.ctx.logger.warning(f"Skipping {group.timestamp} in {directory}: {e}")

        plan = plan_session(result.composites, directory, self.config)
        if plan is None:
            self.ctx.logger.warning(f"No composites for {directory}; no session file")
            return result

        try:
            result.session = concat_to_file(
                plan, self.encoder, self.ctx, timeout=self.config.encode_timeout
            )
            self.ctx.logger.info(f"✅ Session written: {result.session.path}")
        except DashcamError as e:
            result.failures.append(f"{directory}: concatenation failed: {e}")
            self.ctx.logger.error(result.failures[-1])

        return result

    def _process_group(self, directory: str, group: TimestampGroup) -> CompositeOutput:
        """Probe, plan and encode one timestamp group."""
        clips = probe_group(group, self.ctx, timeout=self.config.probe_timeout)
        composition = Composition(group.timestamp, clips, self.config, self.ctx)
        out_path = self.composite_path(directory, group.timestamp)
        return composition.to_file(out_path, self.encoder)


def process_tree(
    root: str,
    config: CombinerConfig,
    ctx: MediaContext,
    encoder: EncoderProfile,
) -> RunSummary:
    """
    Process `root` and all its subdirectories.

    Directories are independent jobs; with `config.jobs > 1` they run on a
    thread pool. Each directory only writes its own output paths.

    Args:
        root: Top-level directory
        config: Run configuration
        ctx: Media context
        encoder: Encoder profile used for every encode

    Returns:
        RunSummary across all directories
    """
    processor = DirectoryProcessor(config, ctx, encoder)
    directories = find_directories(root, config.work_dir_name)
    summary = RunSummary()

    if config.jobs > 1 and len(directories) > 1:
        with ThreadPoolExecutor(max_workers=config.jobs) as pool:
            for result in pool.map(processor.process, directories):
                summary.add(result)
    else:
        for directory in directories:
            summary.add(processor.process(directory))

    return summary
