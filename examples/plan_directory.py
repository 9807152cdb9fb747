#!/usr/bin/env python3
"""
Plan the composites for one dashcam directory without encoding anything.

This example demonstrates:
1. Discovering and grouping clips by timestamp
2. Probing each group and building its composition
3. Printing the FFmpeg command each composite would run
"""

import sys
from dashcam_combiner import CombinerConfig, Composition, DashcamError, MediaContext
from dashcam_combiner.media import find_clip_files, group_by_timestamp, probe_group


def main():
    """Print the planned FFmpeg commands for a directory."""
    directory = sys.argv[1] if len(sys.argv) > 1 else "."
    config = CombinerConfig.from_env()
    ctx = MediaContext(ffmpeg=config.ffmpeg, ffprobe=config.ffprobe)

    groups = group_by_timestamp(find_clip_files(directory, config.extensions))
    if not groups:
        print(f"No dashcam clips in {directory}")
        return

    for group in groups:
        print(f"\n{group.timestamp}: {', '.join(a.value for a in group.angles)}")
        clips = probe_group(group, ctx, timeout=config.probe_timeout)
        try:
            composition = Composition(group.timestamp, clips, config, ctx)
            print(f"Layout: {composition.strategy.value}")
            print(composition.dry_run())
        except DashcamError as e:
            print(f"Skipped: {e}")


if __name__ == "__main__":
    main()
