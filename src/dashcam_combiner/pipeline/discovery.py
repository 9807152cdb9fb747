"""Directory discovery for a recursive run."""

import os
from typing import List


def find_directories(root: str, work_dir_name: str) -> List[str]:
    """
    List `root` and every subdirectory below it, skipping working subfolders.

    Args:
        root: Top-level directory
        work_dir_name: Name of the per-directory working subfolder to exclude

    Returns:
        Directory paths in sorted walk order, root first
    """
    directories = []
    for dirpath, dirnames, _ in os.walk(root):
        # Prune in place so os.walk never descends into working folders
        dirnames[:] = sorted(d for d in dirnames if d != work_dir_name)
        directories.append(dirpath)
    return directories
