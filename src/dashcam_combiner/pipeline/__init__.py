"""Directory discovery and processing."""

from .discovery import find_directories
from .processor import DirectoryProcessor, DirectoryResult, RunSummary, process_tree

__all__ = [
    "find_directories",
    "DirectoryProcessor",
    "DirectoryResult",
    "RunSummary",
    "process_tree",
]
