"""
Glob matching of file paths against rule patterns.
"""

from typing import Sequence, Union

from wcmatch import glob

from auto_label.types import MultiplePatterns, PatternSpec, SinglePattern

# `**` crosses directories, `{a,b}` expands, `!(x)` and friends work.  Names
# starting with a dot are only matched by a pattern that spells the dot.
GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.EXTGLOB


def pattern_list(pattern: Union[str, Sequence[str], PatternSpec]) -> list:
    """Normalize any way of writing patterns to a list of strings."""
    if isinstance(pattern, (SinglePattern, MultiplePatterns)):
        return list(pattern.patterns)
    if isinstance(pattern, str):
        return [pattern]
    return list(pattern)


def matches(file_path: str, pattern: Union[str, Sequence[str], PatternSpec]) -> bool:
    """
    Does `file_path` match at least one of the glob patterns in `pattern`?
    """
    patterns = pattern_list(pattern)
    if not patterns:
        return False
    return glob.globmatch(file_path, patterns, flags=GLOB_FLAGS)
