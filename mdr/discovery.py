"""Expand command-line inputs into markdown file paths."""

import os
from pathlib import Path

from .constants import ViewerConstants


class DiscoveryError(Exception):
    """An input path does not exist or is not a markdown file."""


def is_markdown(path) -> bool:
    return Path(path).suffix.lower() in ViewerConstants.MARKDOWN_EXTENSIONS


def _walk(directory: Path, out: list[str]) -> None:
    for entry in sorted(directory.iterdir()):
        if entry.is_dir():
            _walk(entry, out)
        elif entry.is_file() and is_markdown(entry):
            out.append(os.path.realpath(entry))


def discover_markdown_paths(inputs) -> list[str]:
    """Return the sorted, de-duplicated markdown files named by inputs.

    Directories are searched recursively. A file input must itself be
    markdown.

    Raises:
        DiscoveryError: an input is missing or unsupported.
        OSError: a directory could not be read.
    """
    found: list[str] = []
    for raw in inputs:
        path = Path(raw)
        if path.is_dir():
            _walk(path, found)
        elif path.is_file() and is_markdown(path):
            found.append(os.path.realpath(path))
        else:
            raise DiscoveryError(f"Path not found or unsupported: {raw}")
    return sorted(set(found))
