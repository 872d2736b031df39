"""Filesystem picker: browse directories and pick a markdown file."""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .discovery import is_markdown

logger = logging.getLogger(__name__)


class PickerEntryKind(Enum):
    PARENT = 0
    DIRECTORY = 1
    MARKDOWN_FILE = 2


@dataclass(frozen=True)
class PickerEntry:
    path: str
    kind: PickerEntryKind
    label: str


def list_entries(directory, query: str = "") -> list[PickerEntry]:
    """List `../`, sub-directories and markdown files of directory.

    Hidden entries are skipped. Directories come before files, each group in
    case-insensitive name order. Only names containing query
    (case-insensitively) are listed; `../` is always present unless
    directory is the filesystem root.

    Raises:
        NotADirectoryError: directory is not a directory.
        OSError: directory could not be read.
    """
    directory = Path(os.path.realpath(directory))
    if not directory.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")

    needle = query.strip().lower()
    entries: list[PickerEntry] = []
    if directory.parent != directory:
        entries.append(PickerEntry(str(directory.parent), PickerEntryKind.PARENT, "../"))

    listed: list[PickerEntry] = []
    for child in directory.iterdir():
        name = child.name
        if name.startswith("."):
            continue
        if needle and needle not in name.lower():
            continue
        if child.is_dir():
            listed.append(PickerEntry(str(child), PickerEntryKind.DIRECTORY, f"{name}/"))
        elif child.is_file() and is_markdown(child):
            listed.append(PickerEntry(str(child), PickerEntryKind.MARKDOWN_FILE, name))

    listed.sort(key=lambda e: (e.kind.value, e.label.lower()))
    return entries + listed


class PickerState:
    """Current directory, filter query, listing and selection of the picker."""

    def __init__(self, directory):
        self.directory = os.path.realpath(directory)
        self.query = ""
        self.selected = 0
        self.entries: list[PickerEntry] = []
        self.error: Optional[str] = None
        self.refresh()

    def refresh(self) -> None:
        try:
            self.entries = list_entries(self.directory, self.query)
            self.error = None
        except OSError as e:
            logger.warning(f"Could not list {self.directory}: {e}")
            self.entries = []
            self.error = str(e)
        self.selected = min(self.selected, max(0, len(self.entries) - 1))

    @property
    def current(self) -> Optional[PickerEntry]:
        if not self.entries:
            return None
        return self.entries[self.selected]

    def move(self, delta: int) -> None:
        if self.entries:
            self.selected = max(0, min(len(self.entries) - 1, self.selected + delta))

    def home(self) -> None:
        self.selected = 0

    def end(self) -> None:
        self.selected = max(0, len(self.entries) - 1)

    def type_char(self, ch: str) -> None:
        self.query += ch
        self.selected = 0
        self.refresh()

    def backspace(self) -> None:
        """Trim the query, or go to the parent directory when it is empty."""
        if self.query:
            self.query = self.query[:-1]
            self.selected = 0
            self.refresh()
        else:
            self.change_directory(str(Path(self.directory).parent))

    def change_directory(self, directory: str) -> None:
        self.directory = os.path.realpath(directory)
        self.query = ""
        self.selected = 0
        self.refresh()

    def activate(self) -> Optional[str]:
        """Enter the selected entry.

        Directories (and `../`) are descended into and None is returned; a
        markdown file's path is returned for opening.
        """
        entry = self.current
        if entry is None:
            return None
        if entry.kind == PickerEntryKind.MARKDOWN_FILE:
            return entry.path
        self.change_directory(entry.path)
        return None
