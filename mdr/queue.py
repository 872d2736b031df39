"""Document queue: the ordered set of documents the viewer can switch between."""

import os
from typing import Optional


def _normalize(path: str) -> str:
    return os.path.realpath(os.path.abspath(path))


class DocumentQueue:
    """Ordered list of document paths with a current position.

    next/prev wrap around; a queue always holds at least one document.
    """

    def __init__(self, paths: list[str]):
        if not paths:
            raise ValueError("Document queue cannot be empty")
        self._paths = [_normalize(p) for p in paths]
        self._current = 0

    def __len__(self) -> int:
        return len(self._paths)

    @property
    def current_index(self) -> int:
        return self._current

    @property
    def current(self) -> str:
        return self._paths[self._current]

    @property
    def paths(self) -> list[str]:
        return list(self._paths)

    def next(self) -> str:
        if len(self._paths) > 1:
            self._current = (self._current + 1) % len(self._paths)
        return self.current

    def prev(self) -> str:
        if len(self._paths) > 1:
            self._current = (self._current - 1) % len(self._paths)
        return self.current

    def index_of(self, path: str) -> Optional[int]:
        target = _normalize(path)
        try:
            return self._paths.index(target)
        except ValueError:
            return None

    def focus_existing(self, path: str) -> bool:
        idx = self.index_of(path)
        if idx is None:
            return False
        self._current = idx
        return True

    def focus_index(self, idx: int) -> bool:
        if 0 <= idx < len(self._paths):
            self._current = idx
            return True
        return False

    def push_and_focus(self, path: str) -> None:
        self._paths.append(_normalize(path))
        self._current = len(self._paths) - 1

    def open(self, path: str) -> str:
        """Focus path if queued, otherwise append it; returns the current path."""
        if not self.focus_existing(path):
            self.push_and_focus(path)
        return self.current

    def title(self) -> str:
        return f"[{self._current + 1}/{len(self._paths)}] {self.current}"
