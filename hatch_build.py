"""Hatchling build hook that embeds the git commit into the mdr package."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

from hatchling.builders.hooks.plugin.interface import BuildHookInterface

BUILD_INFO = "mdr/_build_info.py"


class CustomBuildHook(BuildHookInterface):
    """Writes mdr/_build_info.py so installed copies can report their commit."""

    def initialize(self, version: str, build_data: dict[str, Any]) -> None:
        root = Path(self.root)
        commit = _git(["rev-parse", "HEAD"], root)
        date = _git(["show", "-s", "--format=%cI", "HEAD"], root)
        (root / BUILD_INFO).write_text(
            "# Auto-generated at build time.\n"
            f"COMMIT = {commit!r}\n"
            f"DATE = {date!r}\n",
            encoding="utf-8",
        )
        build_data.setdefault("artifacts", []).append(BUILD_INFO)


def _git(args: list[str], cwd: Path) -> str | None:
    try:
        out = subprocess.check_output(["git", *args], cwd=str(cwd), stderr=subprocess.DEVNULL)
    except (subprocess.CalledProcessError, FileNotFoundError, OSError):
        # Building from an sdist or without git is fine
        return None
    return out.decode().strip() or None
