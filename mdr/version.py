"""Version string: package version plus the git commit it was built from."""

from __future__ import annotations

import importlib.metadata
import json
import subprocess
from pathlib import Path
from typing import NamedTuple, Optional

DIST_NAME = "mdr"


class BuildInfo(NamedTuple):
    commit: Optional[str]
    date: Optional[str]
    dirty: bool


def _git(args: list[str], cwd: Path) -> Optional[str]:
    try:
        out = subprocess.check_output(["git", *args], cwd=str(cwd), stderr=subprocess.DEVNULL)
    except (subprocess.CalledProcessError, FileNotFoundError, OSError):
        return None
    return out.decode().strip() or None


def _from_git_checkout() -> Optional[BuildInfo]:
    """Commit of the source checkout this module is running from."""
    here = Path(__file__).resolve().parent
    root = _git(["rev-parse", "--show-toplevel"], here)
    if not root or not (Path(root) / "mdr").is_dir():
        return None
    commit = _git(["rev-parse", "HEAD"], Path(root))
    date = _git(["show", "-s", "--format=%cI", "HEAD"], Path(root))
    dirty = bool(_git(["status", "--porcelain"], Path(root)))
    return BuildInfo(commit=commit, date=date, dirty=dirty)


def _from_embedded_file() -> Optional[BuildInfo]:
    # Written by the hatch build hook
    try:
        from . import _build_info  # type: ignore
    except ImportError:
        return None
    commit = getattr(_build_info, "COMMIT", None)
    date = getattr(_build_info, "DATE", None)
    return BuildInfo(commit=commit, date=date, dirty=False)


def _from_direct_url() -> Optional[BuildInfo]:
    """VCS commit recorded by pip in direct_url.json (PEP 610)."""
    try:
        dist = importlib.metadata.distribution(DIST_NAME)
    except importlib.metadata.PackageNotFoundError:
        return None
    text = dist.read_text("direct_url.json")
    if not text:
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    commit = (data.get("vcs_info") or {}).get("commit_id")
    return BuildInfo(commit=commit, date=None, dirty=False) if commit else None


def get_build_info() -> BuildInfo:
    for getter in (_from_git_checkout, _from_embedded_file, _from_direct_url):
        info = getter()
        if info and (info.commit or info.date):
            return info
    return BuildInfo(commit=None, date=None, dirty=False)


def package_version() -> str:
    try:
        return importlib.metadata.version(DIST_NAME)
    except importlib.metadata.PackageNotFoundError:
        return "0+unknown"


def get_version_string() -> str:
    """e.g. ``mdr 0.1.0 (1a2b3c4-dirty 2026-01-02T03:04:05+00:00)``"""
    info = get_build_info()
    commit = info.commit[:7] if info.commit else "unknown"
    dirty = "-dirty" if info.dirty else ""
    date = info.date or "unknown"
    return f"mdr {package_version()} ({commit}{dirty} {date})"
