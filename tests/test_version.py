"""Tests for the version string."""

from unittest.mock import patch

from mdr import version
from mdr.version import BuildInfo, get_version_string


def test_version_string_with_commit():
    info = BuildInfo(commit="1a2b3c4d5e6f", date="2026-01-02T03:04:05+00:00", dirty=True)
    with patch.object(version, "get_build_info", return_value=info), \
         patch.object(version, "package_version", return_value="0.1.0"):
        assert get_version_string() == "mdr 0.1.0 (1a2b3c4-dirty 2026-01-02T03:04:05+00:00)"


def test_version_string_without_build_info():
    info = BuildInfo(commit=None, date=None, dirty=False)
    with patch.object(version, "get_build_info", return_value=info), \
         patch.object(version, "package_version", return_value="0.1.0"):
        assert get_version_string() == "mdr 0.1.0 (unknown unknown)"


def test_build_info_falls_back_in_order():
    embedded = BuildInfo(commit="abc", date=None, dirty=False)
    with patch.object(version, "_from_git_checkout", return_value=None), \
         patch.object(version, "_from_embedded_file", return_value=embedded), \
         patch.object(version, "_from_direct_url") as direct:
        assert version.get_build_info() == embedded
        direct.assert_not_called()
