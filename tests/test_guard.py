"""
Tests for the platform capability checks.
"""

import os

import pytest

from wincpu.exceptions import UnsupportedPlatformError, UnsupportedReason
from wincpu.system.guard import PlatformGuard


@pytest.fixture
def tool_file(tmp_path):
    """An executable stand-in for wmic.exe."""
    path = tmp_path / "wmic.exe"
    path.write_text("")
    path.chmod(0o755)
    return str(path)


@pytest.fixture
def on_windows(monkeypatch):
    monkeypatch.setattr("wincpu.system.guard.psutil.WINDOWS", True)


@pytest.fixture
def not_windows(monkeypatch):
    monkeypatch.setattr("wincpu.system.guard.psutil.WINDOWS", False)


class TestIsSupported:
    """Non-raising capability probe."""

    def test_wrong_os_is_false_even_with_tool_present(self, not_windows, tool_file):
        assert PlatformGuard(tool_file).is_supported() is False

    def test_wrong_os_never_touches_filesystem(self, not_windows, monkeypatch):
        def explode(*args, **kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr("wincpu.system.guard.os.path.isfile", explode)
        assert PlatformGuard("C:\\missing\\wmic.exe").is_supported() is False

    def test_supported_with_accessible_tool(self, on_windows, tool_file):
        assert PlatformGuard(tool_file).is_supported() is True

    def test_missing_tool(self, on_windows, tmp_path):
        assert PlatformGuard(str(tmp_path / "wmic.exe")).is_supported() is False

    def test_inaccessible_tool(self, on_windows, tool_file, monkeypatch):
        monkeypatch.setattr("wincpu.system.guard.os.access", lambda path, mode: False)
        assert PlatformGuard(tool_file).is_supported() is False

    def test_probe_error_is_false(self, on_windows, monkeypatch):
        def explode(*args, **kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr("wincpu.system.guard.os.path.isfile", explode)
        assert PlatformGuard("C:\\Windows\\System32\\wbem\\wmic.exe").is_supported() is False

    def test_default_tool_path(self):
        from wincpu.config import WMIC_PATH

        assert PlatformGuard().tool_path == WMIC_PATH


class TestAssertSupported:
    """Fail-fast capability check."""

    def test_wrong_os(self, not_windows, tool_file):
        with pytest.raises(UnsupportedPlatformError) as exc_info:
            PlatformGuard(tool_file).assert_supported()
        assert exc_info.value.reason is UnsupportedReason.WRONG_OS

    def test_missing_tool(self, on_windows, tmp_path):
        missing = str(tmp_path / "wmic.exe")

        with pytest.raises(UnsupportedPlatformError) as exc_info:
            PlatformGuard(missing).assert_supported()

        assert exc_info.value.reason is UnsupportedReason.TOOL_MISSING
        assert exc_info.value.tool_path == missing

    def test_inaccessible_tool(self, on_windows, tool_file, monkeypatch):
        monkeypatch.setattr("wincpu.system.guard.os.access", lambda path, mode: False)

        with pytest.raises(UnsupportedPlatformError) as exc_info:
            PlatformGuard(tool_file).assert_supported()

        assert exc_info.value.reason is UnsupportedReason.TOOL_INACCESSIBLE
        assert "privilege" in str(exc_info.value)

    def test_probe_error(self, on_windows, monkeypatch):
        def explode(*args, **kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr("wincpu.system.guard.os.path.isfile", explode)

        with pytest.raises(UnsupportedPlatformError) as exc_info:
            PlatformGuard("C:\\wmic.exe").assert_supported()
        assert exc_info.value.reason is UnsupportedReason.TOOL_INACCESSIBLE

    def test_supported_returns_none(self, on_windows, tool_file):
        assert PlatformGuard(tool_file).assert_supported() is None
