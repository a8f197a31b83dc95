# File: src/mstair/runpoint/base/test_config.py
"""
Tests for context flags and environment-driven settings.
"""

from __future__ import annotations

import io
import os
import threading
from collections.abc import Iterator
from pathlib import Path

import pytest

import mstair.runpoint.base.config as cfg
from mstair.runpoint.base.fs_helpers import fs_load_dotenv, fs_relpath_or_absolute


@pytest.fixture
def no_dotenv(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Skip .env loading and clear the depth variable."""
    monkeypatch.setattr(cfg, "fs_load_dotenv", lambda *a, **k: False)
    monkeypatch.delenv(cfg.ENV_TRACE_STACK_DEPTH, raising=False)
    yield


@pytest.fixture
def no_overrides() -> Iterator[None]:
    cfg.in_test_mode(unset_override=True)
    cfg.in_desktop_mode(unset_override=True)
    yield
    cfg.in_test_mode(unset_override=True)
    cfg.in_desktop_mode(unset_override=True)


# ---------- Trace stack depth ----------


class TestTraceStackDepthFromEnvironment:
    def test_unset_uses_default(self, no_dotenv: None) -> None:
        assert cfg.trace_stack_depth_from_environment(32) == 32

    def test_valid_value(self, no_dotenv: None, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(cfg.ENV_TRACE_STACK_DEPTH, " 64 ")
        assert cfg.trace_stack_depth_from_environment(32) == 64

    @pytest.mark.parametrize("raw", ["0", "-4", "deep", "2.5"])
    def test_invalid_value_warns_and_uses_default(
        self,
        no_dotenv: None,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
        raw: str,
    ) -> None:
        monkeypatch.setenv(cfg.ENV_TRACE_STACK_DEPTH, raw)
        assert cfg.trace_stack_depth_from_environment(32) == 32
        assert "Ignoring RUNPOINT_TRACE_STACK_DEPTH" in caplog.text

    def test_value_from_dotenv_stream(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(cfg.ENV_TRACE_STACK_DEPTH, raising=False)
        stream = io.StringIO(f"{cfg.ENV_TRACE_STACK_DEPTH}=12\n")
        monkeypatch.setattr(cfg, "fs_load_dotenv", lambda *a, **k: fs_load_dotenv(stream=stream))
        try:
            assert cfg.trace_stack_depth_from_environment(32) == 12
        finally:
            os.environ.pop(cfg.ENV_TRACE_STACK_DEPTH, None)


# ---------- Context flags ----------


def test_analysis_mode_context_nests() -> None:
    assert not cfg.in_analysis_mode()
    with cfg.analysis_mode_context():
        assert cfg.in_analysis_mode()
        with cfg.analysis_mode_context():
            assert cfg.in_analysis_mode()
        assert cfg.in_analysis_mode()
    assert not cfg.in_analysis_mode()


def test_analysis_mode_is_thread_local() -> None:
    seen: list[bool] = []
    with cfg.analysis_mode_context():
        thread = threading.Thread(target=lambda: seen.append(cfg.in_analysis_mode()))
        thread.start()
        thread.join()
    assert seen == [False]


def test_test_mode_detected_under_pytest(no_overrides: None) -> None:
    assert cfg.in_test_mode()
    with cfg.analysis_mode_context():
        assert not cfg.in_test_mode()


def test_test_mode_override(no_overrides: None) -> None:
    assert cfg.in_test_mode(override=False) is False
    assert cfg.in_test_mode() is False
    assert cfg.in_test_mode(unset_override=True) is True


def test_desktop_mode_rules(no_overrides: None, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NO_COLOR", raising=False)
    assert cfg.in_desktop_mode() is True
    monkeypatch.setenv("NO_COLOR", "1")
    assert cfg.in_desktop_mode() is False
    assert cfg.in_desktop_mode(override=True) is True
    assert cfg.in_desktop_mode() is True
    monkeypatch.delenv("NO_COLOR")
    assert cfg.in_desktop_mode(unset_override=True) is True
    with cfg.analysis_mode_context():
        assert cfg.in_desktop_mode() is False


# ---------- fs_helpers ----------


def test_relpath_inside_project(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[project]\nname = 'x'\n")
    source = tmp_path / "src" / "pkg" / "mod.py"
    source.parent.mkdir(parents=True)
    source.write_text("")
    assert fs_relpath_or_absolute(source) == "src/pkg/mod.py"


def test_relpath_passes_pseudo_files_through() -> None:
    assert fs_relpath_or_absolute("<string>") == "<string>"
    assert fs_relpath_or_absolute("") == ""


# End of file: src/mstair/runpoint/base/test_config.py
