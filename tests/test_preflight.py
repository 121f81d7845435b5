"""Tests for the environment preflight."""

import importlib.util
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

from comfysync.exceptions import OperationalError, PreconditionError
from comfysync.models.config import AppConfig
from comfysync.services.preflight import EnvironmentPreflight
from comfysync.utils.subprocess_executor import SubprocessExecutor


@pytest.fixture
def commands(monkeypatch: pytest.MonkeyPatch) -> list[tuple[str, ...]]:
    calls: list[tuple[str, ...]] = []

    def fake_run_streaming(*args: str, **kwargs: object) -> subprocess.CompletedProcess[bytes]:
        calls.append(args)
        return subprocess.CompletedProcess(list(args), 0)

    monkeypatch.setattr(SubprocessExecutor, "run_streaming", staticmethod(fake_run_streaming))
    return calls


def test_missing_installation_is_fatal(tmp_path: Path) -> None:
    config = AppConfig.model_validate({"paths": {"comfyui_dir": str(tmp_path / "nope")}})

    with pytest.raises(PreconditionError) as exc_info:
        EnvironmentPreflight(config).check_installation()
    assert exc_info.value.exit_code == 1
    assert str(tmp_path / "nope") in str(exc_info.value)


def test_tools_present_installs_nothing(
    make_config: Callable[..., AppConfig], monkeypatch: pytest.MonkeyPatch, commands: list[tuple[str, ...]]
) -> None:
    monkeypatch.setattr(shutil, "which", lambda name: f"/usr/bin/{name}")

    EnvironmentPreflight(make_config()).run()

    assert commands == []


def test_missing_tools_are_installed(
    make_config: Callable[..., AppConfig], monkeypatch: pytest.MonkeyPatch, commands: list[tuple[str, ...]]
) -> None:
    monkeypatch.setattr(shutil, "which", lambda name: None)
    monkeypatch.setattr(importlib.util, "find_spec", lambda name: None)

    EnvironmentPreflight(make_config(), python="/venv/bin/python").ensure_tools()

    assert commands == [
        ("apt-get", "update"),
        ("apt-get", "install", "-y", "aria2"),
        ("/venv/bin/python", "-m", "pip", "install", "huggingface-hub"),
    ]


def test_install_failure_is_fatal(make_config: Callable[..., AppConfig], monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_run_streaming(*args: str, **kwargs: object) -> object:
        raise subprocess.CalledProcessError(100, list(args))

    monkeypatch.setattr(SubprocessExecutor, "run_streaming", staticmethod(failing_run_streaming))
    monkeypatch.setattr(shutil, "which", lambda name: None)

    with pytest.raises(OperationalError):
        EnvironmentPreflight(make_config()).ensure_tools()
