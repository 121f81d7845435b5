"""End-to-end tests for the command line entry point."""

from pathlib import Path

import pytest

import comfysync.main as cli
from comfysync.exceptions import DownloadError
from comfysync.models.config import AppConfig, DownloadsConfig
from comfysync.services.downloads import Aria2Downloader
from comfysync.services.models import ModelSyncer
from comfysync.services.orchestrator import SyncReport

ENV_VARS = [
    "COMFYSYNC_CONFIG_PATH",
    "COMFYUI_DIR",
    "MODELS_DIR",
    "UPDATE_NODES",
    "START_COMFYUI",
    "CUSTOM_NODES",
    "MODELS",
    "CUSTOM_TASKS",
    "COMFYSYNC_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def write_config(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_missing_installation_exits_with_one(tmp_path: Path) -> None:
    config_file = write_config(tmp_path / "sync.yaml", f"paths:\n  comfyui_dir: {tmp_path / 'missing'}\n")

    assert cli.main([str(config_file), "--no-start"]) == 1


def test_invalid_config_exits_with_two(tmp_path: Path) -> None:
    config_file = write_config(tmp_path / "sync.yaml", "server:\n  strat: true\n")

    assert cli.main([str(config_file)]) == 2


def test_successful_sync_without_start(
    tmp_path: Path, comfyui_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    seen: dict[str, AppConfig] = {}

    class FakeOrchestrator:
        def __init__(self, config: AppConfig) -> None:
            seen["config"] = config

        def run(self) -> SyncReport:
            return SyncReport()

    monkeypatch.setattr(cli, "SyncOrchestrator", FakeOrchestrator)
    config_file = write_config(
        tmp_path / "sync.yaml",
        f"paths:\n  comfyui_dir: {comfyui_dir}\nserver:\n  start: true\n",
    )

    assert cli.main([str(config_file), "--no-start", "--log-level", "debug"]) == 0
    assert seen["config"].server.start is False
    assert seen["config"].advanced.log_level == "DEBUG"


def test_interrupt_exits_with_130(make_config, monkeypatch: pytest.MonkeyPatch) -> None:  # noqa: ANN001
    class InterruptedOrchestrator:
        def __init__(self, config: AppConfig) -> None:
            pass

        def run(self) -> SyncReport:
            raise KeyboardInterrupt

    monkeypatch.setattr(cli, "SyncOrchestrator", InterruptedOrchestrator)

    assert cli.run(make_config()) == 130


def test_fail_fast_download_error_exits_with_one(make_config, monkeypatch: pytest.MonkeyPatch) -> None:  # noqa: ANN001
    class UnreachableFetcher(Aria2Downloader):
        def download(self, url: str, target: Path) -> Path:
            raise DownloadError("download.aria2_failed", url=url, error="exit status 3")

    class ModelsOnlyOrchestrator:
        def __init__(self, config: AppConfig) -> None:
            self.syncer = ModelSyncer(config, fetcher=UnreachableFetcher(DownloadsConfig()))

        def run(self) -> SyncReport:
            return SyncReport(models=self.syncer.sync())

    monkeypatch.setattr(cli, "SyncOrchestrator", ModelsOnlyOrchestrator)
    config = make_config(models=["url:https://host/a.bin", "url:https://host/b.bin"], server={"start": False})

    assert config.downloads.fail_fast is True
    assert cli.run(config) == 1
