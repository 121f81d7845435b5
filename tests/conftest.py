from pathlib import Path
from typing import Any

import pytest

from comfysync.models.config import AppConfig


@pytest.fixture
def comfyui_dir(tmp_path: Path) -> Path:
    path = tmp_path / "ComfyUI"
    path.mkdir()
    return path


@pytest.fixture
def make_config(comfyui_dir: Path):  # noqa: ANN201
    """Build an AppConfig rooted at the temporary ComfyUI directory."""

    def _make(**overrides: Any) -> AppConfig:  # noqa: ANN401
        data: dict[str, Any] = {"paths": {"comfyui_dir": str(comfyui_dir)}}
        data.update(overrides)
        return AppConfig.model_validate(data)

    return _make
