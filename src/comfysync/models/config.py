"""Configuration data models for comfysync."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from comfysync.models.assets import ModelEntry, NodeEntry, parse_list


class StrictModel(BaseModel):
    """Base model rejecting unknown keys so config typos surface early."""

    model_config = ConfigDict(extra="forbid")


def _expand_path(v: str | Path | None) -> Path | None:
    if v is None or v == "":
        return None
    return Path(v).expanduser()


class PathsConfig(StrictModel):
    """Paths configuration."""

    comfyui_dir: Path = Path("/workspace/ComfyUI")
    models_dir: Path | None = None  # Flat directory, no per-type subfolders
    custom_nodes_dir: Path | None = None

    @field_validator("comfyui_dir", mode="before")
    @classmethod
    def expand_comfyui_dir(cls, v: str | Path) -> Path:
        """Expand user path for comfyui_dir."""
        return Path(v).expanduser()

    @field_validator("models_dir", "custom_nodes_dir", mode="before")
    @classmethod
    def expand_optional_path(cls, v: str | Path | None) -> Path | None:
        """Expand user path for optional paths."""
        return _expand_path(v)

    def model_post_init(self, __context: object) -> None:
        """Set default subdirectories if not specified."""
        if self.models_dir is None:
            self.models_dir = self.comfyui_dir / "models"
        if self.custom_nodes_dir is None:
            self.custom_nodes_dir = self.comfyui_dir / "custom_nodes"


class CredentialsConfig(StrictModel):
    """API credentials used for outbound downloads."""

    huggingface_token: str = ""
    civitai_api_key: str = ""

    @field_validator("huggingface_token", "civitai_api_key", mode="before")
    @classmethod
    def none_to_empty(cls, v: str | None) -> str:
        return (v or "").strip()


class NodesConfig(StrictModel):
    """Custom node repositories."""

    update: bool = False
    repositories: list[NodeEntry] = Field(default_factory=list)
    git_executable: str | None = None  # Defaults to git on PATH

    @field_validator("repositories", mode="before")
    @classmethod
    def parse_repositories(cls, v: str | list[str] | None) -> list[NodeEntry]:
        return [NodeEntry.parse(item) for item in _clean_items(v, "\n")]


class TasksConfig(StrictModel):
    """Post-sync commands."""

    commands: list[str] = Field(default_factory=list)
    timeout: float | None = None  # Per-command timeout in seconds

    @field_validator("commands", mode="before")
    @classmethod
    def parse_commands(cls, v: str | list[str] | None) -> list[str]:
        return parse_list(v, separator="|")


class ServerConfig(StrictModel):
    """ComfyUI server launch configuration."""

    start: bool = True
    host: str = "0.0.0.0"
    port: int = 8188
    python: str | None = None  # Interpreter running main.py, defaults to sys.executable
    extra_args: list[str] = Field(default_factory=list)


class DownloadsConfig(StrictModel):
    """Download behavior for model files."""

    fail_fast: bool = True  # A failed model download aborts the run
    connections: int = Field(default=16, ge=1)  # aria2c -x
    splits: int = Field(default=16, ge=1)  # aria2c -s
    min_split_size: str = "1M"  # aria2c -k
    civitai_endpoint: str = "https://civitai.com/api/download/models"

    @field_validator("civitai_endpoint")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class AdvancedConfig(StrictModel):
    """Advanced configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["console", "json"] = "console"

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class AppConfig(StrictModel):
    """Application configuration."""

    paths: PathsConfig = Field(default_factory=PathsConfig)
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    nodes: NodesConfig = Field(default_factory=NodesConfig)
    models: list[ModelEntry] = Field(default_factory=list)
    tasks: TasksConfig = Field(default_factory=TasksConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    downloads: DownloadsConfig = Field(default_factory=DownloadsConfig)
    advanced: AdvancedConfig = Field(default_factory=AdvancedConfig)

    @field_validator("models", mode="before")
    @classmethod
    def parse_models(cls, v: str | list[str] | None) -> list[ModelEntry]:
        return [ModelEntry.parse(item) for item in _clean_items(v, "\n")]


def _clean_items(v: object, separator: str) -> list[object]:
    """Clean text/list input while letting mappings and parsed entries through."""
    if v is None or isinstance(v, str):
        return list(parse_list(v, separator))
    if not isinstance(v, list):
        raise ValueError(f"expected a list or delimited text, got {type(v).__name__}")

    items: list[object] = []
    for item in v:
        if isinstance(item, str):
            items.extend(parse_list([item]))
        else:
            items.append(item)
    return items
