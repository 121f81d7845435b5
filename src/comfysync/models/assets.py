"""Asset entry models: custom node repositories and model files."""

import posixpath
from enum import Enum
from pathlib import Path
from urllib.parse import urlparse

from pydantic import BaseModel, field_validator, model_validator


class ModelSource(str, Enum):
    """Download strategy a model entry is dispatched to."""

    HUGGINGFACE = "huggingface"
    CIVITAI = "civitai"
    URL = "url"


# Source tags accepted in the `source:identifier[:filename]` format
SOURCE_TAGS: dict[str, ModelSource] = {
    "hf": ModelSource.HUGGINGFACE,
    "huggingface": ModelSource.HUGGINGFACE,
    "civitai": ModelSource.CIVITAI,
    "url": ModelSource.URL,
    "http": ModelSource.URL,
    "https": ModelSource.URL,
}

URL_TAGS = {"url", "http", "https"}


def parse_list(value: str | list[str] | None, separator: str = "\n") -> list[str]:
    """
    Split a plain-text list into trimmed items.

    Blank items and items starting with '#' are dropped. A list input is
    cleaned the same way, item by item.

    Args:
        value: Delimited text, a list of strings, or None
        separator: Item separator for text input ("\\n" for nodes/models, "|" for tasks)

    Returns:
        Cleaned list of items
    """
    if value is None:
        return []
    raw_items = value.split(separator) if isinstance(value, str) else value

    items = []
    for raw in raw_items:
        item = str(raw).strip()
        if not item or item.startswith("#"):
            continue
        items.append(item)
    return items


def _is_plain_name(name: str) -> bool:
    """True for a single path component that stays inside its directory."""
    return "/" not in name and "\\" not in name and name not in (".", "..")


class NodeEntry(BaseModel):
    """A custom node repository to clone into ComfyUI's custom_nodes directory."""

    url: str

    @field_validator("url")
    @classmethod
    def strip_url(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("repository URL must not be empty")
        return v

    @property
    def name(self) -> str:
        """Local directory name: last path segment without a '.git' suffix."""
        base = posixpath.basename(self.url.rstrip("/"))
        if base.endswith(".git"):
            base = base[: -len(".git")]
        return base

    @classmethod
    def parse(cls, value: "str | dict[str, object] | NodeEntry") -> "NodeEntry":
        if isinstance(value, NodeEntry):
            return value
        if isinstance(value, dict):
            return cls.model_validate(value)
        if not isinstance(value, str):
            raise ValueError(f"repository entry must be a URL string, got {value!r}")
        return cls(url=value)


class ModelEntry(BaseModel):
    """
    A model file declared as `source:identifier[:filename]`.

    Identifier semantics depend on the source tag:
        hf/huggingface - owner/repo[/path/in/repo]
        civitai        - numeric model version id
        url            - full URL
        http/https     - URL with its scheme split off by the ':' delimiter
    """

    source: str
    identifier: str
    filename: str | None = None

    @field_validator("source")
    @classmethod
    def normalize_source(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("identifier")
    @classmethod
    def check_identifier(cls, v: str) -> str:
        if not v:
            raise ValueError("model identifier must not be empty")
        return v

    @field_validator("filename")
    @classmethod
    def check_filename(cls, v: str | None) -> str | None:
        if not v:
            return None
        if not _is_plain_name(v):
            raise ValueError(f"model filename must be a plain file name, got {v!r}")
        return v

    @model_validator(mode="after")
    def check_target(self) -> "ModelEntry":
        name = self.target_filename
        if not name:
            raise ValueError(f"cannot derive a file name from {self.identifier!r}, add :filename")
        if not _is_plain_name(name):
            raise ValueError(f"file name {name!r} derived from {self.identifier!r} is not usable, add :filename")
        return self

    @classmethod
    def parse(cls, value: "str | dict[str, object] | ModelEntry") -> "ModelEntry":
        """
        Parse a `source:identifier[:filename]` line.

        The text after the last ':' is only taken as the filename when it is
        non-empty, has no '/' and is not a port number of a URL entry, so that
        URL schemes and ports stay part of the identifier.
        """
        if isinstance(value, ModelEntry):
            return value
        if isinstance(value, dict):
            return cls.model_validate(value)
        if not isinstance(value, str):
            raise ValueError(f"model entry must be a string, got {value!r}")

        line = value.strip()
        source, sep, rest = line.partition(":")
        if not sep:
            raise ValueError(f"model entry must look like source:identifier[:filename], got {line!r}")
        source = source.strip().lower()

        identifier = rest
        filename = None
        head, sep, tail = rest.rpartition(":")
        if sep:
            is_port = source in URL_TAGS and tail.isdigit()
            if not tail:
                identifier = head
            elif "/" not in tail and not is_port:
                identifier = head
                filename = tail

        return cls(source=source, identifier=identifier.rstrip(":").strip(), filename=filename)

    @property
    def kind(self) -> ModelSource | None:
        """Download strategy, or None for an unknown source tag."""
        return SOURCE_TAGS.get(self.source)

    @property
    def fetch_url(self) -> str:
        """Full URL of a URL entry, with the scheme reattached for http/https tags."""
        if self.source in ("http", "https"):
            return f"{self.source}://{self.identifier.lstrip('/')}"
        return self.identifier

    @property
    def target_filename(self) -> str:
        if self.filename:
            return self.filename
        if self.kind is ModelSource.URL:
            path = urlparse(self.fetch_url).path
            if posixpath.basename(path):
                return posixpath.basename(path)
        return posixpath.basename(self.identifier.rstrip("/"))

    def target_path(self, models_dir: Path) -> Path:
        """Resolved location of this model in the flat models directory."""
        return models_dir / self.target_filename

    def hub_location(self) -> tuple[str, str]:
        """
        Split a hub identifier into (repo_id, path_in_repo).

        `owner/repo/nested/file.bin` -> (`owner/repo`, `nested/file.bin`). When
        the identifier names only a repository, the target filename is used as
        the path inside it.
        """
        parts = self.identifier.split("/", 2)
        repo_id = f"{parts[0]}/{parts[1]}" if len(parts) > 1 else self.identifier
        filename = parts[2] if len(parts) > 2 and parts[2] else self.target_filename
        return repo_id, filename

    def __str__(self) -> str:
        if self.filename:
            return f"{self.source}:{self.identifier}:{self.filename}"
        return f"{self.source}:{self.identifier}"
