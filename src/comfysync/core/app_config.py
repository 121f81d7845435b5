"""Configuration management for comfysync."""

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pydantic
import yaml

from comfysync.exceptions import ConfigurationError
from comfysync.logger import get_logger
from comfysync.models.config import AppConfig

logger = get_logger(__name__)

TRUE_VALUES = ("true", "1", "yes", "on")
# Same reference syntax as os.path.expandvars
_VAR_PATTERN = re.compile(r"\$(\w+|\{[^}]*\})")

# Sections passed through without expansion, and sections where unset references become ""
VERBATIM_SECTIONS = frozenset({"tasks"})
BLANK_UNSET_SECTIONS = frozenset({"credentials"})


class AppConfigManager:
    """Builds the application configuration from defaults, environment and a YAML file.

    Precedence (lowest first): built-in defaults, environment variables, the
    configuration file.
    """

    def __init__(self, config_path: Path | None = None, environ: Mapping[str, str] | None = None) -> None:
        """Initialize configuration manager.

        Args:
            config_path: Path to config file. If None, uses COMFYSYNC_CONFIG_PATH
                        environment variable; without either only env/defaults apply
            environ: Environment mapping to read, defaults to os.environ
        """
        self.environ: Mapping[str, str] = os.environ if environ is None else environ

        if config_path is None:
            env_path = self.environ.get("COMFYSYNC_CONFIG_PATH")
            if env_path:
                config_path = Path(env_path).expanduser()

        self.config_path = config_path

    def load(self) -> AppConfig:
        """Load configuration from environment and file.

        Returns:
            Validated configuration

        Raises:
            ConfigurationError: If the file is not valid YAML or the merged data
                fails schema validation
        """
        # 1. Environment variables over built-in defaults
        config_data = self._env_data()

        # 2. Configuration file over environment
        if self.config_path is not None:
            if self.config_path.is_file():
                logger.info("Loading configuration", path=str(self.config_path))
                file_data = self._read_file(self.config_path)
                config_data = _deep_merge(config_data, file_data)
            else:
                logger.warning("Configuration file not found, using environment", path=str(self.config_path))

        # 3. Validate
        try:
            return AppConfig.model_validate(config_data)
        except pydantic.ValidationError as e:
            raise ConfigurationError("config.invalid", error=_format_errors(e)) from e

    def _read_file(self, path: Path) -> dict[str, Any]:
        try:
            with open(path, encoding="utf-8") as f:
                # Guard against BOM
                data = yaml.safe_load(f.read().lstrip("\ufeff"))
        except yaml.YAMLError as e:
            raise ConfigurationError("config.invalid_yaml", path=str(path), error=str(e)) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError("config.not_a_mapping", path=str(path))
        return self._expand_sections(data)

    def _expand_sections(self, data: dict[str, Any]) -> dict[str, Any]:
        """Expand environment references section by section.

        Task commands are kept verbatim: they are run without a shell and may
        contain `$1` or `$x` meant for awk or `bash -c`. Unset variables stay
        as written, except in credentials, where they expand to an empty
        string so a missing secret reads as "no credential".
        """
        expanded: dict[str, Any] = {}
        for section, value in data.items():
            if section in VERBATIM_SECTIONS:
                expanded[section] = value
            else:
                expanded[section] = self._expand_vars(value, keep_unset=section not in BLANK_UNSET_SECTIONS)
        return expanded

    def _expand_vars(self, obj: Any, keep_unset: bool = True) -> Any:  # noqa: ANN401
        """Expand $VAR and ${VAR} references in string values using the manager's environment."""
        if isinstance(obj, dict):
            return {k: self._expand_vars(v, keep_unset) for k, v in obj.items()}
        if isinstance(obj, list):
            return [self._expand_vars(item, keep_unset) for item in obj]
        if isinstance(obj, str):
            return _expandvars(obj, self.environ, keep_unset)
        return obj

    def _env_data(self) -> dict[str, Any]:
        """Collect configuration values from environment variables.

        Variables (with RunPod secret names as fallbacks for credentials):
            - COMFYUI_DIR, MODELS_DIR
            - UPDATE_NODES, START_COMFYUI
            - HUGGINGFACE_TOKEN (or hf), CIVITAI_API_KEY (or civitai_usenet)
            - CUSTOM_NODES, MODELS (newline-delimited), CUSTOM_TASKS (pipe-delimited)
            - COMFYSYNC_LOG_LEVEL

        Returns:
            Nested dictionary matching the AppConfig layout
        """
        env = self.environ
        data: dict[str, Any] = {}

        def put(section: str, key: str, value: Any) -> None:  # noqa: ANN401
            data.setdefault(section, {})[key] = value

        # Path overrides
        if comfyui_dir := env.get("COMFYUI_DIR"):
            put("paths", "comfyui_dir", comfyui_dir)
        if models_dir := env.get("MODELS_DIR"):
            put("paths", "models_dir", models_dir)

        # Flags
        if update := env.get("UPDATE_NODES"):
            put("nodes", "update", update.strip().lower() in TRUE_VALUES)
        if start := env.get("START_COMFYUI"):
            put("server", "start", start.strip().lower() in TRUE_VALUES)

        # Credentials
        if hf_token := env.get("HUGGINGFACE_TOKEN") or env.get("hf"):
            put("credentials", "huggingface_token", hf_token)
        if civitai_key := env.get("CIVITAI_API_KEY") or env.get("civitai_usenet"):
            put("credentials", "civitai_api_key", civitai_key)

        # Asset lists
        if nodes := env.get("CUSTOM_NODES"):
            put("nodes", "repositories", nodes)
        if models := env.get("MODELS"):
            data["models"] = models
        if tasks := env.get("CUSTOM_TASKS"):
            put("tasks", "commands", tasks)

        # Advanced overrides
        if log_level := env.get("COMFYSYNC_LOG_LEVEL"):
            put("advanced", "log_level", log_level)

        return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into base, recursing into nested mappings."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _expandvars(value: str, environ: Mapping[str, str], keep_unset: bool = True) -> str:
    """Expand $VAR and ${VAR} against a mapping.

    With keep_unset, references to unset variables are left unchanged, as
    os.path.expandvars does; otherwise they expand to an empty string.
    """

    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name.startswith("{"):
            name = name[1:-1]
        if name in environ:
            return environ[name]
        return match.group(0) if keep_unset else ""

    return _VAR_PATTERN.sub(replace, value)


def _format_errors(error: pydantic.ValidationError) -> str:
    """Render pydantic errors as '<dotted.location>: <message>' pairs."""
    parts = []
    for err in error.errors():
        location = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)
