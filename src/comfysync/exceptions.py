"""Centralized exception hierarchy for comfysync.

Errors carry a dot-path message key plus format parameters. The key is
rendered through an English catalogue for log output, and every error knows
the process exit code it maps to.
"""

MESSAGES: dict[str, str] = {
    "config.invalid_yaml": "Configuration file {path} is not valid YAML: {error}",
    "config.not_a_mapping": "Configuration file {path} must contain a mapping at the top level",
    "config.invalid": "Invalid configuration: {error}",
    "installation.not_found": "ComfyUI not found at {path}",
    "preflight.install_failed": "Failed to install {tool}: {error}",
    "git.not_found_in_path": "git executable not found in PATH",
    "git.invalid_path": "Configured git executable is not usable: {path}",
    "git.clone_failed": "Failed to clone {url}: {error}",
    "git.pull_failed": "Failed to update {path}: {error}",
    "nodes.requirements_failed": "Failed to install requirements for {name}: {error}",
    "download.huggingface_failed": "Error downloading {repo_id}/{filename}: {error}",
    "download.aria2_failed": "Download failed for {url}: {error}",
    "launcher.exec_failed": "Failed to start ComfyUI with {python}: {error}",
}


class AppBaseError(Exception):
    """Base exception for all application-specific errors."""

    def __init__(
        self,
        message_key: str,
        exit_code: int = 1,
        retriable: bool = False,
        **params: object,
    ) -> None:
        """
        Initialize the error.

        Args:
            message_key: Dot-path into MESSAGES (e.g., 'installation.not_found')
            exit_code: Process exit code the CLI uses for this error
            retriable: Whether the operation can be retried
            **params: Parameters for string formatting in the message
        """
        super().__init__(message_key)
        self.message_key = message_key
        self.exit_code = exit_code
        self.retriable = retriable
        self.params = params

    def __str__(self) -> str:
        template = MESSAGES.get(self.message_key)
        if template is not None:
            try:
                return template.format(**self.params)
            except (KeyError, IndexError):
                pass
        params_str = ", ".join(f"{k}={v}" for k, v in self.params.items())
        return f"[{self.message_key}] {params_str} (retriable: {self.retriable})"


class ConfigurationError(AppBaseError):
    """Raised when the configuration file or environment cannot be loaded."""

    def __init__(self, message_key: str, **params: object) -> None:
        super().__init__(message_key, exit_code=2, **params)


class ValidationError(AppBaseError):
    """Raised when input validation fails."""

    def __init__(self, message_key: str, **params: object) -> None:
        super().__init__(message_key, exit_code=2, **params)


class PreconditionError(AppBaseError):
    """Raised when the host does not satisfy a hard requirement (e.g., missing install dir)."""

    def __init__(self, message_key: str, **params: object) -> None:
        super().__init__(message_key, exit_code=1, **params)


class OperationalError(AppBaseError):
    """Raised when an operational failure occurs (git command, package install, etc.)."""

    def __init__(self, message_key: str, retriable: bool = False, **params: object) -> None:
        super().__init__(message_key, exit_code=1, retriable=retriable, **params)


class DownloadError(OperationalError):
    """Raised when a model file could not be downloaded."""

    def __init__(self, message_key: str, **params: object) -> None:
        super().__init__(message_key, retriable=True, **params)
