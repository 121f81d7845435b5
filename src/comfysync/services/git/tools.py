"""Git executable resolution."""

import os
import shutil
from pathlib import Path

from comfysync.exceptions import ValidationError
from comfysync.logger import get_logger
from comfysync.utils.subprocess_executor import SubprocessExecutor

logger = get_logger(__name__)


class GitToolManager:
    """Locates the git executable used for node repositories."""

    def __init__(self, custom_path: str | None = None) -> None:
        """
        Args:
            custom_path: Explicit git executable; when None, git is looked up on PATH
        """
        self.custom_path = custom_path

    def get_git_executable(self) -> str:
        """Get Git executable path based on configuration."""
        if self.custom_path:
            return self.custom_path
        return "git"

    def ensure_git_installed(self) -> str:
        """
        Ensure Git is installed and return the executable path.

        Returns:
            Path to git executable

        Raises:
            ValidationError: If Git is not installed or invalid
        """
        git_exec = self.get_git_executable()

        if git_exec == "git":
            if not shutil.which("git"):
                raise ValidationError("git.not_found_in_path")
        else:
            if not Path(git_exec).exists() or not os.access(git_exec, os.X_OK):
                raise ValidationError("git.invalid_path", path=git_exec)

        return git_exec

    def get_git_version(self) -> str | None:
        """Return `git --version` output, or None if git cannot be run."""
        try:
            result = SubprocessExecutor.run_sync(self.get_git_executable(), "--version", timeout=10)
        except OSError as e:
            logger.debug(f"Error executing git: {e}")
            return None

        if result.returncode != 0:
            return None
        # Expected output: "git version 2.x.x"
        return result.stdout.decode().strip()
