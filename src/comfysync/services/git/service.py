"""Git repository service."""

import subprocess
from pathlib import Path

from comfysync.exceptions import OperationalError
from comfysync.logger import get_logger
from comfysync.utils.subprocess_executor import SubprocessExecutor

from .tools import GitToolManager

logger = get_logger(__name__)


class GitService:
    """Manages git repository operations."""

    def __init__(self, tool_manager: GitToolManager) -> None:
        self.tool_manager = tool_manager

    def clone(self, repo_url: str, target_dir: Path) -> None:
        """
        Clone a repository into target_dir.

        Args:
            repo_url: Repository URL
            target_dir: Directory to create; must not exist yet

        Raises:
            OperationalError: If git fails
        """
        git_exec = self.tool_manager.ensure_git_installed()
        cmd = [git_exec, "clone", repo_url, str(target_dir)]

        try:
            SubprocessExecutor.run_streaming(*cmd, check=True)
        except (subprocess.CalledProcessError, OSError) as e:
            raise OperationalError("git.clone_failed", retriable=True, url=repo_url, error=str(e)) from e

    def pull(self, repo_dir: Path) -> None:
        """
        Pull the latest changes of the checked-out branch.

        Args:
            repo_dir: Repository directory

        Raises:
            OperationalError: If git fails
        """
        git_exec = self.tool_manager.ensure_git_installed()

        try:
            SubprocessExecutor.run_streaming(git_exec, "pull", cwd=repo_dir, check=True)
        except (subprocess.CalledProcessError, OSError) as e:
            raise OperationalError("git.pull_failed", retriable=True, path=str(repo_dir), error=str(e)) from e

    def get_commit_hash(self, repo_dir: Path) -> str | None:
        """Get the current commit hash of a repository, or None if it cannot be read."""
        git_exec = self.tool_manager.get_git_executable()
        try:
            result = SubprocessExecutor.run_sync(git_exec, "rev-parse", "HEAD", cwd=repo_dir, timeout=10)
        except OSError:
            return None
        if result.returncode != 0:
            return None
        return result.stdout.decode().strip()
