"""Environment preflight: installation check and download tooling."""

import importlib.util
import shutil
import subprocess
import sys

from comfysync.exceptions import OperationalError, PreconditionError
from comfysync.logger import get_logger
from comfysync.models.config import AppConfig
from comfysync.services.git import GitToolManager
from comfysync.utils.subprocess_executor import SubprocessExecutor

logger = get_logger(__name__)


class EnvironmentPreflight:
    """Verifies the ComfyUI installation and installs missing download tools.

    Installing tools mutates the host (apt/pip); nothing here is rolled back.
    """

    def __init__(self, config: AppConfig, python: str | None = None) -> None:
        self.config = config
        self.python = python or sys.executable

    def run(self) -> None:
        self.check_installation()
        self.ensure_tools()

    def check_installation(self) -> None:
        """
        Raises:
            PreconditionError: If the ComfyUI directory does not exist
        """
        comfyui_dir = self.config.paths.comfyui_dir
        if not comfyui_dir.is_dir():
            raise PreconditionError("installation.not_found", path=str(comfyui_dir))
        logger.info("Found ComfyUI", path=str(comfyui_dir))

    def ensure_tools(self) -> None:
        """Install aria2c and huggingface_hub when they are missing."""
        logger.info("Checking dependencies...")

        if not shutil.which("aria2c"):
            logger.info("Installing aria2c for faster downloads...")
            self._install("aria2c", ["apt-get", "update"], ["apt-get", "install", "-y", "aria2"])

        if importlib.util.find_spec("huggingface_hub") is None:
            logger.info("Installing huggingface-hub...")
            self._install("huggingface-hub", [self.python, "-m", "pip", "install", "huggingface-hub"])
            importlib.invalidate_caches()

        if self.config.nodes.repositories:
            git_version = GitToolManager(self.config.nodes.git_executable).get_git_version()
            if git_version:
                logger.debug(f"Using {git_version}")
            else:
                logger.warning("git is not available, custom nodes cannot be cloned")

    def _install(self, tool: str, *commands: list[str]) -> None:
        for cmd in commands:
            try:
                SubprocessExecutor.run_streaming(*cmd, check=True)
            except (subprocess.CalledProcessError, OSError) as e:
                raise OperationalError("preflight.install_failed", tool=tool, error=str(e)) from e
