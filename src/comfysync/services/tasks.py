"""Post-sync custom tasks."""

import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path

from comfysync.logger import get_logger
from comfysync.models.config import AppConfig
from comfysync.utils.subprocess_executor import SubprocessExecutor

logger = get_logger(__name__)


@dataclass
class TaskResult:
    """Exit status of one custom task. `returncode` is None when the command never ran."""

    command: str
    returncode: int | None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class TaskRunner:
    """Runs configured commands in order, continuing past failures.

    Commands are split with shlex and executed directly, without a shell, from
    the ComfyUI directory. Shell syntax such as pipes or `&&` is therefore not
    interpreted; wrap it in `bash -c '...'` explicitly when needed.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def run(self) -> list[TaskResult]:
        commands = self.config.tasks.commands
        if not commands:
            return []

        logger.info("Running custom tasks...")
        return [self.run_task(command) for command in commands]

    def run_task(self, command: str) -> TaskResult:
        logger.info(f"Executing: {command}")

        try:
            argv = shlex.split(command)
        except ValueError as e:
            return self._failed(command, None, f"cannot parse command: {e}")
        if not argv:
            return self._failed(command, None, "empty command")

        cwd: Path = self.config.paths.comfyui_dir
        try:
            result = SubprocessExecutor.run_streaming(*argv, cwd=cwd, timeout=self.config.tasks.timeout)
        except subprocess.TimeoutExpired:
            return self._failed(command, None, f"timed out after {self.config.tasks.timeout}s")
        except OSError as e:
            return self._failed(command, None, str(e))

        if result.returncode != 0:
            return self._failed(command, result.returncode, f"exit status {result.returncode}")
        return TaskResult(command, result.returncode)

    def _failed(self, command: str, returncode: int | None, error: str) -> TaskResult:
        logger.error(f"Failed to execute: {command}", error=error)
        return TaskResult(command, returncode, error)
