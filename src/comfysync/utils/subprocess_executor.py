"""Subprocess execution utilities with automatic logging."""

import subprocess
from pathlib import Path

from comfysync.logger import get_logger

logger = get_logger(__name__)


class SubprocessExecutor:
    """Executes subprocess commands with automatic debug logging."""

    @staticmethod
    def run_sync(
        *args: str,
        cwd: Path | str | None = None,
        env: dict[str, str] | None = None,
        check: bool = False,
        timeout: float | None = None,
    ) -> subprocess.CompletedProcess[bytes]:
        """
        Execute a subprocess command, capturing its output.

        Args:
            *args: Command arguments
            cwd: Working directory
            env: Environment variables
            check: Whether to raise exception on non-zero exit code
            timeout: Timeout in seconds

        Returns:
            subprocess.CompletedProcess object

        Raises:
            subprocess.CalledProcessError: If check=True and returncode != 0
            subprocess.TimeoutExpired: If timeout is exceeded
            OSError: If the executable cannot be started
        """
        cmd_str = " ".join(args)
        logger.debug(f"Executing sync subprocess: {cmd_str}")
        if cwd:
            logger.debug(f"Working directory: {cwd}")

        cwd_arg = str(cwd) if cwd else None

        try:
            result = subprocess.run(args, check=check, capture_output=True, cwd=cwd_arg, env=env, timeout=timeout)

            # Log outputs at debug level
            if result.stdout:
                stdout_str = result.stdout.decode("utf-8", errors="replace")
                logger.debug(f"Subprocess stdout: {stdout_str}")
            if result.stderr:
                stderr_str = result.stderr.decode("utf-8", errors="replace")
                logger.debug(f"Subprocess stderr: {stderr_str}")

            return result

        except subprocess.TimeoutExpired:
            logger.error(f"Subprocess timeout after {timeout}s: {cmd_str}")
            raise
        except Exception as e:
            logger.error(f"Subprocess execution failed: {cmd_str} - {e}")
            raise

    @staticmethod
    def run_streaming(
        *args: str,
        cwd: Path | str | None = None,
        env: dict[str, str] | None = None,
        check: bool = False,
        timeout: float | None = None,
        display: str | None = None,
    ) -> subprocess.CompletedProcess[bytes]:
        """
        Execute a subprocess attached to the current terminal.

        Output is not captured so progress bars of git, pip and aria2c stay
        visible while they run.

        Args:
            *args: Command arguments
            cwd: Working directory
            env: Environment variables
            check: Whether to raise exception on non-zero exit code
            timeout: Timeout in seconds
            display: Command text to log instead of the arguments (for commands carrying secrets)

        Returns:
            subprocess.CompletedProcess object without stdout/stderr

        Raises:
            subprocess.CalledProcessError: If check=True and returncode != 0
            subprocess.TimeoutExpired: If timeout is exceeded
            OSError: If the executable cannot be started
        """
        cmd_str = display or " ".join(args)
        logger.debug(f"Executing subprocess with streaming: {cmd_str}")
        if cwd:
            logger.debug(f"Working directory: {cwd}")

        cwd_arg = str(cwd) if cwd else None

        try:
            result = subprocess.run(args, cwd=cwd_arg, env=env, timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.error(f"Subprocess timeout after {timeout}s: {cmd_str}")
            raise
        except Exception as e:
            logger.error(f"Subprocess execution failed: {cmd_str} - {e}")
            raise

        if result.returncode != 0:
            logger.debug(f"Subprocess exited with code {result.returncode}: {cmd_str}")
            if check:
                raise subprocess.CalledProcessError(result.returncode, list(args))
        return result
