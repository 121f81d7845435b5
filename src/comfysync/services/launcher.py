"""ComfyUI server launch."""

import os
import sys

from comfysync.exceptions import OperationalError
from comfysync.logger import get_logger
from comfysync.models.config import AppConfig

logger = get_logger(__name__)


class ServerLauncher:
    """Replaces the current process with the ComfyUI server when enabled."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def build_command(self) -> list[str]:
        server = self.config.server
        python = server.python or sys.executable
        return [python, "main.py", "--listen", server.host, "--port", str(server.port), *server.extra_args]

    def launch(self) -> None:
        """
        Start ComfyUI in the foreground. Does not return if the server starts.

        Raises:
            OperationalError: If the interpreter cannot be executed
        """
        if not self.config.server.start:
            logger.info("Sync complete! Start ComfyUI manually when ready.")
            return

        cmd = self.build_command()
        logger.info("Starting ComfyUI...", host=self.config.server.host, port=self.config.server.port)

        # Flush before exec, buffered output would be lost
        sys.stdout.flush()
        sys.stderr.flush()

        os.chdir(self.config.paths.comfyui_dir)
        try:
            os.execvp(cmd[0], cmd)
        except OSError as e:
            raise OperationalError("launcher.exec_failed", python=cmd[0], error=str(e)) from e
