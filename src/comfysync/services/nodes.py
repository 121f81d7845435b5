"""Custom node synchronization."""

import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from comfysync.exceptions import AppBaseError, OperationalError
from comfysync.logger import get_logger
from comfysync.models.assets import NodeEntry
from comfysync.models.config import AppConfig
from comfysync.services.git import GitService, GitToolManager
from comfysync.utils.subprocess_executor import SubprocessExecutor

logger = get_logger(__name__)

REQUIREMENTS_FILE = "requirements.txt"

NodeAction = Literal["skipped", "updated", "cloned", "failed"]


@dataclass
class NodeSyncResult:
    """Outcome of syncing one node repository."""

    name: str
    action: NodeAction
    error: str | None = None


class NodeSyncer:
    """Clones missing custom node repositories and optionally updates existing ones.

    Every failure here is logged and recorded, never raised: nodes are extras
    and the model sync still has to run. A clone whose requirements fail to
    install stays on disk.
    """

    def __init__(
        self,
        config: AppConfig,
        git_service: GitService | None = None,
        python: str | None = None,
    ) -> None:
        self.config = config
        self.git_service = git_service or GitService(GitToolManager(config.nodes.git_executable))
        self.python = python or sys.executable

    @property
    def nodes_dir(self) -> Path:
        assert self.config.paths.custom_nodes_dir is not None
        return self.config.paths.custom_nodes_dir

    def sync(self) -> list[NodeSyncResult]:
        logger.info("Syncing custom nodes...")

        entries = self.config.nodes.repositories
        if not entries:
            logger.info("No custom nodes specified")
            return []

        self.nodes_dir.mkdir(parents=True, exist_ok=True)
        return [self.sync_node(entry) for entry in entries]

    def sync_node(self, entry: NodeEntry) -> NodeSyncResult:
        node_dir = self.nodes_dir / entry.name

        if node_dir.is_dir():
            logger.info("Custom node already exists", name=entry.name, action="skip")
            if not self.config.nodes.update:
                return NodeSyncResult(entry.name, "skipped")

            logger.info(f"Updating {entry.name}...")
            try:
                self.git_service.pull(node_dir)
            except AppBaseError as e:
                logger.error(str(e), name=entry.name)
                return NodeSyncResult(entry.name, "failed", str(e))
            self._log_commit(entry.name, node_dir)
            return NodeSyncResult(entry.name, "updated")

        logger.info("Installing custom node", name=entry.name, url=entry.url)
        try:
            self.git_service.clone(entry.url, node_dir)
        except AppBaseError as e:
            logger.error(str(e), name=entry.name)
            return NodeSyncResult(entry.name, "failed", str(e))
        self._log_commit(entry.name, node_dir)

        try:
            self.install_requirements(entry.name, node_dir)
        except OperationalError as e:
            # The clone is kept; only its dependencies are missing
            logger.error(str(e), name=entry.name)
            return NodeSyncResult(entry.name, "failed", str(e))

        return NodeSyncResult(entry.name, "cloned")

    def install_requirements(self, name: str, node_dir: Path) -> None:
        """
        Install a node's requirements.txt into the current interpreter, if it has one.

        Raises:
            OperationalError: If pip fails
        """
        requirements = node_dir / REQUIREMENTS_FILE
        if not requirements.is_file():
            return

        logger.info(f"Installing requirements for {name}...")
        try:
            SubprocessExecutor.run_streaming(self.python, "-m", "pip", "install", "-r", str(requirements), check=True)
        except (subprocess.CalledProcessError, OSError) as e:
            raise OperationalError("nodes.requirements_failed", name=name, error=str(e)) from e

    def _log_commit(self, name: str, node_dir: Path) -> None:
        commit_hash = self.git_service.get_commit_hash(node_dir)
        if commit_hash:
            logger.debug(f"Current commit: {commit_hash}", name=name)
