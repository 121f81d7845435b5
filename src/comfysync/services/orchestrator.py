"""Runs the sync steps in order."""

from dataclasses import dataclass, field

from comfysync.logger import get_logger
from comfysync.models.config import AppConfig

from .credentials import CredentialConfigurator, CredentialStatus
from .models import ModelSyncer, ModelSyncResult
from .nodes import NodeSyncer, NodeSyncResult
from .preflight import EnvironmentPreflight
from .tasks import TaskResult, TaskRunner

logger = get_logger(__name__)


@dataclass
class SyncReport:
    """Everything a sync run did, step by step."""

    credentials: CredentialStatus | None = None
    nodes: list[NodeSyncResult] = field(default_factory=list)
    models: list[ModelSyncResult] = field(default_factory=list)
    tasks: list[TaskResult] = field(default_factory=list)

    def summary(self) -> dict[str, int]:
        return {
            "nodes_cloned": sum(1 for r in self.nodes if r.action == "cloned"),
            "nodes_updated": sum(1 for r in self.nodes if r.action == "updated"),
            "nodes_skipped": sum(1 for r in self.nodes if r.action == "skipped"),
            "nodes_failed": sum(1 for r in self.nodes if r.action == "failed"),
            "models_downloaded": sum(1 for r in self.models if r.action == "downloaded"),
            "models_skipped": sum(1 for r in self.models if r.action in ("skipped", "unknown_source")),
            "models_failed": sum(1 for r in self.models if r.action == "failed"),
            "tasks_failed": sum(1 for r in self.tasks if not r.ok),
        }


class SyncOrchestrator:
    """Preflight, credentials, nodes, models, then custom tasks.

    Preflight and download errors propagate and end the run; everything the
    other steps report is collected in the SyncReport.
    """

    def __init__(
        self,
        config: AppConfig,
        preflight: EnvironmentPreflight | None = None,
        credentials: CredentialConfigurator | None = None,
        node_syncer: NodeSyncer | None = None,
        model_syncer: ModelSyncer | None = None,
        task_runner: TaskRunner | None = None,
    ) -> None:
        self.config = config
        self.preflight = preflight or EnvironmentPreflight(config)
        self.credentials = credentials or CredentialConfigurator(config.credentials)
        self.node_syncer = node_syncer or NodeSyncer(config)
        self.model_syncer = model_syncer or ModelSyncer(config)
        self.task_runner = task_runner or TaskRunner(config)

    def run(self) -> SyncReport:
        report = SyncReport()

        self.preflight.run()
        report.credentials = self.credentials.configure()
        report.nodes = self.node_syncer.sync()
        report.models = self.model_syncer.sync()
        report.tasks = self.task_runner.run()

        logger.info("Sync completed successfully!", **report.summary())
        return report
