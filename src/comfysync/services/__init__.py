"""Sync services."""

from .credentials import CredentialConfigurator, CredentialStatus
from .launcher import ServerLauncher
from .models import ModelSyncer, ModelSyncResult
from .nodes import NodeSyncer, NodeSyncResult
from .orchestrator import SyncOrchestrator, SyncReport
from .preflight import EnvironmentPreflight
from .tasks import TaskResult, TaskRunner

__all__ = [
    "CredentialConfigurator",
    "CredentialStatus",
    "EnvironmentPreflight",
    "ModelSyncResult",
    "ModelSyncer",
    "NodeSyncResult",
    "NodeSyncer",
    "ServerLauncher",
    "SyncOrchestrator",
    "SyncReport",
    "TaskResult",
    "TaskRunner",
]
