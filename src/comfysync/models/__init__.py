"""Data models for comfysync."""

from comfysync.models.assets import ModelEntry, ModelSource, NodeEntry, parse_list
from comfysync.models.config import AppConfig

__all__ = [
    "AppConfig",
    "ModelEntry",
    "ModelSource",
    "NodeEntry",
    "parse_list",
]
