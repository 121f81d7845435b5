"""Core services for comfysync."""

from comfysync.core.app_config import AppConfigManager

__all__ = ["AppConfigManager"]
