"""Utilities for comfysync."""

from comfysync.utils.subprocess_executor import SubprocessExecutor

__all__ = ["SubprocessExecutor"]
