"""Segmented HTTP downloads through aria2c."""

import subprocess
from pathlib import Path
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from comfysync.exceptions import DownloadError
from comfysync.logger import get_logger
from comfysync.models.config import DownloadsConfig
from comfysync.utils.subprocess_executor import SubprocessExecutor

logger = get_logger(__name__)

SECRET_QUERY_KEYS = {"token", "api_key", "apikey", "key"}


def redact_url(url: str) -> str:
    """Mask credential query parameters so URLs can be logged."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    query = [
        (k, "***" if k.lower() in SECRET_QUERY_KEYS else v)
        for k, v in parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urlunsplit(parts._replace(query=urlencode(query, safe="*")))


class Aria2Downloader:
    """Downloads a URL to an exact file path with aria2c's multi-connection mode."""

    def __init__(self, settings: DownloadsConfig, executable: str = "aria2c") -> None:
        self.settings = settings
        self.executable = executable

    def build_command(self, url: str, target: Path) -> list[str]:
        return [
            self.executable,
            "-x",
            str(self.settings.connections),
            "-s",
            str(self.settings.splits),
            "-k",
            self.settings.min_split_size,
            f"--dir={target.parent}",
            f"--out={target.name}",
            url,
        ]

    def download(self, url: str, target: Path) -> Path:
        """
        Raises:
            DownloadError: If aria2c is missing or exits non-zero
        """
        safe_url = redact_url(url)
        cmd = self.build_command(url, target)
        display = " ".join([*cmd[:-1], safe_url])

        try:
            SubprocessExecutor.run_streaming(*cmd, check=True, display=display)
        except subprocess.CalledProcessError as e:
            # str(e) would echo the URL including any token
            raise DownloadError("download.aria2_failed", url=safe_url, error=f"exit status {e.returncode}") from e
        except OSError as e:
            raise DownloadError("download.aria2_failed", url=safe_url, error=str(e)) from e

        return target
