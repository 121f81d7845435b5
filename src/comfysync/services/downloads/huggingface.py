"""HuggingFace Hub downloads."""

import shutil
import tempfile
from pathlib import Path

from comfysync.exceptions import DownloadError
from comfysync.logger import get_logger

logger = get_logger(__name__)

STAGING_PREFIX = ".comfysync-"


class HuggingFaceDownloader:
    """Fetches single files from the HuggingFace Hub into the models directory."""

    def download(self, repo_id: str, filename: str, target: Path, token: str | None = None) -> Path:
        """
        Download `filename` from `repo_id` and place it at `target`.

        The hub client mirrors the repository layout and keeps its own metadata
        under its local_dir, so it writes into a staging directory next to
        `target`. Only the downloaded file is moved out; other files in the
        models directory are never touched.

        Args:
            repo_id: Repository id (owner/repo)
            filename: Path of the file inside the repository
            target: Final location of the file
            token: Hub access token, or None for anonymous access

        Returns:
            The target path

        Raises:
            DownloadError: If the hub client fails
        """
        logger.info(f"Downloading from HuggingFace: {repo_id}/{filename}")

        try:
            from huggingface_hub import hf_hub_download

            target.parent.mkdir(parents=True, exist_ok=True)

            with tempfile.TemporaryDirectory(prefix=STAGING_PREFIX, dir=target.parent) as staging:
                file_path = hf_hub_download(
                    repo_id=repo_id,
                    filename=filename,
                    local_dir=staging,
                    token=token or None,
                )
                shutil.move(str(file_path), str(target))
        except Exception as e:
            raise DownloadError(
                "download.huggingface_failed", repo_id=repo_id, filename=filename, error=str(e)
            ) from e

        logger.info(f"Downloaded to: {target}")
        return target
