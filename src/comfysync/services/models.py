"""Model file synchronization."""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal
from urllib.parse import urlencode

from comfysync.exceptions import DownloadError
from comfysync.logger import get_logger
from comfysync.models.assets import ModelEntry, ModelSource
from comfysync.models.config import AppConfig
from comfysync.services.downloads import Aria2Downloader, HuggingFaceDownloader, redact_url

logger = get_logger(__name__)

ModelAction = Literal["skipped", "downloaded", "unknown_source", "failed"]


@dataclass
class ModelSyncResult:
    """Outcome of syncing one model entry."""

    entry: ModelEntry
    target: Path
    action: ModelAction
    error: str | None = None


class ModelSyncer:
    """Downloads declared model files into the flat models directory.

    A file already present at the target path is never downloaded again. Download
    failures abort the sync unless `downloads.fail_fast` is disabled; unknown
    source tags are skipped with a warning.
    """

    def __init__(
        self,
        config: AppConfig,
        hub: HuggingFaceDownloader | None = None,
        fetcher: Aria2Downloader | None = None,
    ) -> None:
        self.config = config
        self.hub = hub or HuggingFaceDownloader()
        self.fetcher = fetcher or Aria2Downloader(config.downloads)

    @property
    def models_dir(self) -> Path:
        assert self.config.paths.models_dir is not None
        return self.config.paths.models_dir

    def sync(self) -> list[ModelSyncResult]:
        """
        Returns:
            One result per configured entry processed

        Raises:
            DownloadError: On the first failed download when fail-fast is enabled
        """
        logger.info("Syncing models...")

        entries = self.config.models
        if not entries:
            logger.info("No models specified")
            return []

        self.models_dir.mkdir(parents=True, exist_ok=True)

        results = []
        for entry in entries:
            try:
                results.append(self.sync_model(entry))
            except DownloadError as e:
                if self.config.downloads.fail_fast:
                    raise
                logger.error(str(e), entry=str(entry))
                results.append(ModelSyncResult(entry, entry.target_path(self.models_dir), "failed", str(e)))
        return results

    def sync_model(self, entry: ModelEntry) -> ModelSyncResult:
        target = entry.target_path(self.models_dir)

        if target.is_file():
            logger.info("Model already exists", name=target.name, action="skip")
            return ModelSyncResult(entry, target, "skipped")

        kind = entry.kind
        if kind is ModelSource.HUGGINGFACE:
            repo_id, filename = entry.hub_location()
            self.hub.download(repo_id, filename, target, token=self.config.credentials.huggingface_token or None)
        elif kind is ModelSource.CIVITAI:
            url = self.civitai_url(entry.identifier)
            logger.info(f"Downloading from CivitAI: Model ID {entry.identifier}")
            self.fetcher.download(url, target)
        elif kind is ModelSource.URL:
            url = entry.fetch_url
            logger.info(f"Downloading from URL: {redact_url(url)}")
            self.fetcher.download(url, target)
        else:
            logger.warning(f"Unknown model source: {entry.source}, skipping...")
            return ModelSyncResult(entry, target, "unknown_source")

        return ModelSyncResult(entry, target, "downloaded")

    def civitai_url(self, model_id: str) -> str:
        """Download URL for a CivitAI model version, authenticated when a key is configured."""
        url = f"{self.config.downloads.civitai_endpoint}/{model_id}"
        api_key = self.config.credentials.civitai_api_key
        if api_key:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}{urlencode({'token': api_key})}"
        return url
