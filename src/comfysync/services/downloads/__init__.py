"""Model download strategies."""

from .aria2 import Aria2Downloader, redact_url
from .huggingface import HuggingFaceDownloader

__all__ = ["Aria2Downloader", "HuggingFaceDownloader", "redact_url"]
