"""API credential registration."""

from dataclasses import dataclass

from comfysync.logger import get_logger
from comfysync.models.config import CredentialsConfig

logger = get_logger(__name__)


@dataclass(frozen=True)
class CredentialStatus:
    """Which credentials were available for this run."""

    huggingface: bool
    civitai: bool


class CredentialConfigurator:
    """Registers the HuggingFace token and reports which API keys are present.

    Missing credentials only produce warnings: public assets still download
    without them.
    """

    def __init__(self, credentials: CredentialsConfig) -> None:
        self.credentials = credentials

    def configure(self) -> CredentialStatus:
        if self.credentials.huggingface_token:
            logger.info("Configuring HuggingFace token...")
            self._login_huggingface(self.credentials.huggingface_token)
        else:
            logger.warning("No HuggingFace token found")

        # The CivitAI key is appended per download; nothing to register here
        if self.credentials.civitai_api_key:
            logger.info("CivitAI API key detected")
        else:
            logger.warning("No CivitAI API key found")

        return CredentialStatus(
            huggingface=bool(self.credentials.huggingface_token),
            civitai=bool(self.credentials.civitai_api_key),
        )

    def _login_huggingface(self, token: str) -> None:
        """Best-effort login; the token is still passed explicitly to each hub download."""
        try:
            from huggingface_hub import login

            login(token=token, add_to_git_credential=True)
        except Exception as e:
            logger.warning(f"HuggingFace login failed, continuing: {e}")
