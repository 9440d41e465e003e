"""Shared configuration for the formatting pipeline.

Remote-classifier credentials come from the environment (optionally a ``.env``
file at the project root).  All three Azure OpenAI variables must be set for
the remote strategy to be attempted; otherwise the local engine is used.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

ROOT = Path(__file__).parent.parent.parent.resolve()
load_dotenv(ROOT / ".env")

DEFAULT_REMOTE_TIMEOUT = 30.0


class RemoteSettings(BaseModel, frozen=True):
    """Connection settings for the remote AI classifier."""

    endpoint: str = ""
    api_key: str = ""
    deployment: str = ""
    timeout: float = DEFAULT_REMOTE_TIMEOUT
    enabled: bool = True

    @property
    def configured(self) -> bool:
        """True when endpoint, key and deployment are all present."""
        return all([self.endpoint, self.api_key, self.deployment])

    @property
    def base_url(self) -> str:
        return f"{self.endpoint.rstrip('/')}/openai/v1/"


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off")


def load_remote_settings() -> RemoteSettings:
    """Read the remote classifier settings from the environment."""
    try:
        timeout = float(os.getenv("SMART_FORMAT_REMOTE_TIMEOUT", str(DEFAULT_REMOTE_TIMEOUT)))
    except ValueError:
        timeout = DEFAULT_REMOTE_TIMEOUT
    return RemoteSettings(
        endpoint=os.getenv("AZURE_OPENAI_ENDPOINT", "").rstrip("/"),
        api_key=os.getenv("AZURE_OPENAI_API_KEY", ""),
        deployment=os.getenv("AZURE_OPENAI_DEPLOYMENT_NAME", ""),
        timeout=timeout,
        enabled=_env_flag("SMART_FORMAT_REMOTE_ENABLED", True),
    )
