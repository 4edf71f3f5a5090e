"""Client configuration with environment variable loading.

Pydantic-based configuration for the EduBot client. Every bound the core
enforces (request timeouts, reconnect delay, upload size) is read from here.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

MIB = 1024 * 1024


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


class ClientConfig(BaseModel):
    """Configuration for the EduBot client.

    Attributes:
        api_base_url: Base URL of the remote document Q&A service.
        chat_timeout: Seconds before a chat submission is abandoned.
        upload_timeout: Seconds before a document upload is abandoned.
        delete_timeout: Seconds before a document deletion is abandoned.
        history_timeout: Seconds before a history fetch is abandoned.
        recovery_delay: Seconds between session expiry and rebinding.
        max_upload_mb: Largest accepted upload, in MiB.
        history_limit: Maximum number of turns fetched when resuming a chat.
    """

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("API_BASE_URL", "http://localhost:8000"),
        description="Remote service base URL",
    )
    chat_timeout: float = Field(
        default_factory=lambda: _env_float("EDUBOT_CHAT_TIMEOUT", 30.0),
        gt=0.0,
    )
    upload_timeout: float = Field(
        default_factory=lambda: _env_float("EDUBOT_UPLOAD_TIMEOUT", 60.0),
        gt=0.0,
    )
    delete_timeout: float = Field(
        default_factory=lambda: _env_float("EDUBOT_DELETE_TIMEOUT", 15.0),
        gt=0.0,
    )
    history_timeout: float = Field(
        default_factory=lambda: _env_float("EDUBOT_HISTORY_TIMEOUT", 10.0),
        gt=0.0,
    )
    recovery_delay: float = Field(
        default_factory=lambda: _env_float("EDUBOT_RECOVERY_DELAY", 2.0),
        gt=0.0,
    )
    max_upload_mb: int = Field(
        default_factory=lambda: int(os.getenv("EDUBOT_MAX_UPLOAD_MB", "50")),
        ge=1,
        le=1024,
    )
    history_limit: int = Field(
        default_factory=lambda: int(os.getenv("EDUBOT_HISTORY_LIMIT", "50")),
        ge=1,
    )

    @field_validator("api_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and drop trailing slashes."""
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                "API_BASE_URL must start with http:// or https://"
            )
        return v

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * MIB


def get_client_config() -> ClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ClientConfig instance.

    Raises:
        ValidationError: If an environment value is out of range.
    """
    return ClientConfig()
