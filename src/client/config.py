"""Client configuration with environment variable loading.

Pydantic-based configuration for the chat backend connection and the
default model used when a session starts without an explicit selection.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.schemas import ModelInfo

# Load environment variables from .env file
load_dotenv()


class ClientConfig(BaseModel):
    """Configuration for the chat backend client.

    Attributes:
        api_base_url: Backend base URL, without trailing slash.
        api_token: Optional bearer token sent with every request.
        request_timeout: Timeout in seconds for plain JSON requests.
        stream_timeout: Timeout in seconds for streaming generation requests.
        conversation_page_size: Number of conversations fetched per page.
        conversation_type: Conversation type tag used for new sessions.
        model_name: Default model identifier.
        model_provider: Provider of the default model.
        provider_id: Provider settings id of the default model.
        server_name: Server name hosting the default model.
        server_id: Server id hosting the default model.
    """

    model_config = ConfigDict(protected_namespaces=())

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("API_BASE_URL", "http://localhost:8005"),
        description="Chat backend base URL",
    )
    api_token: str | None = Field(
        default_factory=lambda: os.getenv("API_TOKEN") or None,
        description="Bearer token for the chat backend",
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("REQUEST_TIMEOUT", "30.0")),
        gt=0.0,
        description="Timeout in seconds for JSON requests",
    )
    stream_timeout: float = Field(
        default_factory=lambda: float(os.getenv("STREAM_TIMEOUT", "120.0")),
        gt=0.0,
        description="Timeout in seconds for streaming requests",
    )
    conversation_page_size: int = Field(
        default_factory=lambda: int(os.getenv("CONVERSATION_PAGE_SIZE", "50")),
        ge=1,
        le=500,
        description="Conversations fetched per page",
    )
    conversation_type: str = Field(
        default_factory=lambda: os.getenv("CONVERSATION_TYPE", "chat"),
        description="Conversation type tag",
    )
    model_name: str = Field(default_factory=lambda: os.getenv("MODEL_NAME", "llama3"))
    model_provider: str = Field(default_factory=lambda: os.getenv("MODEL_PROVIDER", "ollama"))
    provider_id: str = Field(
        default_factory=lambda: os.getenv("PROVIDER_ID", "ollama_servers_settings")
    )
    server_name: str = Field(default_factory=lambda: os.getenv("SERVER_NAME", "local"))
    server_id: str = Field(default_factory=lambda: os.getenv("SERVER_ID", "local"))

    @field_validator("api_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and strip the trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("API_BASE_URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("api_token")
    @classmethod
    def blank_token_is_none(cls, v: str | None) -> str | None:
        """Treat a whitespace-only token as unset."""
        if v is None or not v.strip():
            return None
        return v.strip()

    def default_model(self) -> ModelInfo:
        """Build the model descriptor configured for new sessions."""
        return ModelInfo(
            name=self.model_name,
            provider=self.model_provider,
            provider_id=self.provider_id,
            server_name=self.server_name,
            server_id=self.server_id,
        )


def get_client_config() -> ClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ClientConfig instance.

    Raises:
        ValueError: If an environment value is malformed.
    """
    return ClientConfig()
