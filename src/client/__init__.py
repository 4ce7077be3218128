"""HTTP transport and configuration.

Responsibilities:
    - Environment-driven client configuration with validation
    - Async JSON requests against the chat backend
    - Streaming responses for server-sent events

Every other package receives an HttpClient by injection and never touches
httpx directly.
"""

from src.client.config import ClientConfig, get_client_config
from src.client.http_client import HttpClient, HttpClientError

__all__ = ["ClientConfig", "HttpClient", "HttpClientError", "get_client_config"]
