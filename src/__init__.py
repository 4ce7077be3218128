"""Chat Session Client - streaming generation and conversation history for chat views.

Wraps a chat backend's HTTP API with two composable domain components, plus the
transport and configuration they are wired with.

Components:
    - chat: Streaming generation lifecycle with cooperative cancellation
    - conversations: Conversation history retrieval and recency ordering
    - client: HTTP transport and environment-driven configuration
    - repositories: User and document pass-through data access
    - models: Request/response schemas
"""

__version__ = "0.1.0"
