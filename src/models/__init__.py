"""Pydantic models shared across the client.

Provides type safety and validation at the boundary with a loosely-typed backend.

Models:
    - ModelInfo / PersonaInfo: Model and persona descriptors for a generation
    - StreamingRequest / StreamingCallbacks: One generation attempt and its sinks
    - Conversation: Conversation record (id and user_id required)
    - ConversationMessage: Message from a conversation's history
    - User / Document: Pass-through records
"""

from src.models.schemas import (
    Conversation,
    ConversationMessage,
    Document,
    ModelInfo,
    PersonaInfo,
    StreamingCallbacks,
    StreamingRequest,
    User,
)

__all__ = [
    "Conversation",
    "ConversationMessage",
    "Document",
    "ModelInfo",
    "PersonaInfo",
    "StreamingCallbacks",
    "StreamingRequest",
    "User",
]
