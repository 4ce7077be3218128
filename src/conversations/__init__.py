"""Conversation history retrieval and ordering.

Responsibilities:
    - Fetch a user's conversations from a loosely-typed list endpoint
    - Normalize response shapes and drop malformed records
    - Order conversations by recency (last message, update, creation)
    - Load, rename and delete individual conversations
"""

from src.conversations.repository import ConversationRepository, sort_by_recency

__all__ = ["ConversationRepository", "sort_by_recency"]
