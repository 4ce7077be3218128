"""Conversation data access and recency ordering.

The backend behind these endpoints is loosely typed: the list endpoint may
answer with a bare list, a wrapped list, or a single record, and individual
entries may be partial or garbage. Everything is normalized into a list and
filtered before any of it reaches callers.
"""

import logging
import re
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from src.client.http_client import HttpClient
from src.models.schemas import Conversation, ConversationMessage

logger = logging.getLogger(__name__)

# Keys under which the list endpoint may nest its records, in lookup order
WRAPPER_KEYS = ("data", "conversations", "items")

# Recency fields, highest priority first; camelCase names are legacy payloads
RECENCY_FIELDS = (
    "last_message_at",
    "updated_at",
    "created_at",
    "lastMessageAt",
    "updatedAt",
    "createdAt",
)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def is_valid_conversation(entry: Any) -> bool:
    """Check that an entry is a mapping with a non-empty id and user_id."""
    return isinstance(entry, Mapping) and bool(entry.get("id")) and bool(entry.get("user_id"))


def normalize_response(response: Any) -> list[Any]:
    """Reshape a list-endpoint response into a plain list of raw entries.

    Args:
        response: Decoded JSON body of any shape.

    Returns:
        The response itself if it is a list, the nested list under a wrapper
        key, a one-element list for a single record, otherwise [].
    """
    if isinstance(response, list):
        return response

    if isinstance(response, Mapping):
        for key in WRAPPER_KEYS:
            nested = response.get(key)
            if isinstance(nested, list):
                return nested
        if is_valid_conversation(response):
            return [response]

    return []


def _from_epoch_millis(millis: float) -> datetime | None:
    try:
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a timestamp into an aware datetime, or None if it does not parse.

    Accepts ISO-8601 text, and epoch milliseconds given as a number or as
    all-digit text. Naive ISO values are read as UTC.
    """
    if not value or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return _from_epoch_millis(value)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if text.isascii() and text.isdigit():
        return _from_epoch_millis(int(text))
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def recency_key(conversation: Conversation | Mapping[str, Any]) -> datetime:
    """Return the first parseable recency field, falling back to the epoch."""
    for field in RECENCY_FIELDS:
        if isinstance(conversation, Mapping):
            value = conversation.get(field)
        else:
            value = getattr(conversation, field, None)
        parsed = parse_timestamp(value)
        if parsed is not None:
            return parsed
    return EPOCH


def sort_by_recency(conversations: list[Conversation]) -> list[Conversation]:
    """Return a new list ordered most recent first.

    Ties keep their original relative order. The input is not modified.
    """
    return sorted(conversations, key=recency_key, reverse=True)


def clean_message_content(content: str) -> str:
    """Normalize stored message text for display.

    Normalizes line endings, collapses runs of blank lines, and strips
    retrieval context that older messages stored inline with the question.
    """
    if not content:
        return content

    cleaned = content.replace("\r\n", "\n")
    cleaned = re.sub(r"\n{3,}", "\n\n", cleaned).strip()

    cleaned = re.sub(r"\n\n\[WEB SEARCH CONTEXT[\s\S]*$", "", cleaned)
    cleaned = re.sub(r"^Document Context:[\s\S]*?\n\nUser Question: ", "", cleaned)
    cleaned = re.sub(r"^[\s\S]*?\n\nUser Question: ", "", cleaned)

    return cleaned.strip()


class ConversationRepository:
    """Conversation data access for a single backend.

    Holds no state between calls beyond the injected client.
    """

    def __init__(self, http_client: HttpClient) -> None:
        self._http = http_client

    async def fetch_conversations(
        self,
        user_id: str,
        *,
        conversation_type: str = "chat",
        page_id: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Conversation]:
        """Fetch a page of the user's conversations.

        Args:
            user_id: Owner of the conversations.
            conversation_type: Conversation type filter.
            page_id: Page filter; omitted from the query when None.
            skip: Number of records to skip.
            limit: Maximum number of records to return.

        Returns:
            Valid conversations in response order. Malformed entries are dropped.

        Raises:
            HttpClientError: If the request itself fails.
        """
        params: dict[str, Any] = {
            "skip": skip,
            "limit": limit,
            "conversation_type": conversation_type,
        }
        if page_id is not None:
            params["page_id"] = page_id

        response = await self._http.get(f"/api/v1/users/{user_id}/conversations", params=params)
        return self._validate_conversations(normalize_response(response))

    @staticmethod
    def _validate_conversations(entries: list[Any]) -> list[Conversation]:
        valid = [entry for entry in entries if is_valid_conversation(entry)]
        if len(valid) < len(entries):
            logger.debug(f"Dropped {len(entries) - len(valid)} malformed conversation entries")

        conversations: list[Conversation] = []
        for entry in valid:
            try:
                conversations.append(Conversation.model_validate(dict(entry)))
            except ValidationError as e:
                logger.warning(f"Skipping conversation {entry.get('id')!r}: {e}")
        return conversations

    def sort_by_recency(self, conversations: list[Conversation]) -> list[Conversation]:
        """Sort conversations most recent first. See sort_by_recency()."""
        return sort_by_recency(conversations)

    async def load_conversation_history(self, conversation_id: str) -> list[ConversationMessage]:
        """Load a conversation's messages, oldest first as the backend returns them.

        Args:
            conversation_id: Conversation to load.

        Returns:
            Messages with cleaned content. Messages from the model have sender "ai".
        """
        response = await self._http.get(f"/api/v1/conversations/{conversation_id}/with-messages")

        raw_messages = response.get("messages") if isinstance(response, Mapping) else None
        if not isinstance(raw_messages, list):
            return []

        messages = [
            ConversationMessage(
                id=str(msg.get("id") or f"history-{uuid.uuid4().hex[:12]}"),
                sender="ai" if msg.get("sender") == "llm" else "user",
                content=clean_message_content(str(msg.get("message") or "")),
                timestamp=str(msg["created_at"]) if msg.get("created_at") else None,
            )
            for msg in raw_messages
            if isinstance(msg, Mapping)
        ]
        logger.info(f"Loaded {len(messages)} messages for conversation {conversation_id}")
        return messages

    async def rename_conversation(self, conversation_id: str, title: str) -> None:
        """Set a conversation's title."""
        await self._http.put(f"/api/v1/conversations/{conversation_id}", json={"title": title})

    async def delete_conversation(self, conversation_id: str) -> None:
        await self._http.delete(f"/api/v1/conversations/{conversation_id}")
