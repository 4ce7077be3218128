"""Generation service contract and its HTTP implementation.

The session manager only depends on the GenerationService protocol.
HttpGenerationService implements it against the backend's chat endpoint,
consuming server-sent events and racing the transport against the
cancellation token.
"""

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any, Protocol

from src.chat.cancellation import CancellationToken, GenerationCancelledError
from src.client.http_client import HttpClient
from src.models.schemas import ModelInfo, PersonaInfo

logger = logging.getLogger(__name__)

CHAT_PATH = "/api/v1/ai/providers/chat"
CANCEL_PATH = "/api/v1/ai/providers/cancel"

_DONE = object()


class GenerationError(Exception):
    """Raised when the backend reports an error inside the response."""

    pass


class GenerationService(Protocol):
    """Collaborator that performs generation and exposes cancellation."""

    async def send_prompt(
        self,
        prompt: str,
        model: ModelInfo,
        use_streaming: bool,
        conversation_id: str | None,
        conversation_type: str,
        on_chunk: Callable[[str], None],
        on_conversation_id: Callable[[str], None],
        page_context: dict[str, Any] | None,
        persona: PersonaInfo | None,
        cancellation_token: CancellationToken | None,
    ) -> None: ...

    async def cancel_generation(self, conversation_id: str) -> None: ...


def call_once(callback: Callable[[str], None]) -> Callable[[str], None]:
    """Wrap a sink so only its first invocation goes through."""
    fired = False

    def wrapper(value: str) -> None:
        nonlocal fired
        if fired:
            return
        fired = True
        callback(value)

    return wrapper


def _decode_event(line: str) -> Any:
    """Decode one SSE line into a payload dict, _DONE, or None to skip it."""
    data_str = line.strip()
    if data_str.startswith("data:"):
        data_str = data_str[5:].strip()
    if not data_str:
        return None
    if data_str == "[DONE]":
        return _DONE
    try:
        data = json.loads(data_str)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def _extract_text(data: dict[str, Any]) -> str:
    """Pull the text fragment out of a chat payload, or "" if it has none."""
    choices = data.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        first = choices[0]
        for key in ("delta", "message"):
            part = first.get(key)
            if isinstance(part, dict) and isinstance(part.get("content"), str):
                return part["content"]
        if isinstance(first.get("text"), str):
            return first["text"]
    for key in ("text", "content"):
        if isinstance(data.get(key), str):
            return data[key]
    return ""


class HttpGenerationService:
    """GenerationService over the backend's HTTP chat endpoint."""

    def __init__(self, http_client: HttpClient) -> None:
        self._http = http_client

    @staticmethod
    def build_payload(
        prompt: str,
        model: ModelInfo,
        use_streaming: bool,
        conversation_id: str | None,
        conversation_type: str,
        page_context: dict[str, Any] | None,
        persona: PersonaInfo | None,
    ) -> dict[str, Any]:
        """Build the chat request body."""
        return {
            "provider": model.provider,
            "settings_id": model.provider_id,
            "server_id": model.server_id,
            "model": model.name,
            "messages": [{"role": "user", "content": prompt}],
            "stream": use_streaming,
            "conversation_id": conversation_id,
            "conversation_type": conversation_type,
            "page_context": page_context,
            "persona_id": persona.id if persona else None,
            "persona": persona.model_dump() if persona else None,
        }

    async def send_prompt(
        self,
        prompt: str,
        model: ModelInfo,
        use_streaming: bool,
        conversation_id: str | None,
        conversation_type: str,
        on_chunk: Callable[[str], None],
        on_conversation_id: Callable[[str], None],
        page_context: dict[str, Any] | None = None,
        persona: PersonaInfo | None = None,
        cancellation_token: CancellationToken | None = None,
    ) -> None:
        """Send a prompt and deliver the response through the sinks.

        Raises:
            GenerationCancelledError: If the token fires before the response ends.
            GenerationError: If the backend reports an error event.
            HttpClientError: On transport failure.
        """
        token = cancellation_token or CancellationToken()
        token.raise_if_cancelled()

        payload = self.build_payload(
            prompt,
            model,
            use_streaming,
            conversation_id,
            conversation_type,
            page_context,
            persona,
        )
        consume = asyncio.ensure_future(
            self._consume(payload, use_streaming, on_chunk, call_once(on_conversation_id))
        )
        watcher = asyncio.ensure_future(token.wait())
        try:
            await asyncio.wait({consume, watcher}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            watcher.cancel()
            if not consume.done():
                consume.cancel()
                # Let the response close before returning.
                await asyncio.wait({consume})

        if not consume.cancelled():
            consume.result()
            return
        logger.info(f"Generation cancelled (conversation={conversation_id})")
        raise GenerationCancelledError("Generation cancelled")

    async def _consume(
        self,
        payload: dict[str, Any],
        use_streaming: bool,
        on_chunk: Callable[[str], None],
        on_conversation_id: Callable[[str], None],
    ) -> None:
        if not use_streaming:
            data = await self._http.post(CHAT_PATH, json=payload)
            if isinstance(data, dict):
                self._handle_payload(data, on_chunk, on_conversation_id)
            return

        async with self._http.stream("POST", CHAT_PATH, json=payload) as response:
            async for line in response.aiter_lines():
                data = _decode_event(line)
                if data is _DONE:
                    return
                if data is None:
                    continue
                self._handle_payload(data, on_chunk, on_conversation_id)

    @staticmethod
    def _handle_payload(
        data: dict[str, Any],
        on_chunk: Callable[[str], None],
        on_conversation_id: Callable[[str], None],
    ) -> None:
        if error := data.get("error"):
            raise GenerationError(str(error))
        if conversation_id := data.get("conversation_id"):
            on_conversation_id(str(conversation_id))
        if text := _extract_text(data):
            on_chunk(text)

    async def cancel_generation(self, conversation_id: str) -> None:
        """Ask the backend to stop producing tokens for a conversation."""
        await self._http.post(CANCEL_PATH, json={"conversation_id": conversation_id})
        logger.info(f"Requested backend cancellation for conversation {conversation_id}")
