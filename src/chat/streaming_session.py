"""Streaming session manager.

Owns the lifecycle of one outstanding generation request per chat session:
dispatch, incremental delivery of partial output, and cooperative
cancellation.

State is either idle or streaming, and a cancellation token is held exactly
while streaming. The token is cleared on completion, failure, explicit stop
and cleanup, always before control returns to the caller.

Overlapping send_prompt() calls are not serialized. Callers are expected to
block user-initiated sends while is_streaming() is true. When they do
overlap, the most recent send owns the live token and an older send
finishing later leaves it in place.
"""

import logging

from src.chat.cancellation import CancellationToken
from src.chat.generation_service import GenerationService, call_once
from src.models.schemas import StreamingCallbacks, StreamingRequest

logger = logging.getLogger(__name__)


class StreamingSessionManager:
    """Manage streaming generation requests with cancellation control."""

    def __init__(self, generation_service: GenerationService) -> None:
        """Initialize the manager.

        Args:
            generation_service: Collaborator that performs the generation.
        """
        self._service = generation_service
        self._token: CancellationToken | None = None

    async def send_prompt(
        self,
        request: StreamingRequest,
        callbacks: StreamingCallbacks,
    ) -> None:
        """Send a prompt to the generation service.

        Fragments reach callbacks.on_chunk in the order the service produces
        them. callbacks.on_conversation_id fires at most once.

        Args:
            request: The generation attempt.
            callbacks: Sinks for fragments and the resolved conversation id.

        Raises:
            Exception: Whatever the service raised, including the error it
                raises after observing cancellation. State is already idle.
        """
        token = CancellationToken()
        self._token = token
        logger.debug(
            f"Sending prompt (conversation={request.conversation_id or 'new'}, "
            f"model={request.selected_model.name})"
        )

        try:
            await self._service.send_prompt(
                request.prompt,
                request.selected_model,
                request.use_streaming,
                request.conversation_id,
                request.conversation_type,
                callbacks.on_chunk,
                call_once(callbacks.on_conversation_id),
                request.page_context,
                request.selected_persona,
                token,
            )
        finally:
            if self._token is token:
                self._token = None

    async def stop_generation(self, conversation_id: str | None) -> None:
        """Stop the current generation.

        Cancels the live token, if any. With a conversation id, also asks the
        backend to stop; that request is best effort and its failure is
        logged, never raised.

        Args:
            conversation_id: Conversation to cancel server-side, or None.
        """
        logger.info(f"Stopping generation (conversation={conversation_id})")

        if self._token is not None:
            self._token.cancel()
            self._token = None

        if conversation_id is not None:
            await self._cancel_backend_generation(conversation_id)

    async def _cancel_backend_generation(self, conversation_id: str) -> None:
        try:
            await self._service.cancel_generation(conversation_id)
        except Exception as e:
            logger.error(f"Error canceling backend generation: {e}")

    def is_streaming(self) -> bool:
        """Check if a generation is in flight."""
        return self._token is not None

    def get_cancellation_token(self) -> CancellationToken | None:
        """Return the live cancellation token, or None when idle."""
        return self._token

    def cleanup(self) -> None:
        """Cancel any live generation and reset to idle. Safe to call repeatedly."""
        if self._token is not None:
            self._token.cancel()
            self._token = None
