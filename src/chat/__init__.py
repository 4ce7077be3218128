"""Streaming generation lifecycle.

Responsibilities:
    - Cancellation tokens for cooperative early termination
    - The generation service contract and its HTTP implementation
    - One live generation per session, with stop and cleanup

The manager never decides what a cancelled generation means for the UI.
It only guarantees that its own state is idle once a call settles.
"""

from src.chat.cancellation import CancellationToken, GenerationCancelledError
from src.chat.generation_service import GenerationError, GenerationService, HttpGenerationService
from src.chat.streaming_session import StreamingSessionManager

__all__ = [
    "CancellationToken",
    "GenerationCancelledError",
    "GenerationError",
    "GenerationService",
    "HttpGenerationService",
    "StreamingSessionManager",
]
