"""Terminal chat entry point.

Lists the user's most recent conversations, then streams responses for each
prompt to stdout. Ctrl+C while a response streams stops it; an empty line or
Ctrl+D at the prompt exits.
Environment variables are loaded from .env file.
"""

import asyncio
import logging
import os
import signal
import sys
from collections.abc import Callable
from typing import TYPE_CHECKING

from dotenv import load_dotenv

if TYPE_CHECKING:
    from src.chat.streaming_session import StreamingSessionManager
    from src.client.config import ClientConfig
    from src.conversations.repository import ConversationRepository
    from src.models.schemas import StreamingCallbacks, StreamingRequest

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

RECENT_CONVERSATIONS = 5


async def show_recent_conversations(
    repository: "ConversationRepository", user_id: str, config: "ClientConfig"
) -> None:
    """Print the most recent conversations, newest first."""
    conversations = await repository.fetch_conversations(
        user_id,
        conversation_type=config.conversation_type,
        limit=config.conversation_page_size,
    )
    if not conversations:
        print("No previous conversations.")
        return

    print("Recent conversations:")
    for conversation in repository.sort_by_recency(conversations)[:RECENT_CONVERSATIONS]:
        print(f"  {conversation.id}  {conversation.title or 'Untitled'}")


async def run_turn(
    manager: "StreamingSessionManager",
    request: "StreamingRequest",
    callbacks: "StreamingCallbacks",
    get_conversation_id: Callable[[], str | None],
) -> None:
    """Stream one response, stopping it on SIGINT.

    Returns only after any stop requested during the turn, including the
    backend cancel request, has finished.
    """
    from src.chat import GenerationCancelledError, GenerationError
    from src.client import HttpClientError

    loop = asyncio.get_running_loop()
    stop_tasks: list[asyncio.Future[None]] = []

    def request_stop() -> None:
        stop_tasks.append(asyncio.ensure_future(manager.stop_generation(get_conversation_id())))

    loop.add_signal_handler(signal.SIGINT, request_stop)
    try:
        await manager.send_prompt(request, callbacks)
    except GenerationCancelledError:
        print("\n[stopped]")
    except (GenerationError, HttpClientError) as e:
        logger.error(f"Generation failed: {e}")
    finally:
        loop.remove_signal_handler(signal.SIGINT)
        if stop_tasks:
            await asyncio.gather(*stop_tasks)


async def run_chat() -> None:
    """Run the prompt loop until the user exits."""
    from src.chat import HttpGenerationService, StreamingSessionManager
    from src.client import HttpClient, get_client_config
    from src.conversations import ConversationRepository
    from src.models import StreamingCallbacks, StreamingRequest
    from src.repositories import UserRepository

    config = get_client_config()
    logger.info(f"Connecting to {config.api_base_url}")

    async with HttpClient(config) as http_client:
        user_id = await UserRepository(http_client).get_current_user_id()
        await show_recent_conversations(ConversationRepository(http_client), user_id, config)

        manager = StreamingSessionManager(HttpGenerationService(http_client))
        conversation_id: str | None = None

        def on_chunk(text: str) -> None:
            sys.stdout.write(text)
            sys.stdout.flush()

        def on_conversation_id(value: str) -> None:
            nonlocal conversation_id
            conversation_id = value
            logger.debug(f"Conversation ID received: {value}")

        callbacks = StreamingCallbacks(on_chunk=on_chunk, on_conversation_id=on_conversation_id)
        try:
            while True:
                try:
                    prompt = input("\n> ").strip()
                except EOFError:
                    break
                if not prompt:
                    break

                request = StreamingRequest(
                    prompt=prompt,
                    conversation_type=config.conversation_type,
                    conversation_id=conversation_id,
                    selected_model=config.default_model(),
                )

                await run_turn(manager, request, callbacks, lambda: conversation_id)
                print()
        finally:
            manager.cleanup()


def main() -> None:
    """Application entry point."""
    try:
        asyncio.run(run_chat())
    except KeyboardInterrupt:
        logger.info("Exiting")


if __name__ == "__main__":
    main()
