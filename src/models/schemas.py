from collections.abc import Callable
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ModelInfo(BaseModel):
    """Descriptor of the model selected for a generation.

    Attributes:
        name: Model identifier on the serving backend.
        provider: Provider key (e.g. "ollama", "openai").
        provider_id: Provider settings id.
        server_name: Display name of the server hosting the model.
        server_id: Id of the server hosting the model.
        is_temporary: Whether the model is a placeholder until models load.
    """

    name: str
    provider: str
    provider_id: str
    server_name: str
    server_id: str
    is_temporary: bool = False


class PersonaInfo(BaseModel):
    """Persona attached to a conversation. Opaque beyond id and name."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    name: str


class StreamingRequest(BaseModel):
    """One generation attempt.

    Attributes:
        prompt: Prompt text sent to the model.
        conversation_type: Conversation type tag.
        conversation_id: Existing conversation, or None to start a new one.
        selected_model: Model to generate with.
        use_streaming: Whether to request incremental output.
        page_context: Opaque page payload forwarded to the backend.
        selected_persona: Optional persona for the conversation.
    """

    prompt: str = Field(..., min_length=1)
    conversation_type: str = "chat"
    conversation_id: str | None = None
    selected_model: ModelInfo
    use_streaming: bool = True
    page_context: dict[str, Any] | None = None
    selected_persona: PersonaInfo | None = None


class StreamingCallbacks(BaseModel):
    """Notification sinks for a generation.

    Attributes:
        on_chunk: Called with each text fragment, in arrival order.
        on_conversation_id: Called at most once with the server-assigned id.
    """

    on_chunk: Callable[[str], None]
    on_conversation_id: Callable[[str], None]


class Conversation(BaseModel):
    """Conversation record as returned by the backend.

    Only id and user_id are required. Everything else is tolerated as-is,
    unknown keys included; timestamps stay text and are parsed on demand.
    """

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    user_id: str
    conversation_type: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    last_message_at: str | None = None
    title: str | None = None
    persona_id: str | None = None
    model: str | None = None
    server: str | None = None

    @field_validator(
        "conversation_type",
        "created_at",
        "updated_at",
        "last_message_at",
        "title",
        "persona_id",
        "model",
        "server",
        mode="before",
    )
    @classmethod
    def stringify(cls, v: Any) -> str | None:
        """Carry loosely-typed values as text instead of rejecting the record."""
        if v is None or isinstance(v, str):
            return v
        return str(v)


class ConversationMessage(BaseModel):
    """A single message from a conversation's history."""

    id: str
    sender: Literal["ai", "user"]
    content: str
    timestamp: str | None = None


class User(BaseModel):
    """Authenticated user."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str


class Document(BaseModel):
    """Document stored in a collection."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    collection_id: str | None = None
    original_filename: str | None = None
    status: str | None = None
