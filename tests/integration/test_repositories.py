"""Integration tests for the conversation, user and document repositories."""

from unittest.mock import MagicMock

import pytest
import pytest_check as check
from fastapi import FastAPI

from src.client.http_client import HttpClient, HttpClientError
from src.conversations.repository import ConversationRepository
from src.repositories import DocumentRepository, UserNotFoundError, UserRepository


class TestConversationRepository:
    """Tests for conversation endpoints."""

    @pytest.fixture
    def repository(self, http_client: HttpClient) -> ConversationRepository:
        return ConversationRepository(http_client)

    async def test_fetch_drops_malformed_entries(self, repository: ConversationRepository) -> None:
        conversations = await repository.fetch_conversations("user-123")

        assert [c.id for c in conversations] == ["conv-old", "conv-recent", "conv-updated"]

    async def test_fetch_then_sort(self, repository: ConversationRepository) -> None:
        """Last message beats last update, which beats creation."""
        conversations = await repository.fetch_conversations("user-123")

        ordered = repository.sort_by_recency(conversations)

        assert [c.id for c in ordered] == ["conv-recent", "conv-updated", "conv-old"]

    async def test_query_parameters_on_the_wire(
        self, repository: ConversationRepository, backend_app: FastAPI
    ) -> None:
        await repository.fetch_conversations("user-123")
        await repository.fetch_conversations("user-123", page_id="page-1", skip=50, limit=25)

        assert backend_app.state.conversation_queries == [
            {"skip": "0", "limit": "50", "conversation_type": "chat"},
            {"skip": "50", "limit": "25", "conversation_type": "chat", "page_id": "page-1"},
        ]

    async def test_unknown_user_has_no_conversations(
        self, repository: ConversationRepository
    ) -> None:
        assert await repository.fetch_conversations("someone-else") == []

    async def test_load_history_cleans_messages(self, repository: ConversationRepository) -> None:
        messages = await repository.load_conversation_history("conv-old")

        assert len(messages) == 2
        check.equal(messages[0].id, "m1")
        check.equal(messages[0].sender, "user")
        check.equal(messages[0].content, "What is it?")
        check.equal(messages[1].sender, "ai")
        check.equal(messages[1].content, "It is\n\na thing.")
        check.equal(messages[1].timestamp, "2024-01-01T00:00:05Z")

    async def test_rename_and_delete(
        self, repository: ConversationRepository, backend_app: FastAPI
    ) -> None:
        await repository.rename_conversation("conv-old", "Renamed")
        await repository.delete_conversation("conv-recent")

        assert backend_app.state.renamed == {"conv-old": "Renamed"}
        assert backend_app.state.deleted == ["conv-recent"]


class TestUserRepository:
    async def test_current_user(self, http_client: HttpClient) -> None:
        repository = UserRepository(http_client)

        user = await repository.get_current_user()

        assert user.id == "user-123"
        assert user.model_extra["username"] == "tester"
        assert await repository.get_current_user_id() == "user-123"

    @pytest.mark.parametrize("response", [{}, {"username": "anon"}, [], None])
    async def test_missing_id_raises(self, mock_http: MagicMock, response: object) -> None:
        mock_http.get.return_value = response

        with pytest.raises(UserNotFoundError):
            await UserRepository(mock_http).get_current_user_id()


class TestDocumentRepository:
    """Tests for document CRUD pass-through."""

    @pytest.fixture
    def repository(self, http_client: HttpClient) -> DocumentRepository:
        return DocumentRepository(http_client)

    async def test_find_by_collection(self, repository: DocumentRepository) -> None:
        documents = await repository.find_by_collection("col-1")

        assert [d.id for d in documents] == ["doc-1"]

    async def test_find_by_id(self, repository: DocumentRepository) -> None:
        document = await repository.find_by_id("doc-2")

        assert document.original_filename == "b.pdf"

    async def test_find_missing_raises(self, repository: DocumentRepository) -> None:
        with pytest.raises(HttpClientError) as exc_info:
            await repository.find_by_id("doc-404")

        assert exc_info.value.status_code == 404

    async def test_create_update_delete(
        self, repository: DocumentRepository, backend_app: FastAPI
    ) -> None:
        created = await repository.create({"collection_id": "col-1", "original_filename": "c.pdf"})
        check.equal(created.id, "doc-3")
        check.equal(created.status, "pending")

        updated = await repository.update("doc-3", {"status": "processed"})
        check.equal(updated.status, "processed")
        check.equal(updated.original_filename, "c.pdf")

        await repository.delete("doc-3")
        check.is_not_in("doc-3", backend_app.state.documents)
