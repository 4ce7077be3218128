"""Document CRUD against the collection document endpoints."""

from typing import Any

from src.client.http_client import HttpClient
from src.models.schemas import Document


class DocumentRepository:
    """Thin pass-through over /documents/."""

    def __init__(self, http_client: HttpClient) -> None:
        self._http = http_client

    async def find_by_collection(self, collection_id: str) -> list[Document]:
        response = await self._http.get("/documents/", params={"collection_id": collection_id})
        if not isinstance(response, list):
            return []
        return [Document.model_validate(item) for item in response]

    async def find_by_id(self, document_id: str) -> Document:
        return Document.model_validate(await self._http.get(f"/documents/{document_id}"))

    async def create(self, data: dict[str, Any]) -> Document:
        return Document.model_validate(await self._http.post("/documents/", json=data))

    async def update(self, document_id: str, data: dict[str, Any]) -> Document:
        return Document.model_validate(
            await self._http.put(f"/documents/{document_id}", json=data)
        )

    async def delete(self, document_id: str) -> None:
        await self._http.delete(f"/documents/{document_id}")
