"""Pass-through data access for users and documents.

No business logic, just I/O through the injected HttpClient.
"""

from src.repositories.document_repository import DocumentRepository
from src.repositories.user_repository import UserNotFoundError, UserRepository

__all__ = ["DocumentRepository", "UserNotFoundError", "UserRepository"]
