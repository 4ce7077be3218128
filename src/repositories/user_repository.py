"""Current-user lookup."""

from src.client.http_client import HttpClient
from src.models.schemas import User


class UserNotFoundError(Exception):
    """Raised when the backend does not identify the current user."""

    pass


class UserRepository:
    def __init__(self, http_client: HttpClient) -> None:
        self._http = http_client

    async def get_current_user(self) -> User:
        """Fetch the authenticated user.

        Raises:
            UserNotFoundError: If the response carries no user id.
        """
        response = await self._http.get("/api/v1/auth/me")
        if not isinstance(response, dict) or not response.get("id"):
            raise UserNotFoundError("Could not get current user ID")
        return User.model_validate(response)

    async def get_current_user_id(self) -> str:
        user = await self.get_current_user()
        return user.id
