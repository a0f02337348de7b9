import logging
from typing import Any, Dict, List, Optional

import httpx

from myknowledge.config import CLERK_API_URL, CLERK_SECRET_KEY, CLERK_API_TIMEOUT

logger = logging.getLogger(__name__)


class UserServiceError(Exception):
    """Raised when a call to the Clerk Backend API fails for any reason."""


def _shape_user(user: Dict[str, Any], include_metadata: bool = True) -> Dict[str, Any]:
    email_addresses = user.get("email_addresses") or []
    first_name = user.get("first_name")
    last_name = user.get("last_name")
    profile = {
        "id": user.get("id"),
        "email": email_addresses[0].get("email_address") if email_addresses else None,
        "firstName": first_name,
        "lastName": last_name,
        "fullName": f"{first_name or ''} {last_name or ''}".strip(),
        "imageUrl": user.get("image_url"),
        "createdAt": user.get("created_at"),
        "lastSignInAt": user.get("last_sign_in_at"),
    }
    if include_metadata:
        profile["publicMetadata"] = user.get("public_metadata") or {}
        profile["privateMetadata"] = user.get("private_metadata") or {}
    return profile


class UserService:
    """
    Passthrough to the Clerk Backend API for user profiles and organizations.

    Nothing is cached or stored locally; every method is a live round-trip.
    The underlying httpx client is created on first use and reused until
    close() is called.
    """

    def __init__(self, api_url: str = CLERK_API_URL, secret_key: Optional[str] = CLERK_SECRET_KEY,
                 timeout: float = CLERK_API_TIMEOUT, client: Optional[httpx.AsyncClient] = None):
        self.api_url = api_url.rstrip("/")
        self.secret_key = secret_key
        self.timeout = timeout
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.api_url, timeout=self.timeout)
        return self._client

    async def _request(self, method: str, path: str, failure_message: str, **kwargs) -> Any:
        if not self.secret_key:
            logger.error("[UserService] CLERK_SECRET_KEY is not configured.")
            raise UserServiceError(failure_message)
        headers = {"Authorization": f"Bearer {self.secret_key}", "Accept": "application/json"}
        try:
            response = await self._get_client().request(method, path, headers=headers, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"[UserService] Clerk API {method} {path} returned {e.response.status_code}: {e.response.text}")
            raise UserServiceError(failure_message) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"[UserService] Clerk API {method} {path} failed: {e}", exc_info=True)
            raise UserServiceError(failure_message) from e

    async def get_user_by_id(self, user_id: str) -> Dict[str, Any]:
        user = await self._request("GET", f"/users/{user_id}", "Failed to fetch user data")
        return _shape_user(user)

    async def get_users_by_ids(self, user_ids: List[str]) -> List[Dict[str, Any]]:
        if not user_ids:
            return []
        users = await self._request(
            "GET", "/users", "Failed to fetch users data",
            params=[("user_id", user_id) for user_id in user_ids]
        )
        if isinstance(users, dict):
            users = users.get("data", [])
        return [_shape_user(user, include_metadata=False) for user in users]

    async def update_user_metadata(self, user_id: str, metadata: Dict[str, Any]) -> Dict[str, Any]:
        # PATCH /users/{id} replaces public_metadata as a whole; /metadata would merge.
        user = await self._request(
            "PATCH", f"/users/{user_id}", "Failed to update user metadata",
            json={"public_metadata": metadata}
        )
        return _shape_user(user)

    async def get_user_organizations(self, user_id: str) -> List[Dict[str, Any]]:
        memberships = await self._request(
            "GET", f"/users/{user_id}/organization_memberships", "Failed to fetch user organizations"
        )
        if isinstance(memberships, dict):
            return memberships.get("data", [])
        return memberships

    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None
