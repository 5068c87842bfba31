"""OpenStack Swift object storage client using httpx."""

from dataclasses import dataclass

import httpx

from photo_share.services.storage import ObjectStorageClient, ObjectStorageSession


@dataclass
class SwiftSession(ObjectStorageSession):
    """Swift account session authorised by a Keystone token."""

    http_client: httpx.AsyncClient
    storage_url: str
    token: str
    timeout: float

    async def create_container(self, name: str) -> None:
        """Create a container with PUT."""
        response = await self.http_client.put(
            self._url(name), headers=self._headers(), timeout=self.timeout
        )
        response.raise_for_status()

    async def retrieve_container(self, name: str) -> bool:
        """Check that a container exists with HEAD."""
        response = await self.http_client.head(
            self._url(name), headers=self._headers(), timeout=self.timeout
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return False
        response.raise_for_status()
        return True

    async def update_container_metadata(
        self, name: str, metadata: dict[str, str]
    ) -> None:
        """Set container metadata headers with POST."""
        response = await self.http_client.post(
            self._url(name),
            headers={**self._headers(), **metadata},
            timeout=self.timeout,
        )
        response.raise_for_status()

    async def store_object(
        self, container_name: str, name: str, data: bytes, content_type: str | None
    ) -> None:
        """Upload object bytes with PUT."""
        headers = self._headers()
        if content_type:
            headers["Content-Type"] = content_type
        response = await self.http_client.put(
            self._url(container_name, name),
            headers=headers,
            content=data,
            timeout=self.timeout,
        )
        response.raise_for_status()

    def _url(self, *segments: str) -> str:
        return "/".join([self.storage_url, *segments])

    def _headers(self) -> dict[str, str]:
        return {"X-Auth-Token": self.token}


@dataclass
class HttpxSwiftClient(ObjectStorageClient):
    """Authenticates against Keystone v3 and opens Swift sessions."""

    auth_url: str
    storage_url: str
    project_id: str
    user_id: str
    password: str
    http_client: httpx.AsyncClient
    timeout: float = 30.0

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        auth_url: str,
        storage_url: str,
        project_id: str,
        user_id: str,
        password: str,
        timeout: float = 30.0,
    ) -> "HttpxSwiftClient":
        """Create a Swift client with a managed httpx session."""
        return cls(
            auth_url=auth_url,
            storage_url=storage_url,
            project_id=project_id,
            user_id=user_id,
            password=password,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def connect(self) -> SwiftSession | None:
        """Request a project-scoped token and return a session."""
        payload = {
            "auth": {
                "identity": {
                    "methods": ["password"],
                    "password": {
                        "user": {"id": self.user_id, "password": self.password}
                    },
                },
                "scope": {"project": {"id": self.project_id}},
            }
        }
        response = await self.http_client.post(
            f"{self.auth_url}/v3/auth/tokens", json=payload, timeout=self.timeout
        )
        response.raise_for_status()
        token = response.headers.get("X-Subject-Token")
        if not token:
            return None
        return SwiftSession(
            http_client=self.http_client,
            storage_url=self.storage_url,
            token=token,
            timeout=self.timeout,
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
