"""CouchDB HTTP API client."""

import json
from dataclasses import dataclass

import httpx

from photo_share.services.documents import DocumentDatabase


@dataclass
class HttpxCouchClient(DocumentDatabase):
    """Document database backed by the CouchDB HTTP API."""

    base_url: str
    database: str
    http_client: httpx.AsyncClient
    timeout: float = 10.0

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        base_url: str,
        database: str,
        username: str | None = None,
        password: str | None = None,
        timeout: float = 10.0,
    ) -> "HttpxCouchClient":
        """Create a CouchDB client with a managed httpx session."""
        auth = httpx.BasicAuth(username, password or "") if username else None
        return cls(
            base_url=base_url.rstrip("/"),
            database=database,
            http_client=httpx.AsyncClient(auth=auth),
            timeout=timeout,
        )

    async def query_view(
        self, design: str, view: str, params: dict[str, object]
    ) -> dict[str, object]:
        """Query a design document view."""
        url = f"{self._database_url}/_design/{design}/_view/{view}"
        response = await self.http_client.get(
            url, params=_encode_view_params(params), timeout=self.timeout
        )
        response.raise_for_status()
        return response.json()

    async def get_document(self, document_id: str) -> dict[str, object] | None:
        """Fetch a document, returning None on 404."""
        response = await self.http_client.get(
            f"{self._database_url}/{document_id}", timeout=self.timeout
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        response.raise_for_status()
        return response.json()

    async def create_document(self, document: dict[str, object]) -> tuple[str, str]:
        """Create a document and return its id and revision."""
        response = await self.http_client.post(
            self._database_url, json=document, timeout=self.timeout
        )
        response.raise_for_status()
        payload = response.json()
        if not payload.get("ok"):
            raise RuntimeError("CouchDB did not acknowledge document creation")
        return str(payload["id"]), str(payload["rev"])

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    @property
    def _database_url(self) -> str:
        return f"{self.base_url}/{self.database}"


def _encode_view_params(params: dict[str, object]) -> dict[str, str]:
    """Encode view query parameters as CouchDB expects them (JSON values)."""
    return {key: json.dumps(value) for key, value in params.items()}
