"""Processing pipeline HTTP client."""

from dataclasses import dataclass

import httpx

from photo_share.services.pipeline import PipelineClient, PipelineResponse


@dataclass
class HttpxPipelineClient(PipelineClient):
    """Posts image ids to the pipeline endpoint with basic auth."""

    url: str
    auth_token: str
    http_client: httpx.AsyncClient
    timeout: float = 30.0

    @classmethod
    def create(
        cls, url: str, auth_token: str, timeout: float = 30.0
    ) -> "HttpxPipelineClient":
        """Create a pipeline client with a managed httpx session."""
        return cls(
            url=url,
            auth_token=auth_token,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def submit(self, image_id: str) -> PipelineResponse:
        """POST the image id to the pipeline."""
        response = await self.http_client.post(
            self.url,
            json={"imageId": image_id},
            headers={
                "Authorization": f"Basic {self.auth_token}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
        )
        return PipelineResponse(status_code=response.status_code, body=response.content)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
