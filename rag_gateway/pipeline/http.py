"""HTTP adapter for a pipeline running as a separate service."""

from typing import Any

import httpx
import structlog

from .base import Document, PipelineConfig, QueryResult
from .exceptions import PipelineResponseError, PipelineTimeoutError, PipelineUnavailableError


logger = structlog.get_logger("pipeline.http")

# Default timeout for pipeline requests; embedding large batches can be slow
DEFAULT_TIMEOUT_SECONDS = 60.0


class HTTPPipeline:
    """Pipeline implementation that forwards every operation over HTTP.

    Constructing the adapter opens no connection; the service is first
    contacted by ``initialize``, which sends the pipeline configuration.
    """

    def __init__(
        self,
        config: PipelineConfig,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ):
        self.config = config
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    async def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        """Send one request to the pipeline service.

        Args:
            method: HTTP method.
            path: Endpoint path relative to the service base URL.
            payload: Optional JSON body.

        Returns:
            Decoded JSON body, or None for an empty response.

        Raises:
            PipelineTimeoutError: If the service doesn't respond in time.
            PipelineUnavailableError: If the connection fails.
            PipelineResponseError: If the service returns an HTTP error status.
        """
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.request(method, path, json=payload, timeout=self.timeout)
        except httpx.TimeoutException:
            raise PipelineTimeoutError(url=url, timeout_seconds=self.timeout)
        except httpx.ConnectError as e:
            raise PipelineUnavailableError(url=url, reason=str(e))
        except httpx.RequestError as e:
            raise PipelineUnavailableError(url=url, reason=f"Request failed: {e}")

        if response.status_code >= 400:
            raise PipelineResponseError(
                url=url,
                status_code=response.status_code,
                detail=response.text[:200]  # Truncate for safety
            )

        if not response.content:
            return None
        return response.json()

    async def initialize(self) -> None:
        await self._request("POST", "/initialize", {"config": self.config.model_dump()})
        logger.info(
            "pipeline_service_initialized",
            url=self.base_url,
            collection=self.config.vector_db.collection_name,
        )

    async def query(
        self,
        question: str,
        *,
        top_k: int | None = None,
        threshold: float | None = None,
        filters: dict[str, Any] | None = None,
    ) -> QueryResult:
        payload: dict[str, Any] = {"question": question}
        if top_k is not None:
            payload["topK"] = top_k
        if threshold is not None:
            payload["threshold"] = threshold
        if filters:
            payload["filters"] = filters
        data = await self._request("POST", "/query", payload)
        return QueryResult.model_validate(data or {})

    async def index_document(self, document: Document) -> int:
        data = await self._request(
            "POST", "/documents", {"document": document.model_dump(exclude_none=True)}
        )
        return int(data["chunksIndexed"])

    async def index_documents(self, documents: list[Document]) -> int:
        data = await self._request(
            "POST",
            "/documents/batch",
            {"documents": [doc.model_dump(exclude_none=True) for doc in documents]},
        )
        return int(data["totalChunks"])

    async def delete_by_source(self, source: str) -> None:
        await self._request("POST", "/documents/delete", {"source": source})

    async def get_stats(self) -> dict[str, Any]:
        return await self._request("GET", "/stats") or {}

    async def clear_all(self) -> None:
        await self._request("POST", "/clear")

    async def aclose(self) -> None:
        await self._client.aclose()
