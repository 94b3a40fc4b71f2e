"""URI-addressed read surface for derived state."""

from rag_gateway.pipeline import Pipeline

from .envelope import to_json_text
from .exceptions import ResourceNotFoundError
from .lifecycle import LifecycleGate
from .schemas import ResourceContents, ResourceDescriptor


STATS_URI = "rag://stats"

RESOURCES: tuple[ResourceDescriptor, ...] = (
    ResourceDescriptor(
        uri=STATS_URI,
        name="RAG Collection Statistics",
        description="Current statistics about the indexed knowledge base",
        mimeType="application/json",
    ),
)


class ResourceProvider:
    """Serves resources/list and resources/read.

    Unlike tool calls, a failed read is not wrapped in an envelope: errors
    propagate to the transport, which reports them as protocol errors.
    """

    def __init__(self, gate: LifecycleGate, pipeline: Pipeline):
        self._gate = gate
        self._pipeline = pipeline

    def list(self) -> list[ResourceDescriptor]:
        return list(RESOURCES)

    async def read(self, uri: str) -> ResourceContents:
        """Read a resource by URI.

        Raises:
            ResourceNotFoundError: If the URI isn't served.
        """
        if uri != STATS_URI:
            raise ResourceNotFoundError(uri)

        await self._gate.ensure_ready()
        stats = await self._pipeline.get_stats()
        return ResourceContents(
            uri=uri,
            mimeType="application/json",
            text=to_json_text(stats),
        )
