"""Gateway facade wiring registry, lifecycle gate, dispatcher and resources."""

from typing import Any, Mapping

import structlog

from rag_gateway.config import Settings, get_settings
from rag_gateway.pipeline import Pipeline, load_pipeline
from rag_gateway.registry import ToolDescriptor, ToolRegistry

from .dispatcher import ToolDispatcher
from .lifecycle import LifecycleGate
from .resources import ResourceProvider
from .schemas import ResourceContents, ResourceDescriptor, ToolResult


logger = structlog.get_logger("gateway")


class RAGGateway:
    """Everything a transport needs to serve the protocol.

    Attributes:
        registry: Tool catalog advertised by tools/list.
        pipeline: The pipeline handle, shared by all calls.
        gate: Lifecycle gate guarding pipeline initialization.
    """

    def __init__(self, pipeline: Pipeline, registry: ToolRegistry | None = None):
        self.pipeline = pipeline
        self.registry = registry or ToolRegistry.from_config()
        self.gate = LifecycleGate(pipeline.initialize)
        self._dispatcher = ToolDispatcher(self.registry, self.gate, pipeline)
        self._resources = ResourceProvider(self.gate, pipeline)

    def list_tools(self) -> list[ToolDescriptor]:
        return self.registry.list()

    async def call_tool(
        self,
        name: str,
        arguments: Mapping[str, Any] | None = None,
        request_id: str | None = None,
    ) -> ToolResult:
        return await self._dispatcher.dispatch(name, arguments, request_id=request_id)

    def list_resources(self) -> list[ResourceDescriptor]:
        return self._resources.list()

    async def read_resource(self, uri: str) -> ResourceContents:
        return await self._resources.read(uri)

    async def aclose(self) -> None:
        """Release the pipeline's resources, if it holds any."""
        close = getattr(self.pipeline, "aclose", None)
        if close is not None:
            await close()


def build_gateway(settings: Settings | None = None) -> RAGGateway:
    """Construct the gateway and its pipeline from settings.

    The pipeline is built but not contacted; initialization happens on the
    first tool call or resource read.

    Raises:
        PipelineLoadError: If the configured pipeline cannot be constructed.
    """
    settings = settings or get_settings()
    gateway = RAGGateway(load_pipeline(settings))
    logger.info(
        "gateway_built",
        tools=len(gateway.registry),
        collection=settings.CHROMA_COLLECTION,
    )
    return gateway
