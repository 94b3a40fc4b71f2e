"""Pipeline contract consumed by the gateway.

The gateway never chunks, embeds or ranks anything itself. It talks to an
object satisfying :class:`Pipeline`, constructed once with a
:class:`PipelineConfig` and initialized lazily on first use.
"""

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from rag_gateway.config import Settings


class Document(BaseModel):
    """A document handed to the pipeline for indexing."""
    
    id: str = Field(..., description="Unique document identifier")
    title: str = Field(..., description="Document title")
    content: str = Field(..., description="Document content (will be chunked)")
    source: str = Field(..., description="Source identifier")
    category: str | None = Field(default=None, description="Optional category")
    tags: list[str] | None = Field(default=None, description="Optional tags")


class Chunk(BaseModel):
    """A scored unit of retrieved content."""
    
    content: str
    score: float
    metadata: dict[str, Any] = Field(default_factory=dict)


class QueryResult(BaseModel):
    """What the pipeline returns for a query."""
    
    context: str = ""
    chunks: list[Chunk] = Field(default_factory=list)
    stats: dict[str, Any] = Field(default_factory=dict)


class VectorDBConfig(BaseModel):
    host: str
    collection_name: str


class EmbeddingsConfig(BaseModel):
    model: str
    dimensions: int | None = None
    api_key: str | None = Field(default=None, repr=False)


class RAGConfig(BaseModel):
    top_k: int = 5
    threshold: float = 0.5
    enable_query_expansion: bool = True
    enable_hybrid_search: bool = True


class PipelineConfig(BaseModel):
    """Configuration passed unmodified into the pipeline constructor."""
    
    vector_db: VectorDBConfig
    embeddings: EmbeddingsConfig
    rag: RAGConfig = Field(default_factory=RAGConfig)
    
    @classmethod
    def from_settings(cls, settings: Settings) -> "PipelineConfig":
        return cls(
            vector_db=VectorDBConfig(
                host=settings.CHROMA_URL,
                collection_name=settings.CHROMA_COLLECTION,
            ),
            embeddings=EmbeddingsConfig(
                model=settings.EMBEDDING_MODEL,
                dimensions=settings.EMBEDDING_DIMENSIONS,
                api_key=settings.OPENAI_API_KEY,
            ),
            rag=RAGConfig(
                top_k=settings.RAG_TOP_K,
                threshold=settings.RAG_THRESHOLD,
                enable_query_expansion=settings.RAG_ENABLE_QUERY_EXPANSION,
                enable_hybrid_search=settings.RAG_ENABLE_HYBRID_SEARCH,
            ),
        )


@runtime_checkable
class Pipeline(Protocol):
    """Operations the gateway needs from a retrieval pipeline.
    
    Every method is a suspension point; the gateway may call several of them
    concurrently once ``initialize`` has completed.
    """
    
    async def initialize(self) -> None: ...
    
    async def query(
        self,
        question: str,
        *,
        top_k: int | None = None,
        threshold: float | None = None,
        filters: dict[str, Any] | None = None,
    ) -> QueryResult: ...
    
    async def index_document(self, document: Document) -> int: ...
    
    async def index_documents(self, documents: list[Document]) -> int: ...
    
    async def delete_by_source(self, source: str) -> None: ...
    
    async def get_stats(self) -> dict[str, Any]: ...
    
    async def clear_all(self) -> None: ...
