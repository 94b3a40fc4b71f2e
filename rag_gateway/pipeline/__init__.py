"""Pipeline module - contract and adapters for the retrieval pipeline."""

from .base import (
    Chunk,
    Document,
    EmbeddingsConfig,
    Pipeline,
    PipelineConfig,
    QueryResult,
    RAGConfig,
    VectorDBConfig,
)
from .exceptions import (
    PipelineError,
    PipelineLoadError,
    PipelineResponseError,
    PipelineTimeoutError,
    PipelineUnavailableError,
)
from .http import HTTPPipeline
from .loader import load_pipeline


__all__ = [
    # Contract
    "Chunk",
    "Document",
    "EmbeddingsConfig",
    "Pipeline",
    "PipelineConfig",
    "QueryResult",
    "RAGConfig",
    "VectorDBConfig",
    # Exceptions
    "PipelineError",
    "PipelineLoadError",
    "PipelineResponseError",
    "PipelineTimeoutError",
    "PipelineUnavailableError",
    # Adapters
    "HTTPPipeline",
    "load_pipeline",
]
