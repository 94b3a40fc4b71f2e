# Test configuration
import sys
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

REPO_ROOT = Path(__file__).parent.parent

# Add repo root to path so tests can import modules
sys.path.insert(0, str(REPO_ROOT))

from rag_gateway.gateway import RAGGateway  # noqa: E402
from rag_gateway.pipeline import Chunk, QueryResult  # noqa: E402


def make_query_result() -> QueryResult:
    return QueryResult(
        context="A",
        chunks=[Chunk(content="A", score=0.9, metadata={})],
        stats={"totalChunks": 1, "avgSimilarity": 0.9},
    )


@pytest.fixture
def pipeline():
    """AsyncMock standing in for the retrieval pipeline."""
    mock = AsyncMock()
    mock.query.return_value = make_query_result()
    mock.index_document.return_value = 3
    mock.index_documents.return_value = 7
    mock.get_stats.return_value = {"totalChunks": 12, "collection": "mcp_knowledge_base"}
    return mock


@pytest.fixture
def gateway(pipeline):
    return RAGGateway(pipeline)
