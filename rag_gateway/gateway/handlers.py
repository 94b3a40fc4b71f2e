"""Operation handlers, one per advertised tool.

Each handler turns validated arguments into one pipeline call and maps the
pipeline's answer onto the tool's output shape. Handlers let failures
propagate; the dispatcher turns them into error envelopes.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel

from rag_gateway.pipeline import Pipeline, QueryResult

from .schemas import (
    ClearCollectionArguments,
    DeleteBySourceArguments,
    GetStatsArguments,
    IndexDocumentArguments,
    IndexDocumentsBatchArguments,
    RagQueryArguments,
    RagSearchArguments,
)


CONFIRMATION_REQUIRED_MESSAGE = "Must set confirm: true to clear collection"


@dataclass(frozen=True)
class ToolHandler:
    """A tool implementation and the model its arguments validate against."""

    arguments_model: type[BaseModel]
    run: Callable[[Any, Pipeline], Awaitable[Any]]


def _as_query_result(result: Any) -> QueryResult:
    # In-process pipelines may hand back plain dicts or their own objects.
    if isinstance(result, QueryResult):
        return result
    return QueryResult.model_validate(result, from_attributes=True)


async def rag_query(args: RagQueryArguments, pipeline: Pipeline) -> dict[str, Any]:
    result = _as_query_result(await pipeline.query(
        args.question,
        top_k=args.top_k,
        threshold=args.threshold,
        filters=args.filters,
    ))
    return {
        "context": result.context,
        "chunks": [
            {"content": c.content, "score": c.score, "metadata": c.metadata}
            for c in result.chunks
        ],
        "stats": result.stats,
    }


async def rag_search(args: RagSearchArguments, pipeline: Pipeline) -> list[dict[str, Any]]:
    # Same query path as rag_query; threshold left to the pipeline default.
    result = _as_query_result(await pipeline.query(
        args.query,
        top_k=args.top_k,
        filters=args.filters,
    ))
    return [
        {
            "content": c.content,
            "score": c.score,
            "documentId": c.metadata.get("documentId"),
            "title": c.metadata.get("title"),
            "source": c.metadata.get("source"),
        }
        for c in result.chunks
    ]


async def index_document(args: IndexDocumentArguments, pipeline: Pipeline) -> dict[str, Any]:
    chunks_indexed = await pipeline.index_document(args)
    return {"success": True, "documentId": args.id, "chunksIndexed": chunks_indexed}


async def index_documents_batch(args: IndexDocumentsBatchArguments, pipeline: Pipeline) -> dict[str, Any]:
    total_chunks = await pipeline.index_documents(args.documents)
    return {
        "success": True,
        "documentsIndexed": len(args.documents),
        "totalChunks": total_chunks,
    }


async def delete_by_source(args: DeleteBySourceArguments, pipeline: Pipeline) -> dict[str, Any]:
    await pipeline.delete_by_source(args.source)
    return {"success": True, "message": f"Deleted all documents from source: {args.source}"}


async def get_stats(args: GetStatsArguments, pipeline: Pipeline) -> Any:
    return await pipeline.get_stats()


async def clear_collection(args: ClearCollectionArguments, pipeline: Pipeline) -> dict[str, Any]:
    if args.confirm is not True:
        return {"success": False, "error": CONFIRMATION_REQUIRED_MESSAGE}

    await pipeline.clear_all()
    return {"success": True, "message": "Collection cleared"}


HANDLERS: dict[str, ToolHandler] = {
    "rag_query": ToolHandler(RagQueryArguments, rag_query),
    "rag_search": ToolHandler(RagSearchArguments, rag_search),
    "index_document": ToolHandler(IndexDocumentArguments, index_document),
    "index_documents_batch": ToolHandler(IndexDocumentsBatchArguments, index_documents_batch),
    "delete_by_source": ToolHandler(DeleteBySourceArguments, delete_by_source),
    "get_stats": ToolHandler(GetStatsArguments, get_stats),
    "clear_collection": ToolHandler(ClearCollectionArguments, clear_collection),
}


def is_declined(payload: Any) -> bool:
    """True for a processed call whose action was refused (``success: false``)."""
    return isinstance(payload, dict) and payload.get("success") is False
