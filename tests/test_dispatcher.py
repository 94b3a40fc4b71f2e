"""Tests for tool dispatch: routing, validation, gating and envelopes."""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest

from rag_gateway.gateway import HANDLERS, LifecycleGate, RAGGateway, ToolDispatcher
from rag_gateway.pipeline import PipelineTimeoutError
from rag_gateway.registry import ToolDescriptor, ToolRegistry


def _payload(result):
    assert len(result.content) == 1
    assert result.content[0].type == "text"
    return json.loads(result.content[0].text)


def _assert_pipeline_untouched(pipeline):
    for method in ("initialize", "query", "index_document", "index_documents",
                   "delete_by_source", "get_stats", "clear_all"):
        getattr(pipeline, method).assert_not_called()


def _reject_constant(name):
    raise ValueError(f"non-standard JSON constant: {name}")


class TestRouting:
    """Tests for unknown tools and argument validation."""

    @pytest.mark.asyncio
    async def test_unknown_tool_is_error_envelope(self, gateway, pipeline):
        result = await gateway.call_tool("rag_delete_everything", {})

        assert result.isError is True
        payload = _payload(result)
        assert payload == {"error": "Unknown tool: rag_delete_everything", "tool": "rag_delete_everything"}
        _assert_pipeline_untouched(pipeline)

    @pytest.mark.asyncio
    async def test_missing_required_argument(self, gateway, pipeline):
        result = await gateway.call_tool("rag_query", {"topK": 3})

        assert result.isError is True
        payload = _payload(result)
        assert payload["tool"] == "rag_query"
        assert "question" in payload["error"]
        _assert_pipeline_untouched(pipeline)

    @pytest.mark.asyncio
    async def test_mistyped_argument(self, gateway, pipeline):
        result = await gateway.call_tool("index_document", {
            "id": "d1", "title": "T", "content": "C", "source": "S", "tags": "not-a-list",
        })

        assert result.isError is True
        assert "tags" in _payload(result)["error"]
        _assert_pipeline_untouched(pipeline)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("top_k", ["5", True, 2.5])
    async def test_mistyped_number_is_not_coerced(self, gateway, pipeline, top_k):
        result = await gateway.call_tool("rag_query", {"question": "q", "topK": top_k})

        assert result.isError is True
        assert "topK" in _payload(result)["error"]
        _assert_pipeline_untouched(pipeline)

    @pytest.mark.asyncio
    async def test_search_and_threshold_types_are_strict(self, gateway, pipeline):
        result = await gateway.call_tool("rag_search", {"query": "q", "topK": "10"})
        assert result.isError is True

        result = await gateway.call_tool("rag_query", {"question": "q", "threshold": False})
        assert result.isError is True
        assert "threshold" in _payload(result)["error"]
        _assert_pipeline_untouched(pipeline)

    @pytest.mark.asyncio
    async def test_batch_item_missing_field(self, gateway, pipeline):
        result = await gateway.call_tool("index_documents_batch", {"documents": [
            {"id": "d1", "title": "T", "content": "C", "source": "S"},
            {"id": "d2", "title": "T", "content": "C"},
        ]})

        assert result.isError is True
        assert "documents.1.source" in _payload(result)["error"]
        _assert_pipeline_untouched(pipeline)

    @pytest.mark.asyncio
    async def test_non_boolean_confirm_is_rejected(self, gateway, pipeline):
        result = await gateway.call_tool("clear_collection", {"confirm": "yes"})

        assert result.isError is True
        _assert_pipeline_untouched(pipeline)

    @pytest.mark.asyncio
    async def test_none_arguments_treated_as_empty(self, gateway, pipeline):
        result = await gateway.call_tool("get_stats", None)

        assert result.isError is False
        assert _payload(result) == {"totalChunks": 12, "collection": "mcp_knowledge_base"}


class TestExecution:
    """Tests for successful calls and failure recovery."""

    @pytest.mark.asyncio
    async def test_rag_query_round_trip(self, gateway, pipeline):
        result = await gateway.call_tool("rag_query", {"question": "What is RAG?"})

        assert result.isError is False
        assert _payload(result) == {
            "context": "A",
            "chunks": [{"content": "A", "score": 0.9, "metadata": {}}],
            "stats": {"totalChunks": 1, "avgSimilarity": 0.9},
        }
        pipeline.initialize.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_rag_search_round_trip(self, gateway):
        result = await gateway.call_tool("rag_search", {"query": "x"})

        assert _payload(result) == [{
            "content": "A", "score": 0.9, "documentId": None, "title": None, "source": None,
        }]

    @pytest.mark.asyncio
    async def test_index_document_round_trip(self, gateway):
        result = await gateway.call_tool(
            "index_document", {"id": "d1", "title": "T", "content": "C", "source": "S"}
        )

        assert _payload(result) == {"success": True, "documentId": "d1", "chunksIndexed": 3}

    @pytest.mark.asyncio
    async def test_clear_without_confirm_is_declined_not_error(self, gateway, pipeline):
        for arguments in ({}, {"confirm": False}):
            result = await gateway.call_tool("clear_collection", arguments)

            assert result.isError is False
            assert _payload(result) == {
                "success": False,
                "error": "Must set confirm: true to clear collection",
            }

        pipeline.clear_all.assert_not_called()

    @pytest.mark.asyncio
    async def test_clear_with_confirm(self, gateway, pipeline):
        result = await gateway.call_tool("clear_collection", {"confirm": True})

        assert _payload(result) == {"success": True, "message": "Collection cleared"}
        pipeline.clear_all.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_pipeline_failure_becomes_error_envelope(self, gateway, pipeline):
        pipeline.index_documents.side_effect = RuntimeError("embedding quota exceeded")

        result = await gateway.call_tool("index_documents_batch", {"documents": []})

        assert result.isError is True
        assert _payload(result) == {"error": "embedding quota exceeded", "tool": "index_documents_batch"}

    @pytest.mark.asyncio
    async def test_gateway_error_message_is_used(self, gateway, pipeline):
        pipeline.get_stats.side_effect = PipelineTimeoutError("http://pipeline/stats", 60.0)

        result = await gateway.call_tool("get_stats", {})

        assert result.isError is True
        assert "timed out after 60.0s" in _payload(result)["error"]

    @pytest.mark.asyncio
    async def test_exception_without_message_still_reported(self, gateway, pipeline):
        pipeline.delete_by_source.side_effect = KeyError()

        result = await gateway.call_tool("delete_by_source", {"source": "docs"})

        assert _payload(result) == {"error": "KeyError", "tool": "delete_by_source"}

    @pytest.mark.asyncio
    async def test_calls_served_normally_after_a_failure(self, gateway, pipeline):
        pipeline.query.side_effect = [RuntimeError("boom"), pipeline.query.return_value]

        failed = await gateway.call_tool("rag_query", {"question": "q"})
        succeeded = await gateway.call_tool("rag_query", {"question": "q"})

        assert failed.isError is True
        assert _payload(failed)["tool"] == "rag_query"
        assert succeeded.isError is False

    @pytest.mark.asyncio
    async def test_unserializable_result_becomes_error_envelope(self, gateway, pipeline):
        pipeline.get_stats.return_value = {("a", "b"): 1}

        result = await gateway.call_tool("get_stats", {})

        assert result.isError is True
        payload = _payload(result)
        assert payload["tool"] == "get_stats"
        assert payload["error"].startswith("Result could not be serialized")

    @pytest.mark.asyncio
    async def test_non_finite_numbers_serialized_as_null(self, gateway, pipeline):
        pipeline.get_stats.return_value = {"totalChunks": 0, "avgSimilarity": float("nan"),
                                           "scores": [float("inf"), 0.5]}

        result = await gateway.call_tool("get_stats", {})

        assert result.isError is False
        assert "NaN" not in result.content[0].text
        assert "Infinity" not in result.content[0].text
        payload = json.loads(result.content[0].text, parse_constant=_reject_constant)
        assert payload == {"totalChunks": 0, "avgSimilarity": None, "scores": [None, 0.5]}


class TestInitialization:
    """Tests for lazy, shared pipeline initialization through dispatch."""

    @pytest.mark.asyncio
    async def test_pipeline_not_initialized_before_first_call(self, gateway, pipeline):
        gateway.list_tools()

        pipeline.initialize.assert_not_called()

    @pytest.mark.asyncio
    async def test_initialization_failure_is_error_envelope(self, gateway, pipeline):
        pipeline.initialize.side_effect = ConnectionError("chroma unreachable")

        result = await gateway.call_tool("get_stats", {})

        assert result.isError is True
        assert _payload(result) == {"error": "chroma unreachable", "tool": "get_stats"}
        pipeline.get_stats.assert_not_called()

    @pytest.mark.asyncio
    async def test_initialization_retried_after_failure(self, gateway, pipeline):
        pipeline.initialize.side_effect = [ConnectionError("down"), None]

        first = await gateway.call_tool("get_stats", {})
        second = await gateway.call_tool("get_stats", {})

        assert first.isError is True
        assert second.isError is False
        assert pipeline.initialize.await_count == 2

    @pytest.mark.asyncio
    async def test_concurrent_first_calls_initialize_once(self, pipeline):
        release = asyncio.Event()

        async def slow_initialize():
            await release.wait()

        pipeline.initialize.side_effect = slow_initialize
        gateway = RAGGateway(pipeline)

        calls = [
            asyncio.create_task(gateway.call_tool("rag_query", {"question": f"q{i}"}))
            for i in range(8)
        ]
        await asyncio.sleep(0)
        release.set()
        results = await asyncio.gather(*calls)

        assert pipeline.initialize.await_count == 1
        assert all(r.isError is False for r in results)
        assert pipeline.query.await_count == 8

    @pytest.mark.asyncio
    async def test_concurrent_first_calls_share_failure(self, pipeline):
        release = asyncio.Event()

        async def failing_initialize():
            await release.wait()
            raise ConnectionError("chroma unreachable")

        pipeline.initialize.side_effect = failing_initialize
        gateway = RAGGateway(pipeline)

        calls = [asyncio.create_task(gateway.call_tool("get_stats", {})) for _ in range(4)]
        await asyncio.sleep(0)
        release.set()
        results = await asyncio.gather(*calls)

        assert pipeline.initialize.await_count == 1
        assert all(_payload(r) == {"error": "chroma unreachable", "tool": "get_stats"} for r in results)


class TestConstruction:
    """Tests for registry/handler consistency checks."""

    def test_registry_without_handler_rejected(self, pipeline):
        registry = ToolRegistry([
            *ToolRegistry.from_config().list(),
            ToolDescriptor(name="summarize", description="No handler"),
        ])

        with pytest.raises(ValueError, match="summarize"):
            ToolDispatcher(registry, LifecycleGate(pipeline.initialize), pipeline)

    def test_handler_without_registry_entry_rejected(self, pipeline):
        registry = ToolRegistry([ToolDescriptor(name="rag_query", description="Only one")])

        with pytest.raises(ValueError, match="rag_search"):
            ToolDispatcher(registry, LifecycleGate(pipeline.initialize), pipeline)

    @pytest.mark.asyncio
    async def test_custom_handler_table(self, pipeline):
        registry = ToolRegistry([ToolDescriptor(name="get_stats", description="Stats")])
        dispatcher = ToolDispatcher(
            registry,
            LifecycleGate(AsyncMock()),
            pipeline,
            handlers={"get_stats": HANDLERS["get_stats"]},
        )

        result = await dispatcher.dispatch("get_stats", {})

        assert _payload(result)["totalChunks"] == 12
