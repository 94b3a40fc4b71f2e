"""Route-level tests for the HTTP MCP transport."""

import json

import pytest
from fastapi.testclient import TestClient

from rag_gateway.main import create_app


def _tool_call_payload(name: str, arguments: dict | None = None) -> dict:
    return {
        "jsonrpc": "2.0",
        "id": "req-2",
        "method": "tools/call",
        "params": {
            "name": name,
            "arguments": arguments or {},
        },
    }


@pytest.fixture
def client(gateway):
    app = create_app(gateway)
    with TestClient(app) as test_client:
        yield test_client


def test_health_reports_pipeline_state(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "app": "mcp-rag-server", "pipeline": "uninitialized"}


def test_tools_list(client):
    response = client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "tools/list"})

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == 1
    assert "error" not in body
    assert len(body["result"]["tools"]) == 7


def test_tools_call(client, pipeline):
    response = client.post("/mcp", json=_tool_call_payload("clear_collection", {"confirm": True}))

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["isError"] is False
    assert json.loads(result["content"][0]["text"]) == {"success": True, "message": "Collection cleared"}
    pipeline.clear_all.assert_awaited_once()


def test_tools_call_error_stays_http_200(client, pipeline):
    pipeline.initialize.side_effect = RuntimeError("no embeddings key")

    response = client.post("/mcp", json=_tool_call_payload("get_stats"))

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["isError"] is True
    assert json.loads(result["content"][0]["text"]) == {"error": "no embeddings key", "tool": "get_stats"}


def test_health_after_first_call(client):
    client.post("/mcp", json=_tool_call_payload("get_stats"))

    assert client.get("/health").json()["pipeline"] == "ready"


def test_notification_returns_202(client):
    response = client.post("/mcp", json={"jsonrpc": "2.0", "method": "notifications/initialized"})

    assert response.status_code == 202
    assert response.content == b""


def test_malformed_json_is_parse_error(client):
    response = client.post("/mcp", content=b"{not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 200
    assert response.json() == {
        "jsonrpc": "2.0",
        "id": None,
        "error": {"code": -32700, "message": "Invalid JSON"},
    }


def test_unknown_resource_is_jsonrpc_error(client):
    response = client.post("/mcp", json={
        "jsonrpc": "2.0",
        "id": "r",
        "method": "resources/read",
        "params": {"uri": "rag://missing"},
    })

    body = response.json()
    assert "result" not in body
    assert body["error"]["code"] == -32002


def test_lifespan_closes_gateway(gateway, pipeline):
    app = create_app(gateway)

    with TestClient(app):
        pass

    pipeline.aclose.assert_awaited_once()
