import json

import pytest
from mcp import types
from mcp.shared.exceptions import McpError

from arxiv_mcp.config.schema import Config
from arxiv_mcp.server import ArxivMCPServer
from conftest import SAMPLE_FEED, DummyResponse


@pytest.fixture
def server(tmp_path) -> ArxivMCPServer:
    return ArxivMCPServer(Config(cache={"directory": str(tmp_path)}))


def test_list_tools(server) -> None:
    tools = server.list_tools()
    assert [t.name for t in tools] == [
        "search_papers",
        "get_paper",
        "search_by_category",
        "get_paper_content",
    ]
    assert tools[1].inputSchema["properties"]["paperId"]["type"] == "string"


def test_initialization_options(server) -> None:
    options = server.initialization_options()
    assert options.server_name == "arxiv-mcp-server"
    assert options.capabilities.tools is not None


async def test_call_tool_success(server, fake_http) -> None:
    fake_http.respond(DummyResponse(SAMPLE_FEED))
    result = await server.call_tool("get_paper", {"paperId": "2104.13478"})
    assert result.isError is False
    assert result.content[0].type == "text"
    assert json.loads(result.content[0].text)["total_results"] == 42


async def test_call_tool_upstream_error_sets_is_error(server, fake_http) -> None:
    fake_http.respond(DummyResponse("busy", status_code=503))
    result = await server.call_tool("search_by_category", {"category": "cs.AI"})
    assert result.isError is True
    assert result.content[0].text == "arXiv API error: busy"


async def test_call_tool_unknown_tool(server) -> None:
    with pytest.raises(McpError) as exc:
        await server.call_tool("delete_paper", {})
    assert exc.value.error.code == types.METHOD_NOT_FOUND
    assert exc.value.error.message == "Unknown tool: delete_paper"


async def test_call_tool_invalid_params(server, fake_http) -> None:
    with pytest.raises(McpError) as exc:
        await server.call_tool("get_paper_content", None)
    assert exc.value.error.code == types.INVALID_PARAMS
    assert "missing required paperId" in exc.value.error.message
    assert fake_http.calls == []


async def test_request_handler_wraps_result(server, fake_http) -> None:
    fake_http.respond(DummyResponse(SAMPLE_FEED))
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name="get_paper", arguments={"paperId": "2104.13478"}),
    )
    response = await server.server.request_handlers[types.CallToolRequest](request)
    assert isinstance(response.root, types.CallToolResult)
    assert response.root.isError is False
