"""
Tests for the MCP server: tool registration, dispatch and error mapping.

Tools are exercised through call_tool(), the same path an MCP client
request takes, against the session test database.
"""

import asyncio

import pytest
from mcp.server.fastmcp.exceptions import ToolError

from mcp_servers.trade_server import TOOL_HANDLERS, call_tool, mcp
from mercosur_trade.services.catalogue import TOOL_NAMES


class TestToolRegistration:

    def test_handlers_cover_all_tools(self):
        assert list(TOOL_HANDLERS) == TOOL_NAMES

    def test_tools_registered_with_fastmcp(self):
        tools = asyncio.run(mcp.list_tools())
        assert {tool.name for tool in tools} == set(TOOL_NAMES)

    def test_tool_schema_lists_required_arguments(self):
        tools = {tool.name: tool for tool in asyncio.run(mcp.list_tools())}
        assert set(tools["get_data_transfer_rules"].inputSchema["required"]) == {"source_country", "dest_country"}


class TestCallTool:

    def test_data_transfer_rules(self, global_store):
        result = call_tool("get_data_transfer_rules", {"source_country": "eu", "dest_country": "ar"})

        assert result["found"] is True
        assert result["reversed_lookup"] is True

    def test_mutual_recognition(self, global_store):
        result = call_tool("get_mutual_recognition", {"country_a": "AR", "country_b": "BR"})
        assert result["count"] == 4

    def test_digital_trade_obligations(self, global_store):
        result = call_tool("check_digital_trade_obligations", {"countries": ["ZZ"]})

        assert result["found"] is False
        assert result["message"] == "No digital trade obligations found for ZZ."

    def test_search(self, global_store):
        result = call_tool("search_agreements", {"query": "comercio", "limit": 2})
        assert result["count"] == 2

    @pytest.mark.parametrize("name,meta_key", [
        ("list_sources", "_meta"),
        ("about", "_metadata"),
        ("check_data_freshness", "_metadata"),
    ])
    def test_tools_without_arguments(self, global_store, name, meta_key):
        assert meta_key in call_tool(name)

    def test_unknown_tool(self, global_store):
        with pytest.raises(ValueError, match="Unknown tool: nope"):
            call_tool("nope", {})


class TestErrorMapping:

    def test_empty_country_list_is_tool_error(self, global_store):
        with pytest.raises(ToolError, match="At least one country code is required."):
            call_tool("check_digital_trade_obligations", {"countries": []})

    def test_malformed_code_is_tool_error(self, global_store):
        with pytest.raises(ToolError):
            call_tool("get_data_transfer_rules", {"source_country": "Brazil", "dest_country": "AR"})

    def test_missing_database_is_tool_error(self, missing_store):
        with pytest.raises(ToolError, match="Database not found"):
            call_tool("about")

    def test_tool_call_is_logged(self, global_store, caplog):
        with caplog.at_level("INFO", logger="tool_calls"):
            call_tool("get_trade_bloc_rules", {"bloc": "prosur"})

        events = [record.msg for record in caplog.records if isinstance(record.msg, dict)]
        assert events[-1]["event_type"] == "tool_call"
        assert events[-1]["tool"] == "get_trade_bloc_rules"
        assert events[-1]["found"] is True

    def test_tool_error_is_logged(self, global_store, caplog):
        with caplog.at_level("INFO", logger="tool_calls"):
            with pytest.raises(ToolError):
                call_tool("check_digital_trade_obligations", {"countries": []})

        events = [record.msg for record in caplog.records if isinstance(record.msg, dict)]
        assert events[-1]["event_type"] == "tool_error"
        assert events[-1]["error_type"] == "InvalidInputError"
