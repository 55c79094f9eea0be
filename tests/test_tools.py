"""
Tests for the tool catalog and registry.
"""

import pytest

from agentchain.errors import DispatchError
from agentchain.tools import (
    CONFIDENTIAL_TRANSFER_TOOL,
    DEFAULT_TOOLS,
    PUBLIC_TRANSFER_TOOL,
    SPECIFIC_TOOL_IDS,
    Tool,
    ToolKind,
    ToolRegistry,
    ToolRegistryError,
)


class TestDefaultCatalog:
    """Tests for the default tool catalog."""

    def test_catalog_has_nineteen_tools(self, registry):
        assert len(registry) == 19

    def test_ids_are_unique(self):
        ids = [tool.id for tool in DEFAULT_TOOLS]
        assert len(ids) == len(set(ids))

    def test_declaration_order_is_kept(self, registry):
        ids = registry.list_ids()
        assert ids[0] == "get_wallet_address"
        assert ids[-1] == "check_liquidity"
        assert ids.index(PUBLIC_TRANSFER_TOOL) < ids.index(CONFIDENTIAL_TRANSFER_TOOL)

    def test_transfer_tools_move_value(self, registry):
        public = registry.get(PUBLIC_TRANSFER_TOOL)
        private = registry.get(CONFIDENTIAL_TRANSFER_TOOL)

        assert public.kind == ToolKind.WRITE
        assert public.moves_value
        assert not public.is_confidential

        assert private.kind == ToolKind.PRIVATE
        assert private.moves_value
        assert private.is_confidential

    def test_read_tools_do_not_move_value(self, registry):
        for tool_id in ("get_balance", "get_network", "get_token_price", "check_liquidity"):
            tool = registry.get(tool_id)
            assert tool.is_read_only
            assert not tool.moves_value

    def test_specific_tool_ids_are_registered(self, registry):
        for tool_id in SPECIFIC_TOOL_IDS:
            assert tool_id in registry

    def test_keywords_are_lowercase(self):
        for tool in DEFAULT_TOOLS:
            assert all(keyword == keyword.lower() for keyword in tool.keywords)


class TestTool:
    """Tests for Tool."""

    def test_matches_keyword_case_insensitive(self):
        tool = Tool(id="get_balance", name="Check Balance", description="d", keywords=("balance",))
        assert tool.matches("What is my BALANCE?")
        assert not tool.matches("what network")

    def test_confidential_marker_in_id(self):
        tool = Tool(id="confidential_vote", name="Vote", description="d", kind=ToolKind.WRITE)
        assert tool.is_confidential

    def test_llm_schema_with_params(self, registry):
        schema = registry.get(PUBLIC_TRANSFER_TOOL).to_llm_schema()
        assert schema["id"] == PUBLIC_TRANSFER_TOOL
        assert set(schema["params"]) == {"to", "amount"}

    def test_llm_schema_without_params(self, registry):
        schema = registry.get("get_network").to_llm_schema()
        assert schema["params"] == "context dependent"


class TestToolRegistry:
    """Tests for ToolRegistry."""

    def test_get_unknown_returns_none(self, registry):
        assert registry.get("no_such_tool") is None
        assert registry.get(None) is None

    def test_get_required_raises_dispatch_error(self, registry):
        with pytest.raises(DispatchError) as exc_info:
            registry.get_required("no_such_tool")

        assert exc_info.value.tool_id == "no_such_tool"
        assert exc_info.value.reason == "tool_not_found"

    def test_duplicate_registration_rejected(self):
        registry = ToolRegistry()
        registry.register(Tool(id="a", name="A", description="first"))

        with pytest.raises(ToolRegistryError):
            registry.register(Tool(id="a", name="A", description="second"))

    def test_tool_without_description_rejected(self):
        with pytest.raises(ToolRegistryError):
            ToolRegistry([Tool(id="a", name="A", description="")])

    def test_uppercase_keywords_rejected(self):
        with pytest.raises(ToolRegistryError):
            ToolRegistry([Tool(id="a", name="A", description="d", keywords=("Send",))])

    def test_unregister(self, registry):
        assert registry.unregister("get_network") is True
        assert "get_network" not in registry
        assert registry.unregister("get_network") is False

    def test_iterates_in_order(self, registry):
        assert [tool.id for tool in registry] == registry.list_ids()

    def test_llm_schemas_cover_catalog(self, registry):
        schemas = registry.to_llm_schemas()
        assert [schema["id"] for schema in schemas] == registry.list_ids()
