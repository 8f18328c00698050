"""Tests for the MCP tool server."""

import json

import anyio
import pytest

from mcp_agentrouter.server import create_server


def _call(server, name: str, **kwargs) -> dict:
    """Call a tool through the server and decode its JSON payload."""

    async def _invoke():
        return await server.call_tool(name, kwargs)

    result = anyio.run(_invoke)
    # Newer SDKs return (content, structured_output)
    content = result[0] if isinstance(result, tuple) else result
    return json.loads(content[0].text)


class TestToolRegistration:
    """Test the exposed tool set."""

    def test_tools_listed(self, router_config):
        """All routing tools are exposed."""
        server = create_server(router_config)
        tools = anyio.run(server.list_tools)
        assert {t.name for t in tools} == {
            "classify_task",
            "delegate_to_codex",
            "delegate_to_gemini",
            "auto_route",
            "check_agents",
        }


class TestClassifyTool:
    """Test classify_task."""

    def test_structured_fields(self, router_config):
        """Decision fields and a summary are returned."""
        result = _call(create_server(router_config), "classify_task", message="compare libraries")
        assert result["target"] == "gemini"
        assert result["confidence"] == pytest.approx(0.825)
        assert result["suggested_subtype"] == "compare"
        assert "82%" in result["summary"] or "83%" in result["summary"]


class TestDelegateTools:
    """Test delegate_to_codex and delegate_to_gemini."""

    def test_codex(self, router_config):
        """Codex output is returned."""
        result = _call(
            create_server(router_config),
            "delegate_to_codex",
            task="the tokenizer",
            task_type="review",
        )
        assert result["success"] is True
        assert result["task_type"] == "review"
        assert "the tokenizer" in result["output"]

    def test_codex_invalid_type(self, router_config):
        """Invalid sub-types come back as structured failures."""
        result = _call(create_server(router_config), "delegate_to_codex", task="x", task_type="deploy")
        assert result["success"] is False
        assert result["error_kind"] == "invalid_argument"

    def test_gemini_compare_requires_options(self, router_config):
        """Compare without options is rejected."""
        result = _call(create_server(router_config), "delegate_to_gemini", query="orms", task_type="compare")
        assert result["success"] is False
        assert result["error_kind"] == "invalid_argument"

    def test_gemini_invalid_depth(self, router_config):
        """Unknown depth values are rejected."""
        result = _call(create_server(router_config), "delegate_to_gemini", query="x", depth="deep")
        assert result["error_kind"] == "invalid_argument"

    def test_gemini_compare(self, router_config):
        """Options reach the agent."""
        result = _call(
            create_server(router_config),
            "delegate_to_gemini",
            query="orms",
            task_type="compare",
            options=["sqlalchemy", "tortoise"],
        )
        assert result["success"] is True
        assert "sqlalchemy, tortoise" in result["output"]

    def test_missing_agent_manual(self, missing_config):
        """Missing CLIs produce manual instructions."""
        result = _call(create_server(missing_config), "delegate_to_codex", task="build a cli")
        assert result["status"] == "manual"
        assert "build a cli" in result["output"]


class TestAutoRoute:
    """Test auto_route."""

    def test_classify_only(self, router_config):
        """execute=False returns only the decision."""
        result = _call(create_server(router_config), "auto_route", message="refactor the code", execute=False)
        assert result["decision"]["target"] == "codex"
        assert result["result"] is None

    def test_execute(self, router_config):
        """execute=True runs the agent."""
        result = _call(create_server(router_config), "auto_route", message="refactor the code")
        assert result["result"]["status"] == "completed"
        assert "completed" in result["summary"]


class TestCheckAgents:
    """Test check_agents."""

    def test_reports_both(self, router_config):
        """Both agents are listed as available."""
        result = _call(create_server(router_config), "check_agents")
        assert len(result["agents"]) == 2
        assert all(a["available"] for a in result["agents"])
        assert result["work_dir"] == str(router_config.work_dir)
