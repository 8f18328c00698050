"""MCP server exposing AgentRouter tools."""
