"""MCP tool server exposing contextcore extraction to agents."""
