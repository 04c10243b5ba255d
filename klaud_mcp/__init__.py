"""MCP server exposing the Klaud API endpoints as schema-validated tools."""

__version__ = "1.0.0"
