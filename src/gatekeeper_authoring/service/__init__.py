"""File-level authoring services shared by the REST API and MCP server."""
