"""QBMCP - QuickBase schema and relationship tooling for MCP agents."""

__version__ = "1.0.0"
