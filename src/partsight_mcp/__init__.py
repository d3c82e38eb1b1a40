"""PartSight MCP - Identify electronic components from vision analysis output."""

__version__ = "0.1.0"
