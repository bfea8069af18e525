"""better-icons - MCP server for searching icons from 200+ libraries."""

__version__ = "0.1.0"

PACKAGE_NAME = "better-icons"
