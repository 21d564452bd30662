"""MCP tool server for querying the Dnaerys genomic variant store."""

__version__ = "0.1.0"
