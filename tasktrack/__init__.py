"""Task tracker storage in SQLite, its errors, and a JSON-RPC 2.0 stdio transport."""

__version__ = "0.1.1"