"""
SmartNotes: small single-user note keeper.

Provides:
- An in-memory note repository with optional SQLite persistence
- Search, tag filtering and pin-then-recency ordering
- A terminal front end and an MCP server
"""

__version__ = "0.1.0"
