"""
CLI Interface - Command-line tools for ShopSearch.

Provides commands for:
- Product search with sort orders
- Suggestions
- Recent searches
- API server
"""

from .main import app, main

__all__ = ["app", "main"]
