"""
Interfaces - User-facing applications.

- api: FastAPI REST API
- cli: Command-line interface
- wiring: session assembly shared by both
"""

__all__ = ["api", "cli", "wiring"]
