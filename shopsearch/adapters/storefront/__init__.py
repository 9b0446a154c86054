"""
Storefront Adapter - Product, category, search and membership REST client.
"""

from .client import StorefrontClient

__all__ = ["StorefrontClient"]
