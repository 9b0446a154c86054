"""
ShopSearch - Storefront product search core.

Example:
    >>> from shopsearch.config import get_settings
    >>> from shopsearch.interfaces.wiring import create_session
    >>> session = create_session(get_settings())
    >>> await session.open()
    >>> outcome = await session.search("sneakers")
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
