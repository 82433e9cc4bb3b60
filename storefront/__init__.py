"""Storefront backend: accounts, catalog, carts and orders over HTTP."""

__version__ = "1.0.0"
