"""Shared services used by the cart, catalog client and routers."""
