"""
Storefront Core

Headless storefront backend over the Shopify Storefront API:
- cart: cart state, persistence, checkout lifecycle
- variants: option selection -> variant resolution
- catalog: GraphQL client and models
- routers: FastAPI endpoints

Note: subpackages are imported on demand so `import storefront` does not
pull in FastAPI or open any connection.
"""

__version__ = "1.0.0"
