from .product_client import HttpProductClient, ProductCatalog

__all__ = ["HttpProductClient", "ProductCatalog"]
