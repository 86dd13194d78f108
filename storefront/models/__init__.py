# Storefront Models

from .product import (
    CamelModel,
    Collection,
    Product,
    ProductCategory,
    ProductSearchResponse,
    ProductType,
    SizeOption,
)
from .cart import (
    AddBundleRequest,
    AddItemRequest,
    BundleItemOut,
    BundleProductIn,
    CartOut,
    CartResponse,
    CheckoutResponse,
    LineItemOut,
    UpdateCartItemRequest,
)

__all__ = [
    "CamelModel",
    "Collection",
    "Product",
    "ProductCategory",
    "ProductSearchResponse",
    "ProductType",
    "SizeOption",
    "AddBundleRequest",
    "AddItemRequest",
    "BundleItemOut",
    "BundleProductIn",
    "CartOut",
    "CartResponse",
    "CheckoutResponse",
    "LineItemOut",
    "UpdateCartItemRequest",
]
