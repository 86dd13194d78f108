"""Catalog models for the storefront"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ProductType(str, Enum):
    PERFUME = "perfume"
    SAMPLE = "sample"


class ProductCategory(str, Enum):
    MEN = "men"
    WOMEN = "women"
    UNISEX = "un"


class SizeOption(CamelModel):
    """Size-specific list price"""
    label: str
    price: float = Field(ge=0)


class Product(CamelModel):
    """Perfume or sample in the catalog"""
    id: str
    name: str
    brand: str
    type: ProductType = ProductType.PERFUME
    category: ProductCategory = ProductCategory.UNISEX
    price: float = Field(ge=0)
    sizes: list[SizeOption] = []
    discount: float = Field(default=0, ge=0, le=100)
    image_url: Optional[str] = None
    featured: bool = False

    @property
    def default_size(self) -> str:
        return self.sizes[0].label if self.sizes else ""


class Collection(CamelModel):
    """Fixed-price bundle of perfumes"""
    id: str
    name: str
    description: Optional[str] = None
    perfumes: list[str]
    price: float = Field(ge=0)
    image: Optional[str] = None
    featured: bool = False


class ProductSearchResponse(CamelModel):
    """Response from product search"""
    products: list[Product]
    total: int
    limit: int
    offset: int
