"""Collection (bundle) catalog for the storefront"""

from typing import Optional

from cart_core import BundleProduct, ValidationError

from ..models.cart import BundleProductIn
from ..models.product import Collection
from .products import ProductDatabase, product_db

COLLECTIONS: dict[str, Collection] = {
    "coll-001": Collection(
        id="coll-001",
        name="Signature Duo",
        description="Bleu de Chanel and La Vie Est Belle, full size",
        perfumes=["perf-001", "perf-002"],
        price=180.00,
        featured=True,
    ),
    "coll-002": Collection(
        id="coll-002",
        name="Discovery Trio",
        description="Three samples to find your scent",
        perfumes=["smpl-001", "smpl-002", "perf-003"],
        price=50.00,
    ),
}


class CollectionDatabase:
    """In-memory collection catalog"""

    def __init__(self, products: ProductDatabase):
        self.collections = COLLECTIONS.copy()
        self.products = products

    def get_collection(self, collection_id: str) -> Optional[Collection]:
        """Get a collection by ID"""
        return self.collections.get(collection_id)

    def list_collections(self, featured_only: bool = False) -> list[Collection]:
        collections = list(self.collections.values())
        if featured_only:
            collections = [c for c in collections if c.featured]
        return collections

    def resolve_products(
        self,
        collection: Collection,
        selection: Optional[list[BundleProductIn]] = None,
    ) -> list[BundleProduct]:
        """
        Contents of one bundle.

        Without a selection every perfume in the collection is included once
        at its default size. A selection may only name perfumes that belong
        to the collection.
        """
        if not selection:
            contents = []
            for product_id in collection.perfumes:
                product = self.products.get_product(product_id)
                size = product.default_size if product else ""
                contents.append(BundleProduct(product_id=product_id, size=size))
            return contents

        contents = []
        for chosen in selection:
            if chosen.product_id not in collection.perfumes:
                raise ValidationError(f"Product {chosen.product_id} is not part of this collection")
            if chosen.quantity < 1 or chosen.quantity > 10:
                raise ValidationError("Product quantity must be between 1 and 10")
            product = self.products.get_product(chosen.product_id)
            size = chosen.size or (product.default_size if product else "")
            contents.append(BundleProduct(product_id=chosen.product_id, size=size, quantity=chosen.quantity))
        return contents


# Singleton instance
collection_db = CollectionDatabase(product_db)
