"""Perfume catalog for the storefront"""

from typing import Optional

from cart_core import PriceQuote, quote

from ..models.product import Product, ProductCategory, ProductType, SizeOption

# Seed catalog
PRODUCTS: dict[str, Product] = {
    "perf-001": Product(
        id="perf-001",
        name="Bleu de Chanel",
        brand="Chanel",
        category=ProductCategory.MEN,
        price=120.00,
        sizes=[
            SizeOption(label="50ml", price=100.00),
            SizeOption(label="100ml", price=150.00),
        ],
        discount=20,
        image_url="/static/images/bleu-de-chanel.jpg",
        featured=True,
    ),
    "perf-002": Product(
        id="perf-002",
        name="La Vie Est Belle",
        brand="Lancome",
        category=ProductCategory.WOMEN,
        price=95.00,
        sizes=[
            SizeOption(label="30ml", price=68.50),
            SizeOption(label="75ml", price=95.00),
        ],
        image_url="/static/images/la-vie-est-belle.jpg",
    ),
    "perf-003": Product(
        id="perf-003",
        name="Oud Wood",
        brand="Tom Ford",
        category=ProductCategory.UNISEX,
        price=250.00,
        sizes=[SizeOption(label="50ml", price=250.00)],
        discount=15,
        image_url="/static/images/oud-wood.jpg",
    ),
    "perf-004": Product(
        id="perf-004",
        name="Sauvage",
        brand="Dior",
        category=ProductCategory.MEN,
        price=110.00,
        image_url="/static/images/sauvage.jpg",
    ),
    "smpl-001": Product(
        id="smpl-001",
        name="Baccarat Rouge 540 Sample",
        brand="Maison Francis Kurkdjian",
        type=ProductType.SAMPLE,
        category=ProductCategory.UNISEX,
        price=12.00,
        sizes=[
            SizeOption(label="2ml", price=12.00),
            SizeOption(label="5ml", price=25.00),
        ],
        discount=10,
        image_url="/static/images/br540-sample.jpg",
    ),
    "smpl-002": Product(
        id="smpl-002",
        name="Black Opium Sample",
        brand="Yves Saint Laurent",
        type=ProductType.SAMPLE,
        category=ProductCategory.WOMEN,
        price=8.00,
        sizes=[SizeOption(label="2ml", price=8.00)],
        image_url="/static/images/black-opium-sample.jpg",
    ),
}


class ProductDatabase:
    """In-memory perfume catalog"""

    def __init__(self):
        self.products = PRODUCTS.copy()

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get a product by ID"""
        return self.products.get(product_id)

    def search_products(
        self,
        query: Optional[str] = None,
        category: Optional[ProductCategory] = None,
        product_type: Optional[ProductType] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Product], int]:
        """
        Search products with filters.

        Returns:
            Tuple of (matching products, total count)
        """
        results = list(self.products.values())

        if query:
            query_lower = query.lower()
            results = [
                p for p in results
                if query_lower in p.name.lower() or query_lower in p.brand.lower()
            ]

        if category:
            results = [p for p in results if p.category == category]

        if product_type:
            results = [p for p in results if p.type == product_type]

        total = len(results)
        return results[offset : offset + limit], total

    def quote(self, product: Product, size: Optional[str] = None) -> PriceQuote:
        """
        Price snapshot for a product size.

        The size's list price is the original price and the product discount
        is applied on top. Unknown sizes fall back to the base price.
        """
        return quote(product.price, product.sizes, size or product.default_size, product.discount)


# Singleton instance
product_db = ProductDatabase()
