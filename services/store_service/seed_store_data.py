"""Seed script for store demo data.

Creates the bilingual demo categories and products (with size/colour
variants for clothing and shoes) so the storefront and checkout can be tried
end-to-end.

Usage:
    python -m services.store_service.seed_store_data
"""

import asyncio
import re
from decimal import Decimal

from libs.db.config import AsyncSessionLocal
from services.store_service.models import Category, Product, ProductVariant
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

CATEGORIES = [
    {
        "name_en": "Men's Clothing",
        "name_id": "Pakaian Pria",
        "description_en": "Stylish clothing for men",
        "description_id": "Pakaian bergaya untuk pria",
    },
    {
        "name_en": "Women's Clothing",
        "name_id": "Pakaian Wanita",
        "description_en": "Fashion clothing for women",
        "description_id": "Pakaian fashion untuk wanita",
    },
    {
        "name_en": "Shoes",
        "name_id": "Sepatu",
        "description_en": "Comfortable and stylish footwear",
        "description_id": "Alas kaki yang nyaman dan bergaya",
    },
    {
        "name_en": "Accessories",
        "name_id": "Aksesoris",
        "description_en": "Fashion accessories and more",
        "description_id": "Aksesoris fashion dan lainnya",
    },
]

PRODUCTS = [
    {
        "category": "Men's Clothing",
        "sku": "SKU-100001",
        "name_en": "Classic Cotton T-Shirt",
        "name_id": "Kaos Katun Klasik",
        "description_en": "A comfortable and durable cotton t-shirt perfect for everyday wear. Made from 100% premium cotton with excellent breathability and softness.",
        "description_id": "Kaos katun yang nyaman dan tahan lama, cocok untuk pemakaian sehari-hari. Terbuat dari 100% katun premium dengan sirkulasi udara dan kelembutan yang sangat baik.",
        "short_description_en": "Comfortable 100% cotton t-shirt",
        "short_description_id": "Kaos katun 100% yang nyaman",
        "base_price": Decimal("150000"),
        "stock_quantity": 50,
        "weight": Decimal("0.25"),
    },
    {
        "category": "Women's Clothing",
        "sku": "SKU-100002",
        "name_en": "Elegant Summer Dress",
        "name_id": "Dress Musim Panas Elegan",
        "description_en": "Beautiful floral summer dress made from lightweight fabric. Perfect for casual outings and summer events.",
        "description_id": "Dress musim panas bermotif bunga yang cantik terbuat dari bahan ringan. Cocok untuk acara santai dan acara musim panas.",
        "short_description_en": "Lightweight floral summer dress",
        "short_description_id": "Dress musim panas bermotif bunga yang ringan",
        "base_price": Decimal("250000"),
        "stock_quantity": 30,
        "weight": Decimal("0.40"),
    },
    {
        "category": "Shoes",
        "sku": "SKU-100003",
        "name_en": "Running Sneakers",
        "name_id": "Sepatu Sneakers Lari",
        "description_en": "High-performance running sneakers with advanced cushioning technology. Designed for comfort and durability during athletic activities.",
        "description_id": "Sepatu sneakers lari berkinerja tinggi dengan teknologi bantalan canggih. Dirancang untuk kenyamanan dan daya tahan selama aktivitas atletik.",
        "short_description_en": "High-performance running sneakers",
        "short_description_id": "Sepatu sneakers lari berkinerja tinggi",
        "base_price": Decimal("750000"),
        "stock_quantity": 25,
        "weight": Decimal("1.10"),
    },
    {
        "category": "Accessories",
        "sku": "SKU-100004",
        "name_en": "Leather Wallet",
        "name_id": "Dompet Kulit",
        "description_en": "Premium genuine leather wallet with multiple card slots and bill compartments. Handcrafted with attention to detail.",
        "description_id": "Dompet kulit asli premium dengan banyak slot kartu dan ruang uang. Dibuat dengan tangan dengan perhatian pada detail.",
        "short_description_en": "Premium genuine leather wallet",
        "short_description_id": "Dompet kulit asli premium",
        "base_price": Decimal("300000"),
        "stock_quantity": 40,
        "weight": Decimal("0.20"),
    },
]

CLOTHING_SIZES = ["S", "M", "L", "XL"]
CLOTHING_COLORS = ["Black", "White", "Navy", "Gray"]
SHOE_SIZES = ["38", "39", "40", "41", "42", "43", "44"]
SHOE_COLORS = ["Black", "White", "Blue"]

# XL costs more
XL_ADJUSTMENT = Decimal("25000")


def slugify(value: str) -> str:
    """'Men's Clothing' -> 'mens-clothing'."""
    value = value.lower().replace("'", "")
    return re.sub(r"[^a-z0-9]+", "-", value).strip("-")


def build_variants(category_name: str, product_sku: str) -> list[ProductVariant]:
    """Size/colour grid for clothing and shoes; other categories get none."""
    if category_name in ("Men's Clothing", "Women's Clothing"):
        sizes, colors = CLOTHING_SIZES, CLOTHING_COLORS
    elif category_name == "Shoes":
        sizes, colors = SHOE_SIZES, SHOE_COLORS
    else:
        return []

    return [
        ProductVariant(
            size=size,
            color=color,
            sku=f"{product_sku}-{size}-{color[:3].upper()}",
            price_adjustment=XL_ADJUSTMENT if size == "XL" else Decimal("0"),
            stock_quantity=10,
            is_active=True,
        )
        for size in sizes
        for color in colors
    ]


async def seed_catalog(db: AsyncSession) -> dict[str, int]:
    """Insert the demo catalog unless categories already exist.

    Returns how many rows of each kind were created.
    """
    existing = (await db.execute(select(func.count()).select_from(Category))).scalar()
    if existing:
        return {"categories": 0, "products": 0, "variants": 0}

    categories = {
        data["name_en"]: Category(slug=slugify(data["name_en"]), is_active=True, **data)
        for data in CATEGORIES
    }
    db.add_all(categories.values())

    products = []
    variant_count = 0
    for data in PRODUCTS:
        data = dict(data)
        category_name = data.pop("category")
        variants = build_variants(category_name, data["sku"])
        variant_count += len(variants)
        text = data["name_en"].replace(" ", "+")
        products.append(
            Product(
                category=categories[category_name],
                slug=slugify(data["name_en"]),
                images=[
                    f"https://placehold.co/600x600/4F46E5/FFFFFF?text={text}",
                    f"https://placehold.co/600x600/7C3AED/FFFFFF?text={text}+2",
                ],
                is_active=True,
                is_featured=True,
                variants=variants,
                **data,
            )
        )
    db.add_all(products)

    await db.commit()
    return {
        "categories": len(categories),
        "products": len(products),
        "variants": variant_count,
    }


async def seed_store_data():
    async with AsyncSessionLocal() as db:
        print("Seeding store data...")
        counts = await seed_catalog(db)

        if not counts["categories"]:
            print("Store data already exists. Skipping seed.")
            return

        print("=" * 60)
        print("Store data seeded successfully!")
        print("=" * 60)
        print(f"  Categories: {counts['categories']}")
        print(f"  Products: {counts['products']}")
        print(f"  Variants: {counts['variants']}")
        print("=" * 60)


if __name__ == "__main__":
    asyncio.run(seed_store_data())
