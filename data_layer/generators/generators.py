"""Sample data generation for the four collections.

Produces talents with their accounts, products (owned and global), posts and
daily sales. A share of the older product sales is written in the legacy
shape (linked to a post instead of a product) so the backfill and the
all-time attribution path have something to work on.
"""
import json
import os
import random
import uuid
from datetime import date, timedelta
from typing import Dict, List, Optional

from bms.models.records import (
    Platform,
    PostRecord,
    ProductRecord,
    SaleKind,
    SaleRecord,
    TalentReference,
)

from .models import ProductSeed, TalentSeed


# --- SEEDS ---

TALENTS = [
    TalentSeed("Ana", ["ana.daily", "ana.beauty"]),
    TalentSeed("Bima", ["bima.gadget"]),
    TalentSeed("Citra", ["citra.cooks", "citra.home"]),
    TalentSeed("Dewi", ["dewi.style"]),
]

PRODUCTS = [
    ProductSeed("Serum Vitamin C 30ml", (89000, 149000), "ana.beauty"),
    ProductSeed("Lip Tint Matte", (39000, 69000), "ana.beauty"),
    ProductSeed("TWS Earbuds Pro", (199000, 449000), "bima.gadget"),
    ProductSeed("Powerbank 20000mAh", (149000, 299000), "bima.gadget"),
    ProductSeed("Air Fryer 4L", (499000, 899000), "citra.home"),
    ProductSeed("Sambal Bawang 200g", (25000, 45000), "citra.cooks"),
    ProductSeed("Oversized Tee", (79000, 129000), "dewi.style"),
    ProductSeed("Tote Bag Canvas", (49000, 99000)),
    ProductSeed("Tumbler Stainless 500ml", (59000, 119000)),
]

PLATFORMS = [Platform.TIKTOK, Platform.INSTAGRAM, Platform.SHOPEE, Platform.YOUTUBE, Platform.OTHER]
PLATFORM_WEIGHTS = [5, 3, 3, 1, 1]

COMMISSION_RATE = (0.05, 0.15)
LEGACY_SHARE = 0.25  # share of product sales stored in the legacy shape
LEGACY_CUTOFF_DAYS = 60  # only sales older than this can be legacy


def _new_id() -> str:
    return uuid.UUID(int=random.getrandbits(128), version=4).hex


def _owner(account: Optional[str], talents: List[TalentReference]) -> Optional[TalentReference]:
    for talent in talents:
        if account in talent.accounts:
            return talent
    return None


# --- GENERATORS ---

def generate_talents() -> List[TalentReference]:
    return [TalentReference(id=_new_id(), name=t.name, accounts=list(t.accounts)) for t in TALENTS]


def generate_products(talents: List[TalentReference]) -> List[ProductRecord]:
    products = []
    for i, seed in enumerate(PRODUCTS):
        owner = _owner(seed.account_name, talents)
        products.append(
            ProductRecord(
                id=_new_id(),
                name=seed.name,
                url=seed.url or f"https://shop.example.com/p/{i + 1}",
                talent_name=owner.name if owner else None,
                account_name=seed.account_name,
                talent_id=owner.id if owner else None,
                created_at=1_700_000_000_000 + i * 60_000,
            )
        )
    return products


def _products_for(account: str, products: List[ProductRecord]) -> List[ProductRecord]:
    return [p for p in products if p.account_name == account or p.is_global]


def generate_posts(
    talents: List[TalentReference],
    products: List[ProductRecord],
    end_date: date,
    days: int = 90,
) -> List[PostRecord]:
    """Roughly every other day per account, 1-3 posts."""
    posts = []
    for day_offset in range(days):
        current = end_date - timedelta(days=day_offset)
        for talent in talents:
            for account in talent.accounts:
                if random.random() < 0.5:
                    continue
                for _ in range(random.randint(1, 3)):
                    candidates = _products_for(account, products)
                    product = random.choice(candidates) if random.random() < 0.8 else None
                    platform = random.choices(PLATFORMS, weights=PLATFORM_WEIGHTS)[0]
                    posts.append(
                        PostRecord(
                            id=_new_id(),
                            date=current.isoformat(),
                            talent_name=talent.name,
                            account_name=account,
                            platform=platform,
                            link=f"https://{platform.value.lower()}.example.com/{account}/{_new_id()[:10]}",
                            product_id=product.id if product else None,
                            product_name=product.name if product else "Unknown",
                            views=random.randint(200, 50000),
                            likes=random.randint(10, 5000),
                            talent_id=talent.id,
                        )
                    )
    return posts


def generate_sales(
    talents: List[TalentReference],
    products: List[ProductRecord],
    posts: List[PostRecord],
    end_date: date,
    days: int = 90,
) -> List[SaleRecord]:
    """One general report per account per day plus product sales from posts."""
    sales = []
    seed_prices = {p.name: s.price_range for p, s in zip(products, PRODUCTS)}

    for day_offset in range(days):
        current = end_date - timedelta(days=day_offset)
        for talent in talents:
            for account in talent.accounts:
                quantity = random.randint(0, 40)
                gmv = quantity * random.randint(30000, 150000)
                sales.append(
                    SaleRecord(
                        id=_new_id(),
                        date=current.isoformat(),
                        talent_name=talent.name,
                        account_name=account,
                        kind=SaleKind.GENERAL,
                        gmv=gmv,
                        commission=int(gmv * random.uniform(*COMMISSION_RATE)),
                        quantity=quantity,
                        product_views=quantity * random.randint(20, 80),
                        product_clicks=quantity * random.randint(3, 10),
                        product_name="General Report",
                        talent_id=talent.id,
                    )
                )

    by_id = {p.id: p for p in products}
    for post in posts:
        if not post.product_id or random.random() < 0.4:
            continue
        product = by_id[post.product_id]
        low, high = seed_prices.get(product.name, (50000, 150000))
        quantity = random.randint(1, 12)
        revenue = quantity * random.randint(low, high)
        age = (end_date - date.fromisoformat(post.date)).days
        legacy = age > LEGACY_CUTOFF_DAYS and random.random() < LEGACY_SHARE
        sales.append(
            SaleRecord(
                id=_new_id(),
                date=post.date,
                talent_name=post.talent_name,
                account_name=post.account_name,
                kind=SaleKind.PRODUCT_LINKED,
                revenue=revenue,
                commission=int(revenue * random.uniform(*COMMISSION_RATE)),
                quantity=quantity,
                product_id=None if legacy else product.id,
                product_name=product.name,
                linked_post_id=post.id if legacy else None,
                talent_id=post.talent_id,
            )
        )
    return sales


def generate_dataset(seed: int = 42, days: int = 90, end_date: Optional[date] = None) -> Dict[str, List[dict]]:
    """All four collections as storage items, deterministic for a given seed."""
    random.seed(seed)
    end_date = end_date or date.today()
    talents = generate_talents()
    products = generate_products(talents)
    posts = generate_posts(talents, products, end_date, days)
    sales = generate_sales(talents, products, posts, end_date, days)
    return {
        "talents": [t.to_item() for t in talents],
        "products": [p.to_item() for p in products],
        "posts": [p.to_item() for p in posts],
        "sales": [s.to_item() for s in sales],
    }


def save_json(data, filepath: str):
    os.makedirs(os.path.dirname(filepath), exist_ok=True)
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    print(f"  ✓ {filepath} ({len(data)} records)")


def generate_all(output_dir: str = "data_layer/data", seed: int = 42, days: int = 90):
    """Generates the sample dataset and writes one JSON file per collection."""
    print("Generating sample data...\n")
    dataset = generate_dataset(seed=seed, days=days)
    for name, items in dataset.items():
        save_json(items, f"{output_dir}/{name}.json")

    legacy = sum(1 for s in dataset["sales"] if s.get("linked_post_id"))
    print(f"\n{'=' * 60}")
    print("✅ Done")
    print(f"   Talents: {len(dataset['talents'])}")
    print(f"   Products: {len(dataset['products'])}")
    print(f"   Posts: {len(dataset['posts'])}")
    print(f"   Sales: {len(dataset['sales'])} ({legacy} legacy-linked)")
    print(f"   Output: {output_dir}/")
    return dataset


if __name__ == "__main__":
    generate_all()
