"""
Starter oil-seal catalogue loaded by POST /api/admin/seed.
"""
from typing import Dict, List

CATEGORY_KEYWORDS = [
    ("front fork", "Front Fork Seals"),
    ("kick", "Kick Seals"),
    ("magnet", "Magnet Seals"),
    ("gear", "Gear Seals"),
    ("clutch", "Clutch Seals"),
    ("wheel", "Wheel Seals"),
    ("shock", "Shock Absorber Seals"),
    ("brake", "Brake Seals"),
    ("engine", "Engine Seals"),
    ("transmission", "Transmission Seals"),
    ("differential", "Differential Seals"),
    ("steering", "Steering Seals"),
]

DEMO_PRODUCTS: List[Dict[str, str]] = [
    {
        "title": "Front Fork Seal 30×42×11 mm (D/S)",
        "size": "30×42×11 mm (D/S)",
        "material": "NBR",
        "fits": "Compatible with: Hero Splendor, Passion, Glamour, CD Delux, KB4S",
        "sku": "SBO-FS-3004211",
    },
    {
        "title": "Front Fork Seal 30×42×10.5 mm",
        "size": "30×42×10.5 mm",
        "material": "NBR",
        "fits": "Compatible with: Hero Splendor, Passion, Glamour, CD Delux, KB4S (Single Spring)",
        "sku": "SBO-FS-30042105",
    },
    {
        "title": "Front Fork Seal 28×42×11 mm",
        "size": "28×42×11 mm",
        "material": "NBR",
        "fits": "Compatible with: Hero Splendor (Type Bore)",
        "sku": "SBO-FS-28042115",
    },
    {
        "title": "Front Fork Seal 31×43×10.5 mm",
        "size": "31×43×10.5 mm",
        "material": "NBR",
        "fits": "Compatible with: Honda CBZ, Pulsar, Unicorn, Discover",
        "sku": "SBO-FS-31043105",
    },
    {
        "title": "Front Fork Seal 30×40.5×10.5 mm",
        "size": "30×40.5×10.5 mm",
        "material": "NBR",
        "fits": "Compatible with: Yamaha RX 100, XL Super, XL 100, Vespa",
        "sku": "SBO-FS-30405105",
    },
    {
        "title": "Kick Seal 13×8×24×5 mm",
        "size": "13×8×24×5 mm",
        "material": "NBR",
        "fits": "Compatible with: Honda Kick Seal",
        "sku": "SBO-KS-13824505",
    },
    {
        "title": "Magnet Seal 18×30×5 mm",
        "size": "18×30×5 mm",
        "material": "NBR",
        "fits": "Compatible with: Honda Magnet Seal",
        "sku": "SBO-MS-183005",
    },
]


def infer_category(title: str) -> str:
    lowered = title.lower()
    for keyword, category in CATEGORY_KEYWORDS:
        if keyword in lowered:
            return category
    return "Oil Seals"


def seed_products() -> List[Dict]:
    return [{**p, "category": infer_category(p["title"]), "in_stock": True} for p in DEMO_PRODUCTS]
