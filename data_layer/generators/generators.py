"""Simülasyon verisi üretim modülü.

3 satış temsilcisi, temsilci başına 6 beat, beat başına 8-14 bayi, paket
varyantlı FMCG ürün kataloğu ve 120 günlük sipariş/ziyaret geçmişi üretir.

Senaryolar:
- Uzun süredir ziyaret edilmemiş bayiler
- Yüksek bekleyen tahsilatlı bayiler
- Aynı beat'te yaygın alınan ürünler (beat trendi)
- Gram başı fiyatı belirgin düşen büyük paketler (paket yükseltme)
"""
import json
import os
import random
from datetime import datetime, timedelta
from typing import Dict, List


# --- SABİTLER ---

USERS = [
    ("U001", "Ravi Kumar"),
    ("U002", "Anita Sharma"),
    ("U003", "Suresh Patel"),
]

AREAS = [
    "Andheri East", "Bandra West", "Dadar", "Kurla", "Powai", "Thane Station",
    "Borivali", "Malad", "Goregaon", "Vashi", "Chembur", "Ghatkopar",
    "Mulund", "Kandivali", "Santacruz", "Worli", "Colaba", "Sion",
]

SHOP_SUFFIXES = ["Kirana Store", "General Stores", "Provisions", "Super Mart", "Traders"]

# ürün adı -> (birim, [(varyant adı, fiyat)])
CATALOG: Dict[str, tuple] = {
    "Masala Chai": ("KG", [("100G", 28), ("250G", 60), ("500G", 110), ("1KG", 200)]),
    "Turmeric Powder": ("KG", [("100G", 22), ("200G", 42), ("500G", 95)]),
    "Red Chilli Powder": ("KG", [("100G", 25), ("500G", 100), ("1KG", 185)]),
    "Basmati Rice": ("KG", [("1KG", 120), ("5KG", 540)]),
    "Toor Dal": ("KG", [("500G", 80), ("1KG", 150)]),
    "Instant Coffee": ("G", [("50G", 95), ("100G", 180), ("200G", 330)]),
    "Glucose Biscuits": ("PCS", [("40G", 5), ("250G", 30), ("800G", 90)]),
    "Groundnut Oil": ("L", [("Pouch", 170), ("Jar", 820)]),
    "Rock Salt": ("KG", [("1KG", 40)]),
    "Garam Masala": ("KG", [("50G", 40), ("100G", 75), ("250G", 170)]),
}

POTENTIALS = ["low", "medium", "medium", "high"]
VISIT_OUTCOMES = ["productive", "productive", "unproductive", "completed", "cancelled"]


def _iso(dt: datetime) -> str:
    return dt.replace(microsecond=0).isoformat()


def generate_profiles() -> List[dict]:
    return [
        {"user_id": uid, "full_name": name, "role": "sales_rep", "is_active": True}
        for uid, name in USERS
    ]


def generate_beats() -> List[dict]:
    beats = []
    areas = list(AREAS)
    random.shuffle(areas)
    for u_idx, (uid, _) in enumerate(USERS):
        for b_idx in range(6):
            area = areas[(u_idx * 6 + b_idx) % len(areas)]
            beats.append({
                "beat_id": f"B{u_idx + 1}{b_idx + 1:02d}",
                "name": area,
                "created_by": uid,
                "is_active": b_idx != 5 or u_idx != 2,  # bir pasif beat
            })
    return beats


def generate_products() -> tuple:
    products, variants = [], []
    for p_idx, (name, (unit, sizes)) in enumerate(CATALOG.items(), start=1):
        product_id = f"P{p_idx:03d}"
        products.append({
            "product_id": product_id,
            "name": name,
            "rate": float(sizes[0][1]),
            "unit": unit,
            "is_active": True,
        })
        for v_idx, (variant_name, price) in enumerate(sizes, start=1):
            variants.append({
                "variant_id": f"{product_id}-V{v_idx}",
                "product_id": product_id,
                "variant_name": variant_name,
                "price": float(price),
                "is_active": True,
            })
    return products, variants


def generate_retailers(beats: List[dict], now: datetime) -> List[dict]:
    retailers = []
    counter = 1
    for beat in beats:
        for _ in range(random.randint(8, 14)):
            never_visited = random.random() < 0.08
            last_visit = None if never_visited else now - timedelta(days=random.randint(1, 60))
            retailers.append({
                "retailer_id": f"R{counter:04d}",
                "name": f"{beat['name']} {random.choice(SHOP_SUFFIXES)} #{counter}",
                "user_id": beat["created_by"],
                "beat_id": beat["beat_id"],
                "beat_name": beat["name"],
                "potential": random.choice(POTENTIALS),
                "priority": "high" if random.random() < 0.1 else "normal",
                "pending_amount": float(random.choice([0, 0, 1500, 6000, 12500, 22000])),
                "last_visit_date": _iso(last_visit) if last_visit else None,
                "order_value": float(random.randint(500, 15000)),
                "status": "active" if random.random() > 0.05 else "inactive",
            })
            counter += 1
    return retailers


def generate_orders(
    retailers: List[dict], products: List[dict], variants: List[dict], now: datetime, days: int = 120
) -> tuple:
    """Her bayi için düzenli ürün alışkanlığı olan sipariş geçmişi."""
    variants_by_product: Dict[str, List[dict]] = {}
    for v in variants:
        variants_by_product.setdefault(v["product_id"], []).append(v)

    # beat bazında popüler ürünler (trend senaryosu)
    beat_favorites: Dict[str, List[dict]] = {}

    orders, items = [], []
    order_no = 1
    for retailer in retailers:
        favorites = beat_favorites.setdefault(
            retailer["beat_id"], random.sample(products, 3)
        )
        habits = random.sample(products, random.randint(2, 4))
        if random.random() < 0.6:
            habits.append(random.choice(favorites))

        order_count = random.randint(0, 10)
        for _ in range(order_count):
            created_at = now - timedelta(days=random.randint(0, days), hours=random.randint(0, 10))
            order_id = f"O{order_no:06d}"
            order_no += 1
            total = 0.0
            for i_idx, product in enumerate(habits, start=1):
                if random.random() < 0.25:
                    continue
                # Baz ürün (varyantsız) ya da bir paket varyantı
                use_variant = random.random() < 0.4
                variant = random.choice(variants_by_product[product["product_id"]]) if use_variant else None
                quantity = float(random.choice([2, 3, 3, 4, 5, 5, 6]))
                rate = variant["price"] if variant else product["rate"]
                total += quantity * rate
                items.append({
                    "order_id": order_id,
                    "item_id": f"{i_idx:02d}",
                    "product_id": product["product_id"],
                    "product_name": product["name"],
                    "variant_id": variant["variant_id"] if variant else None,
                    "variant_name": variant["variant_name"] if variant else None,
                    "quantity": quantity,
                    "unit": product["unit"],
                    "rate": float(rate),
                })
            orders.append({
                "order_id": order_id,
                "retailer_id": retailer["retailer_id"],
                "user_id": retailer["user_id"],
                "total_amount": round(total, 2),
                "created_at": _iso(created_at),
                "status": "confirmed" if random.random() > 0.1 else "pending",
            })
    return orders, items


def generate_visits(retailers: List[dict], now: datetime, days: int = 90) -> List[dict]:
    visits = []
    visit_no = 1
    for retailer in retailers:
        for _ in range(random.randint(0, 6)):
            planned = now - timedelta(days=random.randint(0, days))
            status = random.choice(VISIT_OUTCOMES)
            check_in = planned.replace(hour=random.randint(9, 17), minute=random.randint(0, 59))
            visits.append({
                "visit_id": f"V{visit_no:06d}",
                "user_id": retailer["user_id"],
                "retailer_id": retailer["retailer_id"],
                "planned_date": planned.date().isoformat(),
                "status": status,
                "created_at": _iso(planned.replace(hour=8, minute=0)),
                "check_in_time": _iso(check_in) if status != "cancelled" else None,
                "check_out_time": _iso(check_in + timedelta(minutes=20)) if status != "cancelled" else None,
            })
            visit_no += 1
    return visits


def save_json(data, filepath: str):
    """JSON dosyasına kaydet."""
    os.makedirs(os.path.dirname(filepath), exist_ok=True)
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    print(f"  ✓ {filepath} ({len(data)} kayıt)")


def generate_all(output_dir: str = "data_layer/data", seed: int = 42, now: datetime = None):
    """Tüm simülasyon verisini üretir ve kaydeder."""
    random.seed(seed)
    now = now or datetime.utcnow()
    print("🏭 Simülasyon verisi üretiliyor...\n")

    profiles = generate_profiles()
    beats = generate_beats()
    products, variants = generate_products()
    retailers = generate_retailers(beats, now)
    orders, items = generate_orders(retailers, products, variants, now)
    visits = generate_visits(retailers, now)

    save_json(profiles, f"{output_dir}/profiles.json")
    save_json(beats, f"{output_dir}/beats.json")
    save_json(products, f"{output_dir}/products.json")
    save_json(variants, f"{output_dir}/product-variants.json")
    save_json(retailers, f"{output_dir}/retailers.json")
    save_json(orders, f"{output_dir}/orders.json")
    save_json(items, f"{output_dir}/order-items.json")
    save_json(visits, f"{output_dir}/visits.json")

    print(f"\n{'='*60}")
    print("✅ Üretim tamamlandı!")
    print(f"   Temsilciler: {len(profiles)}")
    print(f"   Beat'ler: {len(beats)}")
    print(f"   Bayiler: {len(retailers)}")
    print(f"   Ürünler: {len(products)} ({len(variants)} varyant)")
    print(f"   Siparişler: {len(orders)} ({len(items)} kalem)")
    print(f"   Ziyaretler: {len(visits)}")
    print(f"   Çıktı dizini: {output_dir}/")

    return {
        "profiles": profiles,
        "beats": beats,
        "products": products,
        "variants": variants,
        "retailers": retailers,
        "orders": orders,
        "order_items": items,
        "visits": visits,
    }


if __name__ == "__main__":
    generate_all()
