from __future__ import annotations

from decimal import Decimal

from django.core.management.base import BaseCommand

from modules.products.models import Product, ProductStatus

SEED_PRODUCTS = [
    # (sku, name, price, requires_prescription)
    ("PROD-001", "Paracetamol 500mg (10 tablets)", Decimal("35.00"), False),
    ("PROD-002", "Vitamin C 1000mg (20 tablets)", Decimal("120.00"), False),
    ("PROD-003", "Amoxicillin 500mg (15 capsules)", Decimal("95.50"), True),
    ("PROD-004", "Azithromycin 250mg (6 tablets)", Decimal("110.00"), True),
    ("PROD-005", "Hand Sanitizer 200ml", Decimal("60.00"), False),
]


class Command(BaseCommand):
    help = "Seed the catalog with general and prescription-only products."

    def handle(self, *args, **options):
        self.stdout.write("Seeding catalog...")
        created = 0
        for sku, name, price, requires_prescription in SEED_PRODUCTS:
            _, was_created = Product.objects.get_or_create(
                sku=sku,
                defaults={
                    "name": name,
                    "price": price,
                    "currency": "INR",
                    "requires_prescription": requires_prescription,
                    "status": ProductStatus.ACTIVE,
                },
            )
            created += int(was_created)

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: products={len(SEED_PRODUCTS)}, created={created}"
            )
        )
