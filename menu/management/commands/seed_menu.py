from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from menu.models import MenuCategory, MenuItem


DEMO_MENU = [
    ('Starters', 'Small plates', [
        ('Paneer Tikka', 220, 90, True),
        ('Chicken 65', 260, 110, False),
        ('Veg Spring Roll', 160, 55, True),
    ]),
    ('Main Course', 'Curries and rice', [
        ('Paneer Butter Masala', 280, 120, True),
        ('Butter Chicken', 340, 150, False),
        ('Veg Biryani', 240, 95, True),
    ]),
    ('Desserts', 'Sweets', [
        ('Gulab Jamun', 90, 30, True),
        ('Rasmalai', 120, 45, True),
    ]),
    ('Beverages', 'Hot and cold drinks', [
        ('Masala Chai', 40, 10, True),
        ('Sweet Lassi', 80, 25, True),
    ]),
]


class Command(BaseCommand):
    help = "Seed demo menu categories and items. Does nothing if the menu already has categories."

    def add_arguments(self, parser):
        parser.add_argument("--force", action="store_true", help="Seed even if categories exist.")

    @transaction.atomic
    def handle(self, *args, **opts):
        if MenuCategory.objects.exists() and not opts["force"]:
            self.stdout.write(self.style.WARNING("Already seeded"))
            return

        items_created = 0
        for order, (name, description, items) in enumerate(DEMO_MENU):
            category = MenuCategory.objects.create(name=name, description=description, display_order=order)
            for item_order, (item_name, price, cost, veg) in enumerate(items):
                MenuItem.objects.create(
                    category=category,
                    name=item_name,
                    price=Decimal(price),
                    cost_price=Decimal(cost),
                    is_vegetarian=veg,
                    display_order=item_order,
                )
                items_created += 1

        self.stdout.write(self.style.SUCCESS(f"Seeded {len(DEMO_MENU)} categories and {items_created} items."))
