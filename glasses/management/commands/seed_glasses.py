"""Seed the catalog with sample categories and glasses.

Every generated frame comes in several colors sharing the same model and
manufacturer, so variations show up on the detail endpoints.

Usage:
  python manage.py seed_glasses
  python manage.py seed_glasses --models 20 --seed 7 --reset
"""

import random
from decimal import Decimal, ROUND_HALF_UP

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from glasses.models import Category, Glasses


CATEGORIES = {
    'Sunglasses': 'Tinted lenses with UV protection.',
    'Eyeglasses': 'Prescription frames.',
    'Sport': 'Wraparound frames for outdoor activity.',
    'Kids': 'Small, flexible frames.',
}

MANUFACTURERS = ['Ray-Ban', 'Oakley', 'Persol', 'Prada', 'Carrera', 'Polaroid']
SHAPES = ['Aviator', 'Wayfarer', 'Round', 'Clubmaster', 'Cat Eye', 'Rectangle']
COLORS = ['Black', 'Tortoise', 'Gold', 'Silver', 'Blue', 'Red', 'Green']


def _money(value):
    return Decimal(str(value)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


class Command(BaseCommand):
    help = 'Seed the glasses catalog with sample categories, models and color variations.'

    def add_arguments(self, parser):
        parser.add_argument('--models', type=int, default=12, help='Number of frame models to generate.')
        parser.add_argument('--max-colors', type=int, default=3, help='Maximum color variations per model.')
        parser.add_argument('--seed', type=int, default=None, help='Random seed for reproducible data.')
        parser.add_argument('--reset', action='store_true', help='Delete glasses not referenced by any order first.')

    def handle(self, *args, **options):
        if options['models'] < 1 or options['max_colors'] < 1:
            raise CommandError('--models and --max-colors must be positive.')
        rng = random.Random(options['seed'])

        with transaction.atomic():
            if options['reset']:
                self._reset()
            categories = [
                Category.objects.get_or_create(name=name, defaults={'description': description})[0]
                for name, description in CATEGORIES.items()
            ]
            created = 0
            for index in range(options['models']):
                manufacturer = rng.choice(MANUFACTURERS)
                model = f"{rng.choice(SHAPES)} {1000 + index}"
                price = _money(rng.uniform(49, 399))
                picked = rng.sample(categories, k=rng.randint(1, 2))
                for color in rng.sample(COLORS, k=rng.randint(1, min(options['max_colors'], len(COLORS)))):
                    identifier = f"{manufacturer[:3].upper()}-{1000 + index}-{color[:3].upper()}"
                    glasses, was_created = Glasses.objects.get_or_create(
                        identifier=identifier,
                        defaults={
                            'name': f"{manufacturer} {model}",
                            'price': price,
                            'color': color,
                            'model': model,
                            'manufacturer': manufacturer,
                        },
                    )
                    if was_created:
                        glasses.categories.set(picked)
                        created += 1

        self.stdout.write(self.style.SUCCESS(f"Seeded {created} glasses in {len(categories)} categories."))

    def _reset(self):
        from orders.models import OrderItem

        ordered = OrderItem.objects.values_list('glasses_id', flat=True)
        deleted, _ = Glasses.objects.exclude(pk__in=ordered).delete()
        self.stdout.write(f"Removed {deleted} rows from the catalog.")
