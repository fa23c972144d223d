"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data
    python manage.py create_sample_data --days 5 --seed 7

This creates (skipping anything that already exists):
- 1 staff account (wallet 0xADMIN, password admin123)
- 6 tourists from different countries on a trip ending yesterday
- 8 restaurants around central Madrid and 2 in Barcelona
- Transfers for every trip day; the first two tourists give away
  their whole budget each day and can claim a voucher
"""

import random
from datetime import datetime, time, timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.services import register_tourist
from apps.restaurants.models import Restaurant
from apps.restaurants.services import register_restaurant
from apps.transfers.models import Transfer
from apps.transfers.services import record_transfer

TOURISTS = [
    ('0xSAMPLE_TOURIST_01', 'Germany', 'Anna'),
    ('0xSAMPLE_TOURIST_02', 'Japan', 'Kenji'),
    ('0xSAMPLE_TOURIST_03', 'France', 'Claire'),
    ('0xSAMPLE_TOURIST_04', 'United States', 'Mike'),
    ('0xSAMPLE_TOURIST_05', 'Brazil', ''),
    ('0xSAMPLE_TOURIST_06', 'Germany', ''),
]

RESTAURANTS = [
    ('sample-sol', 'Taberna del Sol', 'Puerta del Sol 4, Madrid', '40.416775', '-3.703790'),
    ('sample-mayor', 'Casa Mayor', 'Calle Mayor 22, Madrid', '40.415363', '-3.707398'),
    ('sample-botin', 'Asador Botín', 'Calle Cuchilleros 17, Madrid', '40.414020', '-3.708050'),
    ('sample-lucio', 'Casa Lucio', 'Cava Baja 35, Madrid', '40.411990', '-3.709400'),
    ('sample-retiro', 'Mesón del Retiro', 'Calle Alcalá 90, Madrid', '40.421470', '-3.683310'),
    ('sample-chueca', 'Bar Chueca', 'Plaza de Chueca 1, Madrid', '40.422650', '-3.697460'),
    ('sample-latina', 'La Latina Tapas', 'Plaza de la Cebada 2, Madrid', '40.410980', '-3.709890'),
    ('sample-prado', 'Café del Prado', 'Paseo del Prado 8, Madrid', '40.413780', '-3.692120'),
    ('sample-boqueria', 'El Quim', 'La Rambla 91, Barcelona', '41.381950', '2.171600'),
    ('sample-born', 'Bar del Born', 'Passeig del Born 12, Barcelona', '41.384990', '2.182410'),
]


class Command(BaseCommand):
    help = 'Create sample tourists, restaurants and transfers'

    def add_arguments(self, parser):
        parser.add_argument(
            '--days',
            type=int,
            default=3,
            help='Length of the sample trip in days (ending yesterday)',
        )
        parser.add_argument(
            '--seed',
            type=int,
            default=42,
            help='Random seed for the generated transfers',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        rng = random.Random(options['seed'])
        departure = timezone.localdate() - timedelta(days=1)
        arrival = departure - timedelta(days=max(options['days'], 2) - 1)

        self.stdout.write('Creating sample data...')

        self.create_staff()
        tourists = self.create_tourists(arrival, departure)
        restaurants = self.create_restaurants()
        count = self.create_transfers(tourists, restaurants, arrival, departure, rng)

        self.stdout.write(self.style.SUCCESS(
            f'Sample data created: {len(tourists)} tourists, '
            f'{len(restaurants)} restaurants, {count} transfers'
        ))
        self.stdout.write('')
        self.stdout.write('Staff account:  0xADMIN / admin123')
        self.stdout.write(f'Tourist wallets: {", ".join(t.wallet_address for t in tourists)}')

    def create_staff(self):
        if not User.objects.filter(wallet_address='0xADMIN').exists():
            User.objects.create_superuser(
                wallet_address='0xADMIN',
                password='admin123',
                origin_country='Spain',
                display_name='Admin',
            )
            self.stdout.write('  Created staff account')

    def create_tourists(self, arrival, departure):
        tourists = []
        for wallet, country, name in TOURISTS:
            user = User.objects.filter(wallet_address=wallet).first()
            if user is None:
                user = register_tourist(
                    wallet_address=wallet,
                    origin_country=country,
                    arrival_date=arrival,
                    departure_date=departure,
                    display_name=name,
                )
            tourists.append(user)
        self.stdout.write(f'  {len(tourists)} tourists')
        return tourists

    def create_restaurants(self):
        restaurants = []
        for place_ref, name, address, lat, lng in RESTAURANTS:
            restaurant = Restaurant.objects.filter(place_ref=place_ref).first()
            if restaurant is None:
                restaurant = register_restaurant(
                    place_ref=place_ref,
                    name=name,
                    address=address,
                    latitude=Decimal(lat),
                    longitude=Decimal(lng),
                    wallet_address=f'0x{place_ref.upper().replace("-", "_")}',
                )
            restaurants.append(restaurant)
        self.stdout.write(f'  {len(restaurants)} restaurants')
        return restaurants

    def create_transfers(self, tourists, restaurants, arrival, departure, rng):
        """Spend each tourist's budget on every trip day; the first two spend all of it."""
        count = 0
        day = arrival
        while day <= departure:
            at = timezone.make_aware(datetime.combine(day, time(13, 30)))
            for index, tourist in enumerate(tourists):
                if Transfer.objects.filter(user=tourist, transfer_date=day).exists():
                    continue
                budget = 10 if index < 2 else rng.randint(2, 9)
                visited = rng.sample(restaurants, len(restaurants))
                for restaurant in visited:
                    if budget <= 0:
                        break
                    amount = min(3, budget) if index < 2 else rng.randint(1, min(3, budget))
                    record_transfer(
                        user_id=tourist.id,
                        restaurant_id=restaurant.id,
                        amount=amount,
                        at=at,
                    )
                    budget -= amount
                    count += 1
            day += timedelta(days=1)
        return count
