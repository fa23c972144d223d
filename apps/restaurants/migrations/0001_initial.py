# Generated manually for the restaurants app

import uuid
from decimal import Decimal
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Restaurant',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('place_ref', models.CharField(max_length=255, unique=True)),
                ('name', models.CharField(db_index=True, max_length=200)),
                ('address', models.CharField(blank=True, max_length=500)),
                ('latitude', models.DecimalField(decimal_places=6, max_digits=9, validators=[MinValueValidator(Decimal('-90')), MaxValueValidator(Decimal('90'))])),
                ('longitude', models.DecimalField(decimal_places=6, max_digits=9, validators=[MinValueValidator(Decimal('-180')), MaxValueValidator(Decimal('180'))])),
                ('wallet_address', models.CharField(max_length=128, unique=True)),
                ('total_coins_received', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'restaurants',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['-total_coins_received', 'id'], name='restaurants_ranking_idx'),
                    models.Index(fields=['latitude', 'longitude'], name='restaurants_coords_idx'),
                ],
            },
        ),
    ]
