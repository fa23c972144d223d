# Generated manually for the transfers app

import uuid
import apps.transfers.models
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('restaurants', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Transfer',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('settlement_hash', models.CharField(default=apps.transfers.models.pending_settlement_hash, editable=False, max_length=128, unique=True)),
                ('from_address', models.CharField(max_length=128)),
                ('to_address', models.CharField(max_length=128)),
                ('amount', models.PositiveSmallIntegerField()),
                ('transferred_at', models.DateTimeField()),
                ('transfer_date', models.DateField()),
                ('origin_country', models.CharField(max_length=64)),
                ('restaurant', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transfers', to='restaurants.restaurant')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transfers', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'transfers',
                'ordering': ['-transferred_at'],
                'indexes': [
                    models.Index(fields=['user', 'transfer_date'], name='transfers_user_day_idx'),
                    models.Index(fields=['user', 'restaurant', 'transfer_date'], name='transfers_user_rest_day_idx'),
                    models.Index(fields=['restaurant', 'transfer_date'], name='transfers_rest_day_idx'),
                    models.Index(fields=['origin_country'], name='transfers_origin_idx'),
                ],
            },
        ),
        migrations.AddConstraint(
            model_name='transfer',
            constraint=models.CheckConstraint(
                check=models.Q(('amount__gte', 1), ('amount__lte', 3)),
                name='transfer_amount_between_1_and_3',
            ),
        ),
        migrations.CreateModel(
            name='DailyReward',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('reward_date', models.DateField()),
                ('coins_received', models.PositiveSmallIntegerField(default=10)),
                ('coins_given', models.PositiveSmallIntegerField(default=0)),
                ('all_coins_given', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='daily_rewards', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'daily_rewards',
                'ordering': ['-reward_date'],
                'indexes': [
                    models.Index(fields=['user', 'all_coins_given'], name='daily_rewards_complete_idx'),
                ],
            },
        ),
        migrations.AddConstraint(
            model_name='dailyreward',
            constraint=models.UniqueConstraint(fields=('user', 'reward_date'), name='daily_reward_unique_user_day'),
        ),
    ]
