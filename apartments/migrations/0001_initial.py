from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Apartment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True, help_text='Shown on the apartment details page (may contain HTML)')),
                ('base_price', models.DecimalField(decimal_places=2, help_text='Monthly price (THB). Default price of new rentals.', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('room_count', models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Apartment',
                'verbose_name_plural': 'Apartments',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['name'], name='apartment_name_idx'),
                    models.Index(fields=['created_at'], name='apartment_created_idx'),
                ],
            },
        ),
    ]
