from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('rentals', '0001_initial'),
    ]

    operations = [
        migrations.AddConstraint(
            model_name='rental',
            constraint=models.UniqueConstraint(
                condition=models.Q(('status', 'active')),
                fields=('apartment',),
                name='one_active_rental_per_apartment',
                violation_error_message='This apartment already has an active rental',
            ),
        ),
    ]
