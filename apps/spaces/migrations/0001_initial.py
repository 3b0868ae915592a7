import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ParkingSpace",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("address", models.CharField(max_length=255)),
                ("google_maps_link", models.URLField(blank=True, max_length=500)),
                ("contact_number", models.CharField(blank=True, max_length=20)),
                ("latitude", models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ("longitude", models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ("availability_date_from", models.DateField()),
                ("availability_date_to", models.DateField()),
                ("availability_time_from", models.TimeField()),
                ("availability_time_to", models.TimeField()),
                (
                    "price_per_hour",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "price_per_day",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Flat rate for each full 24 hours; empty means hourly pricing only.",
                        max_digits=10,
                        null=True,
                    ),
                ),
                (
                    "capacity",
                    models.PositiveIntegerField(
                        default=1,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "is_available",
                    models.BooleanField(default=True, help_text="Listing switch controlled by the owner."),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="parking_spaces",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Parking space",
                "verbose_name_plural": "Parking spaces",
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["owner", "is_available"], name="spaces_park_owner_i_2c6e1d_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(capacity__gte=1),
                        name="parking_space_capacity_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(price_per_hour__gt=0),
                        name="parking_space_price_per_hour_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(availability_date_to__gte=models.F("availability_date_from")),
                        name="parking_space_valid_dates",
                    ),
                ],
            },
        ),
    ]
