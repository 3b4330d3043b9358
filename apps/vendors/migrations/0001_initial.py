import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Vendor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                (
                    "timezone",
                    models.CharField(
                        default="Africa/Lagos",
                        help_text="Display name of the vendor's zone. Slot maths uses utc_offset_minutes.",
                        max_length=64,
                    ),
                ),
                (
                    "utc_offset_minutes",
                    models.SmallIntegerField(
                        default=60,
                        help_text="Fixed offset from UTC in minutes, no daylight saving.",
                        validators=[
                            django.core.validators.MinValueValidator(-720),
                            django.core.validators.MaxValueValidator(840),
                        ],
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["id"],
            },
        ),
    ]
