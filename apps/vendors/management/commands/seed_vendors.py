from django.core.management.base import BaseCommand

from apps.vendors.models import Vendor

DEFAULT_VENDORS = (
    "Tech Solutions Pro",
    "Creative Design Studio",
    "Business Consulting Expert",
)


class Command(BaseCommand):
    help = "Seed the default vendors (Africa/Lagos, UTC+01:00) when none exist"

    def handle(self, *args, **options):
        if Vendor.objects.exists():
            self.stdout.write("Vendors already present, nothing to seed")
            return
        Vendor.objects.bulk_create(
            [Vendor(name=name, timezone="Africa/Lagos", utc_offset_minutes=60) for name in DEFAULT_VENDORS]
        )
        self.stdout.write(self.style.SUCCESS(f"Seeded {len(DEFAULT_VENDORS)} vendors"))
