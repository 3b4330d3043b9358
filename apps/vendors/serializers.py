"""Serializers for the vendor domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Vendor


class VendorSerializer(serializers.ModelSerializer):
    utc_offset = serializers.ReadOnlyField(source="utc_offset_label")

    class Meta:
        model = Vendor
        fields = ["id", "name", "timezone", "utc_offset_minutes", "utc_offset"]
        read_only_fields = fields


class SlotAvailabilitySerializer(serializers.Serializer):
    local_time = serializers.CharField()
    utc_time = serializers.CharField()
    is_available = serializers.BooleanField()


class DayAvailabilitySerializer(serializers.Serializer):
    """Availability of one vendor-local date."""

    date = serializers.DateField(source="local_date")
    vendor_id = serializers.IntegerField(source="vendor.pk")
    timezone = serializers.CharField(source="vendor.timezone")
    slots = serializers.SerializerMethodField()
    available_slots = serializers.SerializerMethodField()

    def get_slots(self, obj) -> list[dict]:  # type: ignore
        return [slot.as_dict() for slot in obj.slots]

    def get_available_slots(self, obj) -> list[dict]:  # type: ignore
        return [slot.as_dict() for slot in obj.available]
