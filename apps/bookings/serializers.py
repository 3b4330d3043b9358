"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.vendors.serializers import VendorSerializer
from apps.vendors.domain.slots import format_instant

from .models import Booking


class BookingCreateSerializer(serializers.Serializer):
    """Validates the booking request body; field names follow the public API."""

    vendorId = serializers.IntegerField(min_value=1)
    startISO = serializers.DateTimeField()
    endISO = serializers.DateTimeField()

    def validate(self, attrs):  # type: ignore
        if attrs["startISO"] >= attrs["endISO"]:
            raise serializers.ValidationError("startISO must be before endISO")
        return attrs


class BookingSerializer(serializers.ModelSerializer):
    vendor = VendorSerializer(read_only=True)
    start_time_utc = serializers.SerializerMethodField()
    end_time_utc = serializers.SerializerMethodField()
    payment_status = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "vendor",
            "buyer_reference",
            "start_time_utc",
            "end_time_utc",
            "status",
            "payment_reference",
            "payment_status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_start_time_utc(self, obj: Booking) -> str:
        return format_instant(obj.start_time_utc)

    def get_end_time_utc(self, obj: Booking) -> str:
        return format_instant(obj.end_time_utc)

    def get_payment_status(self, obj: Booking) -> str | None:
        payment = getattr(obj, "payment", None)
        return payment.status if payment else None
