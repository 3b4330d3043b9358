"""Filters for booking listings."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    vendor = django_filters.NumberFilter(field_name="vendor_id")
    status = django_filters.ChoiceFilter(choices=Booking.Status.choices)
    buyer_reference = django_filters.CharFilter()
    starts_after = django_filters.IsoDateTimeFilter(field_name="start_time_utc", lookup_expr="gte")
    starts_before = django_filters.IsoDateTimeFilter(field_name="start_time_utc", lookup_expr="lt")

    class Meta:
        model = Booking
        fields = ["vendor", "status", "buyer_reference"]
