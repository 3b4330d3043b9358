"""API views for vendors and their slot availability."""

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes  # type: ignore
from drf_spectacular.utils import OpenApiParameter, extend_schema  # type: ignore
from rest_framework import viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from .models import Vendor
from .serializers import DayAvailabilitySerializer, VendorSerializer
from .services import get_availability


class VendorViewSet(viewsets.ReadOnlyModelViewSet):
    """Vendors are seeded and read-only through the API."""

    queryset = Vendor.objects.all()
    serializer_class = VendorSerializer

    @extend_schema(
        parameters=[OpenApiParameter("date", OpenApiTypes.DATE, required=True, description="Vendor-local date")],
        responses=DayAvailabilitySerializer,
    )
    @action(detail=True, methods=["get"])
    def availability(self, request, pk=None):  # type: ignore
        day = get_availability(pk, request.query_params.get("date"))
        return Response(DayAvailabilitySerializer(day).data)
