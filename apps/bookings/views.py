"""API views for the booking domain."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from drf_spectacular.utils import OpenApiParameter, extend_schema  # type: ignore
from rest_framework import mixins, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore

from .application.command_handlers import CreateBookingCommand, CreateBookingHandler
from .filters import BookingFilterSet
from .models import Booking
from .serializers import BookingCreateSerializer, BookingSerializer

IDEMPOTENCY_HEADER = "Idempotency-Key"
REPLAY_HEADER = "Idempotent-Replayed"


def buyer_reference_for(request) -> str:
    """Authenticated user first, then the X-Buyer-Id header, then the configured default."""

    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        return str(user.pk)
    header = (request.headers.get("X-Buyer-Id") or "").strip()
    if header:
        return header[:64]
    return settings.DEFAULT_BUYER_REFERENCE


class BookingViewSet(
    mixins.CreateModelMixin,
    mixins.RetrieveModelMixin,
    mixins.ListModelMixin,
    viewsets.GenericViewSet,
):
    """Create, list and retrieve bookings."""

    queryset = Booking.objects.select_related("vendor", "payment").all()
    serializer_class = BookingSerializer
    filterset_class = BookingFilterSet

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        user = self.request.user
        if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
            return qs
        return qs.filter(buyer_reference=buyer_reference_for(self.request))

    @extend_schema(
        request=BookingCreateSerializer,
        parameters=[
            OpenApiParameter(
                IDEMPOTENCY_HEADER,
                str,
                OpenApiParameter.HEADER,
                required=True,
                description="Client-chosen key; retries with the same key replay the first response.",
            ),
        ],
    )
    def create(self, request, *args, **kwargs):  # type: ignore
        payload = request.data if hasattr(request.data, "get") else {}
        command = CreateBookingCommand(
            idempotency_key=request.headers.get(IDEMPOTENCY_HEADER),
            buyer_reference=buyer_reference_for(request),
            payload=dict(payload.items()),
        )
        stored = CreateBookingHandler().handle(command)

        headers = {REPLAY_HEADER: "true"} if stored.replayed else {}
        return Response(stored.body, status=stored.status_code, headers=headers)
