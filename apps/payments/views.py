"""API views for payment initialization and gateway notifications."""

from __future__ import annotations

import structlog
from drf_spectacular.utils import extend_schema, inline_serializer  # type: ignore
from rest_framework import permissions, serializers, status  # type: ignore
from rest_framework.exceptions import PermissionDenied  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from shared.domain.errors import InvalidRequest

from .gateway import get_payment_gateway
from .services import handle_payment_event, initialize_payment

logger = structlog.get_logger(__name__)

SIGNATURE_HEADER = "X-Payment-Signature"


class PaymentInitializeView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        request=inline_serializer("PaymentInitializeRequest", {"bookingId": serializers.UUIDField()}),
        responses=inline_serializer(
            "PaymentInitializeResponse",
            {
                "ref": serializers.CharField(),
                "booking_id": serializers.UUIDField(),
                "amount": serializers.DecimalField(max_digits=12, decimal_places=2),
                "currency": serializers.CharField(),
            },
        ),
    )
    def post(self, request, *args, **kwargs):  # type: ignore
        booking_id = request.data.get("bookingId") if hasattr(request.data, "get") else None
        return Response(initialize_payment(booking_id), status=status.HTTP_200_OK)


class PaymentWebhookView(APIView):
    """
    Gateway notification endpoint.

    Unauthenticated by session or token; when PAYMENT_WEBHOOK_SECRET is set
    the raw body must carry a valid signature header.
    """

    authentication_classes: list = []
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        request=inline_serializer(
            "PaymentWebhookRequest",
            {
                "event": serializers.CharField(),
                "data": inline_serializer("PaymentWebhookData", {"reference": serializers.CharField()}),
            },
        ),
        responses=inline_serializer(
            "PaymentWebhookResponse",
            {
                "message": serializers.CharField(),
                "booking_id": serializers.UUIDField(required=False),
                "status": serializers.CharField(required=False),
            },
        ),
    )
    def post(self, request, *args, **kwargs):  # type: ignore
        # The raw body must be read before request.data consumes the stream.
        body = request.body
        if not get_payment_gateway().verify_signature(body, request.headers.get(SIGNATURE_HEADER)):
            logger.warning("payment.webhook_bad_signature")
            raise PermissionDenied("Invalid webhook signature")

        payload = request.data
        if not isinstance(payload, dict):
            raise InvalidRequest("Webhook body must be a JSON object")
        data = payload.get("data") if isinstance(payload.get("data"), dict) else {}

        result = handle_payment_event(payload.get("event"), data.get("reference"), payload)
        return Response(result.as_dict(), status=status.HTTP_200_OK)
