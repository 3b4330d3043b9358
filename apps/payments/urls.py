"""URL routing for payments."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import PaymentInitializeView, PaymentWebhookView

urlpatterns = [
    path("initialize/", PaymentInitializeView.as_view(), name="payment-initialize"),
    path("webhook/", PaymentWebhookView.as_view(), name="payment-webhook"),
]
