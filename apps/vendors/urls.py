"""URL routing for the vendor domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import VendorViewSet

router = SimpleRouter()
router.register(r"", VendorViewSet, basename="vendor")

urlpatterns = [
    path("", include(router.urls)),
]
