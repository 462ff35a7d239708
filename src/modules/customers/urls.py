"""Customer URL configuration.

Uses ``DefaultRouter`` so ``/api/v1/`` also serves the API root view;
addresses register on a ``SimpleRouter`` under the same prefix.
"""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.customers.views import CustomerViewSet

router = DefaultRouter(trailing_slash=True)
router.register("customers", CustomerViewSet, basename="customer")

urlpatterns = router.urls
