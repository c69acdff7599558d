from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .api.views import prometheus_metrics
from .cart.api.views import CartViewSet
from .ordering.api.views import CustomerDashboardViewSet, OrderViewSet, SellerOrderViewSet, SellerStatsViewSet

# Create the main router
router = DefaultRouter()
router.register(r"orders", OrderViewSet, basename="order")
router.register(r"seller/orders", SellerOrderViewSet, basename="seller-order")

app_name = "marketplace"

urlpatterns = [
    # Cart routes (manual routing, product id in the path)
    path("cart/", CartViewSet.as_view({"get": "list", "delete": "clear"}), name="cart"),
    path(
        "cart/<str:product_id>/",
        CartViewSet.as_view({"post": "add_item", "put": "update_item", "delete": "remove_item"}),
        name="cart-item",
    ),
    path("dashboard/", CustomerDashboardViewSet.as_view({"get": "list"}), name="customer-dashboard"),
    path("seller/stats/", SellerStatsViewSet.as_view({"get": "list"}), name="seller-stats"),
    # Prometheus metrics endpoint
    path("metrics/", prometheus_metrics.marketplace_prometheus_metrics, name="marketplace-metrics"),
    # Main API routes
    path("", include(router.urls)),
]
