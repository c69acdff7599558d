from .order_views import CustomerDashboardViewSet, OrderViewSet
from .seller_order_views import SellerOrderViewSet, SellerStatsViewSet


__all__ = ["CustomerDashboardViewSet", "OrderViewSet", "SellerOrderViewSet", "SellerStatsViewSet"]
