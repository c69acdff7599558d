from prometheus_client import Counter, Histogram


# Order Metrics
orders_placed_total = Counter("marketplace_orders_placed_total", "Total orders placed", ["status"])
order_value = Histogram(
    "marketplace_order_value",
    "Order value distribution",
    buckets=[10, 50, 100, 200, 500, 1000, 2000, 5000, float("inf")],
)
order_status_transitions_total = Counter(
    "marketplace_order_status_transitions_total",
    "Order status transitions applied",
    ["from_status", "to_status"],
)
payment_status_transitions_total = Counter(
    "marketplace_payment_status_transitions_total",
    "Payment status transitions applied",
    ["from_status", "to_status"],
)

# Stock Metrics
stock_reservation_failures = Counter("marketplace_stock_reservation_failures", "Stock reservation failures")
stock_restocked_units = Counter("marketplace_stock_restocked_units", "Units returned to stock", ["reason"])

# Cart Metrics
cart_operations_total = Counter("marketplace_cart_operations_total", "Cart mutations", ["operation", "status"])

# Notification Metrics
notification_failures_total = Counter(
    "marketplace_notification_failures_total", "Notifications that could not be handed off", ["event_type"]
)
