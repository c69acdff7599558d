from .cart_serializers import (
    AddToCartRequestSerializer,
    CartLineSerializer,
    CartSerializer,
    TotalsSerializer,
    UpdateCartItemRequestSerializer,
)


__all__ = [
    "AddToCartRequestSerializer",
    "UpdateCartItemRequestSerializer",
    "CartLineSerializer",
    "CartSerializer",
    "TotalsSerializer",
]
