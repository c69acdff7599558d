from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated

from infrastructure.container import container  # For DI
from marketplace.api.responses import error_response, success_response, validation_error_response
from marketplace.api.serializers import CartResponseSerializer, ErrorResponseSerializer
from marketplace.cart.api.serializers import (
    AddToCartRequestSerializer,
    CartSerializer,
    UpdateCartItemRequestSerializer,
)
from marketplace.cart.domain.services import CartService
from marketplace.permissions import IsCustomer


class CartViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated, IsCustomer]

    def get_service(self) -> CartService:
        # Inject CartService via DI container
        return container.cart_service()

    def cart_response(self, result, http_status=status.HTTP_200_OK):
        if not result.ok:
            return error_response(result)
        return success_response(CartSerializer(result.value).data, http_status=http_status)

    @extend_schema(
        operation_id="cart_get",
        summary="Get the customer's shopping cart",
        description="""
        **What it receives:**
        - Authentication token (header)

        **What it returns:**
        - Cart items of active products, in the order they were added
        - Totals (total_amount, shipping_charge, tax_amount, discount_amount, final_amount),
          computed from the prices frozen when each item was added
        - Item count
        """,
        responses={
            200: OpenApiResponse(response=CartResponseSerializer, description="Cart retrieved successfully"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not a customer"),
        },
        tags=["Marketplace - Cart"],
    )
    def list(self, request):
        return self.cart_response(self.get_service().get_cart(request.user.pk))

    @extend_schema(
        operation_id="cart_clear",
        summary="Remove every item from the cart",
        responses={
            200: OpenApiResponse(response=CartResponseSerializer, description="Cart cleared"),
        },
        tags=["Marketplace - Cart"],
    )
    def clear(self, request):
        service = self.get_service()
        result = service.clear_cart(request.user.pk)
        if not result.ok:
            return error_response(result)
        return self.cart_response(service.get_cart(request.user.pk))

    @extend_schema(
        operation_id="cart_add_item",
        summary="Add a product to the cart",
        description="""
        **What it receives:**
        - `product_id` (path): Product to add
        - `quantity` (integer, optional): Quantity to add (default: 1)

        **What it returns:**
        - Updated cart; the item's price is the product's current price

        Quantity already in the cart plus `quantity` may not exceed the product's stock.
        """,
        request=AddToCartRequestSerializer,
        responses={
            201: OpenApiResponse(response=CartResponseSerializer, description="Item added"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid quantity"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found or inactive"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Out of stock"),
        },
        tags=["Marketplace - Cart"],
    )
    def add_item(self, request, product_id=None):
        input_serializer = AddToCartRequestSerializer(data=request.data)
        if not input_serializer.is_valid():
            return validation_error_response(input_serializer.errors)

        result = self.get_service().add_item(request.user.pk, product_id, input_serializer.validated_data["quantity"])
        return self.cart_response(result, http_status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="cart_update_item",
        summary="Set the quantity of a cart item",
        request=UpdateCartItemRequestSerializer,
        responses={
            200: OpenApiResponse(response=CartResponseSerializer, description="Item updated"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid quantity"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Item not in cart"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Out of stock"),
        },
        tags=["Marketplace - Cart"],
    )
    def update_item(self, request, product_id=None):
        input_serializer = UpdateCartItemRequestSerializer(data=request.data)
        if not input_serializer.is_valid():
            return validation_error_response(input_serializer.errors)

        result = self.get_service().update_item(request.user.pk, product_id, input_serializer.validated_data["quantity"])
        return self.cart_response(result)

    @extend_schema(
        operation_id="cart_remove_item",
        summary="Remove a product from the cart",
        request=None,
        responses={
            200: OpenApiResponse(response=CartResponseSerializer, description="Item removed"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Item not in cart"),
        },
        tags=["Marketplace - Cart"],
    )
    def remove_item(self, request, product_id=None):
        return self.cart_response(self.get_service().remove_item(request.user.pk, product_id))
