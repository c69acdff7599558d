from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from authentication.principal import Principal
from infrastructure.container import container
from marketplace.api.responses import error_response, success_response, validation_error_response
from marketplace.api.serializers import (
    CustomerSummaryResponseSerializer,
    ErrorResponseSerializer,
    OrderListResponseSerializer,
    OrderResponseSerializer,
)
from marketplace.ordering.api.serializers import (
    CancelOrderRequestSerializer,
    CreateOrderRequestSerializer,
    CustomerSummarySerializer,
    OrderListQuerySerializer,
    OrderSerializer,
)
from marketplace.ordering.domain.services import OrderService
from marketplace.permissions import IsCustomer


LIST_PARAMETERS = [
    OpenApiParameter(name="status", type=str, description="Filter by order status ('all' for every status)"),
    OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
    OpenApiParameter(name="page_size", type=int, description="Items per page (default: 10)"),
]


class OrderViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated, IsCustomer]

    def get_service(self) -> OrderService:
        return container.order_service()

    def order_response(self, result, http_status=status.HTTP_200_OK):
        if not result.ok:
            return error_response(result)
        return success_response(OrderSerializer(result.value).data, http_status=http_status)

    @extend_schema(
        operation_id="orders_list",
        summary="List the customer's orders",
        description="""
        **What it receives:**
        - Authentication token
        - Optional status filter (query param)
        - Pagination parameters (page, page_size)

        **What it returns:**
        - Paginated list of the customer's orders, newest first
        - Total count and page information
        """,
        parameters=LIST_PARAMETERS,
        responses={
            200: OpenApiResponse(response=OrderListResponseSerializer, description="Orders retrieved successfully"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Unknown status or bad page"),
        },
        tags=["Marketplace - Orders"],
    )
    def list(self, request):
        query = OrderListQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return validation_error_response(query.errors)

        result = self.get_service().list_orders(
            Principal.from_user(request.user),
            status=query.validated_data.get("status"),
            page=query.validated_data["page"],
            page_size=query.validated_data.get("page_size"),
        )
        if not result.ok:
            return error_response(result)

        page = dict(result.value)
        page["results"] = OrderSerializer(page["results"], many=True).data
        return success_response(page)

    @extend_schema(
        operation_id="orders_create",
        summary="Place an order",
        description="""
        **What it receives:**
        - `items` (optional): `[{product_id, quantity}]`; when omitted the cart is checked out and emptied
        - `shipping_address`: street, city, state, country, zip_code, phone (all required)
        - `payment_method`: `cod` (default) or `card`
        - `notes`, `clear_cart` (optional)

        **What it returns:**
        - The created order with frozen item prices and computed totals

        Either every line is reserved and the order is created, or no stock changes.
        """,
        request=CreateOrderRequestSerializer,
        responses={
            201: OpenApiResponse(response=OrderResponseSerializer, description="Order created"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid items, address or empty cart"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found or inactive"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Insufficient stock"),
        },
        tags=["Marketplace - Orders"],
    )
    def create(self, request):
        input_serializer = CreateOrderRequestSerializer(data=request.data)
        if not input_serializer.is_valid():
            return validation_error_response(input_serializer.errors)

        data = input_serializer.validated_data
        principal = Principal.from_user(request.user)
        service = self.get_service()

        if "items" in data:
            result = service.create_order(
                principal,
                items=[dict(line) for line in data["items"]],
                shipping_address=dict(data["shipping_address"]),
                payment_method=data["payment_method"],
                notes=data["notes"],
                clear_cart=data["clear_cart"],
            )
        else:
            result = service.checkout_cart(
                principal,
                shipping_address=dict(data["shipping_address"]),
                payment_method=data["payment_method"],
                notes=data["notes"],
            )

        return self.order_response(result, http_status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="orders_retrieve",
        summary="Get one of the customer's orders",
        description="`pk` is the order UUID or its order number.",
        responses={
            200: OpenApiResponse(response=OrderResponseSerializer, description="Order retrieved successfully"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
        },
        tags=["Marketplace - Orders"],
    )
    def retrieve(self, request, pk=None):
        return self.order_response(self.get_service().get_order(Principal.from_user(request.user), pk))

    @extend_schema(
        operation_id="orders_cancel",
        summary="Cancel a pending order",
        description="""
        **What it receives:**
        - `reason` (optional)

        **What it returns:**
        - The cancelled order; every item's quantity is back in stock
        """,
        request=CancelOrderRequestSerializer,
        responses={
            200: OpenApiResponse(response=OrderResponseSerializer, description="Order cancelled"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Order is no longer pending"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
        },
        tags=["Marketplace - Orders"],
    )
    @action(detail=True, methods=["put"])
    def cancel(self, request, pk=None):
        input_serializer = CancelOrderRequestSerializer(data=request.data)
        if not input_serializer.is_valid():
            return validation_error_response(input_serializer.errors)

        result = self.get_service().cancel_order(
            Principal.from_user(request.user), pk, reason=input_serializer.validated_data["reason"]
        )
        return self.order_response(result)


class CustomerDashboardViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated, IsCustomer]

    @extend_schema(
        operation_id="customer_dashboard",
        summary="Customer dashboard figures",
        description="""
        **What it returns:**
        - Order counts (total, pending, delivered)
        - Number of cart lines with an active product
        - Total spent over orders that were not cancelled
        - The most recent orders, newest first
        """,
        responses={
            200: OpenApiResponse(response=CustomerSummaryResponseSerializer, description="Summary computed"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not a customer"),
        },
        tags=["Marketplace - Orders"],
    )
    def list(self, request):
        result = container.order_service().customer_summary(Principal.from_user(request.user))
        if not result.ok:
            return error_response(result)
        return success_response(CustomerSummarySerializer(result.value).data)
