from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from infrastructure.container import container
from marketplace.api.responses import error_response, success_response, validation_error_response
from marketplace.api.serializers import (
    ErrorResponseSerializer,
    SellerOrderListResponseSerializer,
    SellerOrderResponseSerializer,
    SellerStatsResponseSerializer,
)
from marketplace.ordering.api.serializers import (
    OrderListQuerySerializer,
    OrderSummarySerializer,
    SellerOrderSerializer,
    SellerStatsSerializer,
    UpdateOrderStatusRequestSerializer,
    UpdatePaymentStatusRequestSerializer,
)
from marketplace.ordering.domain.services import OrderFulfillmentService
from marketplace.permissions import IsSeller


class SellerOrderViewSet(viewsets.ViewSet):
    """Orders as seen by a seller: only the seller's own items are shown."""

    permission_classes = [IsAuthenticated, IsSeller]

    def get_service(self) -> OrderFulfillmentService:
        return container.fulfillment_service()

    def order_response(self, result):
        if not result.ok:
            return error_response(result)
        return success_response(SellerOrderSerializer(result.value).data)

    @extend_schema(
        operation_id="seller_orders_list",
        summary="List orders containing the seller's items",
        description="""
        **What it receives:**
        - Optional status filter (query param)
        - Pagination parameters (page, page_size)

        **What it returns:**
        - Paginated orders, each with only the seller's items and `seller_subtotal`
        - `stats`: order counts per status and delivered+paid revenue of the seller's items
        """,
        parameters=[
            OpenApiParameter(name="status", type=str, description="Filter by order status ('all' for every status)"),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page (default: 10)"),
        ],
        responses={
            200: OpenApiResponse(response=SellerOrderListResponseSerializer, description="Orders retrieved"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Unknown status or bad page"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not a seller"),
        },
        tags=["Marketplace - Seller Orders"],
    )
    def list(self, request):
        query = OrderListQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return validation_error_response(query.errors)

        result = self.get_service().list_seller_orders(
            request.user.pk,
            status=query.validated_data.get("status"),
            page=query.validated_data["page"],
            page_size=query.validated_data.get("page_size"),
        )
        if not result.ok:
            return error_response(result)

        summary = container.revenue_service().order_summary(request.user.pk)
        if not summary.ok:
            return error_response(summary)

        page = dict(result.value)
        page["results"] = SellerOrderSerializer(page["results"], many=True).data
        page["stats"] = OrderSummarySerializer(summary.value).data
        return success_response(page)

    @extend_schema(
        operation_id="seller_orders_retrieve",
        summary="Get the seller's view of an order",
        responses={
            200: OpenApiResponse(response=SellerOrderResponseSerializer, description="Order retrieved"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="No such order with the seller's items"),
        },
        tags=["Marketplace - Seller Orders"],
    )
    def retrieve(self, request, pk=None):
        return self.order_response(self.get_service().get_seller_order(request.user.pk, pk))

    @extend_schema(
        operation_id="seller_orders_update_status",
        summary="Move an order to another status",
        description="""
        **What it receives:**
        - `status`: processing, shipped, delivered or cancelled
        - `reason`: required when cancelling

        Allowed: pending -> processing/cancelled, processing -> shipped/cancelled,
        shipped -> delivered (only once paid). Delivered and cancelled are final.
        """,
        request=UpdateOrderStatusRequestSerializer,
        responses={
            200: OpenApiResponse(response=SellerOrderResponseSerializer, description="Status updated"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Unknown status or missing reason"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Transition not allowed"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="No such order with the seller's items"),
            412: OpenApiResponse(response=ErrorResponseSerializer, description="Order not paid"),
        },
        tags=["Marketplace - Seller Orders"],
    )
    @action(detail=True, methods=["put"], url_path="status", url_name="status")
    def update_status(self, request, pk=None):
        input_serializer = UpdateOrderStatusRequestSerializer(data=request.data)
        if not input_serializer.is_valid():
            return validation_error_response(input_serializer.errors)

        result = self.get_service().transition(
            request.user.pk,
            pk,
            input_serializer.validated_data["status"],
            reason=input_serializer.validated_data["reason"],
        )
        return self.order_response(result)

    @extend_schema(
        operation_id="seller_orders_update_payment_status",
        summary="Change the payment status of an order",
        description="""
        **What it receives:**
        - `payment_status`: paid or failed

        Allowed: pending -> paid/failed, paid -> failed. `paid` only once the order is shipped or delivered.
        """,
        request=UpdatePaymentStatusRequestSerializer,
        responses={
            200: OpenApiResponse(response=SellerOrderResponseSerializer, description="Payment status updated"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Transition not allowed"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="No such order with the seller's items"),
            412: OpenApiResponse(response=ErrorResponseSerializer, description="Order not shipped yet"),
        },
        tags=["Marketplace - Seller Orders"],
    )
    @action(detail=True, methods=["put"], url_path="payment-status", url_name="payment-status")
    def update_payment_status(self, request, pk=None):
        input_serializer = UpdatePaymentStatusRequestSerializer(data=request.data)
        if not input_serializer.is_valid():
            return validation_error_response(input_serializer.errors)

        result = self.get_service().update_payment_status(
            request.user.pk, pk, input_serializer.validated_data["payment_status"]
        )
        return self.order_response(result)


class SellerStatsViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated, IsSeller]

    @extend_schema(
        operation_id="seller_stats",
        summary="Seller dashboard figures",
        description="""
        **What it returns:**
        - Product counts (total, active, low stock)
        - Order counts per status, all time and over the trailing window
        - Revenue of the seller's items in delivered and paid orders (all time and windowed)
        - Recent orders and the products lowest on stock
        """,
        responses={
            200: OpenApiResponse(response=SellerStatsResponseSerializer, description="Statistics computed"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not a seller"),
        },
        tags=["Marketplace - Seller Orders"],
    )
    def list(self, request):
        result = container.revenue_service().seller_stats(request.user.pk)
        if not result.ok:
            return error_response(result)
        return success_response(SellerStatsSerializer(result.value).data)
