from django.http import HttpResponse
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from drf_spectacular.types import OpenApiTypes
from apps.customers.services import (
    CustomersServiceError,
    CustomerNotFoundError,
    get_customer_by_id,
)
from .menu import get_menu
from .models import Order
from .serializers import (
    # Input serializers
    OrderFilterSerializer,
    OrderCreateSerializer,
    OrderUpdateSerializer,
    OrderQuoteSerializer,
    PaymentStatusInputSerializer,
    FeedQuerySerializer,
    # Output serializers
    OrderSerializer,
    OrderListSerializer,
    OrderTotalsSerializer,
    MenuCategorySerializer,
    FeedSerializer,
    ReceiptSerializer,
    ErrorSerializer,
)
from .services import (
    create_order,
    update_order,
    delete_order,
    set_payment_status,
    complete_order,
    get_order_by_id,
    get_order_by_receipt_id,
    filter_orders,
    price_order,
    prepare_items,
    snapshot_version,
    orders_snapshot,
    build_receipt,
    export_filename,
    export_orders_csv,
    OrdersServiceError,
    OrderNotFoundError,
)


def _error(exc, status_code):
    return Response({'error': str(exc)}, status=status_code)


class OrderPagination(PageNumberPagination):
    """Custom pagination for the order history."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 200


class OrderViewSet(viewsets.ModelViewSet):
    """
    ViewSet for puff orders.

    list: Order history (filterable by name, contact, receipt id, date)
    create: Take a new order
    retrieve: Get a specific order
    update: Edit an order (re-priced, points reconciled)
    partial_update: Edit some fields of an order
    destroy: Delete an order (points reversed)
    """

    queryset = Order.objects.select_related('customer', 'created_by').prefetch_related('items')
    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = OrderPagination
    lookup_value_regex = '[0-9a-f-]{36}'

    def get_queryset(self):
        """Filter orders using input serializer validation."""
        filter_serializer = OrderFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        return filter_orders(
            super().get_queryset(),
            customer_name=params.get('customer_name'),
            contact=params.get('contact'),
            receipt_id=params.get('receipt_id'),
            delivery_date=params.get('delivery_date'),
        )

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return OrderListSerializer
        elif self.action == 'create':
            return OrderCreateSerializer
        elif self.action in ['update', 'partial_update']:
            return OrderUpdateSerializer
        return OrderSerializer

    @extend_schema(request=OrderCreateSerializer, responses={201: OrderSerializer, 400: ErrorSerializer})
    def create(self, request, *args, **kwargs):
        """Take a new order."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = create_order(
                created_by=request.user,
                **serializer.validated_data
            )
        except (OrdersServiceError, CustomersServiceError) as e:
            return _error(e, status.HTTP_400_BAD_REQUEST)

        order = get_order_by_id(order.id)
        return Response(
            OrderSerializer(order).data,
            status=status.HTTP_201_CREATED
        )

    @extend_schema(request=OrderUpdateSerializer, responses={200: OrderSerializer, 404: ErrorSerializer})
    def update(self, request, *args, **kwargs):
        """Edit an order. PUT and PATCH both only change the fields sent."""
        serializer = OrderUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            order = update_order(order_id=kwargs.get('pk'), **serializer.validated_data)
        except OrderNotFoundError as e:
            return _error(e, status.HTTP_404_NOT_FOUND)
        except (OrdersServiceError, CustomersServiceError) as e:
            return _error(e, status.HTTP_400_BAD_REQUEST)

        order = get_order_by_id(order.id)
        return Response(OrderSerializer(order).data)

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        """Delete an order and reverse its points."""
        try:
            delete_order(order_id=kwargs.get('pk'))
        except OrderNotFoundError as e:
            return _error(e, status.HTTP_404_NOT_FOUND)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: ReceiptSerializer})
    @action(detail=True, methods=['get'])
    def receipt(self, request, pk=None):
        """
        Get the receipt for an order.

        GET /api/orders/{id}/receipt/
        """
        order = self.get_object()
        return Response(ReceiptSerializer(build_receipt(order)).data)

    @extend_schema(request=PaymentStatusInputSerializer, responses={200: OrderSerializer})
    @action(detail=True, methods=['post'])
    def mark_paid(self, request, pk=None):
        """
        Mark an order as paid (or back to unpaid).

        POST /api/orders/{id}/mark_paid/
        Body: {"payment_status": "PAID"}  (optional, defaults to PAID)
        """
        input_serializer = PaymentStatusInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        try:
            set_payment_status(
                order_id=pk,
                payment_status=input_serializer.validated_data['payment_status'],
            )
        except OrderNotFoundError as e:
            return _error(e, status.HTTP_404_NOT_FOUND)

        return Response(OrderSerializer(get_order_by_id(pk)).data)

    @extend_schema(request=None, responses={200: OrderSerializer})
    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        """
        Mark an order as picked up or delivered.

        POST /api/orders/{id}/complete/
        """
        try:
            complete_order(order_id=pk)
        except OrderNotFoundError as e:
            return _error(e, status.HTTP_404_NOT_FOUND)

        return Response(OrderSerializer(get_order_by_id(pk)).data)

    @extend_schema(responses={200: OrderSerializer, 404: ErrorSerializer})
    @action(
        detail=False,
        methods=['get'],
        url_path=r'by-receipt/(?P<receipt_id>[0-9A-Za-z]+)',
        url_name='by-receipt',
    )
    def by_receipt(self, request, receipt_id=None):
        """
        Find an order by its receipt id.

        GET /api/orders/by-receipt/{receipt_id}/
        """
        try:
            order = get_order_by_receipt_id(receipt_id)
        except OrderNotFoundError as e:
            return _error(e, status.HTTP_404_NOT_FOUND)

        return Response(OrderSerializer(order).data)

    @extend_schema(responses={200: MenuCategorySerializer(many=True)})
    @action(detail=False, methods=['get'])
    def menu(self, request):
        """
        Puff categories, default prices and puff types.

        GET /api/orders/menu/
        """
        return Response(MenuCategorySerializer(get_menu(), many=True).data)

    @extend_schema(request=OrderQuoteSerializer, responses={200: OrderTotalsSerializer, 400: ErrorSerializer})
    @action(detail=False, methods=['post'])
    def quote(self, request):
        """
        Price a draft order without saving it.

        POST /api/orders/quote/
        """
        input_serializer = OrderQuoteSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        params = input_serializer.validated_data

        points_balance = 0
        if params.get('customer'):
            try:
                points_balance = get_customer_by_id(params['customer']).rewards_points
            except CustomerNotFoundError as e:
                return _error(e, status.HTTP_404_NOT_FOUND)

        try:
            totals = price_order(
                items=prepare_items(params['items']),
                payment_method=params['payment_method'],
                discount_percent=params['discount_percent'],
                is_delivery=params['is_delivery'],
                delivery_fee=params['delivery_fee'],
                redeem_points=params['redeem_points'],
                points_balance=points_balance,
            )
        except OrdersServiceError as e:
            return _error(e, status.HTTP_400_BAD_REQUEST)

        return Response(OrderTotalsSerializer(totals.as_dict()).data)

    @extend_schema(
        parameters=[
            OpenApiParameter('version', OpenApiTypes.STR, description='Version from the previous poll'),
        ],
        responses={
            200: FeedSerializer,
            304: OpenApiResponse(description='Client version is current'),
        },
    )
    @action(detail=False, methods=['get'])
    def feed(self, request):
        """
        Live order list for polling clients.

        GET /api/orders/feed/?version=<last seen version>
        """
        query_serializer = FeedQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)

        client_version = query_serializer.validated_data.get('version')
        if client_version and client_version == snapshot_version():
            return Response(status=status.HTTP_304_NOT_MODIFIED)

        return Response(FeedSerializer(orders_snapshot()).data)

    @extend_schema(responses={(200, 'text/csv'): OpenApiTypes.STR})
    @action(detail=False, methods=['get'])
    def export(self, request):
        """
        Download the (filtered) order history as CSV.

        GET /api/orders/export/
        """
        content = export_orders_csv(self.get_queryset())
        response = HttpResponse(content, content_type='text/csv; charset=utf-8')
        response['Content-Disposition'] = f'attachment; filename="{export_filename()}"'
        return response
