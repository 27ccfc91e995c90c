from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema
from .models import Customer
from .serializers import (
    # Input serializers
    CustomerFilterSerializer,
    CustomerLookupSerializer,
    CustomerCreateSerializer,
    RewardsPreviewInputSerializer,
    # Output serializers
    CustomerSerializer,
    CustomerLookupResultSerializer,
    RewardsTransactionSerializer,
    RewardsPreviewSerializer,
    MigrationPreviewSerializer,
    MigrationResultSerializer,
    ErrorSerializer,
)
from .services import (
    create_customer,
    update_customer_contact,
    lookup_customer,
    find_similar_customers,
    get_customer_rewards_history,
    rewards_preview,
    preview_customer_migration,
    migrate_all_customers,
    MEDIUM_SIMILARITY_THRESHOLD,
    NOT_PROVIDED,
    CustomerNotFoundError,
    InvalidCustomerError,
)
from .permissions import IsStaffMember


class CustomerPagination(PageNumberPagination):
    """Custom pagination for customers."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class CustomerViewSet(viewsets.ModelViewSet):
    """
    ViewSet for loyalty customers.

    list: Get all customers (fuzzy name search with ?search=)
    create: Create a customer
    retrieve: Get a specific customer
    partial_update: Edit name or contact details
    """

    queryset = Customer.objects.all()
    serializer_class = CustomerSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = CustomerPagination
    http_method_names = ['get', 'post', 'patch', 'head', 'options']
    lookup_value_regex = '[0-9a-f-]{36}'

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action in ['create', 'partial_update']:
            return CustomerCreateSerializer
        return CustomerSerializer

    def list(self, request, *args, **kwargs):
        """List customers, ranked by name similarity when searching."""
        filter_serializer = CustomerFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        search = filter_serializer.validated_data.get('search')

        if search:
            customers = [
                customer for customer, _ in find_similar_customers(
                    name=search,
                    threshold=MEDIUM_SIMILARITY_THRESHOLD,
                )
            ]
        else:
            customers = self.get_queryset()

        page = self.paginate_queryset(customers)
        if page is not None:
            serializer = CustomerSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)

        serializer = CustomerSerializer(customers, many=True)
        return Response(serializer.data)

    def create(self, request, *args, **kwargs):
        """Create a new customer."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            customer = create_customer(**serializer.validated_data)
        except InvalidCustomerError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

        return Response(
            CustomerSerializer(customer).data,
            status=status.HTTP_201_CREATED
        )

    def partial_update(self, request, *args, **kwargs):
        """Edit a customer's name or contact details."""
        serializer = self.get_serializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            customer = update_customer_contact(
                customer_id=kwargs.get('pk'),
                **serializer.validated_data
            )
        except CustomerNotFoundError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_404_NOT_FOUND
            )
        except InvalidCustomerError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

        return Response(CustomerSerializer(customer).data)

    @extend_schema(
        parameters=[CustomerLookupSerializer],
        responses={200: CustomerLookupResultSerializer},
    )
    @action(detail=False, methods=['get'])
    def lookup(self, request):
        """
        Look up a customer while an order is being typed.

        GET /api/customers/lookup/?name=...&contact=...
        """
        query_serializer = CustomerLookupSerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)
        name = query_serializer.validated_data['name'].strip()
        contact = query_serializer.validated_data['contact'].strip()

        customer = lookup_customer(name=name, contact=contact)

        has_contact = bool(contact) and contact != NOT_PROVIDED
        return Response({
            'found': customer is not None,
            'customer': CustomerSerializer(customer).data if customer else None,
            'is_new': customer is None and bool(name) and has_contact,
        })

    @extend_schema(responses={200: RewardsTransactionSerializer(many=True), 404: ErrorSerializer})
    @action(detail=True, methods=['get'])
    def rewards(self, request, pk=None):
        """
        Get the customer's rewards history, newest first.

        GET /api/customers/{id}/rewards/
        """
        try:
            transactions = get_customer_rewards_history(customer_id=pk)
        except CustomerNotFoundError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_404_NOT_FOUND
            )

        return Response(RewardsTransactionSerializer(transactions, many=True).data)

    @extend_schema(
        parameters=[RewardsPreviewInputSerializer],
        responses={200: RewardsPreviewSerializer},
    )
    @action(detail=True, methods=['get'], url_path='rewards/preview', url_name='rewards-preview')
    def points_preview(self, request, pk=None):
        """
        Preview the rewards effect of an order for this customer.

        GET /api/customers/{id}/rewards/preview/?subtotal=42.50&redeem=true
        """
        customer = self.get_object()

        input_serializer = RewardsPreviewInputSerializer(data=request.query_params)
        input_serializer.is_valid(raise_exception=True)

        data = rewards_preview(
            customer=customer,
            order_subtotal=input_serializer.validated_data['subtotal'],
            use_redemption=input_serializer.validated_data['redeem'],
        )
        return Response(RewardsPreviewSerializer(data).data)


@extend_schema(
    responses={200: MigrationPreviewSerializer, 403: ErrorSerializer},
    description="Preview how customers and balances would change when rebuilt from the order history.",
    tags=['customers'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def migration_preview(request):
    """Preview customer reconciliation - thin HTTP handler."""
    data = preview_customer_migration()
    return Response(MigrationPreviewSerializer(data).data)


@extend_schema(
    request=None,
    responses={200: MigrationResultSerializer, 403: ErrorSerializer},
    description="Rebuild customers and their point balances from the order history.",
    tags=['customers'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def migration_run(request):
    """Run customer reconciliation - thin HTTP handler."""
    results = migrate_all_customers()
    return Response(MigrationResultSerializer(results).data)
