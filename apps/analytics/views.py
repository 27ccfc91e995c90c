from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status
from datetime import timedelta
from django.utils import timezone
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from apps.orders.models import Order
from .analytics import TrendsQueries, parse_year
from .order_calendar import MONTH, calendar_page, parse_view, period_bounds
from .serializers import (
    # Input serializers
    TrendsQuerySerializer,
    CalendarQuerySerializer,
    # Response serializers
    TrendsResponseSerializer,
    CalendarResponseSerializer,
    ErrorSerializer,
)
from .exceptions import AnalyticsServiceError


@extend_schema(
    parameters=[
        OpenApiParameter('year', OpenApiTypes.STR, description="'All Years' or a year (YYYY)", default='All Years'),
        OpenApiParameter('limit', OpenApiTypes.INT, description='Number of top puffs', default=10),
    ],
    responses={
        200: TrendsResponseSerializer,
        400: ErrorSerializer,
    },
    description="Sales trends: summary, monthly sales, category breakdown and top puffs.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def trends(request):
    """Sales trends for one year or all years - thin HTTP handler."""
    query_serializer = TrendsQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        year = parse_year(params.get('year'))
    except AnalyticsServiceError as e:
        return Response(
            {'error': str(e)},
            status=status.HTTP_400_BAD_REQUEST
        )

    data = TrendsQueries.trends(year=year, limit=params.get('limit'))
    return Response(TrendsResponseSerializer(data).data)


@extend_schema(
    parameters=[
        OpenApiParameter('view', OpenApiTypes.STR, description="'Day', 'Week', 'Month' or 'Year'", default='Month'),
        OpenApiParameter('date', OpenApiTypes.DATE, description='Anchor date (YYYY-MM-DD), defaults to today'),
        OpenApiParameter('search', OpenApiTypes.STR, description='Customer or puff name'),
    ],
    responses={
        200: CalendarResponseSerializer,
        400: ErrorSerializer,
    },
    description="Orders laid out on a calendar for one day, week, month or year.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def calendar_view(request):
    """Calendar screen for one view and anchor date - thin HTTP handler."""
    query_serializer = CalendarQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    anchor = params.get('date') or timezone.localdate()

    try:
        view = parse_view(params.get('view'))
    except AnalyticsServiceError as e:
        return Response(
            {'error': str(e)},
            status=status.HTTP_400_BAD_REQUEST
        )

    # Only load the orders the view can show
    start, end = period_bounds(view, anchor)
    if view == MONTH:
        # The grid shows trailing and leading days of the neighbouring months
        start, end = start - timedelta(days=7), end + timedelta(days=14)
    orders = (
        Order.objects
        .filter(delivery_date__range=(start, end))
        .prefetch_related('items')
    )

    page = calendar_page(list(orders), view, anchor, search=params.get('search'))
    return Response(CalendarResponseSerializer(page).data)
