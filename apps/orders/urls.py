from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'orders'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.OrderViewSet, basename='order')

urlpatterns = [
    # Order ViewSet routes
    # GET    /api/orders/              - Order history (filterable)
    # POST   /api/orders/              - Take an order
    # GET    /api/orders/{id}/         - Get order details
    # PUT    /api/orders/{id}/         - Edit order
    # PATCH  /api/orders/{id}/         - Edit order
    # DELETE /api/orders/{id}/         - Delete order

    # Custom order actions
    # GET    /api/orders/{id}/receipt/            - Receipt
    # POST   /api/orders/{id}/mark_paid/          - Set payment status
    # POST   /api/orders/{id}/complete/           - Mark completed
    # GET    /api/orders/by-receipt/{receipt_id}/ - Find by receipt id
    # GET    /api/orders/menu/                    - Puff menu
    # POST   /api/orders/quote/                   - Price a draft order
    # GET    /api/orders/feed/                    - Live order list
    # GET    /api/orders/export/                  - CSV backup

    # Include router URLs
    path('', include(router.urls)),
]
