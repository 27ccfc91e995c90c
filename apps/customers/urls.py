from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'customers'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.CustomerViewSet, basename='customer')

urlpatterns = [
    # Customer ViewSet routes
    # GET    /api/customers/                      - List customers (?search= fuzzy)
    # POST   /api/customers/                      - Create customer
    # GET    /api/customers/{id}/                 - Get customer details
    # PATCH  /api/customers/{id}/                 - Edit name/contact

    # Custom customer actions
    # GET    /api/customers/lookup/               - Order form lookup
    # GET    /api/customers/{id}/rewards/         - Rewards history
    # GET    /api/customers/{id}/rewards/preview/ - Rewards preview for an order

    # Reconciliation (staff only)
    path('migration/preview/', views.migration_preview, name='migration-preview'),
    path('migration/run/', views.migration_run, name='migration-run'),

    # Include router URLs
    path('', include(router.urls)),
]
