import pytest
from django.urls import reverse
from rest_framework import status


# =============================================================================
# Trends Endpoint Tests
# =============================================================================

@pytest.mark.django_db
class TestTrends:
    """Tests for GET /api/analytics/trends/"""

    def test_all_years_by_default(self, analytics_user_client, sales_history):
        url = reverse('analytics:trends')
        response = analytics_user_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['year'] == 'All Years'
        assert response.data['available_years'] == ['All Years', '2025', '2024']
        assert response.data['summary']['total_orders'] == 4
        assert response.data['summary']['total_revenue'] == '48.84'

    def test_one_year(self, analytics_user_client, sales_history):
        url = reverse('analytics:trends')
        response = analytics_user_client.get(url, {'year': '2025'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['summary']['total_revenue'] == '35.85'
        assert response.data['monthly_sales'][0]['sales'] == '17.85'
        assert response.data['category_breakdown'][0]['category'] == 'Savory'
        assert response.data['category_breakdown'][0]['percentage'] == 58.3
        assert response.data['top_items'][0]['name'] == 'Butter Chicken Puffs'

    def test_limit(self, analytics_user_client, sales_history):
        url = reverse('analytics:trends')
        response = analytics_user_client.get(url, {'limit': 2})

        assert len(response.data['top_items']) == 2

    def test_invalid_year(self, analytics_user_client):
        url = reverse('analytics:trends')
        response = analytics_user_client.get(url, {'year': 'last year'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_invalid_limit(self, analytics_user_client):
        url = reverse('analytics:trends')
        response = analytics_user_client.get(url, {'limit': 0})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unauthenticated(self, api_client):
        url = reverse('analytics:trends')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Calendar Endpoint Tests
# =============================================================================

@pytest.mark.django_db
class TestCalendar:
    """Tests for GET /api/analytics/calendar/"""

    def test_month_view(self, analytics_user_client, sales_history):
        url = reverse('analytics:calendar')
        response = analytics_user_client.get(url, {'date': '2025-01-15'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['view'] == 'Month'
        assert response.data['previous'] == '2024-12-15'
        assert response.data['next'] == '2025-02-15'

        stats = response.data['stats']
        assert stats['total_orders'] == 2
        assert stats['total_revenue'] == '17.85'
        assert stats['total_items'] == 3
        assert stats['active_days'] == 2

        grid = response.data['grid']
        assert len(grid) == 42
        assert grid[0]['date'] == '2024-12-29'
        assert grid[17]['date'] == '2025-01-15'
        assert grid[17]['order_count'] == 1

    def test_day_view(self, analytics_user_client, sales_history):
        url = reverse('analytics:calendar')
        response = analytics_user_client.get(url, {'view': 'day', 'date': '2025-01-20'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['view'] == 'Day'
        assert len(response.data['orders']) == 1
        assert response.data['orders'][0]['time_label'] == '4:45 PM'
        assert response.data['orders'][0]['order']['customer_name'] == 'Tom Becker'
        assert response.data['orders'][0]['order']['item_count'] == 4

    def test_week_view(self, analytics_user_client, sales_history):
        url = reverse('analytics:calendar')
        response = analytics_user_client.get(url, {'view': 'Week', 'date': '2025-01-15'})

        days = response.data['days']
        assert [d['date'] for d in days][0] == '2025-01-12'
        assert len(days[3]['orders']) == 1
        assert 'grid' not in response.data

    def test_year_view(self, analytics_user_client, sales_history):
        url = reverse('analytics:calendar')
        response = analytics_user_client.get(url, {'view': 'Year', 'date': '2025-06-01'})

        january = response.data['months'][0]
        assert january['label'] == 'JAN'
        assert january['order_count'] == 2
        assert january['revenue'] == '17.85'
        assert january['paid'] == 1
        assert january['unpaid'] == 1
        assert response.data['stats']['total_orders'] == 3

    def test_search(self, analytics_user_client, sales_history):
        url = reverse('analytics:calendar')
        response = analytics_user_client.get(url, {'date': '2025-01-15', 'search': 'nutella'})

        assert response.data['stats']['total_orders'] == 1
        assert response.data['stats']['total_revenue'] == '6.60'

    def test_invalid_view(self, analytics_user_client):
        url = reverse('analytics:calendar')
        response = analytics_user_client.get(url, {'view': 'Decade'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_invalid_date(self, analytics_user_client):
        url = reverse('analytics:calendar')
        response = analytics_user_client.get(url, {'date': '15/01/2025'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unauthenticated(self, api_client):
        url = reverse('analytics:calendar')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
