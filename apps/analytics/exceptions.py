"""
Domain exceptions for analytics app.

These exceptions are raised by the trends and calendar queries and represent
invalid requests, separate from HTTP concerns.

Exception Hierarchy:
    AnalyticsServiceError (base)
    ├── InvalidPeriodError
    └── InvalidViewError

Usage:
    from apps.analytics.exceptions import InvalidPeriodError

    if not value.isdigit():
        raise InvalidPeriodError(f"Invalid year: {value}")
"""


class AnalyticsServiceError(Exception):
    """
    Base exception for all analytics service errors.

    Views catch this to turn any analytics error into a 400 response:

        try:
            year = parse_year(request.query_params.get('year'))
        except AnalyticsServiceError as e:
            return Response({'error': str(e)}, status=400)
    """

    pass


class InvalidPeriodError(AnalyticsServiceError):
    """
    Raised when a year or date cannot be used as a reporting period.

    Example:
        raise InvalidPeriodError("Invalid year: '20x4'. Use YYYY or 'All Years'")
    """

    pass


class InvalidViewError(AnalyticsServiceError):
    """
    Raised when an unknown calendar view is requested.

    Valid views are: Day, Week, Month, Year.
    """

    pass
