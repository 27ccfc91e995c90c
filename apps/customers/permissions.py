"""
Custom permission classes for customers app.

Permission Classes:
    IsStaffMember - Requires a staff account (is_staff)

Usage:
    from apps.customers.permissions import IsStaffMember

    @api_view(['POST'])
    @permission_classes([IsAuthenticated, IsStaffMember])
    def run_migration(request):
        ...
"""

from rest_framework.permissions import BasePermission


class IsStaffMember(BasePermission):
    """
    Allow access only to staff accounts.

    Rebuilding customer balances from the order history rewrites every
    customer's points, so it is limited to staff.
    """

    message = 'Only staff members can reconcile customers.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_staff)
