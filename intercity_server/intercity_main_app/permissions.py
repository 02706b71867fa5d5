from rest_framework.permissions import BasePermission


class IsCompanyOperator(BasePermission):
    """Platform user linked to an active transport company"""
    message = 'Only transport company operators can perform this action'

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        company = getattr(user, 'transport_company', None)
        return company is not None and company.is_active
