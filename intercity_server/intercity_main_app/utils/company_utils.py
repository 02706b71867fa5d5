"""Utility functions for transport company lookups"""


def get_company_for_user(user):
    """
    Get the TransportCompany managed by a platform user.

    Args:
        user: Django User instance

    Returns:
        TransportCompany instance

    Raises:
        ResourceNotFoundError: If the user does not manage a company
    """
    from ..models import TransportCompany
    from ..services.exceptions import ResourceNotFoundError

    company = TransportCompany.objects.filter(platform_user=user, is_active=True).first()
    if not company:
        raise ResourceNotFoundError("Company not found")
    return company
