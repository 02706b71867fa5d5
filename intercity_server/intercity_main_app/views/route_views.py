"""Operator route views using RouteService"""
from rest_framework import viewsets, status
from rest_framework.permissions import IsAuthenticated
from rest_framework_simplejwt.authentication import JWTAuthentication

from ..permissions import IsCompanyOperator
from ..serializers import OperatorRouteSerializer, RouteCreateSerializer, RouteUpdateSerializer
from ..services import RouteService
from ..utils import get_company_for_user
from .booking_views import success


class OperatorRouteViewSet(viewsets.ViewSet):
    """Routes owned by the operator's company"""
    authentication_classes = [JWTAuthentication]
    permission_classes = [IsAuthenticated, IsCompanyOperator]
    lookup_value_regex = r'\d+'

    def list(self, request):
        company = get_company_for_user(request.user)
        routes = RouteService().list_company_routes(company)
        return success(OperatorRouteSerializer(routes, many=True).data)

    def create(self, request):
        serializer = RouteCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        company = get_company_for_user(request.user)

        route = RouteService().create_route(company, **serializer.validated_data)
        return success(OperatorRouteSerializer(route).data, status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        company = get_company_for_user(request.user)
        route = RouteService().get_company_route(company, pk)
        return success(OperatorRouteSerializer(route).data)

    def update(self, request, pk=None):
        serializer = RouteUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        company = get_company_for_user(request.user)

        route = RouteService().update_route(company, pk, dict(serializer.validated_data))
        return success(OperatorRouteSerializer(route).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        company = get_company_for_user(request.user)
        deleted = RouteService().delete_route(company, pk)
        return success({
            'message': 'Route deleted successfully' if deleted else 'Route deactivated, past schedules kept',
            'deleted': deleted,
        })
