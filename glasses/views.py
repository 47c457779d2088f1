"""Glasses catalog API views.

CRUD for glasses (soft delete), lookups with variations, parameter search,
and read-only access to categories.
"""

from drf_spectacular.utils import extend_schema
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from core.pagination import StandardResultsSetPagination

from .models import Category
from .permissions import IsStaffOrReadOnly
from .serializers import (
    CategorySerializer,
    GlassesRequestSerializer,
    GlassesResponseSerializer,
    GlassesSearchParameterSerializer,
)
from .services import GlassesService


class GlassesViewSet(viewsets.GenericViewSet):
    """Glasses catalog.

    - Everyone: list, retrieve (with variations), lookup by identifier, search.
    - Staff: create, partial update, soft delete.
    """

    serializer_class = GlassesResponseSerializer
    permission_classes = [IsStaffOrReadOnly]
    pagination_class = StandardResultsSetPagination
    lookup_value_regex = r'\d+'

    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['manufacturer', 'model', 'color']
    ordering_fields = ['name', 'price', 'id']

    glasses_service = GlassesService()

    def get_queryset(self):
        return self.glasses_service.find_all()

    def _paginated(self, queryset):
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(queryset, many=True).data)

    @extend_schema(summary='List glasses')
    def list(self, request):
        return self._paginated(self.filter_queryset(self.get_queryset()))

    @extend_schema(summary='Get glasses by id')
    def retrieve(self, request, pk=None):
        glasses = self.glasses_service.get_by_id(pk)
        return Response(self.get_serializer(glasses).data)

    @extend_schema(summary='Get glasses by identifier')
    @action(detail=False, methods=['get'], url_path=r'identifier/(?P<identifier>[^/]+)')
    def by_identifier(self, request, identifier=None):
        glasses = self.glasses_service.find_by_identifier(identifier)
        return Response(self.get_serializer(glasses).data)

    @extend_schema(summary='Search glasses', parameters=[GlassesSearchParameterSerializer])
    @action(detail=False, methods=['get'])
    def search(self, request):
        params = GlassesSearchParameterSerializer.from_query_params(request.query_params)
        params.is_valid(raise_exception=True)
        return self._paginated(self.glasses_service.search_glasses_by_parameters(params.to_parameters()))

    @extend_schema(summary='Create glasses', request=GlassesRequestSerializer, responses={201: GlassesResponseSerializer})
    def create(self, request):
        serializer = GlassesRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        glasses = self.glasses_service.save(serializer.validated_data)
        return Response(self.get_serializer(glasses).data, status=status.HTTP_201_CREATED)

    @extend_schema(summary='Update glasses', request=GlassesRequestSerializer, responses={200: GlassesResponseSerializer})
    def update(self, request, pk=None):
        # Full and partial updates both merge only the supplied, non-null fields.
        glasses = self.glasses_service.get_by_id(pk)
        serializer = GlassesRequestSerializer(glasses, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        glasses = self.glasses_service.update(pk, serializer.validated_data)
        return Response(self.get_serializer(glasses).data)

    @extend_schema(summary='Partially update glasses', request=GlassesRequestSerializer, responses={200: GlassesResponseSerializer})
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(summary='Delete glasses', responses={204: None})
    def destroy(self, request, pk=None):
        self.glasses_service.delete_by_id(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CategoryViewSet(viewsets.ReadOnlyModelViewSet):
    """Read-only glasses categories."""
    queryset = Category.objects.order_by('name')
    serializer_class = CategorySerializer
