"""Orders API views.

Includes registered and guest checkout, status changes (staff) and the
order lookups.
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAdminUser, IsAuthenticated
from rest_framework.response import Response

from core.exceptions import EntityNotFoundException
from core.pagination import StandardResultsSetPagination

from .serializers import (
    CreateOrderRequestSerializer,
    GuestOrderRequestSerializer,
    OrderEmailQuerySerializer,
    OrderItemSerializer,
    OrderSerializer,
    UpdateOrderRequestSerializer,
)
from .services import OrderService


class OrderViewSet(viewsets.GenericViewSet):
    """Order API endpoints.

    Customers create and read their own orders; guests may place an order
    without an account; staff change statuses and query any user's orders.
    """

    serializer_class = OrderSerializer
    pagination_class = StandardResultsSetPagination
    lookup_value_regex = r'\d+'

    order_service = OrderService()

    staff_actions = {'partial_update', 'update_status', 'by_user', 'by_email', 'all_orders'}

    def get_permissions(self):
        if self.action == 'guest':
            return [AllowAny()]
        if self.action in self.staff_actions:
            return [IsAdminUser()]
        return [IsAuthenticated()]

    def get_queryset(self):
        return self.order_service.find_all_orders(self.request.user.id)

    def _paginated(self, queryset):
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(queryset, many=True).data)

    def _visible_order(self, request, pk):
        order = self.order_service.find_by_id(pk)
        # Other customers' orders are reported as missing.
        if not request.user.is_staff and order.user_id != request.user.id:
            raise EntityNotFoundException(f"Can't find order with id: {pk}")
        return order

    @extend_schema(summary='List my orders')
    def list(self, request):
        return self._paginated(self.get_queryset())

    @extend_schema(summary='Place order from cart', request=CreateOrderRequestSerializer, responses={201: OrderSerializer})
    def create(self, request):
        serializer = CreateOrderRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self.order_service.add_order(request.user, serializer.validated_data['shipping_address'])
        return Response(self.get_serializer(order).data, status=status.HTTP_201_CREATED)

    @extend_schema(summary='Place guest order', request=GuestOrderRequestSerializer, responses={201: OrderSerializer})
    @action(detail=False, methods=['post'])
    def guest(self, request):
        serializer = GuestOrderRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self.order_service.place_order(serializer.validated_data)
        return Response(self.get_serializer(order).data, status=status.HTTP_201_CREATED)

    @extend_schema(summary='Get order by id')
    def retrieve(self, request, pk=None):
        return Response(self.get_serializer(self._visible_order(request, pk)).data)

    @extend_schema(summary='Overwrite order status (no notification)', request=UpdateOrderRequestSerializer)
    def partial_update(self, request, pk=None):
        serializer = UpdateOrderRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self.order_service.update(pk, serializer.validated_data['status'])
        return Response(self.get_serializer(order).data)

    @extend_schema(summary='Change order status and notify the owner', request=UpdateOrderRequestSerializer)
    @action(detail=True, methods=['patch'], url_path='status')
    def update_status(self, request, pk=None):
        serializer = UpdateOrderRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self.order_service.update_order_status(pk, serializer.validated_data['status'])
        return Response(self.get_serializer(order).data)

    @extend_schema(summary='Get order item', responses={200: OrderItemSerializer})
    @action(detail=True, methods=['get'], url_path=r'items/(?P<item_id>\d+)')
    def item(self, request, pk=None, item_id=None):
        self._visible_order(request, pk)
        item = self.order_service.get_by_order_id_and_order_item_id(pk, item_id)
        return Response(OrderItemSerializer(item).data)

    @extend_schema(summary="List a user's orders")
    @action(detail=False, methods=['get'], url_path=r'users/(?P<user_id>\d+)')
    def by_user(self, request, user_id=None):
        return self._paginated(self.order_service.get_by_user_id(user_id))

    @extend_schema(summary='List orders by user email', parameters=[OpenApiParameter('email', str, required=True)])
    @action(detail=False, methods=['get'], url_path='by-email')
    def by_email(self, request):
        query = OrderEmailQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return self._paginated(self.order_service.find_all_by_user_email(query.validated_data['email']))

    @extend_schema(summary='List all orders, newest first')
    @action(detail=False, methods=['get'], url_path='all')
    def all_orders(self, request):
        return self._paginated(self.order_service.find_all_orders_sorted_by_date_desc())
