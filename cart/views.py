"""Cart APIs for the authenticated user."""

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .serializers import (
    AddCartItemRequestSerializer,
    CartItemSerializer,
    ShoppingCartSerializer,
    UpdateCartItemRequestSerializer,
)
from .services import ShoppingCartManager


class CartViewSet(viewsets.ViewSet):
    """Current user's cart (created on first access)."""

    permission_classes = [IsAuthenticated]
    serializer_class = ShoppingCartSerializer
    manager = ShoppingCartManager()

    @extend_schema(summary='Get shopping cart', responses={200: ShoppingCartSerializer})
    def list(self, request):
        cart = self.manager.get_cart_for_user(request.user)
        return Response(ShoppingCartSerializer(cart).data)


class CartItemViewSet(viewsets.ViewSet):
    """Add, change and remove cart lines."""

    serializer_class = CartItemSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r'\d+'
    manager = ShoppingCartManager()

    @extend_schema(summary='Add glasses to cart', request=AddCartItemRequestSerializer, responses={201: CartItemSerializer})
    def create(self, request):
        serializer = AddCartItemRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = self.manager.add_item(
            request.user,
            serializer.validated_data['glasses_id'],
            serializer.validated_data['quantity'],
        )
        return Response(CartItemSerializer(item).data, status=status.HTTP_201_CREATED)

    @extend_schema(summary='Change cart item quantity', request=UpdateCartItemRequestSerializer, responses={200: CartItemSerializer})
    def update(self, request, pk=None):
        serializer = UpdateCartItemRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = self.manager.update_item(request.user, pk, serializer.validated_data['quantity'])
        return Response(CartItemSerializer(item).data)

    @extend_schema(summary='Partially change cart item quantity', request=UpdateCartItemRequestSerializer, responses={200: CartItemSerializer})
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(summary='Remove cart item', responses={204: None})
    def destroy(self, request, pk=None):
        self.manager.remove_item(request.user, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
