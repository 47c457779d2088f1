"""DRF serializers for cart APIs."""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from .models import CartItem, ShoppingCart


class CartItemSerializer(serializers.ModelSerializer):
    """Cart line item with the current glasses price."""

    glasses_id = serializers.ReadOnlyField(source='glasses.id')
    glasses_name = serializers.ReadOnlyField(source='glasses.name')
    identifier = serializers.ReadOnlyField(source='glasses.identifier')
    price = serializers.DecimalField(source='glasses.price', max_digits=10, decimal_places=2, read_only=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CartItem
        fields = ['id', 'glasses_id', 'glasses_name', 'identifier', 'price', 'quantity', 'subtotal']


class ShoppingCartSerializer(serializers.ModelSerializer):
    """Serializer for the shopping cart including nested items."""

    cart_items = CartItemSerializer(many=True, read_only=True)
    total_price = serializers.SerializerMethodField()

    class Meta:
        model = ShoppingCart
        fields = ['id', 'user', 'cart_items', 'total_price']

    @extend_schema_field(OpenApiTypes.STR)
    def get_total_price(self, obj) -> str:
        return str(obj.total_price)


class AddCartItemRequestSerializer(serializers.Serializer):
    glasses_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class UpdateCartItemRequestSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)
