"""DRF serializers for orders APIs."""

from rest_framework import serializers

from accounts.serializers import normalize_phone_number

from .models import GuestOwner, Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    """Order line with the glasses it refers to and its frozen price."""

    glasses_id = serializers.ReadOnlyField(source='glasses.id')
    glasses_name = serializers.ReadOnlyField(source='glasses.name')
    identifier = serializers.ReadOnlyField(source='glasses.identifier')

    class Meta:
        model = OrderItem
        fields = ['id', 'glasses_id', 'glasses_name', 'identifier', 'quantity', 'price', 'status']


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(source='order_items', many=True, read_only=True)
    owner_email = serializers.SerializerMethodField()
    is_guest = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = ['id', 'shipping_address', 'total', 'status', 'order_date', 'owner_email', 'is_guest', 'items']

    def get_owner_email(self, obj):
        return obj.owner.email

    def get_is_guest(self, obj):
        return isinstance(obj.owner, GuestOwner)


class CreateOrderRequestSerializer(serializers.Serializer):
    shipping_address = serializers.CharField(max_length=512)


class GuestOrderRequestSerializer(serializers.Serializer):
    """Contact details and address of a guest placing an order."""

    email = serializers.EmailField()
    first_name = serializers.CharField(max_length=150)
    last_name = serializers.CharField(max_length=150)
    phone_number = serializers.CharField(max_length=32)
    shipping_address = serializers.CharField(max_length=512)

    def validate_email(self, value):
        return value.lower()

    def validate(self, attrs):
        attrs['phone_number'] = normalize_phone_number(attrs['phone_number'])
        return attrs


class UpdateOrderRequestSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.Status.choices)


class OrderEmailQuerySerializer(serializers.Serializer):
    email = serializers.EmailField()
