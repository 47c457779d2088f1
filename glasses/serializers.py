"""Serializers for the glasses catalog."""

from rest_framework import serializers

from .models import Category, Glasses
from .specifications import GlassesSearchParameters


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name', 'description']


class GlassesVariationSerializer(serializers.ModelSerializer):
    """Short form of a sibling pair (same model and manufacturer)."""

    class Meta:
        model = Glasses
        fields = ['id', 'identifier', 'name', 'color', 'price']


class GlassesResponseSerializer(serializers.ModelSerializer):
    """Glasses as shown to customers.

    ``variations`` is only filled for single-item lookups, where the service
    attaches them; list endpoints return an empty list.
    """

    glasses_name = serializers.ReadOnlyField(source='name')
    categories = CategorySerializer(many=True, read_only=True)
    variations = serializers.SerializerMethodField()

    class Meta:
        model = Glasses
        fields = [
            'id', 'glasses_name', 'price', 'identifier', 'color',
            'model', 'manufacturer', 'categories', 'is_deleted', 'variations',
        ]

    def get_variations(self, obj):
        return GlassesVariationSerializer(getattr(obj, 'variations', []), many=True).data


class GlassesRequestSerializer(serializers.ModelSerializer):
    """Create/update payload. Used with ``partial=True`` for updates."""

    categories = serializers.PrimaryKeyRelatedField(queryset=Category.objects.all(), many=True, required=False)

    class Meta:
        model = Glasses
        fields = ['name', 'price', 'identifier', 'color', 'model', 'manufacturer', 'categories']
        extra_kwargs = {'price': {'min_value': 0}}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # On partial updates an explicit null means "keep the stored value".
        if self.partial:
            for field in self.fields.values():
                field.allow_null = True


class _CommaListField(serializers.ListField):
    """Accept ``?colors=a&colors=b`` as well as ``?colors=a,b``."""

    def to_internal_value(self, data):
        flat = []
        for raw in data:
            flat.extend(part.strip() for part in str(raw).split(',') if part.strip())
        return super().to_internal_value(flat)


class GlassesSearchParameterSerializer(serializers.Serializer):
    names = _CommaListField(child=serializers.CharField(), required=False)
    colors = _CommaListField(child=serializers.CharField(), required=False)
    models = _CommaListField(child=serializers.CharField(), required=False)
    manufacturers = _CommaListField(child=serializers.CharField(), required=False)
    identifiers = _CommaListField(child=serializers.CharField(), required=False)
    categories = _CommaListField(child=serializers.IntegerField(), required=False)
    min_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, min_value=0)
    max_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, min_value=0)

    @classmethod
    def from_query_params(cls, query_params):
        data = {}
        for name, field in cls().fields.items():
            if isinstance(field, serializers.ListField):
                values = query_params.getlist(name)
                if values:
                    data[name] = values
            elif name in query_params:
                data[name] = query_params.get(name)
        return cls(data=data)

    def validate(self, attrs):
        low, high = attrs.get('min_price'), attrs.get('max_price')
        if low is not None and high is not None and low > high:
            raise serializers.ValidationError({'min_price': 'min_price must not exceed max_price.'})
        return attrs

    def to_parameters(self) -> GlassesSearchParameters:
        data = self.validated_data
        return GlassesSearchParameters(
            names=tuple(data.get('names', ())),
            colors=tuple(data.get('colors', ())),
            models=tuple(data.get('models', ())),
            manufacturers=tuple(data.get('manufacturers', ())),
            identifiers=tuple(data.get('identifiers', ())),
            categories=tuple(data.get('categories', ())),
            min_price=data.get('min_price'),
            max_price=data.get('max_price'),
        )
