"""Django admin configuration for orders."""

from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    """Order lines; prices are snapshots and stay read-only."""

    model = OrderItem
    extra = 0
    readonly_fields = ('glasses', 'quantity', 'price')
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'temporary_user', 'total', 'status', 'order_date')
    list_filter = ('status', 'order_date')
    search_fields = ('id', 'user__email', 'temporary_user__email')
    readonly_fields = ('total', 'order_date')
    inlines = [OrderItemInline]
