"""Django admin configuration for shopping carts."""

from django.contrib import admin

from .models import CartItem, ShoppingCart


class CartItemInline(admin.TabularInline):
    """Inline display/edit for cart items within a cart."""

    model = CartItem
    extra = 0
    readonly_fields = ('subtotal',)


@admin.register(ShoppingCart)
class ShoppingCartAdmin(admin.ModelAdmin):
    list_display = ('user', 'total_price', 'created_at')
    search_fields = ('user__email',)
    inlines = [CartItemInline]
