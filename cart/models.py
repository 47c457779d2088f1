"""Database models for shopping carts."""

from decimal import Decimal

from django.conf import settings
from django.db import models

from glasses.models import Glasses


class ShoppingCart(models.Model):
    """Shopping cart of a registered user (exactly one per user)."""

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='shopping_cart')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Cart of {self.user.email}"

    @property
    def total_price(self):
        return sum((item.subtotal for item in self.cart_items.all()), Decimal('0.00'))


class CartItem(models.Model):
    """Line item inside a shopping cart."""

    shopping_cart = models.ForeignKey(ShoppingCart, on_delete=models.CASCADE, related_name='cart_items')
    glasses = models.ForeignKey(Glasses, on_delete=models.CASCADE)
    quantity = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(fields=['shopping_cart', 'glasses'], name='unique_cart_glasses'),
            models.CheckConstraint(condition=models.Q(quantity__gte=1), name='cart_item_quantity_gte_1'),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.glasses.name}"

    @property
    def subtotal(self):
        return self.glasses.price * self.quantity
