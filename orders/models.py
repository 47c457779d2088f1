"""Database models for orders and order items."""

from dataclasses import dataclass

from django.conf import settings
from django.db import models

from accounts.models import TemporaryUser
from glasses.models import Glasses


@dataclass(frozen=True)
class RegisteredOwner:
    user: object

    @property
    def email(self):
        return self.user.email


@dataclass(frozen=True)
class GuestOwner:
    temporary_user: TemporaryUser

    @property
    def email(self):
        return self.temporary_user.email


class Order(models.Model):
    """A placed order.

    Owned by exactly one of a registered ``user`` or a guest
    ``temporary_user``; the database refuses rows with both or neither.
    Use :attr:`owner` rather than reading the two columns directly.
    """

    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        PROCESSING = 'PROCESSING', 'Processing'
        SHIPPED = 'SHIPPED', 'Shipped'
        DELIVERED = 'DELIVERED', 'Delivered'
        COMPLETED = 'COMPLETED', 'Completed'
        CANCELLED = 'CANCELLED', 'Cancelled'

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, null=True, blank=True, related_name='orders')
    temporary_user = models.ForeignKey(TemporaryUser, on_delete=models.CASCADE, null=True, blank=True, related_name='orders')
    shipping_address = models.CharField(max_length=512)
    total = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    order_date = models.DateTimeField()

    class Meta:
        ordering = ['-order_date', '-id']
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(user__isnull=False, temporary_user__isnull=True)
                    | models.Q(user__isnull=True, temporary_user__isnull=False)
                ),
                name='order_has_exactly_one_owner',
            ),
        ]
        indexes = [
            models.Index(fields=['user', 'order_date'], name='orders_user_date_idx'),
        ]

    def __str__(self):
        return f"Order #{self.id} - {self.owner.email}"

    @property
    def owner(self):
        if self.user_id is not None:
            return RegisteredOwner(self.user)
        return GuestOwner(self.temporary_user)


class OrderItem(models.Model):
    """Line of an order with the price frozen at order time."""

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='order_items')
    glasses = models.ForeignKey(Glasses, on_delete=models.PROTECT, related_name='+')
    quantity = models.PositiveIntegerField()
    # glasses.price * quantity when the order was placed
    price = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=20, choices=Order.Status.choices, default=Order.Status.PENDING)

    class Meta:
        ordering = ['id']
        constraints = [
            models.CheckConstraint(condition=models.Q(quantity__gte=1), name='order_item_quantity_gte_1'),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.glasses.name} (Order #{self.order_id})"
