"""Shopping cart manager."""

import logging

from django.db import transaction

from core.exceptions import EntityNotFoundException
from glasses.models import Glasses

from .models import CartItem, ShoppingCart


logger = logging.getLogger(__name__)


class ShoppingCartManager:
    """Owns the per-user cart and its line items."""

    def register_new_cart(self, user):
        cart, created = ShoppingCart.objects.get_or_create(user=user)
        if created:
            logger.info('Registered new cart id=%s for user id=%s', cart.id, user.id)
        return cart

    def get_cart_for_user(self, user, *, for_update=False):
        """Return the user's cart, creating it on first use.

        Raises :class:`EntityNotFoundException` when ``user`` is not a
        persisted account (anonymous or unsaved).
        """
        if user is None or not getattr(user, 'is_authenticated', False) or user.pk is None:
            raise EntityNotFoundException("Can't find shopping cart for an unidentified user.")

        queryset = ShoppingCart.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        cart = queryset.filter(user=user).first()
        if cart is None:
            cart = self.register_new_cart(user)
        return cart

    def clear_cart(self, cart):
        deleted, _ = cart.cart_items.all().delete()
        logger.info('Cleared cart id=%s (%s items removed)', cart.id, deleted)

    def add_item(self, user, glasses_id, quantity):
        """Add glasses to the cart, merging with an existing line for the same glasses."""
        try:
            glasses = Glasses.objects.active().get(pk=glasses_id)
        except Glasses.DoesNotExist:
            raise EntityNotFoundException(f"Can't find glasses with id: {glasses_id}")

        with transaction.atomic():
            cart = self.get_cart_for_user(user, for_update=True)
            item = CartItem.objects.filter(shopping_cart=cart, glasses=glasses).first()
            if item is None:
                item = CartItem.objects.create(shopping_cart=cart, glasses=glasses, quantity=quantity)
            else:
                item.quantity += quantity
                item.save(update_fields=['quantity'])
        return item

    def _get_item(self, user, item_id):
        cart = self.get_cart_for_user(user)
        try:
            return cart.cart_items.select_related('glasses').get(pk=item_id)
        except CartItem.DoesNotExist:
            raise EntityNotFoundException(f"Can't find cart item with id: {item_id}")

    def update_item(self, user, item_id, quantity):
        item = self._get_item(user, item_id)
        item.quantity = quantity
        item.save(update_fields=['quantity'])
        return item

    def remove_item(self, user, item_id):
        self._get_item(user, item_id).delete()
