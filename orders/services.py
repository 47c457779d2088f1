"""Order placement, status changes and order lookups."""

import logging
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from accounts.models import TemporaryUser
from cart.services import ShoppingCartManager
from core.exceptions import EntityNotFoundException

from .emails import EmailService
from .models import Order, OrderItem


logger = logging.getLogger(__name__)

User = get_user_model()


def order_total(items):
    """Sum of the (already multiplied) item prices."""
    return sum((item.price for item in items), Decimal('0.00'))


class OrderService:
    """Creates orders from carts or guest data and serves order lookups."""

    def __init__(self, cart_manager=None, email_service=None):
        self.cart_manager = cart_manager or ShoppingCartManager()
        self.email_service = email_service or EmailService()

    def _orders(self):
        return Order.objects.select_related('user', 'temporary_user').prefetch_related('order_items__glasses')

    def add_order(self, user, shipping_address):
        """Turn the user's cart into a PENDING order and empty the cart.

        The cart row stays locked until the order is committed, so a second
        checkout of the same cart waits and then finds it empty.
        """
        with transaction.atomic():
            cart = self.cart_manager.get_cart_for_user(user, for_update=True)
            lines = list(cart.cart_items.select_related('glasses'))

            order = Order(
                user=user,
                shipping_address=shipping_address,
                status=Order.Status.PENDING,
                order_date=timezone.now(),
            )
            items = [
                OrderItem(
                    glasses=line.glasses,
                    quantity=line.quantity,
                    price=line.glasses.price * line.quantity,
                    status=Order.Status.PENDING,
                )
                for line in lines
            ]
            order.total = order_total(items)
            order.save()
            for item in items:
                item.order = order
            OrderItem.objects.bulk_create(items)

            self.cart_manager.clear_cart(cart)

        logger.info('Placed order id=%s for user id=%s total=%s items=%s', order.id, user.id, order.total, len(items))
        return self.find_by_id(order.id)

    @transaction.atomic
    def place_order(self, data):
        """Guest checkout.

        Creates a :class:`TemporaryUser` and an order owned by it. Guests
        have no cart, so the order carries no items and a zero total.
        """
        guest = TemporaryUser.objects.create(
            email=data['email'],
            first_name=data['first_name'],
            last_name=data['last_name'],
            phone_number=data['phone_number'],
        )
        order = Order.objects.create(
            temporary_user=guest,
            shipping_address=data['shipping_address'],
            total=Decimal('0.00'),
            status=Order.Status.PENDING,
            order_date=timezone.now(),
        )
        logger.info('Placed guest order id=%s for temporary user id=%s', order.id, guest.id)
        return order

    def update_order_status(self, order_id, status):
        """Persist the new status, then notify the order owner by email.

        A failed email is logged; the status change is kept.
        """
        order = self.update(order_id, status)
        try:
            self.email_service.send_status_change_email(order.owner.email, order.status)
        except Exception:
            logger.exception('Could not send status change email for order id=%s', order.id)
        return order

    def update(self, order_id, status):
        order = self.find_by_id(order_id)
        order.status = status
        order.save(update_fields=['status'])
        logger.info('Order id=%s status set to %s', order.id, status)
        return order

    def find_by_id(self, order_id):
        try:
            return self._orders().get(pk=order_id)
        except Order.DoesNotExist:
            raise EntityNotFoundException(f"Can't find order with id: {order_id}")

    def get_by_user_id(self, user_id):
        if not User.objects.filter(pk=user_id).exists():
            raise EntityNotFoundException(f"Can't find user with id: {user_id}")
        return self.find_all_orders(user_id)

    def find_all_orders(self, user_id):
        return self._orders().filter(user_id=user_id)

    def find_all_by_user_email(self, email):
        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            raise EntityNotFoundException(f"Can't find user with email: {email}")
        return self.find_all_orders(user.id)

    def find_all_orders_sorted_by_date_desc(self):
        return self._orders().order_by('-order_date', '-id')

    def get_by_order_id_and_order_item_id(self, order_id, item_id):
        order = self.find_by_id(order_id)
        try:
            return order.order_items.select_related('glasses').get(pk=item_id)
        except OrderItem.DoesNotExist:
            raise EntityNotFoundException(f"Can't find item {item_id} in order {order_id}")
