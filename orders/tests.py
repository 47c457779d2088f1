"""Orders app tests."""

from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.core import mail
from django.db import IntegrityError, transaction
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import TemporaryUser
from cart.models import CartItem, ShoppingCart
from cart.services import ShoppingCartManager
from core.exceptions import EntityNotFoundException
from glasses.models import Glasses
from glasses.services import GlassesService
from orders.models import GuestOwner, Order, OrderItem, RegisteredOwner
from orders.services import OrderService


class OrderFixtureMixin:
	@classmethod
	def setUpTestData(cls):
		User = get_user_model()
		cls.customer = User.objects.create_user(email='customer@example.com', password='12345678')
		cls.other = User.objects.create_user(email='other@example.com', password='12345678')
		cls.staff = User.objects.create_user(email='staff@example.com', password='12345678', is_staff=True)

		cls.aviator = Glasses.objects.create(
			name='Aviator', price=Decimal('149.99'), identifier='RB-3025-BLK',
			color='Black', model='RB3025', manufacturer='Ray-Ban',
		)
		cls.holbrook = Glasses.objects.create(
			name='Holbrook', price=Decimal('120.50'), identifier='OO-9102-BLK',
			color='Black', model='OO9102', manufacturer='Oakley',
		)

	def _fill_cart(self, user):
		manager = ShoppingCartManager()
		manager.add_item(user, self.aviator.id, 2)
		manager.add_item(user, self.holbrook.id, 1)

	def _order_for(self, user, **extra):
		fields = {
			'user': user,
			'shipping_address': 'Main Street 1, Warsaw',
			'total': Decimal('149.99'),
			'order_date': timezone.now(),
		}
		fields.update(extra)
		order = Order.objects.create(**fields)
		OrderItem.objects.create(order=order, glasses=self.aviator, quantity=1, price=Decimal('149.99'))
		return order


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class OrderCheckoutTests(OrderFixtureMixin, TestCase):
	"""Checkout from the cart of a registered user."""

	def setUp(self):
		self.client = APIClient()
		self.client.force_authenticate(user=self.customer)

	def test_create_order_returns_201_and_clears_cart(self):
		self._fill_cart(self.customer)

		res = self.client.post('/api/orders/', {'shipping_address': 'Main Street 1, Warsaw'}, format='json')
		self.assertEqual(res.status_code, 201, getattr(res, 'data', None))
		self.assertEqual(res.data['status'], 'PENDING')
		self.assertFalse(res.data['is_guest'])
		self.assertEqual(res.data['owner_email'], 'customer@example.com')
		self.assertEqual(len(res.data['items']), 2)
		self.assertEqual(res.data['total'], '420.48')

		order = Order.objects.get(pk=res.data['id'])
		self.assertEqual(order.total, sum(item.price for item in order.order_items.all()))
		self.assertEqual(
			sorted((i.glasses_id, i.quantity, i.price) for i in order.order_items.all()),
			sorted([(self.aviator.id, 2, Decimal('299.98')), (self.holbrook.id, 1, Decimal('120.50'))]),
		)
		self.assertTrue(all(i.status == Order.Status.PENDING for i in order.order_items.all()))
		self.assertFalse(CartItem.objects.filter(shopping_cart__user=self.customer).exists())

	def test_second_checkout_of_same_cart_is_empty(self):
		self._fill_cart(self.customer)
		service = OrderService()

		first = service.add_order(self.customer, 'Main Street 1, Warsaw')
		second = service.add_order(self.customer, 'Main Street 1, Warsaw')

		self.assertEqual(first.order_items.count(), 2)
		self.assertEqual(first.total, Decimal('420.48'))
		self.assertEqual(second.order_items.count(), 0)
		self.assertEqual(second.total, Decimal('0.00'))
		self.assertFalse(CartItem.objects.filter(shopping_cart__user=self.customer).exists())
		self.assertEqual(ShoppingCart.objects.filter(user=self.customer).count(), 1)

	def test_checkout_keeps_line_whose_glasses_were_deleted_after_adding(self):
		ShoppingCartManager().add_item(self.customer, self.holbrook.id, 1)
		GlassesService().delete_by_id(self.holbrook.id)

		order = OrderService().add_order(self.customer, 'Main Street 1, Warsaw')

		item = order.order_items.get()
		self.assertEqual(item.glasses_id, self.holbrook.id)
		self.assertEqual(order.total, Decimal('120.50'))

	def test_item_prices_are_frozen_after_catalog_change(self):
		self._fill_cart(self.customer)
		order = OrderService().add_order(self.customer, 'Main Street 1, Warsaw')

		Glasses.objects.filter(pk=self.aviator.id).update(price=Decimal('999.00'))

		item = order.order_items.get(glasses=self.aviator)
		item.refresh_from_db()
		self.assertEqual(item.price, Decimal('299.98'))
		order.refresh_from_db()
		self.assertEqual(order.total, Decimal('420.48'))

	def test_checkout_creates_missing_cart_and_empty_order(self):
		self.assertFalse(ShoppingCart.objects.filter(user=self.other).exists())

		order = OrderService().add_order(self.other, 'Side Street 2')

		self.assertTrue(ShoppingCart.objects.filter(user=self.other).exists())
		self.assertEqual(order.order_items.count(), 0)
		self.assertEqual(order.total, Decimal('0.00'))

	def test_checkout_for_anonymous_user_raises_not_found(self):
		with self.assertRaises(EntityNotFoundException):
			OrderService().add_order(AnonymousUser(), 'Nowhere')
		self.assertFalse(Order.objects.exists())

	def test_create_order_requires_authentication(self):
		res = APIClient().post('/api/orders/', {'shipping_address': 'x'}, format='json')
		self.assertEqual(res.status_code, 401)

	def test_create_order_requires_shipping_address(self):
		res = self.client.post('/api/orders/', {}, format='json')
		self.assertEqual(res.status_code, 400)

	def test_failed_cart_clear_rolls_back_order(self):
		self._fill_cart(self.customer)
		service = OrderService()

		with mock.patch.object(service.cart_manager, 'clear_cart', side_effect=RuntimeError('boom')):
			with self.assertRaises(RuntimeError):
				service.add_order(self.customer, 'Main Street 1, Warsaw')

		self.assertFalse(Order.objects.exists())
		self.assertEqual(CartItem.objects.filter(shopping_cart__user=self.customer).count(), 2)


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class GuestOrderTests(OrderFixtureMixin, TestCase):
	def test_guest_order_is_owned_by_temporary_user_and_has_no_items(self):
		res = APIClient().post('/api/orders/guest/', {
			'email': 'Guest@Example.com',
			'first_name': 'Anna',
			'last_name': 'Guest',
			'phone_number': '+48 601 234 567',
			'shipping_address': 'Guest Lane 5',
		}, format='json')
		self.assertEqual(res.status_code, 201, getattr(res, 'data', None))
		self.assertTrue(res.data['is_guest'])
		self.assertEqual(res.data['items'], [])
		self.assertEqual(res.data['total'], '0.00')
		self.assertEqual(res.data['status'], 'PENDING')

		order = Order.objects.get(pk=res.data['id'])
		self.assertIsNone(order.user_id)
		self.assertIsInstance(order.owner, GuestOwner)
		guest = TemporaryUser.objects.get()
		self.assertEqual(guest.email, 'guest@example.com')
		self.assertEqual(guest.phone_number, '+48601234567')

	def test_guest_order_validates_contact_data(self):
		res = APIClient().post('/api/orders/guest/', {
			'email': 'not-an-email',
			'first_name': 'Anna',
			'last_name': 'Guest',
			'phone_number': '12',
			'shipping_address': 'Guest Lane 5',
		}, format='json')
		self.assertEqual(res.status_code, 400)
		self.assertFalse(TemporaryUser.objects.exists())

	def test_order_cannot_have_two_owners_or_none(self):
		guest = TemporaryUser.objects.create(email='g@example.com', first_name='G', last_name='G', phone_number='+48601234567')
		common = {'shipping_address': 'x', 'total': Decimal('0.00'), 'order_date': timezone.now()}

		with self.assertRaises(IntegrityError):
			with transaction.atomic():
				Order.objects.create(user=self.customer, temporary_user=guest, **common)
		with self.assertRaises(IntegrityError):
			with transaction.atomic():
				Order.objects.create(**common)

	def test_owner_of_registered_order(self):
		order = self._order_for(self.customer)
		self.assertEqual(order.owner, RegisteredOwner(self.customer))
		self.assertEqual(order.owner.email, 'customer@example.com')


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class OrderStatusTests(OrderFixtureMixin, TestCase):
	def setUp(self):
		self.client = APIClient()
		self.client.force_authenticate(user=self.staff)
		self.order = self._order_for(self.customer)

	def test_status_update_persists_and_emails_owner_each_time(self):
		for _ in range(2):
			res = self.client.patch(f'/api/orders/{self.order.id}/status/', {'status': 'SHIPPED'}, format='json')
			self.assertEqual(res.status_code, 200, getattr(res, 'data', None))
			self.assertEqual(res.data['status'], 'SHIPPED')

		self.order.refresh_from_db()
		self.assertEqual(self.order.status, Order.Status.SHIPPED)
		self.assertEqual(len(mail.outbox), 2)
		self.assertEqual(mail.outbox[0].to, ['customer@example.com'])
		self.assertIn('SHIPPED', mail.outbox[0].body)

	def test_status_update_of_guest_order_emails_guest(self):
		guest_order = OrderService().place_order({
			'email': 'guest@example.com',
			'first_name': 'Anna',
			'last_name': 'Guest',
			'phone_number': '+48601234567',
			'shipping_address': 'Guest Lane 5',
		})
		OrderService().update_order_status(guest_order.id, Order.Status.CANCELLED)
		self.assertEqual(len(mail.outbox), 1)
		self.assertEqual(mail.outbox[0].to, ['guest@example.com'])

	def test_failed_email_keeps_new_status(self):
		service = OrderService()
		with mock.patch.object(service.email_service, 'send_status_change_email', side_effect=OSError('smtp down')):
			order = service.update_order_status(self.order.id, Order.Status.DELIVERED)

		self.assertEqual(order.status, Order.Status.DELIVERED)
		self.order.refresh_from_db()
		self.assertEqual(self.order.status, Order.Status.DELIVERED)

	def test_plain_update_does_not_notify(self):
		res = self.client.patch(f'/api/orders/{self.order.id}/', {'status': 'PROCESSING'}, format='json')
		self.assertEqual(res.status_code, 200, getattr(res, 'data', None))
		self.order.refresh_from_db()
		self.assertEqual(self.order.status, Order.Status.PROCESSING)
		self.assertEqual(len(mail.outbox), 0)

	def test_unknown_status_is_rejected(self):
		res = self.client.patch(f'/api/orders/{self.order.id}/status/', {'status': 'LOST'}, format='json')
		self.assertEqual(res.status_code, 400)

	def test_status_update_of_missing_order_returns_404(self):
		res = self.client.patch('/api/orders/999999/status/', {'status': 'SHIPPED'}, format='json')
		self.assertEqual(res.status_code, 404)
		self.assertEqual(len(mail.outbox), 0)

	def test_customers_cannot_change_status(self):
		client = APIClient()
		client.force_authenticate(user=self.customer)
		res = client.patch(f'/api/orders/{self.order.id}/status/', {'status': 'COMPLETED'}, format='json')
		self.assertEqual(res.status_code, 403)
		res = client.patch(f'/api/orders/{self.order.id}/', {'status': 'COMPLETED'}, format='json')
		self.assertEqual(res.status_code, 403)


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class OrderLookupTests(OrderFixtureMixin, TestCase):
	def setUp(self):
		self.client = APIClient()
		now = timezone.now()
		self.older = self._order_for(self.customer, order_date=now - timedelta(days=2))
		self.newer = self._order_for(self.customer, order_date=now - timedelta(days=1))
		self.foreign = self._order_for(self.other, order_date=now)

	def test_list_returns_only_own_orders(self):
		self.client.force_authenticate(user=self.customer)
		res = self.client.get('/api/orders/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual([o['id'] for o in res.data['results']], [self.newer.id, self.older.id])

	def test_retrieve_own_order_and_hide_others(self):
		self.client.force_authenticate(user=self.customer)
		self.assertEqual(self.client.get(f'/api/orders/{self.older.id}/').status_code, 200)
		self.assertEqual(self.client.get(f'/api/orders/{self.foreign.id}/').status_code, 404)
		self.assertEqual(self.client.get('/api/orders/999999/').status_code, 404)

	def test_staff_can_retrieve_any_order(self):
		self.client.force_authenticate(user=self.staff)
		self.assertEqual(self.client.get(f'/api/orders/{self.foreign.id}/').status_code, 200)

	def test_item_lookup_checks_order_membership(self):
		self.client.force_authenticate(user=self.customer)
		item = self.older.order_items.get()
		res = self.client.get(f'/api/orders/{self.older.id}/items/{item.id}/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['price'], '149.99')

		res = self.client.get(f'/api/orders/{self.newer.id}/items/{item.id}/')
		self.assertEqual(res.status_code, 404)

		with self.assertRaises(EntityNotFoundException):
			OrderService().get_by_order_id_and_order_item_id(self.newer.id, item.id)

	def test_orders_by_user_id(self):
		self.client.force_authenticate(user=self.staff)
		res = self.client.get(f'/api/orders/users/{self.other.id}/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual([o['id'] for o in res.data['results']], [self.foreign.id])

		self.assertEqual(self.client.get('/api/orders/users/999999/').status_code, 404)

	def test_orders_by_email(self):
		self.client.force_authenticate(user=self.staff)
		res = self.client.get('/api/orders/by-email/', {'email': 'CUSTOMER@example.com'})
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['count'], 2)

		self.assertEqual(self.client.get('/api/orders/by-email/', {'email': 'nobody@example.com'}).status_code, 404)
		self.assertEqual(self.client.get('/api/orders/by-email/').status_code, 400)

	def test_all_orders_newest_first(self):
		self.client.force_authenticate(user=self.staff)
		res = self.client.get('/api/orders/all/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual([o['id'] for o in res.data['results']], [self.foreign.id, self.newer.id, self.older.id])

	def test_staff_lookups_are_forbidden_for_customers(self):
		self.client.force_authenticate(user=self.customer)
		self.assertEqual(self.client.get('/api/orders/all/').status_code, 403)
		self.assertEqual(self.client.get(f'/api/orders/users/{self.customer.id}/').status_code, 403)

	def test_find_by_id_raises_for_missing_order(self):
		with self.assertRaises(EntityNotFoundException):
			OrderService().find_by_id(999999)
