"""Cart app tests."""

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import TestCase, override_settings
from drf_spectacular.generators import SchemaGenerator
from rest_framework.test import APIClient

from cart.models import CartItem, ShoppingCart
from cart.services import ShoppingCartManager
from core.exceptions import EntityNotFoundException
from glasses.models import Glasses


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class CartApiTests(TestCase):
	@classmethod
	def setUpTestData(cls):
		User = get_user_model()
		cls.customer = User.objects.create_user(email='cart_customer@example.com', password='12345678')
		cls.other = User.objects.create_user(email='cart_other@example.com', password='12345678')

		cls.glasses = Glasses.objects.create(
			name='Wayfarer', price=Decimal('100.00'), identifier='RB-2140-BLK',
			color='Black', model='RB2140', manufacturer='Ray-Ban',
		)
		cls.second = Glasses.objects.create(
			name='Clubmaster', price=Decimal('75.50'), identifier='RB-3016-TOR',
			color='Tortoise', model='RB3016', manufacturer='Ray-Ban',
		)
		cls.deleted = Glasses.objects.create(
			name='Retired', price=Decimal('10.00'), identifier='OLD-1',
			color='Red', model='OLD', manufacturer='Nobody', is_deleted=True,
		)

	def setUp(self):
		self.client = APIClient()
		self.client.force_authenticate(user=self.customer)

	def test_cart_is_created_on_first_access(self):
		self.assertFalse(ShoppingCart.objects.filter(user=self.customer).exists())
		res = self.client.get('/api/cart/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['cart_items'], [])
		self.assertEqual(res.data['total_price'], '0.00')
		self.assertTrue(ShoppingCart.objects.filter(user=self.customer).exists())

	def test_adding_same_glasses_twice_merges_quantity(self):
		res = self.client.post('/api/cart/items/', {'glasses_id': self.glasses.id, 'quantity': 1}, format='json')
		self.assertEqual(res.status_code, 201, getattr(res, 'data', None))
		res = self.client.post('/api/cart/items/', {'glasses_id': self.glasses.id, 'quantity': 2}, format='json')
		self.assertEqual(res.status_code, 201, getattr(res, 'data', None))
		self.assertEqual(res.data['quantity'], 3)

		self.assertEqual(CartItem.objects.filter(shopping_cart__user=self.customer).count(), 1)
		res = self.client.get('/api/cart/')
		self.assertEqual(res.data['total_price'], '300.00')

	def test_deleted_or_unknown_glasses_cannot_be_added(self):
		res = self.client.post('/api/cart/items/', {'glasses_id': self.deleted.id}, format='json')
		self.assertEqual(res.status_code, 404)
		res = self.client.post('/api/cart/items/', {'glasses_id': 999999}, format='json')
		self.assertEqual(res.status_code, 404)

	def test_quantity_must_be_positive(self):
		res = self.client.post('/api/cart/items/', {'glasses_id': self.glasses.id, 'quantity': 0}, format='json')
		self.assertEqual(res.status_code, 400)

	def test_update_and_remove_item(self):
		item = ShoppingCartManager().add_item(self.customer, self.second.id, 1)

		res = self.client.patch(f'/api/cart/items/{item.id}/', {'quantity': 4}, format='json')
		self.assertEqual(res.status_code, 200, getattr(res, 'data', None))
		self.assertEqual(res.data['subtotal'], '302.00')

		res = self.client.delete(f'/api/cart/items/{item.id}/')
		self.assertEqual(res.status_code, 204)
		self.assertFalse(CartItem.objects.filter(pk=item.id).exists())

	def test_items_of_another_cart_are_not_found(self):
		item = ShoppingCartManager().add_item(self.other, self.glasses.id, 1)
		res = self.client.patch(f'/api/cart/items/{item.id}/', {'quantity': 5}, format='json')
		self.assertEqual(res.status_code, 404)
		res = self.client.delete(f'/api/cart/items/{item.id}/')
		self.assertEqual(res.status_code, 404)
		self.assertTrue(CartItem.objects.filter(pk=item.id, quantity=1).exists())

	def test_cart_requires_authentication(self):
		client = APIClient()
		self.assertEqual(client.get('/api/cart/').status_code, 401)


class ShoppingCartManagerTests(TestCase):
	@classmethod
	def setUpTestData(cls):
		cls.user = get_user_model().objects.create_user(email='manager@example.com', password='12345678')
		cls.glasses = Glasses.objects.create(
			name='Round', price=Decimal('50.00'), identifier='RB-3447-GLD',
			color='Gold', model='RB3447', manufacturer='Ray-Ban',
		)

	def test_register_new_cart_is_idempotent(self):
		manager = ShoppingCartManager()
		first = manager.register_new_cart(self.user)
		second = manager.register_new_cart(self.user)
		self.assertEqual(first.pk, second.pk)

	def test_clear_cart_removes_all_lines(self):
		manager = ShoppingCartManager()
		manager.add_item(self.user, self.glasses.id, 2)
		cart = manager.get_cart_for_user(self.user)
		manager.clear_cart(cart)
		self.assertEqual(cart.cart_items.count(), 0)

	def test_cart_lookup_for_anonymous_user_raises(self):
		manager = ShoppingCartManager()
		with self.assertRaises(EntityNotFoundException):
			manager.get_cart_for_user(AnonymousUser())
		with self.assertRaises(EntityNotFoundException):
			manager.get_cart_for_user(None)


class CartSchemaTests(TestCase):
	def test_cart_endpoints_are_documented(self):
		schema = SchemaGenerator().get_schema(request=None, public=True)
		paths = schema['paths']

		self.assertIn('get', paths['/api/cart/'])
		self.assertIn('post', paths['/api/cart/items/'])
		self.assertEqual(
			{'put', 'patch', 'delete'} & set(paths['/api/cart/items/{id}/']),
			{'put', 'patch', 'delete'},
		)

		cart_schema = schema['components']['schemas']['ShoppingCart']
		self.assertEqual(cart_schema['properties']['total_price']['type'], 'string')
		self.assertIn('CartItem', schema['components']['schemas'])
