"""Glasses catalog tests."""

from decimal import Decimal
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase, override_settings
from rest_framework.settings import api_settings
from rest_framework.test import APIClient

from core.exceptions import EntityNotFoundException
from core.pagination import StandardResultsSetPagination
from glasses.models import Category, Glasses
from glasses.services import GlassesService, merge_glasses
from glasses.specifications import (
	CategoryClause,
	FieldInClause,
	GlassesSearchParameters,
	GlassesSpecificationBuilder,
	PriceRangeClause,
)


class CatalogFixtureMixin:
	@classmethod
	def setUpTestData(cls):
		User = get_user_model()
		cls.staff = User.objects.create_user(email='staff@example.com', password='12345678', is_staff=True)
		cls.customer = User.objects.create_user(email='customer@example.com', password='12345678')

		cls.sun = Category.objects.create(name='Sunglasses')
		cls.optical = Category.objects.create(name='Eyeglasses')

		cls.aviator_black = Glasses.objects.create(
			name='Aviator Classic', price=Decimal('150.00'), identifier='RB-3025-BLK',
			color='Black', model='RB3025', manufacturer='Ray-Ban',
		)
		cls.aviator_gold = Glasses.objects.create(
			name='Aviator Classic', price=Decimal('160.00'), identifier='RB-3025-GLD',
			color='Gold', model='RB3025', manufacturer='Ray-Ban',
		)
		cls.aviator_green = Glasses.objects.create(
			name='Aviator Classic', price=Decimal('155.00'), identifier='RB-3025-GRN',
			color='Green', model='RB3025', manufacturer='Ray-Ban', is_deleted=True,
		)
		cls.holbrook = Glasses.objects.create(
			name='Holbrook', price=Decimal('120.00'), identifier='OO-9102-BLK',
			color='Black', model='OO9102', manufacturer='Oakley',
		)
		cls.round_metal = Glasses.objects.create(
			name='Round Metal', price=Decimal('90.00'), identifier='RB-3447-SLV',
			color='Silver', model='RB3447', manufacturer='Ray-Ban',
		)
		cls.aviator_black.categories.set([cls.sun])
		cls.aviator_gold.categories.set([cls.sun])
		cls.holbrook.categories.set([cls.sun])
		cls.round_metal.categories.set([cls.optical])


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class GlassesReadApiTests(CatalogFixtureMixin, TestCase):
	def setUp(self):
		self.client = APIClient()

	def _ids(self, res):
		return [row['id'] for row in res.data['results']]

	def test_list_hides_soft_deleted(self):
		res = self.client.get('/api/glasses/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['count'], 4)
		self.assertNotIn(self.aviator_green.id, self._ids(res))

	def test_retrieve_includes_variations_without_self_or_deleted(self):
		res = self.client.get(f'/api/glasses/{self.aviator_black.id}/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['glasses_name'], 'Aviator Classic')
		self.assertEqual([v['id'] for v in res.data['variations']], [self.aviator_gold.id])

	def test_soft_deleted_still_reachable_by_id_and_identifier(self):
		res = self.client.get(f'/api/glasses/{self.aviator_green.id}/')
		self.assertEqual(res.status_code, 200)
		self.assertTrue(res.data['is_deleted'])
		self.assertEqual(
			sorted(v['id'] for v in res.data['variations']),
			sorted([self.aviator_black.id, self.aviator_gold.id]),
		)

		res = self.client.get('/api/glasses/identifier/RB-3025-GRN/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['id'], self.aviator_green.id)

	def test_missing_glasses_returns_404(self):
		self.assertEqual(self.client.get('/api/glasses/999999/').status_code, 404)
		self.assertEqual(self.client.get('/api/glasses/identifier/NOPE/').status_code, 404)

	def test_search_ors_values_and_ands_parameters(self):
		res = self.client.get('/api/glasses/search/', {'colors': 'black,GOLD', 'manufacturers': 'Ray-Ban'})
		self.assertEqual(res.status_code, 200)
		self.assertEqual(sorted(self._ids(res)), sorted([self.aviator_black.id, self.aviator_gold.id]))

	def test_search_by_price_range_and_category(self):
		res = self.client.get('/api/glasses/search/', {'min_price': '100', 'max_price': '155', 'categories': self.sun.id})
		self.assertEqual(res.status_code, 200)
		self.assertEqual(sorted(self._ids(res)), sorted([self.aviator_black.id, self.holbrook.id]))

	def test_search_excludes_soft_deleted(self):
		res = self.client.get('/api/glasses/search/', {'colors': 'Green'})
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['count'], 0)

	def test_search_rejects_inverted_price_range(self):
		res = self.client.get('/api/glasses/search/', {'min_price': '200', 'max_price': '100'})
		self.assertEqual(res.status_code, 400)

	def test_categories_are_listed(self):
		res = self.client.get('/api/categories/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual([c['name'] for c in res.data['results']], ['Eyeglasses', 'Sunglasses'])

	def test_default_pagination_applies_page_size_param(self):
		self.assertIs(api_settings.DEFAULT_PAGINATION_CLASS, StandardResultsSetPagination)
		res = self.client.get('/api/categories/', {'page_size': 1})
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['count'], 2)
		self.assertEqual([c['name'] for c in res.data['results']], ['Eyeglasses'])
		self.assertIsNotNone(res.data['next'])


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class GlassesWriteApiTests(CatalogFixtureMixin, TestCase):
	def setUp(self):
		self.client = APIClient()
		self.client.force_authenticate(user=self.staff)

	def test_create_glasses(self):
		res = self.client.post('/api/glasses/', {
			'name': 'Wayfarer', 'price': '129.99', 'identifier': 'RB-2140-BLK',
			'color': 'Black', 'model': 'RB2140', 'manufacturer': 'Ray-Ban',
			'categories': [self.sun.id],
		}, format='json')
		self.assertEqual(res.status_code, 201, getattr(res, 'data', None))
		created = Glasses.objects.get(identifier='RB-2140-BLK')
		self.assertEqual(created.price, Decimal('129.99'))
		self.assertEqual(list(created.categories.all()), [self.sun])

	def test_create_with_duplicate_identifier_returns_400(self):
		res = self.client.post('/api/glasses/', {
			'name': 'Copy', 'price': '10.00', 'identifier': 'RB-3025-BLK',
			'color': 'Black', 'model': 'X', 'manufacturer': 'Y',
		}, format='json')
		self.assertEqual(res.status_code, 400)

	def test_partial_update_keeps_values_sent_as_null(self):
		res = self.client.patch(
			f'/api/glasses/{self.holbrook.id}/',
			{'color': 'Matte Black', 'price': None, 'name': None},
			format='json',
		)
		self.assertEqual(res.status_code, 200, getattr(res, 'data', None))
		self.holbrook.refresh_from_db()
		self.assertEqual(self.holbrook.color, 'Matte Black')
		self.assertEqual(self.holbrook.price, Decimal('120.00'))
		self.assertEqual(self.holbrook.name, 'Holbrook')

	def test_put_merges_like_patch(self):
		res = self.client.put(f'/api/glasses/{self.round_metal.id}/', {'price': '95.00'}, format='json')
		self.assertEqual(res.status_code, 200, getattr(res, 'data', None))
		self.round_metal.refresh_from_db()
		self.assertEqual(self.round_metal.price, Decimal('95.00'))
		self.assertEqual(self.round_metal.color, 'Silver')

	def test_delete_is_soft(self):
		res = self.client.delete(f'/api/glasses/{self.holbrook.id}/')
		self.assertEqual(res.status_code, 204)
		self.assertTrue(Glasses.objects.get(pk=self.holbrook.id).is_deleted)
		self.assertNotIn(self.holbrook.id, [g.id for g in GlassesService().find_all()])

	def test_delete_missing_returns_404(self):
		self.assertEqual(self.client.delete('/api/glasses/999999/').status_code, 404)

	def test_writes_require_staff(self):
		client = APIClient()
		payload = {'name': 'X', 'price': '1.00', 'identifier': 'X-1', 'color': 'c', 'model': 'm', 'manufacturer': 'f'}
		self.assertEqual(client.post('/api/glasses/', payload, format='json').status_code, 401)

		client.force_authenticate(user=self.customer)
		self.assertEqual(client.post('/api/glasses/', payload, format='json').status_code, 403)
		self.assertEqual(client.delete(f'/api/glasses/{self.holbrook.id}/').status_code, 403)
		self.assertFalse(Glasses.objects.get(pk=self.holbrook.id).is_deleted)


class GlassesServiceTests(CatalogFixtureMixin, TestCase):
	def test_get_by_id_raises_for_unknown_id(self):
		with self.assertRaises(EntityNotFoundException):
			GlassesService().get_by_id(999999)

	def test_update_changes_only_given_fields(self):
		updated = GlassesService().update(self.aviator_gold.id, {'price': Decimal('170.00'), 'color': None})
		self.assertEqual(updated.price, Decimal('170.00'))
		self.assertEqual(updated.color, 'Gold')

	def test_merge_glasses_reports_changed_fields(self):
		glasses = Glasses(name='A', price=Decimal('1.00'), identifier='A-1', color='Red', model='M', manufacturer='F')
		changed = merge_glasses(glasses, {'name': 'A', 'color': 'Blue', 'model': None, 'is_deleted': True})
		self.assertEqual(changed, ['color'])
		self.assertEqual(glasses.color, 'Blue')
		self.assertFalse(glasses.is_deleted)


class GlassesSpecificationBuilderTests(TestCase):
	def test_empty_parameters_produce_no_clauses(self):
		builder = GlassesSpecificationBuilder()
		self.assertEqual(builder.clauses(GlassesSearchParameters()), [])

	def test_clauses_follow_given_parameters(self):
		params = GlassesSearchParameters(colors=('Black', ''), categories=(3,), min_price=Decimal('10'))
		clauses = GlassesSpecificationBuilder().clauses(params)
		self.assertEqual(clauses, [
			FieldInClause('color', ('Black',)),
			CategoryClause((3,)),
			PriceRangeClause(Decimal('10'), None),
		])


class SeedGlassesCommandTests(TestCase):
	def test_seed_creates_catalog_and_is_repeatable(self):
		call_command('seed_glasses', models=3, max_colors=2, seed=1, stdout=StringIO())
		self.assertTrue(Glasses.objects.exists())
		self.assertEqual(Category.objects.count(), 4)

		# Running again with the same seed adds nothing new.
		before = Glasses.objects.count()
		call_command('seed_glasses', models=3, max_colors=2, seed=1, stdout=StringIO())
		self.assertEqual(Glasses.objects.count(), before)
