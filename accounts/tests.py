"""Accounts app tests."""

from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import PasswordVerificationCode
from accounts.services import UserPasswordInitiationService


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class RegistrationAndLoginTests(TestCase):
	@classmethod
	def setUpTestData(cls):
		User = get_user_model()
		cls.existing = User.objects.create_user(
			email='existing@example.com',
			password='Str0ng-pass!',
			first_name='Ewa',
			last_name='Nowak',
		)

	def setUp(self):
		self.client = APIClient()

	def _payload(self, **overrides):
		payload = {
			'email': 'new.customer@example.com',
			'password': 'Str0ng-pass!',
			'repeat_password': 'Str0ng-pass!',
			'first_name': 'Jan',
			'last_name': 'Kowalski',
			'phone_number': '+48 601 234 567',
		}
		payload.update(overrides)
		return payload

	def test_register_creates_user_with_normalized_phone(self):
		res = self.client.post('/api/auth/register/', self._payload(), format='json')
		self.assertEqual(res.status_code, 201, getattr(res, 'data', None))
		self.assertEqual(res.data['email'], 'new.customer@example.com')
		self.assertEqual(res.data['phone_number'], '+48601234567')
		self.assertNotIn('password', res.data)

		user = get_user_model().objects.get(email='new.customer@example.com')
		self.assertTrue(user.check_password('Str0ng-pass!'))

	def test_register_duplicate_email_returns_400(self):
		res = self.client.post('/api/auth/register/', self._payload(email='EXISTING@example.com'), format='json')
		self.assertEqual(res.status_code, 400, getattr(res, 'data', None))
		self.assertEqual(get_user_model().objects.filter(email__iexact='existing@example.com').count(), 1)

	def test_register_password_mismatch_returns_400(self):
		res = self.client.post('/api/auth/register/', self._payload(repeat_password='Other-pass-1'), format='json')
		self.assertEqual(res.status_code, 400)
		self.assertFalse(get_user_model().objects.filter(email='new.customer@example.com').exists())

	def test_register_invalid_phone_returns_400(self):
		res = self.client.post('/api/auth/register/', self._payload(phone_number='12'), format='json')
		self.assertEqual(res.status_code, 400)

	def test_login_returns_token_pair(self):
		res = self.client.post('/api/auth/login/', {'email': 'existing@example.com', 'password': 'Str0ng-pass!'}, format='json')
		self.assertEqual(res.status_code, 200, getattr(res, 'data', None))
		self.assertTrue(res.data['token'])
		self.assertTrue(res.data['refresh'])

		self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {res.data['token']}")
		me = self.client.get('/api/auth/me/')
		self.assertEqual(me.status_code, 200)
		self.assertEqual(me.data['email'], 'existing@example.com')

	def test_login_with_wrong_password_returns_401(self):
		res = self.client.post('/api/auth/login/', {'email': 'existing@example.com', 'password': 'nope-nope'}, format='json')
		self.assertEqual(res.status_code, 401)

	def test_me_requires_authentication(self):
		res = self.client.get('/api/auth/me/')
		self.assertEqual(res.status_code, 401)

	def test_me_patch_updates_profile(self):
		self.client.force_authenticate(user=self.existing)
		res = self.client.patch('/api/auth/me/', {'last_name': 'Kowalska', 'phone_number': '+1 650 253 0000'}, format='json')
		self.assertEqual(res.status_code, 200, getattr(res, 'data', None))
		self.existing.refresh_from_db()
		self.assertEqual(self.existing.last_name, 'Kowalska')
		self.assertEqual(self.existing.first_name, 'Ewa')
		self.assertEqual(self.existing.phone_number, '+16502530000')


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class PasswordChangeTests(TestCase):
	@classmethod
	def setUpTestData(cls):
		cls.user = get_user_model().objects.create_user(email='pw@example.com', password='Old-pass-123')

	def setUp(self):
		self.client = APIClient()
		self.client.force_authenticate(user=self.user)

	def test_generated_code_has_six_digits(self):
		code = UserPasswordInitiationService().generate_verification_code()
		self.assertEqual(len(code), 6)
		self.assertTrue(code.isdigit())

	def test_initiate_mails_code_and_update_changes_password(self):
		res = self.client.post('/api/auth/password/initiate/')
		self.assertEqual(res.status_code, 202)
		self.assertEqual(len(mail.outbox), 1)
		self.assertEqual(mail.outbox[0].to, ['pw@example.com'])

		code = PasswordVerificationCode.objects.get(user=self.user, is_used=False).code
		self.assertIn(code, mail.outbox[0].body)

		res = self.client.post(
			'/api/auth/password/update/',
			{'code': code, 'new_password': 'New-pass-456', 'repeat_password': 'New-pass-456'},
			format='json',
		)
		self.assertEqual(res.status_code, 200, getattr(res, 'data', None))
		self.user.refresh_from_db()
		self.assertTrue(self.user.check_password('New-pass-456'))

		# A code works once.
		res = self.client.post(
			'/api/auth/password/update/',
			{'code': code, 'new_password': 'Another-pass-789', 'repeat_password': 'Another-pass-789'},
			format='json',
		)
		self.assertEqual(res.status_code, 400)

	def test_new_code_invalidates_previous_one(self):
		service = UserPasswordInitiationService()
		service.initiate_password_change(self.user)
		first = PasswordVerificationCode.objects.get(user=self.user, is_used=False)
		service.initiate_password_change(self.user)

		first.refresh_from_db()
		self.assertTrue(first.is_used)
		self.assertEqual(PasswordVerificationCode.objects.filter(user=self.user, is_used=False).count(), 1)

	@override_settings(PASSWORD_CODE_TTL_MINUTES=15)
	def test_expired_code_is_rejected(self):
		entry = PasswordVerificationCode.objects.create(user=self.user, code='123456')
		PasswordVerificationCode.objects.filter(pk=entry.pk).update(created_at=timezone.now() - timedelta(minutes=16))

		res = self.client.post(
			'/api/auth/password/update/',
			{'code': '123456', 'new_password': 'New-pass-456', 'repeat_password': 'New-pass-456'},
			format='json',
		)
		self.assertEqual(res.status_code, 400)
		self.user.refresh_from_db()
		self.assertTrue(self.user.check_password('Old-pass-123'))
