"""Account services: registration, token login and password change."""

import logging
import secrets
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import authenticate, get_user_model
from django.core.mail import send_mail
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import AuthenticationFailed, NotAuthenticated, ValidationError
from rest_framework_simplejwt.tokens import RefreshToken

from core.exceptions import EntityNotFoundException, RegistrationException

from .models import PasswordVerificationCode


logger = logging.getLogger(__name__)

User = get_user_model()


class UserService:
    """Registered-user operations."""

    def register(self, data):
        """Create an account from validated registration data.

        Raises :class:`RegistrationException` when the email is taken.
        """
        email = data['email']
        if User.objects.filter(email__iexact=email).exists():
            logger.info('Registration rejected, email already in use: %s', email)
            raise RegistrationException(f"Unable to complete registration: {email} is already registered.")

        user = User.objects.create_user(
            email=email,
            password=data['password'],
            first_name=data.get('first_name', ''),
            last_name=data.get('last_name', ''),
            phone_number=data.get('phone_number'),
        )
        logger.info('Registered user id=%s email=%s', user.id, user.email)
        return user

    def get_authenticated(self, request):
        user = getattr(request, 'user', None)
        if user is None or not user.is_authenticated:
            raise NotAuthenticated()
        return user

    def get_by_id(self, user_id):
        try:
            return User.objects.get(pk=user_id)
        except User.DoesNotExist:
            raise EntityNotFoundException(f"Can't find user with id: {user_id}")

    def update_profile(self, user, data):
        for field in ('first_name', 'last_name', 'phone_number'):
            if field in data:
                setattr(user, field, data[field])
        user.save(update_fields=['first_name', 'last_name', 'phone_number'])
        return user


class AuthenticationService:
    """Exchanges credentials for a JWT pair."""

    def authenticate(self, email, password, request=None):
        user = authenticate(request, email=email.lower().strip(), password=password)
        if user is None or not user.is_active:
            raise AuthenticationFailed('Invalid email or password.')
        refresh = RefreshToken.for_user(user)
        return {'token': str(refresh.access_token), 'refresh': str(refresh)}


class UserPasswordInitiationService:
    """Two-step password change: mail a code, then accept it with the new password."""

    CODE_LENGTH = 6

    def generate_verification_code(self):
        return ''.join(secrets.choice('0123456789') for _ in range(self.CODE_LENGTH))

    def initiate_password_change(self, user):
        code = self.generate_verification_code()
        with transaction.atomic():
            PasswordVerificationCode.objects.filter(user=user, is_used=False).update(is_used=True)
            PasswordVerificationCode.objects.create(user=user, code=code)

        send_mail(
            subject='Your password change code',
            message=(
                f"Use the code {code} to change your password. "
                f"It expires in {settings.PASSWORD_CODE_TTL_MINUTES} minutes."
            ),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[user.email],
        )
        logger.info('Password change initiated for user id=%s', user.id)

    def update_password(self, user, code, new_password):
        cutoff = timezone.now() - timedelta(minutes=settings.PASSWORD_CODE_TTL_MINUTES)
        with transaction.atomic():
            entry = (
                PasswordVerificationCode.objects.select_for_update()
                .filter(user=user, code=code, is_used=False, created_at__gte=cutoff)
                .first()
            )
            if entry is None:
                raise ValidationError({'code': 'Invalid or expired verification code.'})
            entry.is_used = True
            entry.save(update_fields=['is_used'])
            user.set_password(new_password)
            user.save(update_fields=['password'])
        logger.info('Password changed for user id=%s', user.id)
