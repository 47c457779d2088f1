"""Serializers for the accounts app.

Includes:
- Registration and login payloads
- Profile read/update
- Password change with a mailed verification code
"""

import re

import phonenumbers
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers


User = get_user_model()


def normalize_phone_number(phone, field_name='phone_number'):
    """Parse a phone number with a country code and return it in E.164 form.

    Accepts spaces, dashes and a leading ``00`` instead of ``+``.
    """
    phone_input = str(phone or '').strip()
    if not phone_input:
        raise serializers.ValidationError({field_name: 'Phone number is required.'})

    # Keep digits and a single leading '+'
    clean_phone = re.sub(r'(?<!^)\+|[^\d+]', '', phone_input)
    if clean_phone.startswith('00'):
        clean_phone = '+' + clean_phone[2:]
    if not clean_phone.startswith('+'):
        clean_phone = '+' + clean_phone

    try:
        parsed = phonenumbers.parse(clean_phone, None)
        if not phonenumbers.is_valid_number(parsed):
            raise ValueError(phone_input)
    except (phonenumbers.NumberParseException, ValueError):
        raise serializers.ValidationError({
            field_name: f"Phone number {phone_input} is not valid. Include the country code (e.g. +48 or +1)."
        })

    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


class UserRegistrationRequestSerializer(serializers.Serializer):
    """Registration payload.

    Uniqueness of the email is a business rule checked by
    :class:`accounts.services.UserService`, not here.
    """

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    repeat_password = serializers.CharField(write_only=True)
    first_name = serializers.CharField(max_length=150)
    last_name = serializers.CharField(max_length=150)
    phone_number = serializers.CharField(required=False, allow_blank=True)

    def validate_email(self, value):
        return value.lower().strip()

    def validate(self, attrs):
        if attrs['password'] != attrs['repeat_password']:
            raise serializers.ValidationError({'repeat_password': 'Passwords do not match.'})
        try:
            validate_password(attrs['password'])
        except DjangoValidationError as exc:
            raise serializers.ValidationError({'password': list(exc.messages)})

        phone = attrs.get('phone_number')
        attrs['phone_number'] = normalize_phone_number(phone) if phone else None
        return attrs


class UserLoginRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class UserLoginResponseSerializer(serializers.Serializer):
    token = serializers.CharField()
    refresh = serializers.CharField()


class UserResponseSerializer(serializers.ModelSerializer):
    """Public view of a registered user."""

    class Meta:
        model = User
        fields = ['id', 'email', 'first_name', 'last_name', 'phone_number']
        read_only_fields = fields


class UserUpdateRequestSerializer(serializers.ModelSerializer):
    """Profile fields a user may change about themselves."""

    class Meta:
        model = User
        fields = ['first_name', 'last_name', 'phone_number']

    def validate(self, attrs):
        if 'phone_number' in attrs:
            phone = attrs['phone_number']
            attrs['phone_number'] = normalize_phone_number(phone) if phone else None
        return attrs


class UserPasswordUpdateRequestSerializer(serializers.Serializer):
    code = serializers.RegexField(r'^\d{6}$')
    new_password = serializers.CharField(write_only=True, min_length=8)
    repeat_password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        if attrs['new_password'] != attrs['repeat_password']:
            raise serializers.ValidationError({'repeat_password': 'Passwords do not match.'})
        try:
            validate_password(attrs['new_password'])
        except DjangoValidationError as exc:
            raise serializers.ValidationError({'new_password': list(exc.messages)})
        return attrs
