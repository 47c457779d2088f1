"""Accounts API views.

Contains:
- Registration and JWT login
- Profile of the authenticated user
- Password change with a mailed verification code
"""

import logging

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import (
    UserLoginRequestSerializer,
    UserLoginResponseSerializer,
    UserPasswordUpdateRequestSerializer,
    UserRegistrationRequestSerializer,
    UserResponseSerializer,
    UserUpdateRequestSerializer,
)
from .services import AuthenticationService, UserPasswordInitiationService, UserService


logger = logging.getLogger(__name__)


class RegisterView(APIView):
    """Public registration endpoint."""

    permission_classes = [AllowAny]
    user_service = UserService()

    @extend_schema(summary='Register', request=UserRegistrationRequestSerializer, responses={201: UserResponseSerializer})
    def post(self, request):
        serializer = UserRegistrationRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        logger.info('Received registration request for user with email: %s', serializer.validated_data['email'])
        user = self.user_service.register(serializer.validated_data)
        return Response(UserResponseSerializer(user).data, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """Exchange email + password for a bearer token."""

    permission_classes = [AllowAny]
    authentication_service = AuthenticationService()

    @extend_schema(summary='Login', request=UserLoginRequestSerializer, responses={200: UserLoginResponseSerializer})
    def post(self, request):
        serializer = UserLoginRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        tokens = self.authentication_service.authenticate(
            serializer.validated_data['email'],
            serializer.validated_data['password'],
            request=request._request,
        )
        return Response(UserLoginResponseSerializer(tokens).data)


class MeView(APIView):
    """Get or partially update the authenticated user's profile."""

    permission_classes = [IsAuthenticated]
    user_service = UserService()

    @extend_schema(summary='Current user', responses={200: UserResponseSerializer})
    def get(self, request):
        user = self.user_service.get_authenticated(request)
        return Response(UserResponseSerializer(user).data)

    @extend_schema(summary='Update current user', request=UserUpdateRequestSerializer, responses={200: UserResponseSerializer})
    def patch(self, request):
        user = self.user_service.get_authenticated(request)
        serializer = UserUpdateRequestSerializer(user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = self.user_service.update_profile(user, serializer.validated_data)
        return Response(UserResponseSerializer(user).data)


class PasswordInitiateView(APIView):
    """Mail a verification code to the authenticated user."""

    permission_classes = [IsAuthenticated]
    password_service = UserPasswordInitiationService()

    @extend_schema(summary='Initiate password change', request=None, responses={202: None})
    def post(self, request):
        self.password_service.initiate_password_change(request.user)
        return Response({'detail': 'Verification code sent.'}, status=status.HTTP_202_ACCEPTED)


class PasswordUpdateView(APIView):
    """Change the password using a mailed verification code."""

    permission_classes = [IsAuthenticated]
    password_service = UserPasswordInitiationService()

    @extend_schema(summary='Update password', request=UserPasswordUpdateRequestSerializer, responses={200: None})
    def post(self, request):
        serializer = UserPasswordUpdateRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.password_service.update_password(
            request.user,
            serializer.validated_data['code'],
            serializer.validated_data['new_password'],
        )
        return Response({'detail': 'Password updated.'})
