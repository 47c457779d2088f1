"""URL routes for authentication and profile APIs."""

from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import LoginView, MeView, PasswordInitiateView, PasswordUpdateView, RegisterView

urlpatterns = [
    path('register/', RegisterView.as_view(), name='auth_register'),
    path('login/', LoginView.as_view(), name='auth_login'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('me/', MeView.as_view(), name='auth_me'),
    path('password/initiate/', PasswordInitiateView.as_view(), name='password_initiate'),
    path('password/update/', PasswordUpdateView.as_view(), name='password_update'),
]
