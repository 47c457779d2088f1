"""
URL configuration for core project.

API routes live under ``/api/``; the catalog and orders share one router,
accounts and cart bring their own URL modules.
"""
from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView
from rest_framework.routers import DefaultRouter
from drf_yasg.views import get_schema_view
from drf_yasg import openapi
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView, SpectacularSwaggerView

from glasses.views import CategoryViewSet, GlassesViewSet
from orders.views import OrderViewSet


router = DefaultRouter()
router.register(r'glasses', GlassesViewSet, basename='glasses')
router.register(r'categories', CategoryViewSet, basename='category')
router.register(r'orders', OrderViewSet, basename='order')


schema_view = get_schema_view(
   openapi.Info(title="Optic Store API", default_version='v1'),
   public=True,
)

urlpatterns = [
    path('', RedirectView.as_view(url='/api/docs/'), name='go-to-docs'),
    path('admin/', admin.site.urls),
    path('api/', include(router.urls)),
    path('api/auth/', include('accounts.urls')),
    path('api/cart/', include('cart.urls')),
    # Swagger Documentation
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0)),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
]
