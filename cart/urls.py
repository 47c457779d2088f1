from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import CartItemViewSet, CartViewSet

router = SimpleRouter()
router.register(r'items', CartItemViewSet, basename='cart-items')
router.register(r'', CartViewSet, basename='cart')

urlpatterns = [
    path('', include(router.urls)),
]
