# apps/ml_recomendaciones/urls.py

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import RecomendacionesViewSet

router = DefaultRouter()
router.register(r'ml-recomendaciones', RecomendacionesViewSet, basename='ml-recomendaciones')

urlpatterns = [
    path('', include(router.urls)),
]
