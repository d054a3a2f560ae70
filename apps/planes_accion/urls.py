# apps/planes_accion/urls.py

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import PlanAccionViewSet

router = DefaultRouter()
router.register(r'planes-accion', PlanAccionViewSet, basename='planes-accion')

urlpatterns = [
    path('', include(router.urls)),
]
