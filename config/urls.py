# config/urls.py
from django.contrib import admin
from django.urls import path, include

# Swagger / OpenAPI
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularSwaggerView,
    SpectacularRedocView
)

urlpatterns = [
    # ==============================
    # 🔹 Django Admin
    # ==============================
    path('admin/', admin.site.urls),

    # ==============================
    # 🔹 Endpoints de las aplicaciones
    # ==============================
    path('api/', include('apps.planes_accion.urls')),
    path('api/', include('apps.ml_recomendaciones.urls')),

    # ==============================
    # 🔹 Documentación OpenAPI / Swagger / Redoc
    # ==============================
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
]
