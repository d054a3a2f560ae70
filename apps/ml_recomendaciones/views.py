# apps/ml_recomendaciones/views.py

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny

from apps.core.mixins import ResponseMixin
from .serializers import RecomendacionSerializer
from .services import RecomendacionesService


class RecomendacionesViewSet(ResponseMixin, viewsets.ViewSet):
    """
    Recomendaciones interactivas del servicio ML.
    Si el servicio falla se responde 503 (ErrorServicioExterno).
    """

    permission_classes = [AllowAny]

    def get_service(self):
        return RecomendacionesService()

    @action(detail=False, methods=['post'])
    def recomendar(self, request):
        """
        POST /api/ml-recomendaciones/recomendar/
        """
        serializer = RecomendacionSerializer(data=request.data)
        if not serializer.is_valid():
            return self.validation_error_response(serializer)

        recomendacion = self.get_service().recomendar(**serializer.validated_data)
        return self.success_response(data=recomendacion, message='Recomendación generada')

    @action(detail=False, methods=['get'], url_path=r'instancia/(?P<instancia_id>[^/.]+)')
    def instancia(self, request, instancia_id=None):
        """
        GET /api/ml-recomendaciones/instancia/{instancia_id}/
        """
        resultado = self.get_service().recomendaciones_instancia(instancia_id)
        return self.success_response(
            data=resultado,
            message=f"{len(resultado['recommendations'])} recomendaciones con brecha de mejora"
        )

    @action(detail=False, methods=['get'])
    def health(self, request):
        """
        GET /api/ml-recomendaciones/health/
        """
        return self.success_response(data=self.get_service().health(), message='Servicio ML disponible')
