# apps/ml_recomendaciones/cliente.py

import logging

import requests
from django.conf import settings

from apps.core.exceptions import ErrorServicioExterno

logger = logging.getLogger(__name__)


class ClienteRecomendaciones:
    """
    Cliente HTTP del servicio de recomendaciones ML.

    Todas las fallas (conexión, timeout, status != 2xx, respuesta mal formada)
    se traducen a ErrorServicioExterno.
    """

    def __init__(self, base_url=None, timeout=None, session=None):
        self.base_url = (base_url or settings.ML_SERVICE_URL).rstrip('/')
        self.timeout = timeout or settings.ML_SERVICE_TIMEOUT
        self.session = session or requests.Session()

    def _post(self, ruta, payload):
        url = f"{self.base_url}{ruta}"
        logger.debug(f"POST {url}")
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise ErrorServicioExterno(f'Error conectando con el servicio ML: {e}')
        return self._procesar(response)

    def _procesar(self, response):
        if not response.ok:
            detalle = response.text[:500]
            logger.error(f"Servicio ML respondió {response.status_code}: {detalle}")
            raise ErrorServicioExterno(
                f'El servicio ML respondió {response.status_code}',
                errores={'detail': detalle}
            )
        try:
            return response.json()
        except ValueError:
            raise ErrorServicioExterno('Respuesta inválida del servicio ML')

    def recomendar(self, question_text, current_response, comment=None, context=None) -> dict:
        """
        Recomendación para una observación.
        El servicio responde {"status": "success", "recommendation": {...}}
        """
        data = self._post('/api/ml/recommend/', {
            'question_text': question_text,
            'current_response': current_response,
            'comment': comment or '',
            'context': context or {},
        })

        recomendacion = data.get('recommendation') if isinstance(data, dict) else None
        if not isinstance(recomendacion, dict):
            logger.error('Respuesta del servicio ML sin campo "recommendation"')
            raise ErrorServicioExterno('Formato de respuesta inválido del servicio ML')

        logger.info(f"Recomendación generada - Prioridad: {recomendacion.get('priority')}")
        return recomendacion

    def enviar_feedback(self, payload: dict) -> dict:
        return self._post('/api/ml/feedback', payload)

    def health(self) -> dict:
        url = f"{self.base_url}/health"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise ErrorServicioExterno(f'Servicio ML no disponible: {e}')
        return self._procesar(response)
