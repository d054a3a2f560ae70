# apps/core/mixins.py
from rest_framework.response import Response
from rest_framework import status


class ResponseMixin:
    """
    Mixin para respuestas estandarizadas:
    {'success': bool, 'message': str, 'data' | 'errors': ...}
    """
    def success_response(self, data=None, message='Operación exitosa', status_code=status.HTTP_200_OK):
        return Response({
            'success': True,
            'message': message,
            'data': data
        }, status=status_code)

    def error_response(self, message='Error en la operación', errors=None, status_code=status.HTTP_400_BAD_REQUEST):
        return Response({
            'success': False,
            'message': message,
            'errors': errors
        }, status=status_code)

    def validation_error_response(self, serializer):
        """400 con los errores del serializer (mismo formato que el exception handler)"""
        return self.error_response(
            message='Error en validación de datos',
            errors=serializer.errors,
            status_code=status.HTTP_400_BAD_REQUEST
        )
