# apps/ml_recomendaciones/serializers.py

from rest_framework import serializers


class RecomendacionSerializer(serializers.Serializer):
    """Datos de una observación para pedir su recomendación"""

    question_text = serializers.CharField()
    current_response = serializers.IntegerField(min_value=0, max_value=3)
    comment = serializers.CharField(required=False, allow_blank=True, default='')
    context = serializers.DictField(required=False, default=dict)
