# api/serializers/salespersons.py
"""
Serializers para Vendedores y su progreso.
"""
from rest_framework import serializers
from django.utils.translation import gettext_lazy as _

from ..models import Salesperson
from ..services import SalespersonProgressService
from .objectives import QualitativeObjectiveSerializer, QuantitativeAssignmentSerializer

class SalespersonSerializer(serializers.ModelSerializer):
    """ Vendedor con número de clientes y progreso de objetivos (0..1). """
    client_count = serializers.SerializerMethodField()
    quantitative_progress = serializers.SerializerMethodField()
    qualitative_progress = serializers.SerializerMethodField()

    class Meta:
        model = Salesperson
        fields = [
            'id', 'nombre', 'email', 'estado', 'client_count',
            'quantitative_progress', 'qualitative_progress', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'client_count', 'quantitative_progress', 'qualitative_progress', 'created_at', 'updated_at']

    def validate_nombre(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError(_("El nombre del vendedor es obligatorio."))
        return value

    def get_client_count(self, obj):
        annotated = getattr(obj, 'client_count', None)
        return annotated if annotated is not None else obj.clients.count()

    def _progress(self, obj):
        cache = self.context.setdefault('_progress_cache', {})
        if obj.pk not in cache:
            cache[obj.pk] = SalespersonProgressService.for_salesperson(obj)
        return cache[obj.pk]

    def get_quantitative_progress(self, obj):
        return self._progress(obj)['quantitative_progress']

    def get_qualitative_progress(self, obj):
        return self._progress(obj)['qualitative_progress']

class SalespersonBasicInfoSerializer(serializers.ModelSerializer):
    class Meta:
        model = Salesperson
        fields = ['id', 'nombre', 'email', 'estado']
        read_only_fields = fields

class SalespersonObjectivesSerializer(serializers.ModelSerializer):
    """ Objetivos cuantitativos (con progreso mensual) y cualitativos del vendedor. """
    quantitative = QuantitativeAssignmentSerializer(source='quantitative_assignments', many=True, read_only=True)
    qualitative = QualitativeObjectiveSerializer(source='qualitative_objectives', many=True, read_only=True)

    class Meta:
        model = Salesperson
        fields = ['id', 'nombre', 'quantitative', 'qualitative']
        read_only_fields = fields
