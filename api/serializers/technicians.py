# api/serializers/technicians.py
"""
Serializers para Técnicos y sus objetivos individuales.
"""
import logging
from rest_framework import serializers
from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils.translation import gettext_lazy as _

from ..exceptions import Conflict
from ..models import Technician, TechnicianObjective, validate_objective_dates

logger = logging.getLogger(__name__)

class TechnicianSerializer(serializers.ModelSerializer):
    client_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Technician
        fields = [
            'id', 'nombre', 'email', 'telefono', 'especialidad', 'estado', 'notas',
            'client_count', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'client_count', 'created_at', 'updated_at']
        # La unicidad del email se comprueba a mano para responder 409
        extra_kwargs = {'email': {'validators': []}}

    def validate_nombre(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError(_("El nombre del técnico es obligatorio."))
        return value

    def validate_email(self, value):
        if not value:
            return None
        duplicates = Technician.objects.filter(email__iexact=value)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise Conflict(_("Ya existe un técnico con este email."))
        return value

class TechnicianObjectiveSerializer(serializers.ModelSerializer):
    class Meta:
        model = TechnicianObjective
        fields = [
            'id', 'technician', 'text', 'description', 'criteria', 'status', 'due_date',
            'completion_date', 'completed', 'priority', 'weight', 'evidence',
            'is_next_objective', 'is_global', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'technician', 'created_at', 'updated_at']

    def validate(self, attrs):
        due_date = attrs.get('due_date', getattr(self.instance, 'due_date', None))
        completion_date = attrs.get('completion_date', getattr(self.instance, 'completion_date', None))
        try:
            validate_objective_dates(due_date, completion_date)
        except DjangoValidationError as e:
            raise serializers.ValidationError(e.message_dict)
        return attrs

class TechnicianObjectiveStatusSerializer(serializers.Serializer):
    completed = serializers.BooleanField()
