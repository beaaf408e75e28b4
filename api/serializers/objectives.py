# api/serializers/objectives.py
"""
Serializers para objetivos cuantitativos (plantillas, objetivos, asignaciones)
y objetivos cualitativos de vendedores.
"""
import logging
from decimal import Decimal
from rest_framework import serializers
from django.db import transaction
from django.utils.translation import gettext_lazy as _

from ..models import (
    QualitativeObjective, QuantitativeObjective, QuantitativeObjectiveTemplate,
    Salesperson, SalespersonObjective, SalespersonQuantitativeObjective,
)
from .base import SalespersonBasicSerializer

logger = logging.getLogger(__name__)

MONTH_KEYS = [f"{month:02d}" for month in range(1, 13)]

# --- Cuantitativos ---

class QuantitativeObjectiveTemplateSerializer(serializers.ModelSerializer):
    class Meta:
        model = QuantitativeObjectiveTemplate
        fields = ['id', 'name', 'description', 'type', 'annual', 'monthly', 'minimum', 'weight', 'created_at']
        read_only_fields = ['id', 'created_at']

class QuantitativeAssignmentSerializer(serializers.ModelSerializer):
    """ Asignación de un objetivo cuantitativo a un vendedor (lectura). """
    salesperson = SalespersonBasicSerializer(read_only=True)
    objective_id = serializers.IntegerField(read_only=True)
    objective_name = serializers.CharField(source='objective.name', read_only=True)

    class Meta:
        model = SalespersonQuantitativeObjective
        fields = [
            'id', 'salesperson', 'objective_id', 'objective_name', 'individual_target',
            'monthly_progress', 'current_value', 'status', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

class QuantitativeObjectiveSerializer(serializers.ModelSerializer):
    """
    Objetivo cuantitativo con sus asignaciones. `difference` es el objetivo de empresa
    menos la suma de objetivos individuales.
    """
    assignments = QuantitativeAssignmentSerializer(many=True, read_only=True)
    assigned_total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    difference = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = QuantitativeObjective
        fields = [
            'id', 'name', 'description', 'type', 'company_target', 'minimum_acceptable', 'weight',
            'start_date', 'end_date', 'status', 'is_global', 'template',
            'assignments', 'assigned_total', 'difference', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'assignments', 'assigned_total', 'difference', 'created_at', 'updated_at']

    def validate(self, attrs):
        start_date = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end_date = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start_date and end_date and end_date < start_date:
            raise serializers.ValidationError({'end_date': _('La fecha de fin debe ser posterior a la fecha de inicio.')})
        return attrs

class AssignmentItemSerializer(serializers.Serializer):
    salesperson_id = serializers.IntegerField()
    individual_target = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0'), default=Decimal('0.00'))

class AssignObjectiveSerializer(serializers.Serializer):
    assignments = AssignmentItemSerializer(many=True, allow_empty=False)

class UpdateAssignmentSerializer(serializers.Serializer):
    assignment_id = serializers.IntegerField()
    individual_target = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0'), required=False)
    monthly_progress = serializers.DictField(child=serializers.FloatField(min_value=0), required=False)

    def validate_monthly_progress(self, value):
        invalid = [key for key in value if key not in MONTH_KEYS]
        if invalid:
            raise serializers.ValidationError(_("Meses inválidos: %(keys)s. Usa '01' a '12'.") % {'keys': ', '.join(invalid)})
        return value

class MonthlyProgressSerializer(serializers.Serializer):
    assignment_id = serializers.IntegerField()
    month = serializers.ChoiceField(choices=MONTH_KEYS)
    value = serializers.DecimalField(max_digits=14, decimal_places=2)

# --- Cualitativos ---

class QualitativeObjectiveSerializer(serializers.ModelSerializer):
    """ Objetivo cualitativo. Los vendedores se asignan con `salesperson_ids`. """
    salespersons = SalespersonBasicSerializer(many=True, read_only=True)
    salesperson_ids = serializers.PrimaryKeyRelatedField(
        queryset=Salesperson.objects.all(), many=True, write_only=True, required=False
    )

    class Meta:
        model = QualitativeObjective
        fields = [
            'id', 'name', 'description', 'criteria', 'status', 'due_date', 'completion_date',
            'weight', 'comments', 'evidence', 'is_global', 'salespersons', 'salesperson_ids',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'salespersons', 'created_at', 'updated_at']

    def validate(self, attrs):
        due_date = attrs.get('due_date', getattr(self.instance, 'due_date', None))
        completion_date = attrs.get('completion_date', getattr(self.instance, 'completion_date', None))
        if due_date and completion_date and completion_date < due_date:
            raise serializers.ValidationError(
                {'completion_date': _('La fecha de finalización no puede ser anterior a la fecha límite.')}
            )
        return attrs

    def _set_salespersons(self, objective, salespersons):
        SalespersonObjective.objects.filter(objective=objective).exclude(salesperson__in=salespersons).delete()
        for salesperson in salespersons:
            SalespersonObjective.objects.get_or_create(objective=objective, salesperson=salesperson)

    @transaction.atomic
    def create(self, validated_data):
        salespersons = validated_data.pop('salesperson_ids', [])
        if validated_data.get('is_global'):
            salespersons = list(Salesperson.objects.filter(estado='active'))
        objective = QualitativeObjective.objects.create(**validated_data)
        self._set_salespersons(objective, salespersons)
        logger.info(f"[QualitativeObjectiveSerializer] Objetivo {objective.pk} creado con {len(salespersons)} vendedores.")
        return objective

    @transaction.atomic
    def update(self, instance, validated_data):
        salespersons = validated_data.pop('salesperson_ids', None)
        instance = super().update(instance, validated_data)
        if salespersons is not None:
            self._set_salespersons(instance, salespersons)
        return instance

class QualitativeStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=QualitativeObjective._meta.get_field('status').choices)
    completion_date = serializers.DateField(required=False, allow_null=True)

class QualitativeEvidenceSerializer(serializers.Serializer):
    evidence = serializers.CharField()
    comments = serializers.CharField(required=False, allow_blank=True, allow_null=True)
