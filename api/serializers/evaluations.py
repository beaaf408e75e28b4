# api/serializers/evaluations.py
"""
Serializers para Evaluaciones semestrales de Técnicos.
"""
import logging
from rest_framework import serializers
from django.db import transaction
from django.utils.translation import gettext_lazy as _

from salesops_client import scoring

from ..exceptions import Conflict, EvaluationLocked
from ..models import TechnicianEvaluation
from ..services import EvaluationScoringService

logger = logging.getLogger(__name__)

class PreviousObjectiveSerializer(serializers.Serializer):
    text = serializers.CharField(max_length=500)
    completed = serializers.BooleanField(default=False)

class TechnicianEvaluationSerializer(serializers.ModelSerializer):
    """
    Evaluación con sus 19 valoraciones. `overall_rating` se recalcula en cada guardado;
    `bonus_percentage` toma el valor sugerido si no se envía.
    """
    previous_objectives = serializers.ListField(child=PreviousObjectiveSerializer(), required=False)
    next_objectives = serializers.ListField(child=serializers.CharField(max_length=500), required=False)
    suggested_bonus_percentage = serializers.SerializerMethodField()
    category_averages = serializers.SerializerMethodField()

    class Meta:
        model = TechnicianEvaluation
        fields = [
            'id', 'technician', 'year', 'semester', 'status',
            *scoring.RATING_FIELDS,
            'overall_rating', 'suggested_bonus_percentage', 'bonus_percentage', 'category_averages',
            'supervisor_comments', 'employee_comments', 'previous_objectives', 'next_objectives',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'technician', 'overall_rating', 'created_at', 'updated_at']
        extra_kwargs = {
            field: {'min_value': scoring.MIN_RATING, 'max_value': scoring.MAX_RATING, 'required': False, 'allow_null': True}
            for field in scoring.RATING_FIELDS
        }
        # La unicidad (técnico, año, semestre) se valida a mano para responder 409
        validators = []

    def _ratings(self, obj):
        return {field: getattr(obj, field) for field in scoring.RATING_FIELDS}

    def get_suggested_bonus_percentage(self, obj):
        return EvaluationScoringService.derived_fields(self._ratings(obj))['suggested_bonus_percentage']

    def get_category_averages(self, obj):
        averages = scoring.category_averages(self._ratings(obj))
        return {category: (float(value) if value is not None else None) for category, value in averages.items()}

    def validate(self, attrs):
        if self.instance is not None and self.instance.is_final:
            raise EvaluationLocked()

        technician = self.context.get('technician') or getattr(self.instance, 'technician', None)
        year = attrs.get('year', getattr(self.instance, 'year', None))
        semester = attrs.get('semester', getattr(self.instance, 'semester', None))
        if technician is not None:
            duplicates = TechnicianEvaluation.objects.filter(technician=technician, year=year, semester=semester)
            if self.instance is not None:
                duplicates = duplicates.exclude(pk=self.instance.pk)
            if duplicates.exists():
                raise Conflict(_("Ya existe una evaluación para este técnico en ese año y semestre."))
        return attrs

    def _apply_scoring(self, validated_data):
        ratings = EvaluationScoringService.ratings_from(validated_data, self.instance)
        derived = EvaluationScoringService.derived_fields(ratings)
        validated_data['overall_rating'] = derived['overall_rating']
        if 'bonus_percentage' not in validated_data:
            validated_data['bonus_percentage'] = derived['suggested_bonus_percentage']
        return validated_data

    @transaction.atomic
    def create(self, validated_data):
        evaluation = super().create(self._apply_scoring(validated_data))
        logger.info(
            f"[TechnicianEvaluationSerializer] Evaluación {evaluation.pk} creada para técnico {evaluation.technician_id} "
            f"({evaluation.year} {evaluation.semester}, nota {evaluation.overall_rating})"
        )
        return evaluation

    @transaction.atomic
    def update(self, instance, validated_data):
        return super().update(instance, self._apply_scoring(validated_data))

