# api/services.py
import logging
from decimal import Decimal, ROUND_HALF_UP

from django.db import IntegrityError, transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from salesops_client import scoring

from .models import (
    Client, ClientService, QualitativeObjective, QuantitativeObjective, Salesperson,
    SalespersonObjective, SalespersonQuantitativeObjective, Service, Technician,
)

logger = logging.getLogger(__name__)

ALREADY_ASSIGNED = 'already_assigned'
ALREADY_ASSIGNED_MESSAGE = 'Service is already assigned to this client'

# ==============================================================================
# ------------------------ ASOCIACIONES CLIENTE-SERVICIO ----------------------
# ==============================================================================

class ClientServiceManager:
    """
    Alta, baja y edición de asociaciones cliente-servicio.
    La asignación es idempotente: si el par ya existe se devuelve la fila existente.
    """
    @staticmethod
    @transaction.atomic
    def assign(client: Client, servicio: Service, notas='', fecha_asignacion=None):
        existing = ClientService.objects.select_for_update().filter(
            client=client, servicio=servicio
        ).order_by('-created_at', '-id').first()
        if existing:
            logger.info(f"[ClientServiceManager] Servicio {servicio.pk} ya asignado al cliente {client.pk} (asociación {existing.pk}).")
            return existing, False

        association = ClientService.objects.create(
            client=client,
            servicio=servicio,
            notas=notas or '',
            fecha_asignacion=fecha_asignacion or timezone.now(),
        )
        logger.info(f"[ClientServiceManager] Servicio {servicio.pk} asignado al cliente {client.pk} (asociación {association.pk}).")
        return association, True

    @staticmethod
    def unassign(client_id, service_id):
        """ Elimina todas las filas del par (incluidos duplicados). Devuelve cuántas se borraron. """
        deleted, _details = ClientService.objects.filter(client_id=client_id, servicio_id=service_id).delete()
        logger.info(f"[ClientServiceManager] Desasignado servicio {service_id} del cliente {client_id} ({deleted} filas).")
        return deleted

    @staticmethod
    def update_notes(association: ClientService, notas):
        association.notas = notas
        association.save(update_fields=['notas', 'updated_at'])
        return association


class ClientServiceHealthService:
    """
    Detecta y repara asociaciones cliente-servicio estructuralmente inválidas:
    campos incompletos, referencias rotas y pares duplicados.
    """
    @staticmethod
    @transaction.atomic
    def run():
        issues, fixed = [], []

        # 1. Entradas incompletas
        incomplete = ClientService.objects.filter(Q(fecha_asignacion__isnull=True) | Q(notas__isnull=True))
        for association in incomplete:
            issues.append(f"Incomplete entry: {association.pk}")
            if association.fecha_asignacion is None:
                association.fecha_asignacion = association.created_at or timezone.now()
            if association.notas is None:
                association.notas = ''
            association.save(update_fields=['fecha_asignacion', 'notas', 'updated_at'])
            fixed.append(f"Fixed incomplete entry: {association.pk}")

        # 2. Referencias a clientes o servicios inexistentes
        orphan_client = ClientService.objects.exclude(client_id__in=Client.objects.values('id'))
        for association in orphan_client:
            issues.append(f"Invalid client reference in entry: {association.pk}")
            fixed.append(f"Removed entry with invalid client reference: {association.pk}")
        orphan_client.delete()

        orphan_service = ClientService.objects.exclude(servicio_id__in=Service.objects.values('id'))
        for association in orphan_service:
            issues.append(f"Invalid service reference in entry: {association.pk}")
            fixed.append(f"Removed entry with invalid service reference: {association.pk}")
        orphan_service.delete()

        # 3. Duplicados: se conserva la fila más reciente
        duplicated_pairs = ClientService.objects.values('client_id', 'servicio_id').annotate(
            total=Count('id')
        ).filter(total__gt=1)
        for pair in duplicated_pairs:
            issues.append(
                f"Duplicate entries for client {pair['client_id']} and service {pair['servicio_id']}: {pair['total']}"
            )
            rows = list(ClientService.objects.filter(
                client_id=pair['client_id'], servicio_id=pair['servicio_id']
            ).order_by('-created_at', '-id'))
            for duplicate in rows[1:]:
                duplicate_id = duplicate.pk
                duplicate.delete()
                fixed.append(f"Removed duplicate entry: {duplicate_id}")

        if issues:
            logger.warning(f"[ClientServiceHealthService] {len(issues)} problemas detectados, {len(fixed)} reparados.")
        else:
            logger.info("[ClientServiceHealthService] Sin problemas en las asociaciones cliente-servicio.")
        return {'issues': issues, 'fixed': fixed, 'success': True}

# ==============================================================================
# ---------------------------- TÉCNICOS Y EVALUACIONES ------------------------
# ==============================================================================

class TechnicianService:

    @staticmethod
    @transaction.atomic
    def delete(technician: Technician, force=False):
        """
        Elimina un técnico. Si tiene clientes asignados solo procede con force=True,
        desasignándolos primero. Devuelve un resumen de la operación.
        """
        client_count = technician.clients.count()
        if client_count and not force:
            logger.info(f"[TechnicianService] Borrado rechazado para técnico {technician.pk}: {client_count} clientes asignados.")
            return {'deleted': False, 'client_count': client_count, 'unassigned_clients': 0}

        unassigned = technician.clients.update(tecnico=None) if client_count else 0
        technician_id = technician.pk
        technician.delete()
        logger.info(f"[TechnicianService] Técnico {technician_id} eliminado ({unassigned} clientes desasignados).")
        return {'deleted': True, 'client_count': client_count, 'unassigned_clients': unassigned}


class EvaluationScoringService:
    """ Recalcula los campos derivados de una evaluación a partir de sus valoraciones. """

    @staticmethod
    def ratings_from(data, instance=None):
        ratings = {}
        for field in scoring.RATING_FIELDS:
            if field in data:
                ratings[field] = data[field]
            elif instance is not None:
                ratings[field] = getattr(instance, field)
            else:
                ratings[field] = None
        return ratings

    @staticmethod
    def derived_fields(ratings):
        return {
            'overall_rating': scoring.overall_rating(ratings),
            'suggested_bonus_percentage': Decimal(scoring.bonus_percentage(ratings)),
        }

# ==============================================================================
# ------------------------------ OBJETIVOS ------------------------------------
# ==============================================================================

class ObjectiveAssignmentService:
    """ Reparto de objetivos cuantitativos entre vendedores. """

    @staticmethod
    @transaction.atomic
    def assign(objective: QuantitativeObjective, assignments):
        results = []
        for item in assignments:
            salesperson_id = item.get('salesperson_id')
            individual_target = item.get('individual_target', Decimal('0.00'))
            salesperson = Salesperson.objects.filter(pk=salesperson_id).first()
            if salesperson is None:
                results.append({'salesperson_id': salesperson_id, 'success': False, 'error': str(_("Vendedor no encontrado."))})
                continue
            assignment, created = SalespersonQuantitativeObjective.objects.update_or_create(
                salesperson=salesperson, objective=objective,
                defaults={'individual_target': individual_target},
            )
            results.append({
                'salesperson_id': salesperson.pk,
                'assignment_id': assignment.pk,
                'individual_target': assignment.individual_target,
                'created': created,
                'success': True,
            })
        logger.info(f"[ObjectiveAssignmentService] Objetivo {objective.pk}: {len(results)} asignaciones procesadas.")
        return results

    @staticmethod
    def assign_global():
        """
        Asigna cada objetivo global a todos los vendedores activos que aún no lo tengan,
        con objetivo individual = objetivo de empresa / número de vendedores activos.
        """
        salespersons = list(Salesperson.objects.filter(estado='active'))
        if not salespersons:
            return {'count': 0, 'errors': [str(_("No hay vendedores activos."))]}

        created_count, errors = 0, []
        for objective in QuantitativeObjective.objects.filter(is_global=True):
            share = (objective.company_target / len(salespersons)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
            existing = set(objective.assignments.values_list('salesperson_id', flat=True))
            for salesperson in salespersons:
                if salesperson.pk in existing:
                    continue
                try:
                    with transaction.atomic():
                        SalespersonQuantitativeObjective.objects.create(
                            salesperson=salesperson, objective=objective, individual_target=share
                        )
                    created_count += 1
                except IntegrityError as e:
                    logger.error(f"[ObjectiveAssignmentService] Error asignando objetivo {objective.pk} a vendedor {salesperson.pk}: {e}")
                    errors.append({'objective_id': objective.pk, 'salesperson_id': salesperson.pk, 'error': str(e)})
        logger.info(f"[ObjectiveAssignmentService] Asignación global: {created_count} creadas, {len(errors)} errores.")
        return {'count': created_count, 'errors': errors}

    @staticmethod
    def update_assignment(assignment: SalespersonQuantitativeObjective, individual_target=None, monthly_progress=None):
        update_fields = ['updated_at']
        if individual_target is not None:
            assignment.individual_target = individual_target
            update_fields.append('individual_target')
        if monthly_progress is not None:
            progress = dict(assignment.monthly_progress or {})
            progress.update(monthly_progress)
            assignment.monthly_progress = progress
            assignment.recalculate_current_value()
            update_fields += ['monthly_progress', 'current_value']
        assignment.refresh_status()
        update_fields.append('status')
        assignment.save(update_fields=update_fields)
        return assignment

    @staticmethod
    def record_monthly_progress(assignment: SalespersonQuantitativeObjective, month, value):
        """ Registra el valor de un mes ('01'..'12') y recalcula el acumulado y el estado. """
        logger.info(f"[ObjectiveAssignmentService] Progreso {month}={value} en asignación {assignment.pk}")
        return ObjectiveAssignmentService.update_assignment(assignment, monthly_progress={month: float(value)})

# ==============================================================================
# ------------------------- PROGRESO DE VENDEDORES ----------------------------
# ==============================================================================

class SalespersonProgressService:

    @staticmethod
    def quantitative_progress(assignments):
        """
        Media ponderada por peso de min(valor actual / objetivo, 1).
        El objetivo es el individual, o el de empresa, o 1 si ambos son cero.
        """
        total_weight = Decimal('0')
        weighted = Decimal('0')
        for assignment in assignments:
            objective = assignment.objective
            target = assignment.individual_target or objective.company_target or Decimal('1')
            progress = min(Decimal(assignment.current_value or 0) / Decimal(target), Decimal('1'))
            weight = objective.weight or Decimal('1')
            weighted += progress * weight
            total_weight += weight
        if not total_weight:
            return 0.0
        return float(weighted / total_weight)

    @staticmethod
    def qualitative_progress(objectives):
        statuses = [objective.status for objective in objectives]
        if not statuses:
            return 0.0
        return statuses.count('completado') / len(statuses)

    @staticmethod
    def for_salesperson(salesperson: Salesperson):
        assignments = salesperson.quantitative_assignments.select_related('objective')
        return {
            'quantitative_progress': SalespersonProgressService.quantitative_progress(assignments),
            'qualitative_progress': SalespersonProgressService.qualitative_progress(salesperson.qualitative_objectives.all()),
        }

    @staticmethod
    def dashboard():
        total_sales = SalespersonQuantitativeObjective.objects.filter(
            objective__type='currency'
        ).aggregate(total=Sum('current_value'))['total'] or Decimal('0.00')

        qualitative_stats = {
            'pending': QualitativeObjective.objects.filter(status='pendiente').count(),
            'in_progress': QualitativeObjective.objects.filter(status='en_progreso').count(),
            'completed': QualitativeObjective.objects.filter(status='completado').count(),
            'not_completed': QualitativeObjective.objects.filter(status='no_completado').count(),
        }
        total_qualitative = sum(qualitative_stats.values())

        assignments = SalespersonQuantitativeObjective.objects.select_related('objective')
        return {
            'total_sales': total_sales,
            'active_salespersons': Salesperson.objects.filter(estado='active').count(),
            'inactive_salespersons': Salesperson.objects.filter(estado='inactive').count(),
            'total_clients': Client.objects.count(),
            'qualitative_stats': qualitative_stats,
            'qualitative_progress': qualitative_stats['completed'] / total_qualitative if total_qualitative else 0.0,
            'quantitative_progress': SalespersonProgressService.quantitative_progress(assignments),
        }

    @staticmethod
    @transaction.atomic
    def delete(salesperson: Salesperson):
        """ Elimina un vendedor desasignando sus clientes y retirando sus objetivos. """
        removed_quantitative, _d = SalespersonQuantitativeObjective.objects.filter(salesperson=salesperson).delete()
        removed_qualitative, _d = SalespersonObjective.objects.filter(salesperson=salesperson).delete()
        unassigned = Client.objects.filter(vendedor=salesperson).update(vendedor=None)
        salesperson_id = salesperson.pk
        salesperson.delete()
        logger.info(
            f"[SalespersonProgressService] Vendedor {salesperson_id} eliminado: {unassigned} clientes desasignados, "
            f"{removed_quantitative} objetivos cuantitativos y {removed_qualitative} cualitativos retirados."
        )
        return {
            'unassigned_clients': unassigned,
            'removed_quantitative_objectives': removed_quantitative,
            'removed_qualitative_objectives': removed_qualitative,
        }
