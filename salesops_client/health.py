# salesops_client/health.py
import logging

logger = logging.getLogger(__name__)


class HealthReport:
    def __init__(self, issues=None, fixed=None, success=True):
        self.issues = list(issues or [])
        self.fixed = list(fixed or [])
        self.success = success

    @classmethod
    def from_response(cls, data):
        data = data or {}
        report = data.get('report', data)
        return cls(
            issues=report.get('issues'),
            fixed=report.get('fixed'),
            success=report.get('success', data.get('success', True)),
        )

    def __repr__(self):
        return f"HealthReport(issues={len(self.issues)}, fixed={len(self.fixed)}, success={self.success})"


class HealthCheckRunner:
    """ Lanza POST cliente-servicios/health-check/ y registra lo detectado y lo reparado. """

    def __init__(self, api):
        self.api = api

    def run(self):
        report = HealthReport.from_response(self.api.post('cliente-servicios/health-check/'))
        for issue in report.issues:
            logger.warning(f"[HealthCheckRunner] Problema: {issue}")
        for fix in report.fixed:
            logger.info(f"[HealthCheckRunner] Reparado: {fix}")
        if not report.issues:
            logger.info("[HealthCheckRunner] Sin problemas en las asociaciones cliente-servicio")
        return report
