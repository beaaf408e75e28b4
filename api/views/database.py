# api/views/database.py
import logging
from django.core.management.base import CommandError
from django.core.serializers.base import DeserializationError
from django.db import DatabaseError
from django.http import FileResponse
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

# Importaciones relativas
from ..backups import DatabaseBackupService, InvalidBackupName
from ..permissions import CanManageDatabase

logger = logging.getLogger(__name__)


class BackupListView(APIView):
    """ GET database/list/: backups disponibles, más recientes primero. """
    permission_classes = [CanManageDatabase]

    def get(self, request):
        return Response({'backups': DatabaseBackupService.list_backups()})


class BackupCreateView(APIView):
    """ POST database/backup/: genera un nuevo volcado JSON. """
    permission_classes = [CanManageDatabase]

    def post(self, request):
        try:
            path = DatabaseBackupService.create_backup()
        except (CommandError, DatabaseError, OSError) as e:
            logger.error(f"[BackupCreateView] Error creando backup: {e}", exc_info=True)
            return Response({"status": "error", "detail": f"Error creando backup: {e}"},
                            status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        logger.info(f"[BackupCreateView] Backup {path.name} creado por {request.user.username}")
        return Response({
            "status": "success",
            "filename": path.name,
            "download_url": f"/api/database/download/{path.name}/",
        }, status=status.HTTP_201_CREATED)


class BackupDeleteView(APIView):
    """ DELETE database/backup/<filename>/ """
    permission_classes = [CanManageDatabase]

    def delete(self, request, filename):
        try:
            DatabaseBackupService.delete_backup(filename)
        except InvalidBackupName as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except FileNotFoundError:
            return Response({"detail": "Backup no encontrado."}, status=status.HTTP_404_NOT_FOUND)
        return Response({"status": "success", "detail": f"Backup {filename} eliminado."})


class BackupDownloadView(APIView):
    """ GET database/download/<filename>/ """
    permission_classes = [CanManageDatabase]

    def get(self, request, filename):
        try:
            path = DatabaseBackupService.resolve(filename)
        except InvalidBackupName as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        if not path.exists():
            return Response({"detail": "Backup no encontrado."}, status=status.HTTP_404_NOT_FOUND)
        return FileResponse(open(path, 'rb'), as_attachment=True, filename=path.name, content_type='application/json')


class RestoreWithUploadView(APIView):
    """ POST database/restore-with-upload/ (multipart, campo 'backup'): guarda el fichero y ejecuta loaddata. """
    permission_classes = [CanManageDatabase]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        uploaded = request.FILES.get('backup') or request.FILES.get('file')
        if uploaded is None:
            return Response({"status": "error", "detail": "Falta el fichero de backup ('backup')."},
                            status=status.HTTP_400_BAD_REQUEST)
        try:
            path = DatabaseBackupService.save_upload(uploaded)
        except InvalidBackupName as e:
            return Response({"status": "error", "detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        try:
            DatabaseBackupService.restore(path)
        except (CommandError, DeserializationError, DatabaseError, OSError) as e:
            logger.error(f"[RestoreWithUploadView] Error restaurando {path.name}: {e}", exc_info=True)
            return Response({"status": "error", "detail": f"Error restaurando la base de datos: {e}"},
                            status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response({"status": "success", "detail": f"Base de datos restaurada desde {path.name}."})


class DatabaseStatusView(APIView):
    permission_classes = [CanManageDatabase]

    def get(self, request):
        return Response(DatabaseBackupService.status())
