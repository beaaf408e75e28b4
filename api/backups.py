# api/backups.py
"""
Copias de seguridad de la base de datos en formato JSON (dumpdata/loaddata).
"""
import logging
import os
import re
from datetime import datetime
from pathlib import Path

from django.conf import settings
from django.core.management import call_command
from django.db import connection

logger = logging.getLogger(__name__)

BACKUP_FILENAME_RE = re.compile(r'^[\w.-]+\.json$')
BACKUP_PREFIX = 'backup-'

# Tablas de sistema que no se vuelcan (se regeneran con migrate)
EXCLUDED_APPS = ['contenttypes', 'auth.permission', 'admin.logentry', 'sessions']


class InvalidBackupName(ValueError):
    pass


class DatabaseBackupService:

    @staticmethod
    def backup_dir() -> Path:
        path = Path(settings.BACKUP_DIR)
        path.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def resolve(filename) -> Path:
        """ Ruta del fichero dentro del directorio de backups; rechaza nombres inválidos y path traversal. """
        if not filename or not BACKUP_FILENAME_RE.match(filename) or filename.startswith('.'):
            raise InvalidBackupName(f"Nombre de fichero de backup inválido: {filename}")
        directory = DatabaseBackupService.backup_dir().resolve()
        path = (directory / filename).resolve()
        if path.parent != directory:
            raise InvalidBackupName(f"Nombre de fichero de backup inválido: {filename}")
        return path

    @staticmethod
    def list_backups():
        """ Backups disponibles, más recientes primero. """
        backups = []
        for path in DatabaseBackupService.backup_dir().glob('*.json'):
            try:
                stat = path.stat()
            except OSError as e:
                logger.warning(f"[DatabaseBackupService] No se pudo leer {path.name}: {e}")
                continue
            backups.append({
                'filename': path.name,
                'size': f"{stat.st_size / (1024 * 1024):.2f} MB",
                'created': datetime.fromtimestamp(stat.st_mtime),
                'download_url': f"/api/database/download/{path.name}/",
            })
        backups.sort(key=lambda item: (item['created'], item['filename']), reverse=True)
        return backups

    @staticmethod
    def create_backup():
        filename = f"{BACKUP_PREFIX}{datetime.now().strftime('%Y%m%d-%H%M%S')}.json"
        path = DatabaseBackupService.backup_dir() / filename
        call_command(
            'dumpdata', exclude=EXCLUDED_APPS, natural_foreign=True,
            indent=2, output=str(path), verbosity=0,
        )
        logger.info(f"[DatabaseBackupService] Backup creado: {path}")
        return path

    @staticmethod
    def delete_backup(filename):
        path = DatabaseBackupService.resolve(filename)
        if not path.exists():
            raise FileNotFoundError(filename)
        path.unlink()
        logger.info(f"[DatabaseBackupService] Backup eliminado: {filename}")

    @staticmethod
    def save_upload(uploaded_file):
        """
        Guarda un fichero subido en el directorio de backups y devuelve su ruta.
        Nunca sobrescribe un backup existente: si el nombre ya está ocupado se
        añade un sufijo numérico (backup-x-1.json, backup-x-2.json...).
        """
        path = DatabaseBackupService.resolve(os.path.basename(uploaded_file.name))
        stem, suffix = path.stem, path.suffix
        counter = 1
        while True:
            try:
                destination = open(path, 'xb')
                break
            except FileExistsError:
                path = path.with_name(f"{stem}-{counter}{suffix}")
                counter += 1
        with destination:
            for chunk in uploaded_file.chunks():
                destination.write(chunk)
        logger.info(f"[DatabaseBackupService] Fichero de restauración guardado: {path.name}")
        return path

    @staticmethod
    def restore(path: Path):
        logger.warning(f"[DatabaseBackupService] Restaurando base de datos desde {path.name}")
        call_command('loaddata', str(path), verbosity=0)
        logger.info(f"[DatabaseBackupService] Restauración completada desde {path.name}")

    @staticmethod
    def status():
        directory = DatabaseBackupService.backup_dir()
        return {
            'status': 'OK',
            'database': {
                'vendor': connection.vendor,
                'name': str(connection.settings_dict.get('NAME')),
            },
            'backup_dir': {
                'path': str(directory),
                'exists': directory.exists(),
                'writable': os.access(directory, os.W_OK),
            },
            'backup_count': len(list(directory.glob('*.json'))),
        }
