# salesops_client/database.py
import logging
import os

import requests
from requests_toolbelt import MultipartEncoder, MultipartEncoderMonitor

from .errors import ApiError

logger = logging.getLogger(__name__)

# Fases de la restauración
UPLOADING = 'uploading'
PROCESSING = 'processing'
COMPLETED = 'completed'
ERROR = 'error'

DOWNLOAD_CHUNK_SIZE = 64 * 1024


def _discard(path):
    if os.path.exists(path):
        os.remove(path)


class BackupClient:
    """ Operaciones de copia de seguridad expuestas en database/. """

    def __init__(self, api):
        self.api = api

    def list(self):
        return self.api.get('database/list/').get('backups', [])

    def create(self):
        data = self.api.post('database/backup/')
        logger.info(f"[BackupClient] Backup creado: {data.get('filename')}")
        return data

    def delete(self, filename):
        return self.api.delete(f"database/backup/{filename}/")

    def status(self):
        return self.api.get('database/status/')

    def download(self, filename, destination):
        """
        Descarga el backup en destination (fichero o directorio) y devuelve la ruta.
        Si la descarga se corta a medias el fichero parcial se elimina.
        """
        if os.path.isdir(destination):
            destination = os.path.join(destination, filename)
        response = self.api.stream(f"database/download/{filename}/")
        try:
            with open(destination, 'wb') as fh:
                for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    if chunk:
                        fh.write(chunk)
        except requests.RequestException as e:
            _discard(destination)
            logger.warning(f"[BackupClient] Descarga de {filename} interrumpida: {e}")
            raise ApiError(f"Descarga de {filename} interrumpida: {e}") from e
        except OSError:
            _discard(destination)
            raise
        finally:
            response.close()
        logger.info(f"[BackupClient] Backup {filename} descargado en {destination}")
        return destination

    def restore(self, path, on_phase=None):
        """
        Sube el fichero y lanza la restauración. on_phase(fase, detalle) recibe
        uploading con el porcentaje subido ({'percent', 'bytes_read', 'total'}),
        processing cuando termina la subida y después completed o error.
        """
        filename = os.path.basename(path)
        progress = {'percent': None, 'processing': False}

        def notify(phase, detail=None):
            logger.info(f"[BackupClient] Restauración {filename}: {phase}")
            if on_phase:
                on_phase(phase, detail)

        def report(bytes_read, total):
            percent = int(bytes_read * 100 / total) if total else 100
            if percent != progress['percent']:
                progress['percent'] = percent
                if on_phase:
                    on_phase(UPLOADING, {'percent': percent, 'bytes_read': bytes_read, 'total': total})
            if bytes_read >= total and not progress['processing']:
                progress['processing'] = True
                notify(PROCESSING)

        try:
            with open(path, 'rb') as fh:
                encoder = MultipartEncoder(fields={'backup': (filename, fh, 'application/json')})
                monitor = MultipartEncoderMonitor(encoder, lambda m: report(m.bytes_read, m.len))
                notify(UPLOADING, {'percent': 0, 'bytes_read': 0, 'total': monitor.len})
                progress['percent'] = 0
                data = self.api.post(
                    'database/restore-with-upload/',
                    data=monitor,
                    headers={'Content-Type': monitor.content_type},
                )
        except Exception as e:
            notify(ERROR, {'error': str(e)})
            raise
        if not progress['processing']:
            report(monitor.len, monitor.len)
        notify(COMPLETED, data)
        return data
