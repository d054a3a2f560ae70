# apps/core/services/storage_service.py

import logging
import os
import uuid
from datetime import datetime
from typing import BinaryIO, Optional

from django.conf import settings
from supabase import create_client

logger = logging.getLogger(__name__)


class StorageService:
    """
    Servicio para gestionar archivos de evidencia en Supabase Storage
    """
    def __init__(self, cliente=None):
        self.supabase = cliente
        self.bucket = getattr(settings, 'SUPABASE_BUCKET', 'evidencias')

        if self.supabase is None:
            url = getattr(settings, 'SUPABASE_URL', None)
            key = getattr(settings, 'SUPABASE_KEY', None)

            if url and key:
                self.supabase = create_client(url, key)
            else:
                raise ValueError("No se encontraron credenciales de Supabase (SUPABASE_URL / SUPABASE_KEY)")

    def upload_file(self, file: BinaryIO, folder: str, filename: Optional[str] = None) -> dict:
        """
        Sube un archivo al bucket.

        Returns:
            dict: {'success': bool, 'path': str, 'url': str} o {'success': False, 'error': str}
        """
        try:
            # El path final no debe repetir el nombre del bucket
            clean_folder = folder.strip('/')
            if clean_folder.startswith(self.bucket):
                clean_folder = clean_folder[len(self.bucket):].strip('/')

            if not filename:
                ext = os.path.splitext(getattr(file, 'name', ''))[1]
                filename = f"{datetime.now().strftime('%Y%m%d%H%M%S')}-{uuid.uuid4().hex}{ext}"

            file_path = f"{clean_folder}/{filename}" if clean_folder else filename

            logger.info(f"Subiendo evidencia a {self.bucket} -> {file_path}")

            file.seek(0)
            file_content = file.read()

            self.supabase.storage.from_(self.bucket).upload(
                path=file_path,
                file=file_content,
                file_options={
                    "content-type": getattr(file, 'content_type', 'application/octet-stream'),
                    "upsert": "false"
                }
            )
            url = self.supabase.storage.from_(self.bucket).get_public_url(file_path)
            return {'success': True, 'path': file_path, 'url': url}
        except Exception as e:
            logger.error(f"Error al subir archivo {getattr(file, 'name', '')}: {e}")
            return {'success': False, 'error': str(e)}
