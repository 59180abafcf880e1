import logging
import os
from datetime import datetime, timezone
from typing import BinaryIO, Optional

import cloudinary
import cloudinary.uploader
from cloudinary.utils import cloudinary_url

from config import Settings
from models.base import Photo

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif"}
MAX_FILE_SIZE = 5 * 1024 * 1024
DISPLAY_WIDTH = 1200


def _file_size(file: BinaryIO) -> int:
    file.seek(0, 2)
    size = file.tell()
    file.seek(0)
    return size


class MediaClient:
    """
    Sube las fotos de los reportes a Cloudinary.
    Cualquier fallo es no fatal: el reporte se crea sin foto.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        if settings.media_enabled:
            cloudinary.config(
                cloud_name=settings.cloudinary_cloud_name,
                api_key=settings.cloudinary_api_key,
                api_secret=settings.cloudinary_api_secret,
                secure=True,
            )

    def upload_photo(self, file: BinaryIO, filename: str) -> Optional[Photo]:
        if not self.settings.media_enabled:
            logger.warning("Cloudinary no configurado, se omite la foto %s", filename)
            return None

        stem, extension = os.path.splitext(filename or "")
        if extension.lower() not in ALLOWED_EXTENSIONS:
            logger.warning("Tipo de archivo no permitido: %s", filename)
            return None

        if _file_size(file) > MAX_FILE_SIZE:
            logger.warning("Imagen %s excede el tamaño máximo de 5MB", filename)
            return None

        try:
            upload_result = cloudinary.uploader.upload(
                file,
                folder=self.settings.cloudinary_folder,
                public_id=f"{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}_{stem}",
                overwrite=True,
            )
        except Exception:
            logger.exception("Error subiendo imagen %s", filename)
            return None

        # Versión redimensionada y optimizada para mostrar en el frontend
        display_url, _ = cloudinary_url(
            upload_result["public_id"],
            width=DISPLAY_WIDTH,
            crop="limit",
            quality="auto",
            fetch_format="auto",
            secure=True,
        )
        return Photo(url=upload_result["secure_url"], display_url=display_url)
