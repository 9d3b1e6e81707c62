import logging
import os

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from tutorlink.configs.settings import settings
from tutorlink.cores.file_validator import FileValidator
from tutorlink.models import User
from tutorlink.services.validation.exception import handle_db_errors

logger = logging.getLogger(__name__)


def _public_path(subdir: str, filename: str) -> str:
    return f"/uploads/{subdir}/{filename}"


async def save_receipt(file: UploadFile) -> dict:
    """Guarda el comprobante (imagen o PDF) y devuelve la ruta pública para `receipt_image`."""
    destination = os.path.join(settings.UPLOAD_DIR, "receipts")
    saved = await FileValidator.save_validated_file(file, destination, file_type="receipt")
    logger.info(f"Comprobante guardado en {saved['file_path']}")
    return {
        "path": _public_path("receipts", saved["unique_filename"]),
        "filename": saved["unique_filename"],
        "mime_type": saved["mime_type"],
        "size": saved["file_size"],
    }


@handle_db_errors
async def save_profile_image(db: AsyncSession, user_id: int, file: UploadFile) -> dict:
    destination = os.path.join(settings.UPLOAD_DIR, "profiles")
    saved = await FileValidator.save_validated_file(file, destination, file_type="image")

    user = await db.get(User, user_id)
    user.image = _public_path("profiles", saved["unique_filename"])
    await db.commit()
    logger.info(f"Imagen de perfil actualizada para usuario {user_id}")
    return {
        "path": user.image,
        "filename": saved["unique_filename"],
        "mime_type": saved["mime_type"],
        "size": saved["file_size"],
    }
