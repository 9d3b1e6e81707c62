import os
import uuid
from pathlib import Path
from typing import Optional

import magic
from fastapi import UploadFile, HTTPException


class FileValidator:
    """Validador de archivos subidos con verificación de MIME, extensión y tamaño."""

    ALLOWED_MIME_TYPES = {
        "image": ["image/jpeg", "image/jpg", "image/png", "image/webp"],
        "receipt": ["image/jpeg", "image/jpg", "image/png", "image/webp", "application/pdf"],
    }

    ALLOWED_EXTENSIONS = {
        "image": [".jpg", ".jpeg", ".png", ".webp"],
        "receipt": [".jpg", ".jpeg", ".png", ".webp", ".pdf"],
    }

    # Tamaños máximos en bytes
    MAX_FILE_SIZES = {
        "image": 5 * 1024 * 1024,     # 5 MB
        "receipt": 5 * 1024 * 1024,   # 5 MB
    }

    @staticmethod
    async def validate_file(
        file: UploadFile,
        file_type: str = "image",
        max_size: Optional[int] = None
    ) -> dict:
        """
        Valida un archivo subido.

        Args:
            file: Archivo subido de FastAPI
            file_type: Tipo esperado (image, receipt)
            max_size: Tamaño máximo en bytes (opcional, usa default si no se especifica)

        Returns:
            dict con información del archivo validado

        Raises:
            HTTPException si la validación falla
        """
        if not file or not file.filename:
            raise HTTPException(status_code=400, detail="No se proporcionó ningún archivo")

        file_ext = Path(file.filename).suffix.lower()
        allowed_extensions = FileValidator.ALLOWED_EXTENSIONS.get(file_type, [])

        if file_ext not in allowed_extensions:
            raise HTTPException(
                status_code=400,
                detail=f"Extensión no permitida. Extensiones válidas: {', '.join(allowed_extensions)}"
            )

        content = await file.read()
        await file.seek(0)

        file_size = len(content)
        max_allowed = max_size or FileValidator.MAX_FILE_SIZES.get(file_type, 5 * 1024 * 1024)

        if file_size == 0:
            raise HTTPException(status_code=400, detail="El archivo está vacío")

        if file_size > max_allowed:
            raise HTTPException(
                status_code=400,
                detail=f"Archivo demasiado grande. Tamaño máximo: {max_allowed / (1024*1024):.1f} MB"
            )

        # Validar MIME type usando python-magic
        mime = magic.from_buffer(content, mime=True)
        allowed_mimes = FileValidator.ALLOWED_MIME_TYPES.get(file_type, [])
        if mime not in allowed_mimes:
            raise HTTPException(
                status_code=400,
                detail=f"Tipo de archivo no permitido. MIME detectado: {mime}. Permitidos: {', '.join(allowed_mimes)}"
            )

        return {
            "original_filename": file.filename,
            "unique_filename": f"{uuid.uuid4()}{file_ext}",
            "file_size": file_size,
            "mime_type": mime,
            "extension": file_ext,
        }

    @staticmethod
    async def save_validated_file(
        file: UploadFile,
        destination_dir: str,
        file_type: str = "image",
        max_size: Optional[int] = None
    ) -> dict:
        """
        Valida y guarda un archivo con nombre UUID.

        Returns:
            dict con información del archivo guardado (path, metadata)
        """
        validation_result = await FileValidator.validate_file(file, file_type, max_size)

        os.makedirs(destination_dir, exist_ok=True)
        file_path = os.path.join(destination_dir, validation_result["unique_filename"])

        content = await file.read()
        with open(file_path, "wb") as f:
            f.write(content)

        return {
            **validation_result,
            "file_path": file_path,
        }
