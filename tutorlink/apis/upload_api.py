from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from tutorlink.apis.deps import auth_required, get_db, student_required
from tutorlink.services.uploads.upload_service import save_profile_image, save_receipt

router = APIRouter()


@router.post("/receipt", status_code=201)
async def upload_receipt(file: UploadFile = File(...), user_data: dict = Depends(student_required)):
    """Sube el comprobante (JPG, PNG, WEBP o PDF, máximo 5 MB)."""
    saved = await save_receipt(file)
    return {"success": True, "message": "Comprobante subido exitosamente", "data": saved}


@router.post("/profile", status_code=201)
async def upload_profile_image(
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    user_data: dict = Depends(auth_required)
):
    saved = await save_profile_image(db, user_data["user_id"], file)
    return {"success": True, "message": "Imagen de perfil actualizada", "data": saved}
