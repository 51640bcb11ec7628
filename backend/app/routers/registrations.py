"""
Router du formulaire public d'inscription.
POST /api/register : inscription d'un participant avec sa carte d'identité scolaire.
"""

import io
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.rate_limit import limit_registrations
from app.schemas.registration import RegistrationCreate, RegistrationCreated
from app.services import registration_service
from app.services.registration_service import DuplicateRegistrationError
from app.services.storage_service import StorageError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Inscriptions"])

ALLOWED_ID_CARD_TYPES = {"image/jpeg", "image/png", "application/pdf"}


@router.post(
    "/register",
    response_model=RegistrationCreated,
    status_code=201,
    summary="Inscrire un participant",
    dependencies=[Depends(limit_registrations)],
)
async def register(
    student_name: str = Form(..., alias="studentName"),
    school_name: str = Form(..., alias="schoolName"),
    class_name: str = Form(..., alias="class"),
    dob: str = Form(...),
    mobile_number: str = Form(..., alias="mobileNumber"),
    alt_mobile_number: Optional[str] = Form(None, alias="altMobileNumber"),
    email: Optional[str] = Form(None),
    id_card: Optional[UploadFile] = File(None, alias="idCard"),
    db: Session = Depends(get_db),
):
    """
    Enregistre une inscription depuis le formulaire public (multipart/form-data).

    - Champs validés puis numéros normalisés au format "+91 XXXXXXXXXX"
    - Carte d'identité obligatoire : JPG, PNG ou PDF, 5 Mo maximum
    - Doublon (nom, école, classe, date de naissance) → 409
    - La carte est stockée sur le stockage objet, son URL est enregistrée
    """
    try:
        data = RegistrationCreate.model_validate({
            "studentName": student_name,
            "schoolName": school_name,
            "class": class_name,
            "dob": dob,
            "mobileNumber": mobile_number,
            "altMobileNumber": alt_mobile_number,
            "email": email,
        })
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    # Validation de la carte d'identité
    if id_card is None or not id_card.filename:
        raise HTTPException(status_code=400, detail="School ID card file is required.")
    if id_card.content_type not in ALLOWED_ID_CARD_TYPES:
        raise HTTPException(status_code=400, detail="Please upload a JPG, PNG or PDF file.")

    content = await id_card.read()
    if not content:
        raise HTTPException(status_code=400, detail="The uploaded file is empty.")
    if len(content) > settings.MAX_ID_CARD_SIZE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"File size should be less than {settings.MAX_ID_CARD_SIZE_MB}MB.",
        )

    try:
        registration = await run_in_threadpool(
            registration_service.register_participant,
            db,
            data,
            io.BytesIO(content),
            id_card.filename,
            id_card.content_type,
        )
    except DuplicateRegistrationError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to upload the ID card. Please try again.")

    return RegistrationCreated(message="Registration successful!", registration=registration)
